#!/usr/bin/env python3
"""Run a PR review locally."""
import argparse
import asyncio

from dotenv import load_dotenv

load_dotenv()

from src.services.reviewer.service import review_pull_request


async def main():
    parser = argparse.ArgumentParser(description="Review one GitHub pull request")
    parser.add_argument("owner")
    parser.add_argument("repo")
    parser.add_argument("pr_number", type=int)
    args = parser.parse_args()

    result = await review_pull_request(
        owner=args.owner,
        repo=args.repo,
        pr_number=args.pr_number,
    )
    print(f"Review result: {result}")

if __name__ == "__main__":
    asyncio.run(main())
