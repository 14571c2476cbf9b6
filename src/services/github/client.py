"""GitHub API client - data layer."""

import time
from typing import Optional

from github import Github, GithubException, GithubIntegration
from github.PullRequest import PullRequest
from github.Repository import Repository
from loguru import logger

from src.config import settings
from src.core.exceptions import ConfigurationError, ExternalServiceError, PRNotFoundError

_github_client: Optional[Github] = None


def get_github_client() -> Github:
    """Get authenticated GitHub client using App installation."""
    global _github_client

    if _github_client:
        return _github_client

    if not all([settings.github_app_id, settings.github_private_key, settings.github_installation_id]):
        raise ConfigurationError("GitHub App credentials")

    private_key = settings.github_private_key.replace("\\n", "\n")

    integration = GithubIntegration(
        integration_id=int(settings.github_app_id),
        private_key=private_key,
    )

    access_token = integration.get_access_token(int(settings.github_installation_id)).token
    _github_client = Github(access_token)

    logger.info("GitHub App client initialized")
    return _github_client


def fetch_repository(owner: str, repo: str) -> Repository:
    client = get_github_client()
    return client.get_repo(f"{owner}/{repo}")


def fetch_pull_request(owner: str, repo: str, pr_number: int) -> PullRequest:
    """Fetch a pull request from GitHub API."""
    repository = fetch_repository(owner, repo)
    try:
        return repository.get_pull(pr_number)
    except GithubException as e:
        if e.status == 404:
            raise PRNotFoundError(owner, repo, pr_number) from e
        raise ExternalServiceError("GitHub", str(e)) from e


def fetch_pr_files(pr: PullRequest) -> list[dict]:
    """Fetch changed files from a PR."""
    files = []
    for f in pr.get_files():
        files.append({
            "filename": f.filename,
            "status": f.status,
            "additions": f.additions,
            "deletions": f.deletions,
            "patch": f.patch,
        })
    return files


def fetch_merge_base(pr: PullRequest) -> str:
    """SHA of the merge base between the PR's base and head."""
    comparison = pr.base.repo.compare(pr.base.sha, pr.head.sha)
    return comparison.merge_base_commit.sha


def fetch_encoded_file_contents(repository: Repository, path: str, ref: str) -> tuple[str, str]:
    """Fetch file contents as returned by the contents API.

    Returns:
        Tuple of (content, encoding); encoding is "base64" for regular files
    """
    try:
        content = repository.get_contents(path, ref=ref)
    except GithubException as e:
        logger.error(f"Failed to fetch file {path}@{ref}: {e}")
        raise ExternalServiceError("GitHub", f"could not fetch {path}@{ref}") from e

    if isinstance(content, list):
        raise ExternalServiceError("GitHub", f"Path {path} is a directory, not a file")
    return content.content or "", content.encoding or "base64"


def create_review(
    pr: PullRequest,
    body: str,
    comments: list[dict],
    event: str = "COMMENT",
) -> int:
    """Create a review on a PR with inline comments on the head commit.

    When GitHub rejects the review (usually an unresolvable comment line),
    every comment is posted as a regular PR comment instead.

    Returns:
        Number of comments posted
    """
    review_comments = [
        {"path": c["path"], "line": c["line"], "side": "RIGHT", "body": c["body"]}
        for c in comments
        if c.get("line") and c.get("path")
    ]

    commit = pr.base.repo.get_commit(pr.head.sha)
    try:
        pr.create_review(
            commit=commit,
            body=body,
            event=event,
            comments=review_comments,
        )
        logger.info(f"Created review with {len(review_comments)} comments")
        return len(review_comments)
    except GithubException as e:
        logger.warning(f"Review rejected ({e.status}), posting comments individually")

    if body:
        pr.create_issue_comment(body)

    posted = 0
    for index, comment in enumerate(review_comments, start=1):
        logger.info(f"Posting individual comment {index}/{len(review_comments)} for file {comment['path']}")
        try:
            pr.create_issue_comment(
                f"**Comment for {comment['path']} line {comment['line']}**\n\n{comment['body']}"
            )
            posted += 1
        except GithubException as e:
            logger.error(f"Failed to post comment {index}: {e}")
        time.sleep(settings.comment_post_delay_seconds)

    return posted
