"""Send the assembled diff to the LLM and parse its review."""

import json
import re

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from src.config import settings
from src.core.exceptions import ReviewParseError
from src.core.llm import get_chat_llm
from src.core.logging import get_logger
from src.core.prompts import render_review_user_prompt
from src.schemas.review import ReviewResponse

logger = get_logger("reviewer.analyzer")

_CODE_FENCE = re.compile(r"```(?:json)?")


def parse_review_response(text: str) -> ReviewResponse:
    """Parse the model's reply into a ReviewResponse.

    Markdown code fences and text around the JSON object are ignored.

    Raises:
        ReviewParseError: If no valid review object can be extracted
    """
    cleaned = _CODE_FENCE.sub("", text).strip()

    # Find JSON in the response
    json_start = cleaned.find("{")
    json_end = cleaned.rfind("}") + 1
    if json_start == -1 or json_end <= json_start:
        raise ReviewParseError("No JSON object in LLM response", text)

    try:
        payload = json.loads(cleaned[json_start:json_end])
    except json.JSONDecodeError as e:
        raise ReviewParseError(f"Invalid JSON in LLM response: {e}", text) from e

    if not isinstance(payload, dict) or "review" not in payload:
        raise ReviewParseError("Invalid AI response: missing 'review' property", text)

    try:
        return ReviewResponse.model_validate(payload)
    except ValidationError as e:
        raise ReviewParseError(f"Review does not match schema: {e}", text) from e


async def analyze_diff(system_prompt: str, patch_diff: str) -> ReviewResponse:
    """Ask the review model for feedback on the assembled diff."""
    llm = get_chat_llm(model=settings.review_model)
    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=render_review_user_prompt(patch_diff)),
    ]

    response = await llm.ainvoke(messages)
    content = response.content if isinstance(response.content, str) else str(response.content)
    logger.info(f"LLM response received ({len(content)} chars)")

    try:
        return parse_review_response(content)
    except ReviewParseError as e:
        logger.error(f"Failed to parse review: {e.message}")
        logger.debug(f"LLM response (first 200 chars): {content[:200]}")
        raise
