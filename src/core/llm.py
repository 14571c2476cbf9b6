"""LLM client using OpenRouter."""

from langchain_openai import ChatOpenAI

from src.config import settings
from src.core.exceptions import ConfigurationError
from src.core.logging import get_logger

logger = get_logger("llm")

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# Short names accepted in REVIEW_MODEL; full OpenRouter ids pass through unchanged
MODEL_ALIASES = {
    "deepseek-chat": "deepseek/deepseek-chat",
    "claude-sonnet-4": "anthropic/claude-sonnet-4",
    "gpt-4o": "openai/gpt-4o",
    "gpt-4o-mini": "openai/gpt-4o-mini",
}

DEFAULT_MODEL = "deepseek-chat"


def resolve_model_id(model: str) -> str:
    """Map a short model name onto an OpenRouter model id."""
    if model in MODEL_ALIASES:
        return MODEL_ALIASES[model]
    if "/" in model:
        return model

    logger.warning(f"[LLM] Unknown model '{model}', falling back to {DEFAULT_MODEL}")
    return MODEL_ALIASES[DEFAULT_MODEL]


def get_chat_llm(
    model: str = DEFAULT_MODEL,
    temperature: float = 0.0,
    top_p: float = 0.95,
) -> ChatOpenAI:
    """Get a chat LLM instance via OpenRouter."""
    api_key = settings.openrouter_api_key
    if not api_key:
        raise ConfigurationError("OPENROUTER_API_KEY")

    model_id = resolve_model_id(model)
    logger.info(f"[LLM] Using OpenRouter: {model} -> {model_id}")

    return ChatOpenAI(
        model=model_id,
        api_key=api_key,
        base_url=OPENROUTER_BASE_URL,
        temperature=temperature,
        top_p=top_p,
        timeout=settings.llm_timeout_seconds,
        max_retries=settings.llm_max_retries,
    )
