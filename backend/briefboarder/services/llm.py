from __future__ import annotations

import hashlib
import logging
from functools import lru_cache
from contextlib import contextmanager
from threading import BoundedSemaphore

from openai import OpenAI

from ..core.config import get_settings
from .caching import cached_get

logger = logging.getLogger(__name__)

_llm_semaphore: BoundedSemaphore | None = None

DESCRIBE_IMAGE_PROMPT = (
    "Describe this image for a creative team working on an advertising brief. "
    "Cover the subject, composition, lighting, colour palette, mood and any visible "
    "text or branding. Answer in 2-4 concise sentences, no preamble."
)


def _get_semaphore() -> BoundedSemaphore:
    """
    Lazy-initialised global semaphore for limiting concurrent LLM calls.
    """
    global _llm_semaphore
    if _llm_semaphore is None:
        settings = get_settings()
        _llm_semaphore = BoundedSemaphore(settings.LLM_MAX_CONCURRENCY)
    return _llm_semaphore


@contextmanager
def limit_llm_concurrency():
    """
    Simple context manager to bound concurrent calls to the LLM provider.

    Usage:

        with limit_llm_concurrency():
            client.chat.completions.create(...)
    """
    sem = _get_semaphore()
    sem.acquire()
    try:
        yield
    finally:
        sem.release()


@lru_cache(maxsize=1)
def get_llm_client() -> OpenAI:
    """
    Centralised factory for the OpenAI-compatible client used across the app.

    - If OPENROUTER_API_KEY is set, route requests via OpenRouter (model ids
      look like "anthropic/claude-sonnet-4.5").
    - Otherwise, fall back to the standard OpenAI API using OPENAI_API_KEY.

    This is cached so all callers in a process share a single client instance.
    """
    settings = get_settings()

    if settings.OPENROUTER_API_KEY:
        return OpenAI(
            base_url="https://openrouter.ai/api/v1",
            api_key=settings.OPENROUTER_API_KEY.strip(),
            default_headers={
                "HTTP-Referer": settings.FRONTEND_ORIGIN or "http://localhost:3000",
                "X-Title": "BriefBoarder",
            },
        )

    if settings.OPENAI_API_KEY:
        return OpenAI(api_key=settings.OPENAI_API_KEY.strip())

    raise RuntimeError(
        "No LLM API key configured. Set either OPENAI_API_KEY or OPENROUTER_API_KEY."
    )


def answer_unstructured(
    *,
    system_prompt: str,
    user_prompt: str,
    model: str,
    temperature: float = 0.7,
    max_tokens: int = 2000,
) -> str:
    """Plain-text completion; returns the message content (may be empty)."""
    client = get_llm_client()
    with limit_llm_concurrency():
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
    return resp.choices[0].message.content or ""


def describe_image(*, image_url: str, model: str | None = None) -> str:
    settings = get_settings()
    model = model or settings.DESCRIBE_IMAGE_MODEL

    url_hash = hashlib.sha256(image_url.encode("utf-8")).hexdigest()
    cache_key = f"describe_image:{model}:{url_hash}"
    cached = cached_get(cache_key)
    if cached is not None:
        return cached

    client = get_llm_client()
    with limit_llm_concurrency():
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": DESCRIBE_IMAGE_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                }
            ],
            temperature=0.3,
            max_tokens=500,
        )

    description = (resp.choices[0].message.content or "").strip()
    if not description:
        raise RuntimeError("No description returned from LLM")

    cached_get(cache_key, set_value=description, ttl=settings.DESCRIBE_IMAGE_CACHE_TTL_SECONDS)
    logger.info("Image described", extra={"model": model, "step": "describe_image"})
    return description


ENHANCE_BRIEF_SYSTEM_PROMPT = """You are a creative director and strategist helping to refine advertising briefs.

Your task is to enhance the brief description by:
- Making it more comprehensive and actionable
- Adding strategic insights and creative direction
- Clarifying the core message and objectives
- Suggesting tone, audience, and creative approaches
- Making it inspiring and useful for creative teams

Keep the enhanced brief:
- Concise but thorough (2-4 paragraphs max)
- Focused on what matters for creative execution
- Authentic to the original intent
- Written in a clear, professional tone

If the original brief is very short, expand it thoughtfully. If it's already detailed, refine and strengthen it."""


def enhance_brief(*, brief_name: str | None, brief_description: str | None) -> str:
    """Rewrite a brief description; the brief name is context only."""
    settings = get_settings()
    user_prompt = f"""Brief Name: {brief_name or "Untitled"}

Current Description:
{brief_description or "No description provided"}

Enhance this brief description by making it more solid, comprehensive, and creatively inspiring. Return ONLY the enhanced description - no additional formatting or labels."""

    response = answer_unstructured(
        system_prompt=ENHANCE_BRIEF_SYSTEM_PROMPT,
        user_prompt=user_prompt,
        model=settings.ENHANCE_BRIEF_MODEL,
        temperature=0.7,
        max_tokens=2000,
    )
    logger.info(
        "Brief enhanced (%d chars)",
        len(response),
        extra={"model": settings.ENHANCE_BRIEF_MODEL, "step": "enhance_brief"},
    )
    return response.strip()
