"""Thin adapter around the OpenAI model used by the database agent."""

import json
import logging
import os
import re
from threading import local
from typing import Any, Dict, List, Optional

from django.conf import settings as django_settings
from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)

_CLIENT_STATE: Dict[str, Optional[OpenAI]] = {"client": None}
_JSON_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.IGNORECASE | re.DOTALL)
_THREAD_STATE = local()


def _default_usage_bucket() -> Dict[str, int]:
    return {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}


def reset_llm_usage_tracker() -> None:
    """Reset the accumulated token counters for the current thread."""
    _THREAD_STATE.llm_usage = _default_usage_bucket()


def _usage_bucket() -> Dict[str, int]:
    usage = getattr(_THREAD_STATE, "llm_usage", None)
    if usage is None:
        usage = _default_usage_bucket()
        _THREAD_STATE.llm_usage = usage
    return usage


def get_llm_usage_snapshot() -> Dict[str, int]:
    """Return the current token counters for the active thread."""
    return dict(_usage_bucket())


def _get_setting(name: str, default=None):
    if django_settings.configured and hasattr(django_settings, name):
        value = getattr(django_settings, name)
        if value not in (None, ""):
            return value
    return os.getenv(name, default)


def _get_openai_client() -> Optional[OpenAI]:
    """Lazily initialize the shared OpenAI client."""
    if _CLIENT_STATE["client"] is not None:
        return _CLIENT_STATE["client"]

    api_key = _get_setting("OPENAI_API_KEY")
    if not api_key:
        logger.warning(
            "OpenAI API key is not configured. Set OPENAI_API_KEY to enable the database agent."
        )
        return None

    client_kwargs: Dict[str, str] = {"api_key": api_key}
    base_url = _get_setting("OPENAI_API_BASE")
    if base_url:
        client_kwargs["base_url"] = base_url
    organization = _get_setting("OPENAI_ORGANIZATION")
    if organization:
        client_kwargs["organization"] = organization

    try:
        _CLIENT_STATE["client"] = OpenAI(**client_kwargs)
    except (OpenAIError, ValueError) as exc:
        logger.error("Failed to initialize OpenAI client: %s", exc)
        return None

    return _CLIENT_STATE["client"]


def _json_candidates(raw: str) -> List[str]:
    """Plausible JSON substrings from a potentially messy LLM response."""
    if not raw:
        return []
    candidates: List[str] = []
    for match in _JSON_CODE_FENCE_RE.findall(raw):
        cleaned = match.strip()
        if cleaned:
            candidates.append(cleaned)

    stripped = raw.strip()
    if stripped:
        candidates.append(stripped)

    return candidates


def parse_json_response(raw: str) -> Optional[Any]:
    """Attempt to parse JSON content from LLM output that may include extra text."""
    if not raw:
        return None

    decoder = json.JSONDecoder()
    for candidate in _json_candidates(raw):
        try:
            return decoder.raw_decode(candidate)[0]
        except json.JSONDecodeError:
            pass

        # First JSON object/array embedded in prose.
        for idx, ch in enumerate(candidate):
            if ch in "{[":
                try:
                    return decoder.raw_decode(candidate[idx:])[0]
                except json.JSONDecodeError:
                    continue

    return None


def query_openai(
    prompt: str,
    *,
    instructions: Optional[str] = None,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_output_tokens: Optional[int] = None,
) -> str:
    """Send a prompt to the configured OpenAI model and return the raw response text.

    Returns an empty string when no client is configured or the request fails.
    """
    client = _get_openai_client()
    if client is None:
        return ""

    request_kwargs: Dict[str, object] = {
        "model": model or _get_setting("AGENT_OPENAI_MODEL", "gpt-4o-mini"),
        "input": prompt,
    }
    if instructions:
        request_kwargs["instructions"] = instructions

    resolved_temperature = (
        temperature if temperature is not None else _get_setting("AGENT_OPENAI_TEMPERATURE", 0.2)
    )
    try:
        request_kwargs["temperature"] = float(resolved_temperature)
    except (TypeError, ValueError):
        request_kwargs["temperature"] = 0.2

    resolved_max_tokens = (
        max_output_tokens
        if max_output_tokens is not None
        else _get_setting("AGENT_OPENAI_MAX_TOKENS", 1024)
    )
    try:
        request_kwargs["max_output_tokens"] = int(resolved_max_tokens)
    except (TypeError, ValueError):
        request_kwargs["max_output_tokens"] = 1024

    try:
        response = client.responses.create(**request_kwargs)
    except (OpenAIError, ValueError, TypeError) as exc:
        logger.error("OpenAI request failed: %s", exc)
        return ""

    _capture_openai_usage(response)

    output_text = getattr(response, "output_text", "")
    if output_text:
        return output_text.strip()

    segments: List[str] = []
    for item in getattr(response, "output", None) or []:
        for content in getattr(item, "content", None) or []:
            text_value = getattr(content, "text", None)
            if isinstance(text_value, str):
                segments.append(text_value)
    return "".join(segments).strip()


def _capture_openai_usage(response: object) -> None:
    """Best-effort extraction of token usage metadata from OpenAI responses."""
    usage_obj = getattr(response, "usage", None)
    if usage_obj is None:
        return

    prompt_tokens = _extract_usage_value(usage_obj, "prompt_tokens", "input_tokens")
    completion_tokens = _extract_usage_value(usage_obj, "completion_tokens", "output_tokens")
    total_tokens = _extract_usage_value(usage_obj, "total_tokens")
    if total_tokens is None:
        total_tokens = (prompt_tokens or 0) + (completion_tokens or 0)

    usage = _usage_bucket()
    usage["prompt_tokens"] += max(prompt_tokens or 0, 0)
    usage["completion_tokens"] += max(completion_tokens or 0, 0)
    usage["total_tokens"] += max(total_tokens or 0, 0)


def _extract_usage_value(source: object, *keys: str) -> Optional[int]:
    for key in keys:
        value = source.get(key) if isinstance(source, dict) else getattr(source, key, None)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None
