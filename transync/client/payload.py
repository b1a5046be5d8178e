"""
Translation Service Wire Format

This module contains the request/response shapes for the translation service:
- Request body and headers
- httpx timeout construction
- Response parsing and error detail extraction

The service takes one piece of content per request:

    {"content": ..., "source_language": "auto", "target_language": "ko", "format": "html"}

and answers with {"translated_content": ...} plus optional provider/quality metadata.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from transync.client.exceptions import MalformedResponse
from transync.config import DEFAULT_SOURCE_LANGUAGE
from transync.logger import get_logger

logger = get_logger(__name__)

# Accepted spellings for the translated text in a response body
TRANSLATED_CONTENT_KEYS = ("translated_content", "translatedContent")


@dataclass(frozen=True)
class TranslationResult:
    """A successful translation of one piece of content."""
    translated_content: str
    language: str
    provider: Optional[str] = None
    quality: Optional[float] = None


def build_request_body(content: str, target_language: str, fmt: str) -> Dict[str, str]:
    return {
        "content": content,
        "source_language": DEFAULT_SOURCE_LANGUAGE,
        "target_language": target_language,
        "format": fmt,
    }


def build_headers(api_key: Optional[str]) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number of milliseconds (total deadline) or a
            dict with connect, write, read, pool keys in milliseconds

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10000) / 1000.0,
            write=timeout_config.get('write', 60000) / 1000.0,
            read=timeout_config.get('read', 120000) / 1000.0,
            pool=timeout_config.get('pool', 10000) / 1000.0,
        )

    timeout_value = float(timeout_config) / 1000.0 if timeout_config else 10.0
    return httpx.Timeout(timeout_value, connect=min(10.0, timeout_value))


def extract_error_detail(response: httpx.Response) -> Dict[str, Optional[str]]:
    """Pull a human-readable message and code out of an error response."""
    message = f"HTTP {response.status_code}"
    code = None

    try:
        error_json = response.json()
    except ValueError:
        text = response.text[:500] if response.text else ""
        return {"message": text or message, "code": None}

    if isinstance(error_json, dict) and "error" in error_json:
        error_detail = error_json["error"]
        if isinstance(error_detail, dict):
            message = error_detail.get("message", str(error_detail))
            raw_code = error_detail.get("code")
            code = str(raw_code) if raw_code is not None else None
        else:
            message = str(error_detail)
    elif isinstance(error_json, dict) and "message" in error_json:
        message = str(error_json["message"])

    return {"message": message, "code": code}


def parse_translation_payload(payload: Any, language: str) -> TranslationResult:
    """
    Turn a decoded success body into a TranslationResult.

    Raises:
        MalformedResponse: If the payload has no non-empty translated content.
    """
    if not isinstance(payload, dict):
        raise MalformedResponse(
            f"Expected a JSON object, got {type(payload).__name__}",
            code="malformed_response",
        )

    translated = None
    for key in TRANSLATED_CONTENT_KEYS:
        if key in payload:
            translated = payload[key]
            break

    if not isinstance(translated, str) or not translated.strip():
        logger.debug(f"Response keys without usable translation: {list(payload.keys())}")
        raise MalformedResponse(
            "Response did not contain translated content",
            code="malformed_response",
            details={"keys": sorted(payload.keys())},
        )

    quality = payload.get("quality")
    if quality is not None and not isinstance(quality, (int, float)):
        quality = None

    provider = payload.get("provider")
    return TranslationResult(
        translated_content=translated,
        language=language,
        provider=str(provider) if provider is not None else None,
        quality=quality,
    )
