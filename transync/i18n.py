"""
Label catalogue for the control surface.

Loads JSON label packs from transync/locales and resolves dotted keys such as
'control.translate_all'. Missing keys fall back to English, then to the key
itself, so a control always has something to show.

Note: Log messages are NOT translated - they remain in English for debugging purposes.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from transync.logger import get_logger

logger = get_logger(__name__)

# Label pack directory
LOCALES_DIR = Path(__file__).parent / "locales"

DEFAULT_LANGUAGE = "en"

SUPPORTED_LANGUAGES = {
    "en": {"name": "English", "native_name": "English"},
    "ko": {"name": "Korean", "native_name": "한국어"},
}


def normalize_language_code(lang_code: Optional[str]) -> str:
    """
    Normalize a UI language code to one of the shipped label packs.

    Examples:
        >>> normalize_language_code('ko-KR')
        'ko'
        >>> normalize_language_code('fr')
        'en'
    """
    if not lang_code:
        return DEFAULT_LANGUAGE

    lang_lower = lang_code.lower().replace('_', '-')
    for supported in SUPPORTED_LANGUAGES:
        if lang_lower == supported.lower():
            return supported

    lang_prefix = lang_lower.split('-')[0]
    for supported in SUPPORTED_LANGUAGES:
        if supported.lower().startswith(lang_prefix):
            return supported

    return DEFAULT_LANGUAGE


@lru_cache(maxsize=None)
def load_language(lang_code: str) -> Dict[str, Any]:
    """Load a label pack, falling back to English when the file is unusable."""
    lang_file = LOCALES_DIR / f"{lang_code}.json"

    if not lang_file.exists():
        logger.debug(f"Label pack not found: {lang_file}, falling back to {DEFAULT_LANGUAGE}")
        if lang_code != DEFAULT_LANGUAGE:
            return load_language(DEFAULT_LANGUAGE)
        return {}

    try:
        with open(lang_file, 'r', encoding='utf-8') as f:
            labels = json.load(f)
            logger.debug(f"Loaded label pack: {lang_code}")
            return labels
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"Failed to load label pack {lang_file}: {e}")
        if lang_code != DEFAULT_LANGUAGE:
            return load_language(DEFAULT_LANGUAGE)
        return {}


def get_nested_value(data: Dict[str, Any], key_path: str) -> Optional[str]:
    """Get a string from a nested dictionary using dot notation."""
    current: Any = data
    for key in key_path.split('.'):
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return None
    return current if isinstance(current, str) else None


def get_translation(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Get the label for the given key and UI language.

    Args:
        key: The label key (dot notation, e.g., 'control.translate_all')
        lang: The UI language code
        **kwargs: Optional format arguments for string interpolation

    Returns:
        The label, or the key itself if not found
    """
    lang = normalize_language_code(lang)
    value = get_nested_value(load_language(lang), key)

    if value is None and lang != DEFAULT_LANGUAGE:
        value = get_nested_value(load_language(DEFAULT_LANGUAGE), key)

    if value is None:
        logger.debug(f"Label not found for key: {key} (lang: {lang})")
        return key

    if kwargs:
        try:
            value = value.format(**kwargs)
        except KeyError as e:
            logger.warning(f"Missing interpolation key {e} for label: {key}")

    return value


# Alias for convenience
t = get_translation


def clear_cache() -> None:
    """Clear the label pack cache (useful for development/testing)."""
    load_language.cache_clear()
    logger.debug("Label cache cleared")
