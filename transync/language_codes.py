"""
Language code lookups for translation targets.

Target languages are ISO 639-1 two-letter codes (en, ko, ja). Region-tagged
input such as 'pt-BR' or 'zh_TW' is reduced to its base language because the
translation service only accepts the two-letter form.
"""

from typing import Optional

# ISO 639-1 language codes (2-letter)
# Source: https://en.wikipedia.org/wiki/List_of_ISO_639-1_codes
ISO_639_1 = {
    'af': 'Afrikaans',
    'am': 'Amharic',
    'ar': 'Arabic',
    'ay': 'Aymara',
    'az': 'Azerbaijani',
    'bg': 'Bulgarian',
    'bn': 'Bengali',
    'bo': 'Tibetan',
    'bs': 'Bosnian',
    'ca': 'Catalan',
    'cs': 'Czech',
    'cy': 'Welsh',
    'da': 'Danish',
    'de': 'German',
    'el': 'Greek',
    'en': 'English',
    'es': 'Spanish',
    'et': 'Estonian',
    'eu': 'Basque',
    'fa': 'Persian',
    'ff': 'Fulah',
    'fi': 'Finnish',
    'fr': 'French',
    'ga': 'Irish',
    'gl': 'Galician',
    'gn': 'Guarani',
    'gu': 'Gujarati',
    'ha': 'Hausa',
    'he': 'Hebrew',
    'hi': 'Hindi',
    'hr': 'Croatian',
    'hu': 'Hungarian',
    'hy': 'Armenian',
    'id': 'Indonesian',
    'ig': 'Igbo',
    'is': 'Icelandic',
    'it': 'Italian',
    'ja': 'Japanese',
    'ka': 'Georgian',
    'kk': 'Kazakh',
    'km': 'Khmer',
    'kn': 'Kannada',
    'ko': 'Korean',
    'ky': 'Kyrgyz',
    'lb': 'Luxembourgish',
    'lo': 'Lao',
    'lt': 'Lithuanian',
    'lv': 'Latvian',
    'mg': 'Malagasy',
    'mi': 'Maori',
    'mk': 'Macedonian',
    'ml': 'Malayalam',
    'mn': 'Mongolian',
    'mr': 'Marathi',
    'ms': 'Malay',
    'mt': 'Maltese',
    'my': 'Burmese',
    'ne': 'Nepali',
    'nl': 'Dutch',
    'no': 'Norwegian',
    'om': 'Oromo',
    'or': 'Odia',
    'pa': 'Punjabi',
    'pl': 'Polish',
    'pt': 'Portuguese',
    'qu': 'Quechua',
    'rn': 'Kirundi',
    'ro': 'Romanian',
    'ru': 'Russian',
    'rw': 'Kinyarwanda',
    'si': 'Sinhala',
    'sk': 'Slovak',
    'sl': 'Slovenian',
    'so': 'Somali',
    'sq': 'Albanian',
    'sr': 'Serbian',
    'ss': 'Swati',
    'st': 'Southern Sotho',
    'sv': 'Swedish',
    'sw': 'Swahili',
    'ta': 'Tamil',
    'te': 'Telugu',
    'tg': 'Tajik',
    'th': 'Thai',
    'tk': 'Turkmen',
    'tn': 'Tswana',
    'tr': 'Turkish',
    'ts': 'Tsonga',
    'uk': 'Ukrainian',
    'ur': 'Urdu',
    'uz': 'Uzbek',
    've': 'Venda',
    'vi': 'Vietnamese',
    'xh': 'Xhosa',
    'yo': 'Yoruba',
    'zh': 'Chinese',
    'zu': 'Zulu',
}


def extract_base_language(code: str) -> str:
    """
    Extract base language from code (remove region).

    Examples:
        >>> extract_base_language('zh-CN')
        'zh'
        >>> extract_base_language('pt_BR')
        'pt'
    """
    return code.replace('_', '-').split('-')[0]


def is_valid_language_code(code: str) -> bool:
    """Check if a code is a known two-letter target language."""
    return isinstance(code, str) and code in ISO_639_1


def get_language_name(code: str) -> Optional[str]:
    """Get the full language name from code, or None if unknown."""
    return ISO_639_1.get(code)


def normalize_target_language(code: str) -> str:
    """
    Normalize user input to a two-letter target language code.

    Raises:
        ValueError: If the code is empty or not a known language.

    Examples:
        >>> normalize_target_language('KO')
        'ko'
        >>> normalize_target_language('pt-BR')
        'pt'
    """
    if not isinstance(code, str) or not code.strip():
        raise ValueError("Target language code must be a non-empty string")

    base = extract_base_language(code.strip()).lower()
    if not is_valid_language_code(base):
        raise ValueError(f"Unsupported target language: {code!r}")
    return base
