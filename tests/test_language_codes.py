# -*- coding: utf-8 -*-
"""Unit Tests for target language codes"""

import pytest

from transync import language_codes as lc


@pytest.mark.parametrize("code, expected", [
    ("ko", "ko"),
    ("KO", "ko"),
    (" ja ", "ja"),
    ("pt-BR", "pt"),
    ("zh_TW", "zh"),
])
def test_normalize_target_language(code, expected):
    assert lc.normalize_target_language(code) == expected


@pytest.mark.parametrize("code", ["", "   ", None, "xx", "english", 42])
def test_normalize_rejects_unknown_codes(code):
    with pytest.raises(ValueError):
        lc.normalize_target_language(code)


def test_language_names():
    assert lc.get_language_name("ko") == "Korean"
    assert lc.get_language_name("xx") is None
    assert lc.is_valid_language_code("ja")
    assert not lc.is_valid_language_code("JA")
