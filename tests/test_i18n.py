# -*- coding: utf-8 -*-
"""Unit Tests for control labels"""

import pytest

from transync import i18n


class TestLabels:

    def test_english_labels(self):
        assert i18n.t("control.translate_all", "en") == "Translate all"
        assert i18n.t("item.error", "en") == "Translation failed"

    def test_korean_labels(self):
        assert i18n.t("control.translate_all", "ko") == "모두 번역"
        assert i18n.t("title.translate", "ko-KR") == "제목 번역"

    def test_progress_interpolation(self):
        assert i18n.t("control.progress", "en", current=2, total=7) == "2/7"

    def test_unsupported_language_uses_english(self):
        assert i18n.t("control.show_original", "fr") == "Show original"

    def test_unknown_key_returns_key(self):
        assert i18n.t("control.does_not_exist", "ko") == "control.does_not_exist"

    def test_label_packs_have_same_keys(self):
        def keys(data, prefix=""):
            found = set()
            for key, value in data.items():
                path = f"{prefix}{key}"
                if isinstance(value, dict):
                    found |= keys(value, path + ".")
                else:
                    found.add(path)
            return found

        i18n.clear_cache()
        assert keys(i18n.load_language("en")) == keys(i18n.load_language("ko"))


@pytest.mark.parametrize("code, expected", [
    (None, "en"),
    ("", "en"),
    ("KO", "ko"),
    ("ko_KR", "ko"),
    ("en-GB", "en"),
    ("de", "en"),
])
def test_normalize_language_code(code, expected):
    assert i18n.normalize_language_code(code) == expected
