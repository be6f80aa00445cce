"""
Tests for the spoken response catalog.
"""

import pytest

from bofang.responses import CATALOG, DEFAULT_LOCALE, message, to_ssml


class TestCatalog:

    @pytest.mark.parametrize("locale", sorted(CATALOG))
    def test_every_locale_has_every_key(self, locale):
        assert set(CATALOG[locale]) == set(CATALOG[DEFAULT_LOCALE])

    def test_interpolation(self):
        assert message("en-US", "NOW_PLAYING", "Song") == "Now playing Song."

    def test_unknown_locale_falls_back(self):
        assert message("ja-JP", "NOTHING_TO_RESUME") == message(DEFAULT_LOCALE, "NOTHING_TO_RESUME")

    def test_braces_in_arguments_are_literal(self):
        assert message("en-US", "ASK_TO_PLAY", "{0} remix").startswith("I found {0} remix.")


class TestSsml:

    def test_wraps_and_escapes(self):
        assert to_ssml("Rock & <Roll>") == "<speak>Rock &amp; &lt;Roll&gt;</speak>"
