"""Tests for redirection detection and repeated percent-decoding."""

from __future__ import annotations

import re

import pytest

from linkscrub.errors import DecodeError, RedirectionHasNoCapturingGroup
from linkscrub.redirection import MAX_DECODE_PASSES, find_redirection, repeatedly_urldecode


class TestFindRedirection:
    def test_returns_first_group(self):
        patterns = [re.compile(r"[?&]u=([^&]+)")]
        assert find_redirection(patterns, "https://r.net/?a=1&u=target&b=2") == "target"

    def test_no_match(self):
        assert find_redirection([re.compile(r"[?&]u=([^&]+)")], "https://r.net/?a=1") is None

    def test_first_matching_pattern_wins(self):
        patterns = [
            re.compile(r"[?&]first=([^&]+)"),
            re.compile(r"[?&]second=([^&]+)"),
        ]
        assert find_redirection(patterns, "https://r.net/?second=b&first=a") == "a"

    def test_missing_group_is_an_error(self):
        with pytest.raises(RedirectionHasNoCapturingGroup) as exc_info:
            find_redirection([re.compile(r"^https://r\.net/")], "https://r.net/x")
        assert exc_info.value.pattern == r"^https://r\.net/"

    def test_missing_group_ignored_when_pattern_does_not_match(self):
        assert find_redirection([re.compile(r"^https://other/")], "https://r.net/x") is None

    def test_unparticipating_group_is_an_error(self):
        with pytest.raises(RedirectionHasNoCapturingGroup):
            find_redirection([re.compile(r"^https://r\.net/(?:go=(.+))?")], "https://r.net/x")


class TestRepeatedlyUrldecode:
    def test_single_encoding(self):
        assert repeatedly_urldecode("https%3A%2F%2Freal.site%2F") == "https://real.site/"

    def test_double_encoding(self):
        assert repeatedly_urldecode("https%253A%252F%252Freal.site%252Fa") == "https://real.site/a"

    def test_already_decoded(self):
        assert repeatedly_urldecode("https://real.site/") == "https://real.site/"

    def test_prepends_scheme(self):
        assert repeatedly_urldecode("real.site%2Fpage") == "http://real.site/page"

    def test_utf8(self):
        assert repeatedly_urldecode("https%3A%2F%2Fxn.site%2Fcaf%C3%A9") == "https://xn.site/café"

    def test_invalid_utf8(self):
        with pytest.raises(DecodeError):
            repeatedly_urldecode("https%3A%2F%2Fa.site%2F%FF")

    def test_pass_cap(self):
        nested = "%25" + "25" * (MAX_DECODE_PASSES + 5) + "78"
        with pytest.raises(DecodeError, match="decode passes"):
            repeatedly_urldecode(nested)

    def test_deep_but_bounded_nesting(self):
        nested = "%25" + "25" * 3 + "78"
        assert repeatedly_urldecode(nested) == "http://x"
