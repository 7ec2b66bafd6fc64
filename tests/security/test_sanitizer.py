"""Tests for input sanitisation."""

import logging

import pytest

from folio.security.sanitizer import sanitize, sanitize_tags, validate_image_url

HOSTILE_INPUTS = [
    "hi <script>alert(1)</script> there",
    "<SCRIPT src=x></SCRIPT>",
    '<a href="javascript:alert(1)">x</a>',
    "<img src=x onerror=alert(1)>",
    "<scr<script>x</script>ipt>alert(1)</script>",
    "javajavascript:script:alert(1)",
    "ononclick=click=steal()",
    "plain text with a < and a >",
    "   padded   ",
    "&lt;already escaped&gt;",
]


class TestSanitize:
    def test_empty_and_none(self) -> None:
        assert sanitize("") == ""
        assert sanitize(None) == ""

    def test_removes_script_blocks(self) -> None:
        assert sanitize("hi <script>alert(1)</script> there") == "hi  there"

    def test_script_tags_are_case_insensitive(self) -> None:
        assert sanitize("<SCRIPT src=x></SCRIPT>") == ""

    def test_removes_javascript_scheme(self) -> None:
        result = sanitize('<a href="javascript:alert(1)">x</a>')
        assert result == '&lt;a href="alert(1)"&gt;x&lt;/a&gt;'

    def test_removes_event_handlers(self) -> None:
        assert sanitize("<img src=x onerror=alert(1)>") == "&lt;img src=x alert(1)&gt;"
        assert sanitize("ONCLICK = foo") == "foo"

    def test_removal_repeats_until_stable(self) -> None:
        """Removing one match must not leave a freshly spliced one behind."""
        assert sanitize("<scr<script>x</script>ipt>alert(1)</script>") == ""
        assert sanitize("javajavascript:script:alert(1)") == "alert(1)"

    def test_escapes_angle_brackets(self) -> None:
        assert sanitize("a < b > c") == "a &lt; b &gt; c"

    def test_ampersand_is_left_alone(self) -> None:
        assert sanitize("&lt;b&gt; &amp; co") == "&lt;b&gt; &amp; co"

    def test_trims_whitespace(self) -> None:
        assert sanitize("  hi  ") == "hi"

    @pytest.mark.parametrize("text", HOSTILE_INPUTS)
    def test_idempotent(self, text: str) -> None:
        once = sanitize(text)
        assert sanitize(once) == once

    @pytest.mark.parametrize("text", HOSTILE_INPUTS)
    def test_no_markup_survives(self, text: str) -> None:
        result = sanitize(text)
        assert "<" not in result
        assert "javascript:" not in result.lower()


class TestSanitizeTags:
    def test_cleans_dedupes_and_drops_empty(self) -> None:
        assert sanitize_tags([" python ", "", "python", "<b>", "   "]) == [
            "python",
            "&lt;b&gt;",
        ]

    def test_keeps_first_occurrence_order(self) -> None:
        assert sanitize_tags(["b", "a", "b"]) == ["b", "a"]


class TestValidateImageUrl:
    def test_empty_is_allowed(self) -> None:
        assert validate_image_url("") is True
        assert validate_image_url(None) is True

    def test_https_trusted_host(self) -> None:
        assert validate_image_url("https://images.unsplash.com/photo.png") is True

    def test_subdomain_of_trusted_host(self) -> None:
        assert validate_image_url("https://res.cloudinary.com/x/y.png") is True

    def test_http_is_rejected(self) -> None:
        assert validate_image_url("http://images.unsplash.com/photo.png") is False

    def test_not_a_url(self) -> None:
        assert validate_image_url("not a url") is False

    def test_missing_host(self) -> None:
        assert validate_image_url("https://") is False

    def test_untrusted_host_is_allowed_but_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="folio.security.sanitizer"):
            assert validate_image_url("https://evil.example/x.png") is True
        assert "untrusted domain" in caplog.text
        assert "evil.example" in caplog.text

    def test_custom_domain_list(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="folio.security.sanitizer"):
            assert validate_image_url("https://cdn.mysite.dev/a.png", ["mysite.dev"]) is True
        assert caplog.text == ""
