"""
Tests for short code generation and input validators.
"""

import re

from shortlink.core.validators import is_valid_url, sanitize_short_code
from shortlink.services.code_generator import GENERATED_CODE_LENGTH, generate_short_code


class TestGenerateShortCode:
    """Test the short code generator."""

    def test_custom_code_returned_verbatim(self):
        assert generate_short_code("my-link") == "my-link"

    def test_empty_custom_code_generates_random(self):
        code = generate_short_code("")
        assert len(code) == GENERATED_CODE_LENGTH

    def test_generated_code_is_url_safe(self):
        code = generate_short_code()
        assert len(code) == GENERATED_CODE_LENGTH
        assert re.fullmatch(r"[0-9a-f]+", code)
        assert sanitize_short_code(code) == code

    def test_generated_codes_do_not_collide(self):
        codes = {generate_short_code() for _ in range(1000)}
        assert len(codes) == 1000


class TestURLValidation:
    """Test URL validation function."""

    def test_valid_urls(self):
        valid_urls = [
            "http://example.com",
            "https://example.com",
            "https://www.example.com/path/to/page",
            "http://subdomain.example.com:8080/path?query=value",
            "http://localhost:3000/",
            "http://[::1]:8080/",
            "http://127.0.0.1/path",
        ]
        for url in valid_urls:
            assert is_valid_url(url), f"Should be valid: {url}"

    def test_invalid_urls(self):
        invalid_urls = [
            "not-a-url",
            "ftp://example.com",  # FTP not supported
            "example.com",  # Missing scheme
            "",
            "http://",  # Missing domain
            "javascript:alert(1)",
            "https://example.com/" + "a" * 2100,
        ]
        for url in invalid_urls:
            assert not is_valid_url(url), f"Should be invalid: {url}"


class TestSanitizeShortCode:
    """Test short code sanitization."""

    def test_accepts_url_safe_codes(self):
        assert sanitize_short_code("abc123") == "abc123"
        assert sanitize_short_code("my_link-2") == "my_link-2"
        assert sanitize_short_code("  padded ") == "padded"

    def test_rejects_unsafe_codes(self):
        for code in ["", "a/b", "../etc", "a b", "x" * 65, "favicon.ico"]:
            assert sanitize_short_code(code) is None, f"Should be rejected: {code!r}"
