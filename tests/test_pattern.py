"""Unit tests for wildcard pattern compilation and tail guards."""

from __future__ import annotations

from originguard._pattern import (
    compile_wildcard_pattern,
    fixed_tail,
    has_partial_label_wildcard,
    is_all_wildcards,
    normalize_wildcard_pattern,
    wildcard_tail_is_forbidden,
)


class TestIsAllWildcards:
    def test_all_wildcards(self):
        assert is_all_wildcards("*") is True
        assert is_all_wildcards("*.*") is True
        assert is_all_wildcards("**.*") is True

    def test_has_literal(self):
        assert is_all_wildcards("*.example.com") is False


class TestHasPartialLabelWildcard:
    def test_partial(self):
        assert has_partial_label_wildcard("ex*.com") is True
        assert has_partial_label_wildcard("*.ex*ample.com") is True
        assert has_partial_label_wildcard("***.example.com") is True

    def test_whole_label(self):
        assert has_partial_label_wildcard("*.example.com") is False
        assert has_partial_label_wildcard("**.example.com") is False


class TestCompileWildcardPattern:
    def test_labels(self):
        assert compile_wildcard_pattern("*.example.com") == ("*", "example", "com")

    def test_case_and_trailing_dot(self):
        assert compile_wildcard_pattern("**.EXAMPLE.com.") == ("**", "example", "com")

    def test_idn_literal_labels(self):
        assert compile_wildcard_pattern("*.café.com") == ("*", "xn--caf-dma", "com")

    def test_unicode_dots(self):
        assert compile_wildcard_pattern("*。example。com") == ("*", "example", "com")

    def test_url_characters(self):
        assert compile_wildcard_pattern("*.example.com:443") is None
        assert compile_wildcard_pattern("*.example.com/path") is None
        assert compile_wildcard_pattern("*.example.com\\path") is None
        assert compile_wildcard_pattern("user@*.example.com") is None
        assert compile_wildcard_pattern("[*].example.com") is None

    def test_empty_labels(self):
        assert compile_wildcard_pattern("*..example.com") is None
        assert compile_wildcard_pattern("") is None

    def test_oversized_label(self):
        assert compile_wildcard_pattern("*." + "a" * 64 + ".com") is None

    def test_oversized_after_idna(self):
        assert compile_wildcard_pattern("*." + "a" * 60 + "é.com") is None

    def test_boundary_label(self):
        assert compile_wildcard_pattern("*." + "a" * 63 + ".com") is not None

    def test_literal_labels_total_length(self):
        pattern = "*." + ".".join(["a" * 63] * 4) + ".com"
        assert compile_wildcard_pattern(pattern) is None

    def test_global(self):
        assert compile_wildcard_pattern("*") == ("*",)


class TestNormalizeWildcardPattern:
    def test_joined(self):
        assert normalize_wildcard_pattern(" *.Example.COM ") == "*.example.com"

    def test_invalid_is_empty(self):
        assert normalize_wildcard_pattern("*.example..com") == ""


class TestFixedTail:
    def test_after_last_wildcard(self):
        assert fixed_tail(("*", "api", "**", "example", "com")) == (3, ("example", "com"))

    def test_no_wildcard(self):
        assert fixed_tail(("example", "com")) == (0, ("example", "com"))

    def test_wildcard_last(self):
        assert fixed_tail(("example", "*")) == (2, ())


class TestWildcardTailIsForbidden:
    def test_public_suffix(self):
        assert wildcard_tail_is_forbidden("com") is True
        assert wildcard_tail_is_forbidden("co.uk") is True

    def test_registrable(self):
        assert wildcard_tail_is_forbidden("example.com") is False
        assert wildcard_tail_is_forbidden("example.co.uk") is False

    def test_ip(self):
        assert wildcard_tail_is_forbidden("127.0.0.1") is True
        assert wildcard_tail_is_forbidden("::1") is True

    def test_localhost_allowed(self):
        assert wildcard_tail_is_forbidden("localhost") is False

    def test_unknown_tld_is_its_own_suffix(self):
        assert wildcard_tail_is_forbidden("internal") is True
