"""Unit tests for IP literal detection and Unicode dot folding."""

from __future__ import annotations

from originguard._classify import (
    canonicalize_bracketed_ipv6_content,
    is_ip_address,
    is_ipv4,
    is_ipv6,
    to_ascii_dots,
)


class TestIsIPv4:
    def test_dotted_quad(self):
        assert is_ipv4("192.168.1.1") is True

    def test_bounds(self):
        assert is_ipv4("0.0.0.0") is True
        assert is_ipv4("255.255.255.255") is True

    def test_octet_out_of_range(self):
        assert is_ipv4("192.168.1.256") is False

    def test_three_octets(self):
        assert is_ipv4("192.168.1") is False

    def test_hostname(self):
        assert is_ipv4("example.com") is False

    def test_trailing_dot_rejected(self):
        assert is_ipv4("127.0.0.1.") is False


class TestIsIPv6:
    def test_loopback_and_unspecified(self):
        assert is_ipv6("::1") is True
        assert is_ipv6("::") is True

    def test_compressed(self):
        assert is_ipv6("2001:db8::1") is True
        assert is_ipv6("fe80::1") is True

    def test_full_form(self):
        assert is_ipv6("2001:0db8:85a3:0000:0000:8a2e:0370:7334") is True

    def test_ipv4_mapped(self):
        assert is_ipv6("::ffff:192.0.2.128") is True

    def test_bracketed(self):
        assert is_ipv6("[::1]") is True
        assert is_ipv6("[2001:db8::1]") is True

    def test_unbalanced_brackets(self):
        assert is_ipv6("[::1") is False
        assert is_ipv6("::1]") is False

    def test_too_many_groups(self):
        assert is_ipv6("1:2:3:4:5:6:7:8:9") is False

    def test_double_compression(self):
        assert is_ipv6("1::2::3") is False

    def test_zone_id_unreserved(self):
        assert is_ipv6("fe80::1%eth0") is True
        assert is_ipv6("fe80::1%ETH0") is True
        assert is_ipv6("fe80::1%eth0-._~Z9") is True

    def test_zone_id_url_form(self):
        assert is_ipv6("[fe80::1%25eth0]") is True
        assert is_ipv6("[fe80::1%25eth0-._~Z9]") is True

    def test_zone_id_pct_encoded(self):
        assert is_ipv6("fe80::1%eth0%2D1%3A") is True
        assert is_ipv6("[fe80::1%25eth0%2D1%3A]") is True

    def test_empty_zone_id(self):
        assert is_ipv6("fe80::1%") is False
        assert is_ipv6("[fe80::1%25]") is False

    def test_illegal_zone_id_characters(self):
        assert is_ipv6("[fe80::1%25eth0!]") is False
        assert is_ipv6("[fe80::1%25eth0:]") is False

    def test_bad_pct_encoding_in_zone_id(self):
        assert is_ipv6("[fe80::1%25eth0%G1]") is False
        assert is_ipv6("[fe80::1%25eth0%2]") is False
        assert is_ipv6("[fe80::1%25eth0%]") is False


class TestIsIPAddress:
    def test_either_family(self):
        assert is_ip_address("10.0.0.1") is True
        assert is_ip_address("::1") is True

    def test_not_an_ip(self):
        assert is_ip_address("not-an-ip") is False
        assert is_ip_address("") is False


class TestToAsciiDots:
    def test_ideographic_full_stop(self):
        assert to_ascii_dots("127。0。0。1") == "127.0.0.1"

    def test_fullwidth_and_halfwidth(self):
        assert to_ascii_dots("a．b｡c") == "a.b.c"

    def test_ascii_untouched(self):
        assert to_ascii_dots("api.example.com") == "api.example.com"


class TestCanonicalizeBracketedIPv6Content:
    def test_lowercases_address(self):
        assert canonicalize_bracketed_ipv6_content("2001:DB8::1") == "2001:db8::1"

    def test_lowercases_zone_id(self):
        assert canonicalize_bracketed_ipv6_content("FE80::1%25ETH0") == "fe80::1%25eth0"

    def test_preserves_zone_id_case(self):
        assert canonicalize_bracketed_ipv6_content("FE80::1%25Eth0", True) == "fe80::1%25Eth0"
