"""IP literal detection and Unicode dot folding."""

from __future__ import annotations

import re

_IPV4_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_IPV4_RE = re.compile(rf"(?:{_IPV4_OCTET}\.){{3}}{_IPV4_OCTET}")

_H16 = r"[0-9a-fA-F]{1,4}"
_EMBEDDED_V4 = r"(?:(?:25[0-5]|(?:2[0-4]|1?[0-9])?[0-9])\.){3}(?:25[0-5]|(?:2[0-4]|1?[0-9])?[0-9])"
_IPV6_RE = re.compile(
    "|".join(
        (
            rf"(?:{_H16}:){{7}}{_H16}",
            rf"(?:{_H16}:){{1,7}}:",
            rf"(?:{_H16}:){{1,6}}:{_H16}",
            rf"(?:{_H16}:){{1,5}}(?::{_H16}){{1,2}}",
            rf"(?:{_H16}:){{1,4}}(?::{_H16}){{1,3}}",
            rf"(?:{_H16}:){{1,3}}(?::{_H16}){{1,4}}",
            rf"(?:{_H16}:){{1,2}}(?::{_H16}){{1,5}}",
            rf"{_H16}:(?::{_H16}){{1,6}}",
            rf":(?:(?::{_H16}){{1,7}}|:)",
            rf"::(?:ffff(?::0{{1,4}})?:)?{_EMBEDDED_V4}",
            rf"(?:{_H16}:){{1,4}}:{_EMBEDDED_V4}",
        )
    )
)

# RFC 6874 zone identifier: unreserved characters or percent-encoded bytes
_ZONE_ID_RE = re.compile(r"(?:[A-Za-z0-9._~-]|%[0-9A-Fa-f]{2})+")

# Fullwidth full stop, ideographic full stop, halfwidth ideographic full stop
_UNICODE_DOTS = str.maketrans({"．": ".", "。": ".", "｡": "."})


def to_ascii_dots(value: str) -> str:
    """Fold the Unicode dot variants browsers accept (``127。0。0。1``) to ``.``."""
    return value.translate(_UNICODE_DOTS)


def is_ipv4(value: str) -> bool:
    """Strict dotted-quad check."""
    return _IPV4_RE.fullmatch(value) is not None


def is_ipv6(value: str) -> bool:
    """Check for an IPv6 literal, bracketed or not, with an optional zone ID.

    The URL form ``[fe80::1%25eth0]`` is accepted: ``%25`` is decoded to ``%``
    before the zone ID is split off. A zone ID must be non-empty and consist
    of unreserved characters or percent-encoded bytes.
    """
    if value.startswith("[") or value.endswith("]"):
        if not (value.startswith("[") and value.endswith("]")):
            return False
        value = value[1:-1]

    cleaned = value.replace("%25", "%")
    addr, sep, zone = cleaned.partition("%")
    if sep and _ZONE_ID_RE.fullmatch(zone) is None:
        return False

    return _IPV6_RE.fullmatch(addr) is not None


def is_ip_address(value: str) -> bool:
    """Check if ``value`` is an IPv4 or IPv6 literal."""
    return is_ipv4(value) or is_ipv6(value)


def canonicalize_bracketed_ipv6_content(content: str, preserve_zone_id_case: bool = False) -> str:
    """Lowercase the content of an IPv6 URL host for deterministic comparison.

    The zone ID delimiter is expected percent-encoded (``fe80::1%25eth0``).
    The zone ID itself is lowercased too unless ``preserve_zone_id_case``.
    """
    i = content.find("%25")
    if i == -1:
        return content.lower()

    addr = content[:i].lower()
    zone = content[i:]
    return addr + (zone if preserve_zone_id_case else zone.lower())
