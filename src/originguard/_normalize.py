"""Canonical forms for domains and origins.

Every public normalizer comes in two shapes: ``parse_*`` returns ``None``
for invalid input, ``normalize_*`` returns the ``""`` sentinel instead.
Comparisons inside the package always go through the ``parse_*`` form so
that two invalid inputs never compare equal.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from types import MappingProxyType

import idna

from originguard._classify import (
    canonicalize_bracketed_ipv6_content,
    is_ip_address,
    is_ipv6,
    to_ascii_dots,
)

MAX_LABEL_OCTETS = 63
MAX_DOMAIN_OCTETS = 255
MAX_DNS_LABELS = 127

NULL_ORIGIN = "null"

DEFAULT_PORTS = MappingProxyType({"http": 80, "https": 443})
HTTP_SCHEMES = frozenset(DEFAULT_PORTS)

# scheme "://" authority [path/query/fragment]; a backslash ends the
# authority the same way browsers treat it in special URLs
_ORIGIN_RE = re.compile(r"([A-Za-z][A-Za-z0-9+.\-]*)://([^/?#\\]*)(.*)", re.DOTALL)
_PORT_RE = re.compile(r"[0-9]+")


def check_dns_lengths(host: str) -> bool:
    """Check DNS length limits on an ASCII hostname.

    Each label must be at most 63 octets, the whole name at most 255 and
    there may be at most 127 labels. Only a trailing empty label (FQDN dot)
    is tolerated.
    """
    labels = host.split(".")
    if len(labels) > MAX_DNS_LABELS:
        return False

    total = 0
    last = len(labels) - 1
    for i, label in enumerate(labels):
        if not label:
            if i != last:
                return False
            continue
        if len(label) > MAX_LABEL_OCTETS:
            return False
        total += len(label) + 1

    return 0 < total and total - 1 <= MAX_DOMAIN_OCTETS


def _to_ascii(name: str) -> str | None:
    """UTS-46 / IDNA2008 conversion of a dotted name, label by label."""
    try:
        # STD3 rules, non-transitional processing; raises on disallowed code points
        mapped = idna.uts46_remap(name, std3_rules=True, transitional=False)
        labels = mapped.split(".")
        if not all(labels):
            return None
        # alabel() runs the hyphen, bidi and CONTEXTJ checks
        return ".".join(idna.alabel(label).decode("ascii") for label in labels)
    except UnicodeError:  # idna.IDNAError derives from UnicodeError
        return None


def parse_domain(value: str) -> str | None:
    """Return the canonical form of a domain or IP literal, or ``None``."""
    trimmed = to_ascii_dots(value.strip())
    if trimmed.endswith("."):
        trimmed = trimmed[:-1]
    if not trimmed:
        return None

    if is_ip_address(trimmed):
        lowered = trimmed.lower()
        if lowered.startswith("[") and lowered.endswith("]"):
            return lowered[1:-1]
        return lowered

    ascii_name = _to_ascii(unicodedata.normalize("NFC", trimmed).lower())
    if ascii_name is None or not check_dns_lengths(ascii_name):
        return None
    return ascii_name


def normalize_domain(value: str) -> str:
    """Normalize a domain for comparison; ``""`` signals invalid input.

    Trims, folds Unicode dots, strips one trailing dot, lowercases IP
    literals (dropping IPv6 brackets) and converts everything else to its
    IDNA A-label form. Idempotent.
    """
    return parse_domain(value) or ""


@dataclass(frozen=True, slots=True)
class _OriginParts:
    """A split origin with its host already normalized."""

    scheme: str  # lowercase
    host: str  # normalized domain, IPv4 literal, or bracketed IPv6 content
    port: int | None
    bracketed: bool


def _split_origin(value: str, *, allow_zone_id: bool) -> _OriginParts | None:
    """Split ``scheme://[userinfo@]host[:port]`` and validate the host.

    With ``allow_zone_id`` false, bracketed hosts carrying a zone ID are
    refused the way URL parsers refuse them.
    """
    m = _ORIGIN_RE.fullmatch(value)
    if m is None:
        return None

    scheme = m.group(1).lower()
    hostport = m.group(2).rpartition("@")[2]

    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            return None
        host = hostport[1:end]
        after = hostport[end + 1 :]
        if after and not after.startswith(":"):
            return None
        port_str = after[1:]
        if not is_ipv6(host) or ("%" in host and not allow_zone_id):
            return None
        bracketed = True
    else:
        host, _, port_str = hostport.partition(":")
        bracketed = False
        # URL parsers refuse whitespace inside the authority
        if host != host.strip():
            return None
        normalized = parse_domain(host)
        if normalized is None:
            return None
        host = normalized

    port: int | None = None
    if port_str:
        if _PORT_RE.fullmatch(port_str) is None:
            return None
        port = int(port_str)
        if port > 65535:
            return None

    return _OriginParts(scheme=scheme, host=host, port=port, bracketed=bracketed)


def parse_origin(value: str, *, preserve_zone_id_case: bool = False) -> str | None:
    """Return the canonical ``scheme://host[:port]`` form, or ``None``.

    The literal ``"null"`` (exact case) passes through unchanged.
    """
    if value == NULL_ORIGIN:
        return NULL_ORIGIN

    candidate = to_ascii_dots(value.strip())
    m = _ORIGIN_RE.fullmatch(candidate)
    if m is None:
        return None

    # Zone IDs are only understood in http(s) origins
    parts = _split_origin(candidate, allow_zone_id=m.group(1).lower() in HTTP_SCHEMES)
    if parts is None:
        return None

    if parts.bracketed:
        host = f"[{canonicalize_bracketed_ipv6_content(parts.host, preserve_zone_id_case)}]"
    else:
        host = parts.host

    port = ""
    if parts.port is not None and parts.port != DEFAULT_PORTS.get(parts.scheme):
        port = f":{parts.port}"

    return f"{parts.scheme}://{host}{port}"


def normalize_origin(value: str, *, preserve_zone_id_case: bool = False) -> str:
    """Normalize an origin for comparison; ``""`` signals invalid input.

    ``"https://Example.COM:443"`` becomes ``"https://example.com"``. The
    host goes through :func:`normalize_domain`; an invalid host makes the
    whole origin invalid. ``"NULL"`` is invalid, only ``"null"`` is kept.
    """
    return parse_origin(value, preserve_zone_id_case=preserve_zone_id_case) or ""
