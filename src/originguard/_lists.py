"""Allowlist evaluation for domains, origins and credentialed origins."""

from __future__ import annotations

import re
from collections.abc import Iterable

from originguard._match import matches_wildcard_domain, matches_wildcard_origin
from originguard._normalize import parse_domain, parse_origin

# "scheme://" prefix of an origin-style entry
ORIGIN_LIKE = re.compile(r"[a-z][a-z0-9+\-.]*://", re.IGNORECASE)


class OriginStyleEntryError(ValueError):
    """Raised when a domain list contains origin-style (``scheme://``) entries."""

    def __init__(self, entries: list[str]) -> None:
        self.entries = entries
        super().__init__(
            "matches_domain_list: origin-style patterns are not allowed in domain lists: "
            + ", ".join(entries)
        )


def _clean(entries: Iterable[str]) -> list[str]:
    """Trim entries and drop the blank ones."""
    return [s for s in (entry.strip() for entry in entries) if s]


def matches_domain_list(domain: str, allowed: Iterable[str]) -> bool:
    """Check if ``domain`` matches any entry of a domain allowlist.

    Entries are exact domains or domain wildcard patterns. Blank entries are
    ignored. Origin-style entries (``https://*.example.com``) are a
    configuration mistake and raise :class:`OriginStyleEntryError`, whatever
    the candidate; use :func:`matches_origin_list` for those.
    """
    cleaned = _clean(allowed)

    origin_like = [s for s in cleaned if ORIGIN_LIKE.match(s)]
    if origin_like:
        raise OriginStyleEntryError(origin_like)

    normalized = parse_domain(domain)
    if normalized is None:
        return False

    for entry in cleaned:
        if "*" in entry:
            if matches_wildcard_domain(domain, entry):
                return True
            continue
        if normalized == parse_domain(entry):
            return True

    return False


def matches_origin_list(
    origin: str | None,
    allowed: Iterable[str],
    *,
    treat_no_origin_as_allowed: bool = False,
) -> bool:
    """Check if ``origin`` matches any entry of an origin allowlist.

    A missing origin (no ``Origin`` header: ``None`` or ``""``) is only
    allowed with ``treat_no_origin_as_allowed`` and a ``*`` entry. The
    ``*`` entry still requires a valid http(s) origin.
    """
    cleaned = _clean(allowed)

    if not origin:
        return treat_no_origin_as_allowed and "*" in cleaned

    normalized = parse_origin(origin)

    for entry in cleaned:
        if "*" in entry:
            if matches_wildcard_origin(origin, entry):
                return True
            continue
        if normalized is not None and normalized == parse_origin(entry):
            return True

    return False


def matches_cors_credentials_list(
    origin: str | None,
    allowed: Iterable[str],
    *,
    allow_wildcard_subdomains: bool = False,
) -> bool:
    """Check if a credentialed request from ``origin`` is allowed.

    Exact matches only unless ``allow_wildcard_subdomains`` is set; without
    it, wildcard entries are compared literally and can never match a real
    origin.
    """
    if not origin:
        return False

    normalized = parse_origin(origin)
    if normalized is None:
        return False

    for entry in _clean(allowed):
        if allow_wildcard_subdomains and "*" in entry:
            if matches_wildcard_origin(origin, entry):
                return True
            continue
        if normalized == parse_origin(entry):
            return True

    return False
