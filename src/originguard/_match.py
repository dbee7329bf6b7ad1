"""Wildcard matching of domains and origins against compiled label patterns."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from originguard._classify import is_ip_address, to_ascii_dots
from originguard._normalize import HTTP_SCHEMES, _split_origin, parse_domain
from originguard._pattern import (
    INVALID_DOMAIN_CHARS,
    WILDCARDS,
    compile_wildcard_pattern,
    fixed_tail,
    is_all_wildcards,
    wildcard_tail_is_forbidden,
)

logger = logging.getLogger("originguard")

# Either side of a match may have at most this many labels.
MAX_LABELS = 32
# Upper bound on (domain_index, pattern_index) states expanded per match.
STEP_LIMIT = 10_000


def match_labels(domain_labels: Sequence[str], pattern_labels: Sequence[str]) -> bool:
    """Match domain labels against pattern labels containing ``*`` / ``**``.

    ``*`` consumes exactly one label. A leftmost ``**`` consumes one or more
    labels, an interior ``**`` zero or more (the empty split is tried
    first). Literal labels compare by equality.

    The search walks ``(domain_index, pattern_index)`` states depth first
    from an explicit stack, expanding each state at most once. It gives up
    and returns ``False`` after ``STEP_LIMIT`` expansions.
    """
    n = len(domain_labels)
    m = len(pattern_labels)
    stack: list[tuple[int, int]] = [(0, 0)]
    seen: set[tuple[int, int]] = set()
    steps = 0

    while stack:
        state = stack.pop()
        if state in seen:
            continue
        seen.add(state)

        steps += 1
        if steps > STEP_LIMIT:
            logger.debug("originguard: label match gave up after %d steps", STEP_LIMIT)
            return False

        d, p = state
        if p == m:
            if d == n:
                return True
            continue

        label = pattern_labels[p]
        if label == "**":
            # Pushed in reverse so the shortest split is popped first
            for i in range(n, d, -1):
                stack.append((i, p + 1))
            if p > 0:
                stack.append((d, p + 1))
        elif d < n and (label == "*" or domain_labels[d] == label):
            stack.append((d + 1, p + 1))

    return False


def matches_multi_label_pattern(domain: str, pattern_labels: Sequence[str]) -> bool:
    """Match a normalized domain against a compiled pattern.

    The fixed tail of the pattern is right-aligned against the domain and
    compared directly; only the labels to its left go through
    :func:`match_labels`.
    """
    domain_labels = domain.split(".")
    if len(domain_labels) > MAX_LABELS or len(pattern_labels) > MAX_LABELS:
        return False

    if not pattern_labels or all(label in WILDCARDS for label in pattern_labels):
        return False

    start, tail = fixed_tail(pattern_labels)
    if len(domain_labels) < len(tail):
        return False

    split = len(domain_labels) - len(tail)
    if tuple(domain_labels[split:]) != tail:
        return False

    left_domain = domain_labels[:split]
    left_pattern = pattern_labels[:start]
    if not left_pattern:
        return not left_domain

    return match_labels(left_domain, left_pattern)


def matches_wildcard_domain(domain: str, pattern: str) -> bool:
    """Check if ``domain`` matches the wildcard ``pattern``.

    - ``*`` matches any valid domain or IP address.
    - ``*.example.com`` matches direct subdomains only, never the apex.
    - ``**.example.com`` matches subdomains at any depth, never the apex.
    - ``*.*.example.com`` matches exactly two subdomain levels.

    Patterns without a wildcard never match here; exact entries are
    compared by the list evaluators. IP addresses only match ``*``, and
    patterns anchored on a public suffix (``*.com``) or an IP never match.
    """
    normalized = parse_domain(domain)
    if normalized is None:
        return False

    labels = compile_wildcard_pattern(pattern)
    if labels is None or not any(label in WILDCARDS for label in labels):
        return False

    if labels == ("*",):
        return True

    if is_ip_address(normalized):
        return False

    if all(label in WILDCARDS for label in labels):
        return False

    _, tail = fixed_tail(labels)
    if not tail:
        return False
    if wildcard_tail_is_forbidden(".".join(tail)):
        logger.debug("originguard: wildcard tail of %r is a public suffix or IP", pattern)
        return False

    # "**." needs at least one label in front of the remainder
    if labels[0] == "**" and normalized == ".".join(labels[1:]):
        return False

    return matches_multi_label_pattern(normalized, labels)


def matches_wildcard_origin(origin: str, pattern: str) -> bool:
    """Check if ``origin`` matches a wildcard origin ``pattern``.

    Supported patterns:

    - ``*``: any valid http(s) origin.
    - ``https://*`` / ``http://*``: any valid origin with that scheme.
    - ``https://*.example.com``: domain wildcard with an exact scheme.
    - ``*.example.com`` / ``**.example.com``: domain wildcard, any http(s)
      scheme. Ports on the origin are ignored.

    Only http(s) origins ever match. ``"null"`` never matches a wildcard and
    must be listed literally. Origins with an IPv6 zone ID are not matched.
    """
    candidate = to_ascii_dots(origin.strip())
    pattern = to_ascii_dots(pattern)

    parts = _split_origin(candidate, allow_zone_id=False)
    if parts is not None and parts.scheme not in HTTP_SCHEMES:
        return False

    if pattern == "*":
        return parts is not None

    lowered = pattern.lower()
    if lowered in ("https://*", "http://*"):
        return parts is not None and parts.scheme == lowered[: -len("://*")]

    if parts is None:
        return False

    if "://" in pattern:
        scheme, _, domain_pattern = pattern.partition("://")
        if INVALID_DOMAIN_CHARS.search(domain_pattern):
            return False
        if parts.scheme != scheme.lower():
            return False
        if "*" not in domain_pattern or is_all_wildcards(domain_pattern):
            return False
        return matches_wildcard_domain(parts.host, domain_pattern)

    if "*" in pattern:
        if is_all_wildcards(pattern):
            return False
        return matches_wildcard_domain(parts.host, pattern)

    return False
