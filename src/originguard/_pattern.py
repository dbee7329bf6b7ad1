"""Wildcard pattern compilation and the guards shared by matcher and validator."""

from __future__ import annotations

import re
import unicodedata

from originguard._classify import is_ip_address, to_ascii_dots
from originguard._normalize import MAX_LABEL_OCTETS, check_dns_lengths, parse_domain
from originguard._psl import public_suffix

WILDCARDS = frozenset({"*", "**"})

# Ports, paths, fragments, brackets, userinfo and backslashes never belong
# in a domain pattern.
INVALID_DOMAIN_CHARS = re.compile(r"[/?#:\[\]@\\]")

# Special-use names treated as non-PSL for the wildcard tail guard.
# Only ``localhost`` for now; add others here explicitly.
INTERNAL_PSEUDO_TLDS = frozenset({"localhost"})


def is_all_wildcards(pattern: str) -> bool:
    return all(label in WILDCARDS for label in pattern.split("."))


def has_partial_label_wildcard(pattern: str) -> bool:
    """``ex*.com`` style labels; only whole-label wildcards are supported."""
    return any("*" in label and label not in WILDCARDS for label in pattern.split("."))


def normalize_literal_label(label: str) -> str | None:
    """Normalize one literal label of a pattern, or ``None`` if it is invalid."""
    # Fail fast on oversized labels before running IDNA on them
    if len(label) > MAX_LABEL_OCTETS:
        return None
    normalized = parse_domain(label)
    if normalized is None or len(normalized) > MAX_LABEL_OCTETS:
        return None
    return normalized


def literal_labels_fit(labels: list[str] | tuple[str, ...]) -> bool:
    """Check that the literal labels, joined, respect DNS length limits."""
    concrete = [label for label in labels if label not in WILDCARDS]
    return not concrete or check_dns_lengths(".".join(concrete))


def compile_wildcard_pattern(pattern: str) -> tuple[str, ...] | None:
    """Compile a wildcard pattern into its normalized label sequence.

    ``*`` and ``**`` labels are kept as-is, every other label is normalized
    like a domain. Returns ``None`` for URL characters, empty labels,
    oversized labels or literal labels that fail IDNA conversion.
    """
    trimmed = to_ascii_dots(unicodedata.normalize("NFC", pattern.strip()))
    if INVALID_DOMAIN_CHARS.search(trimmed):
        return None

    if trimmed.endswith("."):
        trimmed = trimmed[:-1]

    labels = trimmed.split(".")
    if not all(labels):
        return None

    compiled: list[str] = []
    for label in labels:
        if label in WILDCARDS:
            compiled.append(label)
            continue
        normalized = normalize_literal_label(label)
        if normalized is None:
            return None
        compiled.append(normalized)

    if not literal_labels_fit(compiled):
        return None
    return tuple(compiled)


def normalize_wildcard_pattern(pattern: str) -> str:
    """Normalize a wildcard pattern; ``""`` signals invalid input."""
    labels = compile_wildcard_pattern(pattern)
    return ".".join(labels) if labels else ""


def fixed_tail(labels: tuple[str, ...] | list[str]) -> tuple[int, tuple[str, ...]]:
    """Return ``(start, tail)``: the literal labels after the last wildcard."""
    start = 0
    for i in range(len(labels) - 1, -1, -1):
        if labels[i] in WILDCARDS:
            start = i + 1
            break
    return start, tuple(labels[start:])


def wildcard_tail_is_forbidden(tail: str) -> bool:
    """Check if wildcards anchored on ``tail`` would be too broad.

    A tail that is an IP literal or exactly a public suffix (``com``,
    ``co.uk``) is forbidden, unless it is an internal pseudo-TLD.
    """
    if tail in INTERNAL_PSEUDO_TLDS:
        return False
    if is_ip_address(tail):
        return True
    return public_suffix(tail) == tail
