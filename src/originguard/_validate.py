"""Configuration-time validation of allowlist entries.

:func:`validate_config_entry` never raises. Every rejection carries a
stable, human-readable ``info`` string so configuration tooling can report
all problems of a list at once.
"""

from __future__ import annotations

import enum
import re
import unicodedata
from dataclasses import dataclass

from originguard._classify import is_ip_address, is_ipv6, to_ascii_dots
from originguard._lists import ORIGIN_LIKE
from originguard._normalize import HTTP_SCHEMES, parse_domain
from originguard._pattern import (
    INTERNAL_PSEUDO_TLDS,
    INVALID_DOMAIN_CHARS,
    WILDCARDS,
    compile_wildcard_pattern,
    fixed_tail,
    has_partial_label_wildcard,
    is_all_wildcards,
    literal_labels_fit,
    normalize_literal_label,
    wildcard_tail_is_forbidden,
)
from originguard._psl import public_suffix

_PORT_RE = re.compile(r"[0-9]*")

NON_HTTP_ADVISORY = "non-http(s) scheme; CORS may not match"


class WildcardKind(enum.Enum):
    """What kind of wildcard a validated entry represents."""

    NONE = "none"  # exact match only
    GLOBAL = "global"  # "*"
    PROTOCOL = "protocol"  # "https://*"
    SUBDOMAIN = "subdomain"  # "*.example.com", "https://**.example.com"


@dataclass(frozen=True, slots=True)
class ValidationVerdict:
    """Outcome of validating one configuration entry."""

    valid: bool
    wildcard_kind: WildcardKind = WildcardKind.NONE
    info: str | None = None  # rejection reason, or an advisory when valid


def _reject(info: str | None = None) -> ValidationVerdict:
    return ValidationVerdict(False, WildcardKind.NONE, info)


def _scheme_advisory(scheme: str) -> str | None:
    return None if scheme in HTTP_SCHEMES else NON_HTTP_ADVISORY


def _is_public_suffix(host: str) -> bool:
    return host not in INTERNAL_PSEUDO_TLDS and public_suffix(host) == host


def _concrete_labels_valid(pattern: str) -> bool:
    """Check the literal labels of a wildcard pattern (IDNA and DNS limits)."""
    concrete: list[str] = []
    for label in pattern.split("."):
        if label in WILDCARDS:
            continue
        normalized = normalize_literal_label(label)
        if normalized is None:
            return False
        concrete.append(normalized)
    return literal_labels_fit(concrete)


def _wildcard_tail_invalid(pattern: str) -> bool:
    labels = compile_wildcard_pattern(pattern)
    if labels is None:
        return True
    _, tail = fixed_tail(labels)
    return not tail or wildcard_tail_is_forbidden(".".join(tail))


def _validate_domain_wildcard(pattern: str) -> ValidationVerdict:
    trimmed = to_ascii_dots(unicodedata.normalize("NFC", pattern.strip()))

    if "*" not in trimmed:
        return _reject()
    if is_all_wildcards(trimmed):
        return _reject("all-wildcards pattern is not allowed")
    if INVALID_DOMAIN_CHARS.search(trimmed):
        return _reject("invalid characters in domain pattern")
    if has_partial_label_wildcard(trimmed):
        return _reject("partial-label wildcards are not allowed")
    if not _concrete_labels_valid(trimmed):
        return _reject("invalid domain labels")
    if _wildcard_tail_invalid(trimmed):
        return _reject("wildcard tail targets public suffix or IP (disallowed)")

    return ValidationVerdict(True, WildcardKind.SUBDOMAIN)


def _validate_exact_domain(entry: str) -> ValidationVerdict:
    if ORIGIN_LIKE.match(entry):
        return _reject("protocols are not allowed in domain context")

    # IP literals first: bracketed IPv6 would trip the URL character check
    dotted = to_ascii_dots(entry)
    if is_ip_address(dotted):
        if parse_domain(dotted) is None:
            return _reject("invalid IP address")
        return ValidationVerdict(True)

    if INVALID_DOMAIN_CHARS.search(entry):
        return _reject("invalid characters in domain")

    normalized = parse_domain(entry)
    if normalized is None:
        return _reject("invalid domain")
    if _is_public_suffix(normalized):
        return _reject("entry equals a public suffix (not registrable)")

    return ValidationVerdict(True)


def _validate_domain_entry(entry: str) -> ValidationVerdict:
    if "*" in entry:
        return _validate_domain_wildcard(entry)
    return _validate_exact_domain(entry)


def _validate_global(allow_global_wildcard: bool) -> ValidationVerdict:
    if allow_global_wildcard:
        return ValidationVerdict(True, WildcardKind.GLOBAL)
    return _reject("global wildcard '*' not allowed in this context")


def _validate_origin_entry(
    raw: str, *, allow_global_wildcard: bool, allow_protocol_wildcard: bool
) -> ValidationVerdict:
    if raw.lower() == "null":
        # Browsers only ever send the lowercase literal
        if raw != "null":
            return _reject("literal 'null' origin must be lowercase")
        return ValidationVerdict(True)

    if raw == "*":
        return _validate_global(allow_global_wildcard)

    scheme, sep, rest = raw.partition("://")
    if not sep:
        # Bare domains and domain patterns follow the domain rules
        return _validate_domain_entry(raw)

    scheme = scheme.lower()
    if not rest:
        return _reject("missing host in origin")
    if any(c in rest for c in "/?#"):
        return _reject("origin must not contain path, query, or fragment")
    if "@" in rest:
        return _reject("origin must not include userinfo")

    if rest == "*":
        if not allow_protocol_wildcard:
            return _reject("protocol wildcard not allowed")
        return ValidationVerdict(True, WildcardKind.PROTOCOL, _scheme_advisory(scheme))

    port: str | None = None
    if rest.startswith("["):
        end = rest.find("]")
        if end == -1:
            return _reject("unclosed IPv6 bracket")
        host = rest[: end + 1]
        after = rest[end + 1 :]
        if after.startswith(":"):
            port = after[1:]
        elif after:
            return _reject("unexpected characters after IPv6 host")
    else:
        host, colon, port_str = rest.partition(":")
        if colon:
            port = port_str
        if host != host.strip():
            return _reject("invalid domain in origin")

    if "*" in host:
        if "[" in host or "]" in host:
            return _reject("wildcard host cannot be an IP literal")
        if port is not None:
            return _reject("ports are not allowed in wildcard origins")
        verdict = _validate_domain_wildcard(host)
        if not verdict.valid:
            return verdict
        return ValidationVerdict(True, WildcardKind.SUBDOMAIN, _scheme_advisory(scheme))

    if port is not None and (_PORT_RE.fullmatch(port) is None or (port and int(port) > 65535)):
        return _reject("invalid port in origin")

    if host.startswith("["):
        if not is_ipv6(host):
            return _reject("invalid IPv6 address in origin")
        return ValidationVerdict(True, WildcardKind.NONE, _scheme_advisory(scheme))

    if is_ip_address(to_ascii_dots(host)):
        return ValidationVerdict(True, WildcardKind.NONE, _scheme_advisory(scheme))

    normalized = parse_domain(host)
    if normalized is None:
        return _reject("invalid domain in origin")
    if _is_public_suffix(normalized):
        return _reject("origin host equals a public suffix (not registrable)")

    return ValidationVerdict(True, WildcardKind.NONE, _scheme_advisory(scheme))


def validate_config_entry(
    entry: str | None,
    context: str,
    *,
    allow_global_wildcard: bool = False,
    allow_protocol_wildcard: bool = True,
) -> ValidationVerdict:
    """Validate one allowlist entry in ``"domain"`` or ``"origin"`` context.

    Domain context accepts exact domains, IP literals and domain wildcard
    patterns; any ``scheme://`` is refused. Origin context additionally
    accepts exact origins of any scheme, protocol wildcards
    (``https://*``), protocol plus domain wildcards
    (``https://*.example.com``) and the literal ``null``. Non-http(s)
    schemes are valid but carry an advisory ``info``.

    The global ``*`` is refused unless ``allow_global_wildcard``; protocol
    wildcards are accepted unless ``allow_protocol_wildcard`` is false.
    Wildcards must span whole labels, must keep a literal tail, and that
    tail may be neither an IP literal nor a public suffix (``localhost``
    excepted).
    """
    raw = (entry or "").strip()
    if not raw:
        return _reject("empty entry")

    if context == "domain":
        if ORIGIN_LIKE.match(raw):
            return _reject("protocols are not allowed in domain context")
        if raw == "*":
            return _validate_global(allow_global_wildcard)
        return _validate_domain_entry(raw)

    if context == "origin":
        return _validate_origin_entry(
            raw,
            allow_global_wildcard=allow_global_wildcard,
            allow_protocol_wildcard=allow_protocol_wildcard,
        )

    return _reject("unknown validation context")
