"""originguard: domain and origin allowlist matching for Python."""

from __future__ import annotations

__version__ = "0.1.0"

from originguard._classify import is_ip_address, is_ipv4, is_ipv6, to_ascii_dots
from originguard._lists import (
    OriginStyleEntryError,
    matches_cors_credentials_list,
    matches_domain_list,
    matches_origin_list,
)
from originguard._match import matches_wildcard_domain, matches_wildcard_origin
from originguard._normalize import (
    check_dns_lengths,
    normalize_domain,
    normalize_origin,
    parse_domain,
    parse_origin,
)
from originguard._pattern import compile_wildcard_pattern, normalize_wildcard_pattern
from originguard._policy import DomainPolicy, InvalidConfigError, OriginPolicy
from originguard._psl import is_apex_domain, public_suffix, registrable_domain, subdomain
from originguard._validate import ValidationVerdict, WildcardKind, validate_config_entry

__all__ = [
    "DomainPolicy",
    "InvalidConfigError",
    "OriginPolicy",
    "OriginStyleEntryError",
    "ValidationVerdict",
    "WildcardKind",
    "__version__",
    "check_dns_lengths",
    "compile_wildcard_pattern",
    "is_apex_domain",
    "is_ip_address",
    "is_ipv4",
    "is_ipv6",
    "matches_cors_credentials_list",
    "matches_domain_list",
    "matches_origin_list",
    "matches_wildcard_domain",
    "matches_wildcard_origin",
    "normalize_domain",
    "normalize_origin",
    "normalize_wildcard_pattern",
    "parse_domain",
    "parse_origin",
    "public_suffix",
    "registrable_domain",
    "subdomain",
    "to_ascii_dots",
    "validate_config_entry",
]
