"""Validated, immutable allowlist policies for hosts and CORS origins."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from originguard._lists import matches_cors_credentials_list, matches_domain_list, matches_origin_list
from originguard._validate import WildcardKind, validate_config_entry

logger = logging.getLogger("originguard")


class InvalidConfigError(ValueError):
    """Raised when a policy is built from an invalid allowlist.

    ``problems`` lists every problem found, one message per entry or rule.
    """

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("originguard: invalid configuration: " + "; ".join(problems))


def _fail(problems: list[str]) -> InvalidConfigError:
    for problem in problems:
        logger.error("originguard: %s", problem)
    return InvalidConfigError(problems)


def _entry_problem(kind: str, entry: str, info: str | None) -> str:
    msg = f"invalid {kind} {entry!r}"
    if info:
        msg += f": {info}"
    return msg


def _as_list(value: str | Iterable[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


def _dedupe(entries: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(entries))


class DomainPolicy:
    """Immutable host allowlist, validated at construction.

    Thread-safe to read from multiple threads after construction.
    """

    __slots__ = ("_allow_global_wildcard", "_entries")

    def __init__(self, entries: str | Iterable[str], *, allow_global_wildcard: bool = False) -> None:
        self._allow_global_wildcard = allow_global_wildcard

        cleaned: list[str] = []
        problems: list[str] = []
        for raw in _as_list(entries):
            verdict = validate_config_entry(raw, "domain", allow_global_wildcard=allow_global_wildcard)
            if not verdict.valid:
                problems.append(_entry_problem("domain entry", raw, verdict.info))
                continue
            if verdict.wildcard_kind is WildcardKind.GLOBAL:
                logger.warning("originguard: domain rule %r matches ALL hosts, intended?", raw)
            cleaned.append(raw.strip())

        if problems:
            raise _fail(problems)

        self._entries: tuple[str, ...] = _dedupe(cleaned)

    @property
    def entries(self) -> tuple[str, ...]:
        return self._entries

    def is_allowed(self, host: str) -> bool:
        """Check if ``host`` (a domain or IP literal) is allowed."""
        return matches_domain_list(host, self._entries)

    def __repr__(self) -> str:
        return f"DomainPolicy({list(self._entries)!r})"


def _is_protocol_wildcard(entry: str) -> bool:
    return entry in ("https://*", "http://*")


class OriginPolicy:
    """Immutable CORS origin policy, validated at construction.

    ``origins`` is ``"*"``, a single origin entry, or a list of exact
    origins, domain wildcards (``*.example.com``), protocol wildcards
    (``https://*``) and the literal ``null``. ``credentials`` is a bool or a
    single origin or a list of origins allowed to send credentials.

    Construction enforces the CORS configuration rules:

    - ``"*"`` cannot be combined with ``credentials=True``.
    - ``credentials=True`` with a protocol wildcard requires
      ``allow_credentials_with_protocol_wildcard``.
    - A credentials list may not contain ``null``, the global wildcard or
      protocol wildcards; subdomain wildcards need
      ``credentials_allow_wildcard_subdomains``.
    - ``"*"`` together with a credentials list is replaced by that list.
    - In an origin list, at most one wildcard token (``*``, ``scheme://*``)
      may appear and the only other entry allowed beside it is ``null``.

    Credential origins are merged into the origin list. Thread-safe to read
    from multiple threads after construction.
    """

    __slots__ = (
        "_allow_all",
        "_credentials",
        "_credentials_allow_wildcard_subdomains",
        "_credentials_list",
        "_origins",
        "_treat_no_origin_as_allowed",
    )

    def __init__(
        self,
        origins: str | Iterable[str],
        *,
        credentials: bool | str | Iterable[str] = False,
        credentials_allow_wildcard_subdomains: bool = False,
        allow_credentials_with_protocol_wildcard: bool = False,
        treat_no_origin_as_allowed: bool = False,
    ) -> None:
        self._credentials_allow_wildcard_subdomains = credentials_allow_wildcard_subdomains
        self._treat_no_origin_as_allowed = treat_no_origin_as_allowed

        origin_list = _as_list(origins)
        # ["*"] is the same as "*"
        allow_all = {o.strip() for o in origin_list} == {"*"}
        credentials_list: tuple[str, ...] | None = None
        if not isinstance(credentials, bool):
            credentials_list = _dedupe([c.strip() for c in _as_list(credentials)])

        if allow_all and credentials is True:
            raise _fail(["credentials=True cannot be combined with origin '*'"])

        if (
            credentials is True
            and any(_is_protocol_wildcard(o.strip()) for o in origin_list)
            and not allow_credentials_with_protocol_wildcard
        ):
            raise _fail(
                [
                    "credentials=True with a protocol wildcard origin requires "
                    "allow_credentials_with_protocol_wildcard=True"
                ]
            )

        if credentials_list is not None:
            self._check_credentials(credentials_list, credentials_allow_wildcard_subdomains)
            if allow_all:
                if not credentials_list:
                    raise _fail(["credentials list is empty; cannot combine origin '*' with credentials"])
                # '*' is upgraded to the concrete credentials allowlist
                allow_all = False
                origin_list = list(credentials_list)

        if allow_all:
            logger.warning("originguard: origin '*' allows ALL http(s) origins, intended?")
        else:
            self._check_origins(origin_list, credentials is True)

        if credentials_list is not None and not allow_all:
            origin_list = origin_list + list(credentials_list)

        self._allow_all = allow_all
        self._origins: tuple[str, ...] = ("*",) if allow_all else _dedupe([o.strip() for o in origin_list])
        self._credentials = credentials is True
        self._credentials_list = credentials_list

    @staticmethod
    def _check_credentials(entries: tuple[str, ...], allow_wildcard: bool) -> None:
        problems: list[str] = []
        for entry in entries:
            if entry == "null":
                problems.append("credentials cannot be enabled for the 'null' origin")
                continue
            verdict = validate_config_entry(
                entry, "origin", allow_global_wildcard=False, allow_protocol_wildcard=False
            )
            if not verdict.valid:
                problems.append(_entry_problem("credentials origin", entry, verdict.info))
            elif verdict.wildcard_kind is WildcardKind.SUBDOMAIN and not allow_wildcard:
                problems.append(
                    f"wildcard pattern {entry!r} in credentials requires "
                    "credentials_allow_wildcard_subdomains=True"
                )
        if problems:
            raise _fail(problems)

    @staticmethod
    def _check_origins(entries: list[str], credentials: bool) -> None:
        problems: list[str] = []
        wildcard_tokens: list[str] = []
        has_other = False

        for raw in entries:
            verdict = validate_config_entry(
                raw, "origin", allow_global_wildcard=True, allow_protocol_wildcard=True
            )
            if not verdict.valid:
                problems.append(_entry_problem("origin", raw, verdict.info))
                continue
            if verdict.wildcard_kind in (WildcardKind.GLOBAL, WildcardKind.PROTOCOL):
                wildcard_tokens.append(raw.strip())
            elif raw.strip() != "null":
                has_other = True

        if len(wildcard_tokens) > 1:
            problems.append(
                "only one of '*', 'https://*', or 'http://*' may be specified in origins. "
                f"Found: {', '.join(wildcard_tokens)}"
            )
        if wildcard_tokens and has_other:
            problems.append("when a wildcard token is present, the only other allowed origin is the literal 'null'")
        if "*" in wildcard_tokens and credentials:
            problems.append("credentials=True cannot be combined with an origin list containing '*'")

        if problems:
            raise _fail(problems)

        for token in wildcard_tokens:
            logger.warning("originguard: origin rule %r matches a whole class of origins, intended?", token)

    @property
    def origins(self) -> tuple[str, ...]:
        return self._origins

    @property
    def credentials(self) -> bool | tuple[str, ...]:
        if self._credentials_list is not None:
            return self._credentials_list
        return self._credentials

    def is_origin_allowed(self, origin: str | None) -> bool:
        """Check if a request carrying ``origin`` (``None`` when absent) is allowed."""
        return matches_origin_list(
            origin, self._origins, treat_no_origin_as_allowed=self._treat_no_origin_as_allowed
        )

    def are_credentials_allowed(self, origin: str | None) -> bool:
        """Check if credentials may be allowed for ``origin``.

        With ``credentials=True`` this holds for every allowed origin; with a
        credentials list only listed origins qualify.
        """
        if not self.is_origin_allowed(origin):
            return False
        if self._credentials_list is not None:
            return matches_cors_credentials_list(
                origin,
                self._credentials_list,
                allow_wildcard_subdomains=self._credentials_allow_wildcard_subdomains,
            )
        return self._credentials

    def __repr__(self) -> str:
        return f"OriginPolicy({list(self._origins)!r}, credentials={self.credentials!r})"
