"""Public Suffix List lookups backed by tldextract's bundled snapshot."""

from __future__ import annotations

import tldextract


def _extractor() -> tldextract.TLDExtract:
    # No live fetch and no disk cache: lookups read the snapshot shipped
    # with tldextract and keep it in memory. ICANN section only.
    return tldextract.TLDExtract(
        cache_dir=None,
        suffix_list_urls=(),
        include_psl_private_domains=False,
    )


_EXTRACT = _extractor()


def public_suffix(host: str) -> str | None:
    """Return the public suffix of a normalized host.

    Hosts whose TLD is not on the list fall back to the PSL default rule
    ``*``: the last label is the public suffix.
    """
    if not host:
        return None
    suffix = _EXTRACT(host).suffix
    if suffix:
        return suffix
    return host.rsplit(".", 1)[-1] or None


def _split(host: str) -> tuple[str, str] | None:
    """Split ``host`` into (subdomain, registrable domain)."""
    suffix = public_suffix(host)
    if suffix is None or suffix == host:
        return None
    labels = host[: -len(suffix) - 1].split(".")
    registrable = f"{labels[-1]}.{suffix}"
    return ".".join(labels[:-1]), registrable


def registrable_domain(host: str) -> str | None:
    """Return the registrable domain (eTLD+1) of ``host``, if any."""
    parts = _split(host)
    return parts[1] if parts else None


def subdomain(host: str) -> str | None:
    """Return the labels in front of the registrable domain, if any."""
    parts = _split(host)
    return parts[0] if parts else None


def is_apex_domain(host: str) -> bool:
    """Check if ``host`` is a registrable domain with no subdomain labels."""
    parts = _split(host)
    return parts is not None and not parts[0]
