"""Normalization of persistent identifiers and identifier-like URLs.

Every function here is idempotent: normalizing an already normalized value
returns it unchanged.
"""

from __future__ import annotations

import re
from functools import cached_property
from urllib.parse import quote, unquote, urlsplit, urlunsplit

DOI_RESOLVER = "https://doi.org/"
SANDBOX_DOI_RESOLVER = "https://handle.test.datacite.org/"

_BARE_DOI = re.compile(r"^(?:doi:)?(10\.\d{4,9}/\S+)$", re.IGNORECASE)
_ORCID = re.compile(
    r"^(?:(?:https?://)?(?:www\.)?(?:sandbox\.)?orcid\.org/)?(\d{4}-\d{4}-\d{4}-\d{3}[\dX])$",
    re.IGNORECASE,
)


class DoiNormalizer:
    """Turn the many spellings of a DOI into one canonical URL.

    The canonical form is the resolver URL followed by the lowercased DOI,
    e.g. ``https://doi.org/10.5061/dryad.8515``. DOIs registered in the test
    system keep the sandbox resolver.
    """

    def __init__(
        self,
        doi_resolver: str = DOI_RESOLVER,
        sandbox_doi_resolver: str = SANDBOX_DOI_RESOLVER,
    ) -> None:
        self.doi_resolver = doi_resolver
        self.sandbox_doi_resolver = sandbox_doi_resolver

    @cached_property
    def _resolver_hosts(self) -> dict[str, bool]:
        hosts = {
            "doi.org": False,
            "dx.doi.org": False,
            "www.doi.org": False,
            urlsplit(self.doi_resolver).netloc.lower(): False,
        }
        hosts[urlsplit(self.sandbox_doi_resolver).netloc.lower()] = True
        return hosts

    def _split(self, token: str) -> tuple[str, bool] | None:
        """Return the bare DOI and whether it came from the test system."""
        token = token.strip()
        match = _BARE_DOI.match(token)
        if match:
            return match.group(1), False

        parts = urlsplit(token)
        if parts.scheme not in ("http", "https"):
            return None
        sandbox = self._resolver_hosts.get(parts.netloc.lower())
        if sandbox is None:
            return None
        match = _BARE_DOI.match(unquote(parts.path.lstrip("/")))
        if not match:
            return None
        return match.group(1), sandbox

    def validate_doi(self, token: str | None) -> str | None:
        """Return the bare, lowercased DOI in ``token`` or None."""
        if not token:
            return None
        split = self._split(token)
        if split is None:
            return None
        return split[0].lower()

    def normalize_doi(self, token: str | None, sandbox: bool = False) -> str | None:
        if not token:
            return None
        split = self._split(token)
        if split is None:
            return None
        doi, from_sandbox = split
        resolver = (
            self.sandbox_doi_resolver if sandbox or from_sandbox else self.doi_resolver
        )
        return resolver + quote(doi.lower(), safe="/:;+()._-")

    def doi_from_url(self, url: str | None) -> str | None:
        return self.validate_doi(url)

    def normalize_id(self, token: str | None, sandbox: bool = False) -> str | None:
        """Normalize a DOI or an http(s) URL. Anything else yields None."""
        doi = self.normalize_doi(token, sandbox=sandbox)
        if doi:
            return doi
        return normalize_url(token)


def normalize_url(token: str | None) -> str | None:
    """Return an http(s) URL without fragment and trailing slash, or None."""
    if not token:
        return None
    token = token.strip()
    parts = urlsplit(token)
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return None
    path = parts.path.rstrip("/")
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), path, parts.query, "")
    )


def normalize_orcid(token: str | None) -> str | None:
    if not token:
        return None
    match = _ORCID.match(token.strip())
    if not match:
        return None
    return "https://orcid.org/" + match.group(1).upper()


default_normalizer = DoiNormalizer()

validate_doi = default_normalizer.validate_doi
normalize_doi = default_normalizer.normalize_doi
doi_from_url = default_normalizer.doi_from_url
normalize_id = default_normalizer.normalize_id
