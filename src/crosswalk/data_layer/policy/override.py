from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from crosswalk.core.exceptions import CrosswalkValueError
from crosswalk.data_layer.base.frozen import BaseFrozenData
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.util.identifier import DoiNormalizer, default_normalizer

log = logging.getLogger(__name__)


class OverrideData(BaseFrozenData):
    """Caller-supplied values that replace whatever a reader found.

    Only the fields the caller actually set are applied, so an explicit
    ``None`` clears a parsed value while an omitted field leaves it alone.
    """

    identifier: str | None = None
    url: str | None = None
    content_url: list[str] | str | None = None
    schema_version: str | None = None
    sandbox: bool = False


OVERRIDE_KEYS = frozenset(OverrideData.model_fields)


def _split_mapping(
    overrides: Mapping[str, Any],
) -> tuple[OverrideData, dict[str, Any]]:
    known = {k: v for k, v in overrides.items() if k in OVERRIDE_KEYS}
    edits = {k: v for k, v in overrides.items() if k not in OVERRIDE_KEYS}
    unknown = sorted(set(edits) - set(BibliographicData.model_fields))
    if unknown:
        raise CrosswalkValueError(f"Unknown override keys: {', '.join(unknown)}")
    try:
        return OverrideData.model_validate(known), edits
    except ValidationError as e:
        raise CrosswalkValueError(f"Invalid override: {e}") from e


def apply_overrides(
    record: BibliographicData,
    overrides: OverrideData | Mapping[str, Any] | None,
    normalizer: DoiNormalizer = default_normalizer,
) -> BibliographicData:
    """Return a copy of ``record`` with the overridden fields replaced.

    ``overrides`` may also name any other record field ("titles", "state",
    ...), which is how direct edits of a parsed record are expressed. The
    record passed in is never modified.

    :raise CrosswalkValueError: If an override key is not a record field, or
        an override value is not valid for its field.
    """
    if not overrides:
        return record.model_copy(deep=True)

    if isinstance(overrides, OverrideData):
        override, edits = overrides, {}
    else:
        override, edits = _split_mapping(overrides)

    result = record.model_copy(deep=True)
    applied = override.model_fields_set - {"sandbox"}
    try:
        if "identifier" in applied:
            token = override.identifier
            result.raw_identifier = token
            result.identifier = (
                normalizer.normalize_id(token, sandbox=override.sandbox) or token
            )
        elif override.sandbox and result.identifier:
            result.identifier = (
                normalizer.normalize_doi(result.identifier, sandbox=True)
                or result.identifier
            )
        if "url" in applied:
            result.url = override.url
        if "content_url" in applied:
            result.content_url = override.content_url
        if "schema_version" in applied:
            result.schema_version = override.schema_version
        for field, value in edits.items():
            setattr(result, field, value)
    except ValidationError as e:
        raise CrosswalkValueError(f"Invalid override: {e}") from e

    if applied or edits:
        log.debug(
            "Applied overrides to %s: %s",
            result.identifier,
            ", ".join(sorted(applied | set(edits))),
        )
    return result
