from __future__ import annotations

from typing import Any

from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.util.json import json_serializer
from crosswalk.writer.base import TargetFormat, Writer, WriteResult


def camel_case(key: str) -> str:
    head, *tail = key.split("_")
    return head + "".join(word.capitalize() for word in tail)


def _compact(value: Any) -> Any:
    """Drop empty values and camelCase keys, recursively."""
    if isinstance(value, dict):
        compacted = {camel_case(k): _compact(v) for k, v in value.items()}
        return {k: v for k, v in compacted.items() if v not in (None, [], {})}
    if isinstance(value, list):
        return [_compact(v) for v in value]
    return value


class CrossciteJsonWriter(Writer):
    """Write a record as crosscite JSON. There is no schema to validate against."""

    target_format = TargetFormat.CROSSCITE_JSON

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def as_dict(self, record: BibliographicData) -> dict[str, Any]:
        # "id" and "doi" carry the identifier; the spelling it was read in
        # is not part of the document.
        data = record.model_dump(
            mode="json", exclude_none=True, exclude={"raw_identifier"}
        )
        identifier = data.pop("identifier", None)
        document = {"id": identifier, "doi": record.doi, **data}
        return _compact(document)  # type: ignore[no-any-return]

    def serialize(
        self, record: BibliographicData, schema_version: str | None = None
    ) -> WriteResult:
        document = json_serializer(
            self.as_dict(record), indent=self.indent, ensure_ascii=False
        )
        return WriteResult(document=document, schema_version=record.schema_version)
