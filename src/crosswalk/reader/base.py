from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import ValidationError

from crosswalk.core.exceptions import ParseError
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.data_layer.policy.override import OverrideData, apply_overrides
from crosswalk.util.identifier import DoiNormalizer, default_normalizer
from crosswalk.util.log import LoggerMixin

SourceT = TypeVar("SourceT")

TextSource = str | bytes | Path

Overrides = OverrideData | Mapping[str, Any] | None


class SourceKind(StrEnum):
    DATACITE_XML = "datacite"
    CROSSCITE_JSON = "crosscite"
    BIBTEX = "bibtex"
    REGISTRY = "registry"


class Reader(ABC, LoggerMixin, Generic[SourceT]):
    """Turn one shape of source into a canonical record.

    Subclasses implement ``read``. ``parse`` wraps it: it turns bad input
    into ParseError and applies overrides last.
    """

    source_kind: ClassVar[SourceKind]

    def __init__(self, normalizer: DoiNormalizer = default_normalizer) -> None:
        self.normalizer = normalizer

    @abstractmethod
    def read(self, source: SourceT) -> BibliographicData:
        """Build a record from the source, without applying overrides."""
        ...

    def parse(
        self, source: SourceT, overrides: Overrides = None
    ) -> BibliographicData:
        """Parse a source into a record and apply the caller's overrides.

        :raise ParseError: If the source is not a valid document of the
            shape this reader handles.
        """
        try:
            record = self.read(source)
        except ValidationError as e:
            raise ParseError(
                f"Could not build a record from {self.source_kind} source",
                diagnostic=str(e),
                source_kind=self.source_kind,
            ) from e
        if not overrides:
            return record
        return apply_overrides(record, overrides, normalizer=self.normalizer)

    def normalize_identifier(
        self, token: str | None, identifier_type: str | None = None
    ) -> str | None:
        """The canonical form of an identifier found in a source."""
        if not token:
            return None
        if identifier_type is None or identifier_type.upper() == "DOI":
            normalized = self.normalizer.normalize_doi(token)
            if normalized:
                return normalized
        return self.normalizer.normalize_id(token) or token


class TextReader(Reader[TextSource], ABC):
    """A reader for sources that are text documents."""

    def load_source(self, source: TextSource) -> str:
        """Get the text of a source. Paths are read as UTF-8."""
        try:
            if isinstance(source, Path):
                return source.read_text(encoding="utf-8")
            if isinstance(source, bytes):
                return source.decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(
                "Could not read source",
                diagnostic=str(e),
                source_kind=self.source_kind,
            ) from e
        return source
