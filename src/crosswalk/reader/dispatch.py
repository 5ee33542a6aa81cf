from __future__ import annotations

from pathlib import PurePath
from typing import Any

from frozendict import frozendict

from crosswalk.core.exceptions import CrosswalkValueError
from crosswalk.reader.base import Reader, SourceKind
from crosswalk.reader.bibtex import BibtexReader
from crosswalk.reader.crosscite import CrossciteJsonReader
from crosswalk.reader.datacite import DataciteXmlReader
from crosswalk.reader.registry import RegistryRecordReader
from crosswalk.util.identifier import DoiNormalizer, default_normalizer

READERS: frozendict[SourceKind, type[Reader[Any]]] = frozendict(
    {
        SourceKind.DATACITE_XML: DataciteXmlReader,
        SourceKind.CROSSCITE_JSON: CrossciteJsonReader,
        SourceKind.BIBTEX: BibtexReader,
        SourceKind.REGISTRY: RegistryRecordReader,
    }
)

EXTENSIONS: frozendict[str, SourceKind] = frozendict(
    {
        ".xml": SourceKind.DATACITE_XML,
        ".json": SourceKind.CROSSCITE_JSON,
        ".bib": SourceKind.BIBTEX,
    }
)


def reader_for(
    kind: SourceKind | str, normalizer: DoiNormalizer = default_normalizer
) -> Reader[Any]:
    """Get a reader for a kind of source.

    :raise CrosswalkValueError: If there is no reader for the kind.
    """
    try:
        reader_class = READERS[SourceKind(kind)]
    except ValueError as e:
        raise CrosswalkValueError(f"No reader for source kind {kind!r}") from e
    return reader_class(normalizer=normalizer)


def sniff_source_kind(
    text: str, filename: str | PurePath | None = None
) -> SourceKind:
    """Guess what kind of source a document is.

    The file extension wins if it is a known one. Otherwise the first
    character of the document decides.

    :raise CrosswalkValueError: If the kind cannot be determined.
    """
    if filename is not None:
        kind = EXTENSIONS.get(PurePath(filename).suffix.lower())
        if kind is not None:
            return kind

    stripped = text.lstrip("\ufeff \t\r\n")
    if stripped.startswith("<"):
        return SourceKind.DATACITE_XML
    if stripped.startswith("{"):
        return SourceKind.CROSSCITE_JSON
    if stripped.startswith("@"):
        return SourceKind.BIBTEX
    raise CrosswalkValueError("Could not determine the kind of source document")
