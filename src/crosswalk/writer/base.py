from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import ClassVar

from pydantic import Field

from crosswalk.data_layer.base.frozen import BaseFrozenData
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.util.log import LoggerMixin


class TargetFormat(StrEnum):
    DATACITE_XML = "datacite"
    CROSSCITE_JSON = "crosscite"
    BIBTEX = "bibtex"


class WriteResult(BaseFrozenData):
    """A serialized document and what is wrong with it, if anything."""

    document: str
    errors: list[str] = Field(default_factory=list)
    # The schema version the document was actually written for. This can
    # differ from the requested one if that was not recognized.
    schema_version: str | None = None

    @property
    def valid(self) -> bool:
        return not self.errors


class Writer(ABC, LoggerMixin):
    """Serialize a canonical record into one target format.

    Serialization always produces a document. A record that is missing
    required fields yields a document along with errors describing what
    is wrong; it never raises.
    """

    target_format: ClassVar[TargetFormat]

    @abstractmethod
    def serialize(
        self, record: BibliographicData, schema_version: str | None = None
    ) -> WriteResult: ...
