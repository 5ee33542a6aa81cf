from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from typing import Any

from pydantic import Field

from crosswalk.core.exceptions import ParseError
from crosswalk.data_layer.base.frozen import BaseFrozenData
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.reader.base import Reader, SourceKind
from crosswalk.reader.datacite import DataciteXmlReader
from crosswalk.util.identifier import DoiNormalizer, default_normalizer

NOT_FOUND = "not_found"
FINDABLE = "findable"


class LookupResult(BaseFrozenData):
    """What the identifier registry returned for one identifier.

    Fetching this is somebody else's job. ``xml`` is the registered metadata
    document, either as plain text or base64 encoded.
    """

    identifier: str
    found: bool = True
    state: str | None = None
    url: str | None = None
    content_url: list[str] = Field(default_factory=list)
    xml: str | None = None
    sandbox: bool = False

    def decoded_xml(self) -> str | None:
        if not self.xml:
            return None
        xml = self.xml.strip()
        if xml.startswith("<"):
            return xml
        return base64.b64decode(xml, validate=True).decode("utf-8")


class RegistryRecordReader(Reader[LookupResult | Mapping[str, Any] | str | bytes]):
    """Turn a registry lookup into a record.

    An identifier the registry does not know is not an error: it yields a
    record with state "not_found", which fails validation like any other
    incomplete record.
    """

    source_kind = SourceKind.REGISTRY

    def __init__(
        self,
        normalizer: DoiNormalizer = default_normalizer,
        xml_reader: DataciteXmlReader | None = None,
    ) -> None:
        super().__init__(normalizer)
        self.xml_reader = xml_reader or DataciteXmlReader(normalizer)

    def _lookup_result(
        self, source: LookupResult | Mapping[str, Any] | str | bytes
    ) -> LookupResult:
        if isinstance(source, LookupResult):
            return source
        if isinstance(source, (str, bytes)):
            return LookupResult.model_validate_json(source)
        return LookupResult.model_validate(source)

    def read(
        self, source: LookupResult | Mapping[str, Any] | str | bytes
    ) -> BibliographicData:
        result = self._lookup_result(source)
        identifier = (
            self.normalizer.normalize_doi(result.identifier, sandbox=result.sandbox)
            or self.normalize_identifier(result.identifier)
        )

        if not result.found:
            self.log.info("%s was not found in the registry", identifier)
            return BibliographicData(
                identifier=identifier,
                raw_identifier=result.identifier,
                state=NOT_FOUND,
            )

        try:
            xml = result.decoded_xml()
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ParseError(
                "Registry metadata is neither XML nor base64 encoded XML",
                diagnostic=str(e),
                source_kind=self.source_kind,
            ) from e

        if xml is None:
            record = BibliographicData(
                identifier=identifier, raw_identifier=result.identifier
            )
        else:
            record = self.xml_reader.read(xml)
            record.identifier = identifier
            record.raw_identifier = result.identifier

        record.state = result.state or FINDABLE
        if result.url:
            record.url = result.url
        if result.content_url:
            record.content_url = list(result.content_url)
        return record
