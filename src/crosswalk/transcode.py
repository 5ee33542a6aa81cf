"""The conversion pipeline: read a source, apply overrides, write a target."""

from __future__ import annotations

from functools import cached_property
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from crosswalk.core.exceptions import CrosswalkValueError, ParseError
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.reader.base import Overrides, Reader, SourceKind
from crosswalk.reader.dispatch import reader_for, sniff_source_kind
from crosswalk.reader.registry import LookupResult
from crosswalk.service.configuration.crosswalk import CrosswalkConfiguration
from crosswalk.service.logging.log import setup_logging
from crosswalk.util.identifier import DoiNormalizer
from crosswalk.util.log import LoggerMixin, elapsed_time_logging, pluralize
from crosswalk.writer.base import TargetFormat, Writer, WriteResult
from crosswalk.writer.dispatch import writer_for
from crosswalk.writer.schema import PackageSchemaLoader, SchemaValidator


class Transcoder(LoggerMixin):
    """Convert metadata from one representation into another.

    A transcoder holds no state between conversions apart from its
    configuration and the parsed schema definitions, so one instance can
    serve any number of conversions.
    """

    def __init__(
        self,
        config: CrosswalkConfiguration | None = None,
        configure_logging: bool = False,
    ) -> None:
        """
        :param configure_logging: Install the package log handler, set up
            from the CROSSWALK_LOG_* settings. Applications that configure
            logging themselves leave this off.
        """
        self.config = config or CrosswalkConfiguration()
        if configure_logging:
            setup_logging()

    @cached_property
    def normalizer(self) -> DoiNormalizer:
        return self.config.doi_normalizer()

    @cached_property
    def validator(self) -> SchemaValidator:
        return SchemaValidator(PackageSchemaLoader(self.config.schema_directory))

    def reader(self, source_kind: SourceKind | str) -> Reader[Any]:
        return reader_for(source_kind, normalizer=self.normalizer)

    def writer(self, target_format: TargetFormat | str) -> Writer:
        return writer_for(target_format, validator=self.validator)

    @staticmethod
    def sniff(source: Any) -> SourceKind:
        # Lookup results arrive already parsed.
        if isinstance(source, (LookupResult, Mapping)):
            return SourceKind.REGISTRY
        if isinstance(source, Path):
            try:
                text = source.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ParseError("Could not read source", diagnostic=str(e)) from e
            return sniff_source_kind(text, source)
        if isinstance(source, bytes):
            return sniff_source_kind(source.decode("utf-8", errors="replace"))
        if not isinstance(source, str):
            raise CrosswalkValueError(
                f"Could not determine the kind of source from {type(source).__name__}"
            )
        return sniff_source_kind(source)

    def read(
        self,
        source: Any,
        source_kind: SourceKind | str | None = None,
        overrides: Overrides = None,
    ) -> BibliographicData:
        """Read a source into a record, sniffing its kind if not given."""
        if source_kind is None:
            source_kind = self.sniff(source)
        return self.reader(source_kind).parse(source, overrides)

    def write(
        self,
        record: BibliographicData,
        target_format: TargetFormat | str = TargetFormat.DATACITE_XML,
        schema_version: str | None = None,
    ) -> WriteResult:
        """Write a record.

        The schema version is, in order of preference, ``schema_version``,
        the record's own, and the configured default.
        """
        schema_version = (
            schema_version
            or record.schema_version
            or self.config.default_schema_version
        )
        return self.writer(target_format).serialize(record, schema_version)

    def convert(
        self,
        source: Any,
        source_kind: SourceKind | str | None = None,
        target_format: TargetFormat | str = TargetFormat.DATACITE_XML,
        schema_version: str | None = None,
        overrides: Overrides = None,
    ) -> WriteResult:
        with elapsed_time_logging(
            log_method=self.log.debug,
            message_prefix=f"Converting {source_kind or 'document'} to {target_format}",
        ):
            record = self.read(source, source_kind, overrides)
            result = self.write(record, target_format, schema_version)
        if not result.valid:
            self.log.info(
                "%s converted with %s",
                record.identifier or "Record",
                pluralize(len(result.errors), "validation error"),
            )
        return result
