import logging
import re
from pathlib import Path

import pytest

from crosswalk.core.exceptions import UnresolvedSchemaVersion
from crosswalk.writer.schema import (
    KNOWN_SCHEMA_VERSIONS,
    LATEST_SCHEMA_VERSION,
    PackageSchemaLoader,
    SchemaValidator,
    resolve_schema_version,
    revision_of,
    schema_version_or_latest,
)
from tests.fixtures.files import DataciteFilesFixture
from tests.fixtures.transcoder import TranscoderFixture


class TestSchemaVersions:
    @pytest.mark.parametrize(
        "version, expected",
        [
            ("http://datacite.org/schema/kernel-4", "4"),
            ("http://datacite.org/schema/kernel-3/", "3"),
            ("http://datacite.org/schema/kernel-2.2", "2.2"),
            ("kernel-4.1", "4"),
            ("4.3", "4"),
            ("3.1", "3"),
            ("2.1", "2.1"),
            (" 4 ", "4"),
            ("http://datacite.org/schema/kernel-9", None),
            ("4.9", None),
            ("not a version", None),
            ("", None),
            (None, None),
        ],
    )
    def test_revision_of(self, version: str | None, expected: str | None):
        assert revision_of(version) == expected

    def test_resolve(self):
        assert resolve_schema_version(None) == LATEST_SCHEMA_VERSION
        assert resolve_schema_version("kernel-3").revision == "3"
        assert (
            resolve_schema_version("http://datacite.org/schema/kernel-4.1").namespace
            == "http://datacite.org/schema/kernel-4"
        )

        with pytest.raises(UnresolvedSchemaVersion) as excinfo:
            resolve_schema_version("kernel-9")
        assert excinfo.value.requested == "kernel-9"
        assert excinfo.value.fallback == "http://datacite.org/schema/kernel-4"

    def test_fallback_is_logged(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level(logging.WARNING)
        version = schema_version_or_latest("http://datacite.org/schema/kernel-9")
        assert version == LATEST_SCHEMA_VERSION
        assert (
            "Unknown schema version: 'http://datacite.org/schema/kernel-9'. "
            "Falling back to http://datacite.org/schema/kernel-4." in caplog.text
        )

        caplog.clear()
        assert schema_version_or_latest("kernel-3").revision == "3"
        assert caplog.text == ""

    def test_schema_location(self):
        assert KNOWN_SCHEMA_VERSIONS["3"].schema_location == (
            "http://datacite.org/schema/kernel-3 "
            "http://schema.datacite.org/meta/kernel-3/metadata.xsd"
        )

    def test_capabilities(self):
        kernel_2 = KNOWN_SCHEMA_VERSIONS["2.1"].capabilities
        assert kernel_2 == KNOWN_SCHEMA_VERSIONS["2.2"].capabilities
        assert not kernel_2.rights_list
        assert not kernel_2.lang
        assert kernel_2.geo_locations is None

        kernel_3 = KNOWN_SCHEMA_VERSIONS["3"].capabilities
        assert kernel_3.rights_list
        assert kernel_3.subject_uris
        assert kernel_3.geo_locations == "string"
        assert not kernel_3.structured_names
        assert not kernel_3.funding_references
        assert not kernel_3.date_information

        kernel_4 = KNOWN_SCHEMA_VERSIONS["4"].capabilities
        assert all(
            value for value in kernel_4.model_dump().values()
        ), kernel_4.model_dump()
        assert kernel_4.geo_locations == "structured"


class TestPackageSchemaLoader:
    def test_load(self):
        loader = PackageSchemaLoader()
        for revision in KNOWN_SCHEMA_VERSIONS:
            schema = loader.load(revision)
            assert loader.load(revision) is schema

    def test_missing_definition(self, tmp_path: Path):
        validator = SchemaValidator(PackageSchemaLoader(tmp_path))
        [error] = validator.validate("<resource/>", "4")
        assert error == f"No schema definition at {tmp_path / 'kernel-4' / 'metadata.xsd'}"

    def test_broken_definition(self, tmp_path: Path):
        path = tmp_path / "kernel-3" / "metadata.xsd"
        path.parent.mkdir()
        path.write_text("<xs:schema xmlns:xs='http://www.w3.org/2001/XMLSchema'>")

        validator = SchemaValidator(PackageSchemaLoader(tmp_path))
        [error] = validator.validate("<resource/>", "3")
        assert error.startswith("Schema definition for kernel-3 could not be parsed: ")


class TestSchemaValidator:
    @pytest.mark.parametrize(
        "filename, version",
        [
            ("kernel-4.xml", "http://datacite.org/schema/kernel-4"),
            ("kernel-3.xml", "http://datacite.org/schema/kernel-3"),
            ("kernel-2.2.xml", "2.2"),
            ("kernel-2.1.xml", "kernel-2.1"),
            ("prefixed.xml", None),
        ],
    )
    def test_valid(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
        filename: str,
        version: str | None,
    ):
        document = datacite_files_fixture.sample_data(filename)
        assert transcoder_fixture.validator.validate(document, version) == []

    def test_invalid(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
    ):
        document = datacite_files_fixture.sample_text(
            "missing-resource-type-general.xml"
        )
        errors = transcoder_fixture.validator.validate(
            document, KNOWN_SCHEMA_VERSIONS["4"]
        )
        assert len(errors) == 1
        assert re.match(r"^\d+:\d+: ERROR: ", errors[0])
        assert "resourceTypeGeneral" in errors[0]

    def test_wrong_kernel(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
    ):
        document = datacite_files_fixture.sample_text("kernel-4.xml")
        assert transcoder_fixture.validator.validate(document, "3") != []

    def test_not_well_formed(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
    ):
        document = datacite_files_fixture.sample_text("malformed.xml")
        [error] = transcoder_fixture.validator.validate(document, "4")
        assert error.startswith("Document is not well-formed: ")
