import json
import logging
from pathlib import Path

import pytest
from lxml import etree
from pytest import LogCaptureFixture

from crosswalk.core.exceptions import CrosswalkValueError, ParseError
from crosswalk.reader.base import SourceKind
from crosswalk.reader.bibtex import BibtexReader
from crosswalk.reader.registry import LookupResult
from crosswalk.transcode import Transcoder
from crosswalk.writer.base import TargetFormat
from tests.fixtures.files import (
    BibtexFilesFixture,
    CrossciteFilesFixture,
    DataciteFilesFixture,
    RegistryFilesFixture,
)
from tests.fixtures.transcoder import TranscoderFixture

KERNEL_3 = "http://datacite.org/schema/kernel-3"
KERNEL_4 = "http://datacite.org/schema/kernel-4"


class TestTranscoder:
    def test_sniff(self, tmp_path: Path):
        assert Transcoder.sniff(b"  <resource/>") == SourceKind.DATACITE_XML
        assert Transcoder.sniff('{"id": null}') == SourceKind.CROSSCITE_JSON

        # The extension of a path wins over its content.
        path = tmp_path / "record.bib"
        path.write_text("<resource/>", encoding="utf-8")
        assert Transcoder.sniff(path) == SourceKind.BIBTEX

    def test_sniff_missing_file(self, tmp_path: Path):
        with pytest.raises(ParseError, match="Could not read source"):
            Transcoder.sniff(tmp_path / "missing.xml")

    def test_sniff_lookup_results(self):
        result = LookupResult(identifier="10.5061/missing", found=False)
        assert Transcoder.sniff(result) == SourceKind.REGISTRY
        assert Transcoder.sniff({"identifier": "10.5061/missing"}) == (
            SourceKind.REGISTRY
        )

    @pytest.mark.parametrize("source", [42, None, ["<resource/>"]])
    def test_sniff_unsupported(self, source: object):
        with pytest.raises(
            CrosswalkValueError, match="Could not determine the kind of source"
        ):
            Transcoder.sniff(source)

    def test_read_lookup_result(self, transcoder_fixture: TranscoderFixture):
        transcoder = transcoder_fixture.transcoder()

        record = transcoder.read(
            LookupResult(identifier="10.5061/missing", found=False)
        )
        assert record.state == "not_found"
        assert record.identifier == "https://doi.org/10.5061/missing"

        record = transcoder.read({"identifier": "10.5072/ABC", "state": "registered"})
        assert record.state == "registered"
        assert record.doi == "10.5072/abc"

    def test_convert_datacite(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
    ):
        transcoder = transcoder_fixture.transcoder()
        result = transcoder.convert(datacite_files_fixture.sample_text("kernel-4.xml"))

        assert result.valid
        assert result.schema_version == KERNEL_4
        root = etree.fromstring(result.document.encode("utf-8"))
        [identifier] = root.findall(f"{{{KERNEL_4}}}identifier")
        assert identifier.text == "10.5061/DRYAD.8515"

    def test_convert_path(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
    ):
        transcoder = transcoder_fixture.transcoder()
        result = transcoder.convert(
            datacite_files_fixture.sample_path("kernel-3.xml"),
            target_format=TargetFormat.CROSSCITE_JSON,
        )

        data = json.loads(result.document)
        assert data["id"] == "https://doi.org/10.6084/m9.figshare.4234751.v1"
        assert data["schemaVersion"] == KERNEL_3
        assert result.errors == []

    def test_convert_crosscite(
        self,
        transcoder_fixture: TranscoderFixture,
        crosscite_files_fixture: CrossciteFilesFixture,
    ):
        transcoder = transcoder_fixture.transcoder()
        result = transcoder.convert(
            crosscite_files_fixture.sample_data("crosscite.json"),
            source_kind="crosscite",
        )

        # The record names kernel-4 itself.
        assert result.schema_version == KERNEL_4
        assert (
            '<identifier identifierType="DOI">10.5281/ZENODO.48440</identifier>'
            in result.document
        )

    def test_convert_bibtex(
        self,
        transcoder_fixture: TranscoderFixture,
        bibtex_files_fixture: BibtexFilesFixture,
    ):
        transcoder = transcoder_fixture.transcoder()
        result = transcoder.convert(
            bibtex_files_fixture.sample_text("crossref.bib"),
            target_format="bibtex",
        )

        assert result.errors == []
        assert result.schema_version is None
        record = BibtexReader().read(result.document)
        assert record.doi == "10.7554/elife.01567"

    def test_schema_version_argument(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
    ):
        transcoder = transcoder_fixture.transcoder()
        result = transcoder.convert(
            datacite_files_fixture.sample_text("kernel-4.xml"), schema_version="3"
        )

        assert result.schema_version == KERNEL_3
        assert f'xmlns="{KERNEL_3}"' in result.document

    def test_configured_default_schema_version(
        self,
        transcoder_fixture: TranscoderFixture,
        bibtex_files_fixture: BibtexFilesFixture,
    ):
        source = bibtex_files_fixture.sample_text("crossref.bib")

        # BibTeX records do not name a schema version, so the default decides.
        transcoder = transcoder_fixture.transcoder()
        assert transcoder.convert(source).schema_version == KERNEL_4

        transcoder = transcoder_fixture.transcoder(default_schema_version=KERNEL_3)
        assert transcoder.convert(source).schema_version == KERNEL_3

    def test_default_schema_version_from_environment(
        self,
        transcoder_fixture: TranscoderFixture,
        bibtex_files_fixture: BibtexFilesFixture,
    ):
        transcoder_fixture.monkeypatch.setenv(
            "CROSSWALK_DEFAULT_SCHEMA_VERSION", "kernel-3"
        )
        result = Transcoder().convert(bibtex_files_fixture.sample_path("crossref.bib"))
        assert result.schema_version == KERNEL_3

    def test_overrides(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
    ):
        transcoder = transcoder_fixture.transcoder()
        record = transcoder.read(
            datacite_files_fixture.sample_text("kernel-4.xml"),
            overrides={
                "url": "https://datadryad.org/stash/dataset/doi:10.5061/dryad.8515",
                "state": "findable",
            },
        )
        assert (
            record.url == "https://datadryad.org/stash/dataset/doi:10.5061/dryad.8515"
        )
        assert record.state == "findable"

        result = transcoder.convert(
            datacite_files_fixture.sample_text("kernel-4.xml"),
            target_format="crosscite",
            overrides={"identifier": "10.5072/example", "sandbox": True},
        )
        data = json.loads(result.document)
        assert data["id"] == "https://handle.test.datacite.org/10.5072/example"

    def test_invalid_overrides(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
    ):
        transcoder = transcoder_fixture.transcoder()
        with pytest.raises(CrosswalkValueError, match="Unknown override keys: colour"):
            transcoder.convert(
                datacite_files_fixture.sample_text("kernel-4.xml"),
                overrides={"colour": "blue"},
            )

    def test_registry_not_found(
        self,
        transcoder_fixture: TranscoderFixture,
        registry_files_fixture: RegistryFilesFixture,
        caplog: LogCaptureFixture,
    ):
        caplog.set_level(logging.INFO)
        transcoder = transcoder_fixture.transcoder()
        result = transcoder.convert(
            registry_files_fixture.sample_text("not-found.json"),
            source_kind=SourceKind.REGISTRY,
        )

        assert not result.valid
        assert result.schema_version == KERNEL_4
        assert "10.4124/05F6C379-DD68-4CDB-880D-33D3E9576D52/1" in result.document
        assert (
            "https://doi.org/10.4124/05f6c379-dd68-4cdb-880d-33d3e9576d52/1 "
            "converted with" in caplog.text
        )

    def test_parse_error(
        self, transcoder_fixture: TranscoderFixture, caplog: LogCaptureFixture
    ):
        caplog.set_level(logging.DEBUG)
        transcoder = transcoder_fixture.transcoder()

        with pytest.raises(ParseError) as exc_info:
            transcoder.convert("<resource")

        assert exc_info.value.source_kind == SourceKind.DATACITE_XML
        assert "Converting document to datacite: Failed (raised ParseError)" in (
            caplog.text
        )

    def test_undetermined_source(self, transcoder_fixture: TranscoderFixture):
        transcoder = transcoder_fixture.transcoder()
        with pytest.raises(
            CrosswalkValueError, match="Could not determine the kind of source"
        ):
            transcoder.convert("Just some text")

    def test_elapsed_time_logged(
        self,
        transcoder_fixture: TranscoderFixture,
        datacite_files_fixture: DataciteFilesFixture,
        caplog: LogCaptureFixture,
    ):
        caplog.set_level(logging.DEBUG)
        transcoder = transcoder_fixture.transcoder()
        transcoder.convert(
            datacite_files_fixture.sample_text("kernel-4.xml"),
            source_kind="datacite",
            target_format="crosscite",
        )

        assert "Converting datacite to crosscite: Starting..." in caplog.text
        assert "Converting datacite to crosscite: Completed" in caplog.text
        assert "converted with" not in caplog.text
