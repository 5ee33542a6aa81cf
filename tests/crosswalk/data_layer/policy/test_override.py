import logging

import pytest

from crosswalk.core.exceptions import CrosswalkValueError
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.data_layer.policy.override import OverrideData, apply_overrides
from crosswalk.reader.datacite import DataciteXmlReader
from tests.fixtures.files import DataciteFilesFixture


@pytest.fixture
def record() -> BibliographicData:
    return BibliographicData(
        identifier="https://doi.org/10.5438/4k3m-nyvg",
        raw_identifier="10.5438/4K3M-NYVG",
        titles=["Eating your own Dog Food"],
        publisher="DataCite",
        url="https://blog.datacite.org/eating-your-own-dog-food",
        content_url=["https://blog.datacite.org/eating.pdf"],
    )


class TestApplyOverrides:
    def test_identifier_override_on_parse(
        self, datacite_files_fixture: DataciteFilesFixture
    ):
        reader = DataciteXmlReader()
        source = datacite_files_fixture.sample_text("kernel-3.xml")

        record = reader.parse(source, {"identifier": "10.5061/dryad.8515"})
        assert record.identifier == "https://doi.org/10.5061/dryad.8515"
        assert record.doi == "10.5061/dryad.8515"
        assert record.raw_identifier == "10.5061/dryad.8515"

        # Everything else comes from the document.
        assert record.title == "RAIN v1"
        assert record.publisher == "Figshare"

    def test_original_is_unchanged(self, record: BibliographicData):
        result = apply_overrides(record, {"identifier": "10.5061/dryad.8515"})
        assert result is not record
        assert record.identifier == "https://doi.org/10.5438/4k3m-nyvg"
        assert result.identifier == "https://doi.org/10.5061/dryad.8515"

    def test_empty_overrides_copy(self, record: BibliographicData):
        for overrides in (None, {}):
            result = apply_overrides(record, overrides)
            assert result == record
            assert result is not record
            result.titles.clear()
            assert len(record.titles) == 1

    def test_explicit_none_clears(self, record: BibliographicData):
        result = apply_overrides(record, {"url": None, "content_url": None})
        assert result.url is None
        assert result.content_url == []
        assert result.identifier == record.identifier

    def test_omitted_fields_are_kept(self, record: BibliographicData):
        result = apply_overrides(record, OverrideData(url="https://example.org/x"))
        assert result.url == "https://example.org/x"
        assert result.content_url == record.content_url
        assert result.identifier == record.identifier

    def test_content_url_string(self, record: BibliographicData):
        result = apply_overrides(
            record, {"content_url": "https://example.org/data.zip"}
        )
        assert result.content_url == ["https://example.org/data.zip"]

    def test_schema_version(self, record: BibliographicData):
        result = apply_overrides(
            record, {"schema_version": "http://datacite.org/schema/kernel-3"}
        )
        assert result.schema_version == "http://datacite.org/schema/kernel-3"

    def test_sandbox(self, record: BibliographicData):
        result = apply_overrides(record, {"sandbox": True})
        assert result.identifier == "https://handle.test.datacite.org/10.5438/4k3m-nyvg"

        result = apply_overrides(
            record, {"identifier": "10.5061/DRYAD.8515", "sandbox": True}
        )
        assert result.identifier == "https://handle.test.datacite.org/10.5061/dryad.8515"
        assert result.doi == "10.5061/dryad.8515"

    def test_sandbox_without_identifier(self):
        result = apply_overrides(BibliographicData(), {"sandbox": True})
        assert result.identifier is None

    def test_non_doi_identifier(self, record: BibliographicData):
        result = apply_overrides(record, {"identifier": "https://example.org/item/1/"})
        assert result.identifier == "https://example.org/item/1"
        assert result.doi is None

        result = apply_overrides(record, {"identifier": "ark:/13030/tf5p30086k"})
        assert result.identifier == "ark:/13030/tf5p30086k"

    def test_direct_edits(self, record: BibliographicData):
        result = apply_overrides(
            record, {"titles": ["A better title"], "state": "registered"}
        )
        assert result.title == "A better title"
        assert result.state == "registered"
        assert record.title == "Eating your own Dog Food"
        assert record.state is None

    def test_unknown_key(self, record: BibliographicData):
        with pytest.raises(CrosswalkValueError, match="Unknown override keys: doi"):
            apply_overrides(record, {"doi": "10.5061/dryad.8515"})

    @pytest.mark.parametrize(
        "overrides",
        [
            pytest.param({"publication_year": "someday"}, id="record field"),
            pytest.param({"sandbox": "sometimes"}, id="override field"),
            pytest.param({"dates": [{"date_type": "Issued"}]}, id="nested"),
        ],
    )
    def test_invalid_value(self, record: BibliographicData, overrides: dict):
        with pytest.raises(CrosswalkValueError, match="Invalid override"):
            apply_overrides(record, overrides)

    def test_logs_applied_fields(
        self, record: BibliographicData, caplog: pytest.LogCaptureFixture
    ):
        caplog.set_level(logging.DEBUG)
        apply_overrides(record, {"url": None, "state": "findable"})
        assert (
            "Applied overrides to https://doi.org/10.5438/4k3m-nyvg: state, url"
            in caplog.text
        )
