import pytest

from crosswalk.reader.bibtex import BibtexReader
from crosswalk.reader.crosscite import CrossciteJsonReader
from crosswalk.reader.datacite import DataciteXmlReader
from crosswalk.writer.bibtex import BibtexWriter
from crosswalk.writer.crosscite import CrossciteJsonWriter
from tests.fixtures.files import BibtexFilesFixture, DataciteFilesFixture
from tests.fixtures.transcoder import TranscoderFixture


@pytest.mark.parametrize(
    "filename",
    [
        "kernel-4.xml",
        "kernel-3.xml",
        "kernel-2.2.xml",
        "kernel-2.1.xml",
        "lowercase-doi.xml",
    ],
)
def test_datacite_round_trip(
    datacite_files_fixture: DataciteFilesFixture,
    transcoder_fixture: TranscoderFixture,
    filename: str,
):
    reader = DataciteXmlReader()
    record = reader.read(datacite_files_fixture.sample_text(filename))

    result = transcoder_fixture.datacite_writer.serialize(record)
    assert result.errors == []
    assert result.schema_version == record.schema_version

    reread = reader.read(result.document)
    assert reread.model_dump() == record.model_dump()


@pytest.mark.parametrize("filename", ["kernel-4.xml", "kernel-3.xml"])
def test_crosscite_round_trip(
    datacite_files_fixture: DataciteFilesFixture, filename: str
):
    record = DataciteXmlReader().read(datacite_files_fixture.sample_text(filename))

    result = CrossciteJsonWriter().serialize(record)
    reread = CrossciteJsonReader().read(result.document)

    assert reread.model_dump(exclude={"raw_identifier"}) == record.model_dump(
        exclude={"raw_identifier"}
    )


def test_bibtex_round_trip(bibtex_files_fixture: BibtexFilesFixture):
    reader = BibtexReader()
    record = reader.read(bibtex_files_fixture.sample_text("crossref.bib"))

    result = BibtexWriter().serialize(record)
    assert result.errors == []

    reread = reader.read(result.document)
    assert reread.model_dump() == record.model_dump()
