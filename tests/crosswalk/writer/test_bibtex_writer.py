from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.data_layer.contributor import PersonData
from crosswalk.data_layer.resource_type import ResourceTypesData
from crosswalk.reader.bibtex import BibtexReader
from crosswalk.writer.bibtex import BibtexWriter, bibtex_person
from tests.fixtures.files import BibtexFilesFixture


class TestBibtexWriter:
    def test_serialize(self, bibtex_files_fixture: BibtexFilesFixture):
        record = BibtexReader().read(bibtex_files_fixture.sample_text("crossref.bib"))
        result = BibtexWriter().serialize(record)

        assert result.errors == []
        assert result.document.startswith("@article{10.7554/elife.01567,")
        assert "Weigel, Detlef" in result.document
        assert "2050-084X" in result.document

    def test_entry(self):
        record = BibliographicData(
            identifier="https://doi.org/10.5061/dryad.8515",
            creators=[
                PersonData(family_name="Ollomo", given_name="Benjamin"),
                PersonData(name="Dryad Digital Repository", type="Organization"),
            ],
            contributors=[
                PersonData(name="Prugnolle, Franck", contributor_type="ContactPerson"),
                PersonData(family_name="Weigel", contributor_type="Editor"),
            ],
            titles=["Data from: A new malaria agent in African hominids."],
            publication_year="2011",
            types=ResourceTypesData(type="Dataset").backfilled(),
            descriptions=[
                {"text": "How it was done.", "type": "Methods"},
                {"text": "What was found.", "type": "Abstract"},
            ],
        )
        entry = BibtexWriter().entry(record)

        assert entry.type == "misc"
        assert entry.fields["doi"] == "10.5061/dryad.8515"
        assert entry.fields["abstract"] == "What was found."
        assert "publisher" not in entry.fields
        assert [str(p) for p in entry.persons["author"]] == [
            "Ollomo, Benjamin",
            "{Dryad Digital Repository}",
        ]
        # Only editors have a place in a BibTeX entry.
        assert [str(p) for p in entry.persons["editor"]] == ["Weigel"]

    def test_missing_fields(self):
        result = BibtexWriter().serialize(BibliographicData(titles=["Untitled"]))
        assert result.errors == [
            "Missing required field: author",
            "Missing required field: year",
        ]
        assert result.document.startswith("@misc{record,")

    def test_entry_key(self):
        record = BibliographicData(
            identifier="https://example.org/items/1",
            titles=["A web page"],
            creators=["Example"],
            publication_year="2020",
        )
        result = BibtexWriter().serialize(record)
        assert result.errors == []
        assert result.document.startswith("@misc{https://example.org/items/1,")


def test_bibtex_person():
    assert str(bibtex_person(PersonData(family_name="van der Berg", given_name="Anna"))) == (
        "van der Berg, Anna"
    )
    assert str(bibtex_person(PersonData(name="The Dataverse Project"))) == (
        "{The Dataverse Project}"
    )
