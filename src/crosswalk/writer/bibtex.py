from __future__ import annotations

from pybtex.database import BibliographyData, Entry, Person

from crosswalk.core import vocabulary
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.data_layer.contributor import PersonData
from crosswalk.writer.base import TargetFormat, Writer, WriteResult

EDITOR = "Editor"
DEFAULT_ENTRY_KEY = "record"

# Fields a bibliography renderer cannot do without.
REQUIRED_FIELDS = ("title", "author", "year")


def bibtex_person(person: PersonData) -> Person:
    if person.family_name:
        return Person(first=person.given_name or "", last=person.family_name)
    # Braces keep organizations and unresolved names in one piece.
    return Person(last=f"{{{person.name}}}")


class BibtexWriter(Writer):
    """Write a record as a single BibTeX entry.

    Missing fields that renderers need are reported as errors; the entry is
    written regardless.
    """

    target_format = TargetFormat.BIBTEX

    def entry(self, record: BibliographicData) -> Entry:
        types = record.types
        entry_type = types.bibtex or vocabulary.bibtex_for(types.type)

        fields: list[tuple[str, str]] = []

        def add(name: str, value: str | None) -> None:
            if value:
                fields.append((name, value))

        add("title", record.title)
        if record.periodical is not None:
            add("journal", record.periodical.title)
        add("publisher", record.publisher)
        add("year", record.publication_year)
        add("doi", record.doi)
        add("url", record.url)
        add("language", record.language)
        add("version", record.version)
        abstract = next(
            (d.text for d in record.descriptions if d.type in (None, "Abstract")),
            None,
        )
        add("abstract", abstract)
        add("keywords", ", ".join(subject.text for subject in record.subjects))
        for identifier in record.alternate_identifiers:
            if identifier.type and identifier.type.upper() in ("ISBN", "ISSN"):
                add(identifier.type.lower(), identifier.value)

        persons = {}
        if record.creators:
            persons["author"] = [bibtex_person(p) for p in record.creators]
        editors = [p for p in record.contributors if p.contributor_type == EDITOR]
        if editors:
            persons["editor"] = [bibtex_person(p) for p in editors]

        return Entry(entry_type, fields=fields, persons=persons)

    def serialize(
        self, record: BibliographicData, schema_version: str | None = None
    ) -> WriteResult:
        entry = self.entry(record)
        key = record.doi or record.identifier or DEFAULT_ENTRY_KEY
        document = BibliographyData(entries={key: entry}).to_string("bibtex")

        present = set(entry.fields.keys()) | set(entry.persons.keys())
        present = {name.lower() for name in present}
        errors = [
            f"Missing required field: {name}"
            for name in REQUIRED_FIELDS
            if name not in present
        ]
        return WriteResult(document=document, errors=errors)
