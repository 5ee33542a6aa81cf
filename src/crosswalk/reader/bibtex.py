from __future__ import annotations

from pybtex.database import Entry, Person, parse_string
from pybtex.exceptions import PybtexError

from crosswalk.core import vocabulary
from crosswalk.core.exceptions import ParseError
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.data_layer.contributor import PersonData
from crosswalk.data_layer.date import ISSUED, DateData
from crosswalk.data_layer.description import DescriptionData, PeriodicalData
from crosswalk.data_layer.identifier import AlternateIdentifierData
from crosswalk.data_layer.resource_type import ResourceTypesData
from crosswalk.data_layer.subject import SubjectData
from crosswalk.data_layer.title import TitleData
from crosswalk.reader.base import SourceKind, TextReader, TextSource
from crosswalk.util.personal_names import clean_name

EDITOR = "Editor"


def unbrace(value: str | None) -> str | None:
    """Drop the braces BibTeX uses to protect case and grouping."""
    if value is None:
        return None
    return clean_name(value.replace("{", "").replace("}", ""))


class BibtexReader(TextReader):
    """Read the first entry of a BibTeX document."""

    source_kind = SourceKind.BIBTEX

    def read(self, source: TextSource) -> BibliographicData:
        raw = self.load_source(source)
        try:
            bibliography = parse_string(raw, "bibtex")
        except PybtexError as e:
            raise ParseError(
                "Malformed BibTeX document",
                diagnostic=str(e),
                source_kind=self.source_kind,
            ) from e
        if not bibliography.entries:
            raise ParseError(
                "BibTeX document has no entries", source_kind=self.source_kind
            )

        key, entry = next(iter(bibliography.entries.items()))
        if len(bibliography.entries) > 1:
            self.log.info(
                "Document has %d entries, reading only %r",
                len(bibliography.entries),
                key,
            )
        return self._record(entry, raw)

    @staticmethod
    def _person(
        person: Person, contributor_type: str | None = None
    ) -> PersonData | None:
        given_name = unbrace(" ".join(person.first_names + person.middle_names))
        family_name = unbrace(" ".join(person.prelast_names + person.last_names))
        if given_name:
            return PersonData.resolve(
                given_name=given_name,
                family_name=family_name,
                contributor_type=contributor_type,
            )
        # A single braced group, such as an organization or a name that must
        # not be split.
        return PersonData.resolve(
            name=family_name, contributor_type=contributor_type
        )

    def _record(self, entry: Entry, raw: str) -> BibliographicData:
        fields = entry.fields

        def field(name: str) -> str | None:
            return unbrace(fields.get(name))

        doi = field("doi")
        url = field("url")
        year = field("year")
        entry_type = entry.type.lower()

        creators = [
            person
            for person in map(self._person, entry.persons.get("author", []))
            if person is not None
        ]
        contributors = [
            person
            for person in (
                self._person(p, EDITOR) for p in entry.persons.get("editor", [])
            )
            if person is not None
        ]

        journal = field("journal") or field("booktitle")
        alternate_identifiers = [
            AlternateIdentifierData(value=value, type=name.upper())
            for name in ("isbn", "issn")
            if (value := field(name))
        ]

        record = BibliographicData(
            identifier=self.normalize_identifier(doi or url),
            raw_identifier=doi or url,
            url=url,
            creators=creators,
            contributors=contributors,
            titles=[TitleData(text=title)] if (title := field("title")) else [],
            publisher=field("publisher")
            or field("institution")
            or field("school")
            or field("organization"),
            publication_year=year,
            types=ResourceTypesData(
                type=vocabulary.kind_for_bibtex(entry_type), bibtex=entry_type
            ).backfilled(),
            dates=[DateData(date=year, date_type=ISSUED)] if year else [],
            language=field("language"),
            alternate_identifiers=alternate_identifiers,
            subjects=[
                SubjectData(text=keyword)
                for keyword in (field("keywords") or "").split(",")
                if keyword.strip()
            ],
            descriptions=(
                [DescriptionData(text=abstract)]
                if (abstract := field("abstract"))
                else []
            ),
            version=field("version"),
            periodical=PeriodicalData(title=journal) if journal else None,
            raw=raw.strip(),
        )
        self.log.debug("Read %s", record.identifier or "record")
        return record
