from __future__ import annotations

import json
import re
from typing import Any

from crosswalk.core.exceptions import ParseError
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.data_layer.contributor import PersonData
from crosswalk.data_layer.date import ISSUED, DateData
from crosswalk.data_layer.description import DescriptionData, PeriodicalData
from crosswalk.data_layer.funding import FundingReferenceData
from crosswalk.data_layer.geo_location import GeoLocationData
from crosswalk.data_layer.identifier import (
    AlternateIdentifierData,
    RelatedIdentifierData,
)
from crosswalk.data_layer.resource_type import ResourceTypesData
from crosswalk.data_layer.rights import RightsData
from crosswalk.data_layer.subject import SubjectData
from crosswalk.data_layer.title import TitleData
from crosswalk.reader.base import SourceKind, TextReader, TextSource
from crosswalk.util.personal_names import name_type_from_attribute

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def snake_case(key: str) -> str:
    """'resourceTypeGeneral' -> 'resource_type_general', 'date-type' -> 'date_type'"""
    return _CAMEL_BOUNDARY.sub("_", key).replace("-", "_").lower()


def snake_case_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {snake_case(k): snake_case_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [snake_case_keys(v) for v in value]
    return value


def as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def first_of(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, "", [], {}):
            return value
    return None


def text(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class CrossciteJsonReader(TextReader):
    """Read the crosscite JSON shape.

    Keys may be camelCase or snake_case. Most list-valued keys also accept a
    single value, and most entries accept a bare string.
    """

    source_kind = SourceKind.CROSSCITE_JSON

    def read(self, source: TextSource) -> BibliographicData:
        raw = self.load_source(source)
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError(
                "Malformed JSON document",
                diagnostic=str(e),
                source_kind=self.source_kind,
            ) from e
        if not isinstance(data, dict):
            raise ParseError(
                f"Expected a JSON object, found {type(data).__name__}",
                source_kind=self.source_kind,
            )
        data = snake_case_keys(data)
        try:
            return self._record(data, raw)
        except (AttributeError, TypeError) as e:
            raise ParseError(
                "Unexpected crosscite structure",
                diagnostic=str(e),
                source_kind=self.source_kind,
            ) from e

    def _record(self, data: dict[str, Any], raw: str) -> BibliographicData:
        raw_identifier = text(first_of(data, "id", "identifier", "doi"))
        publication_year = text(first_of(data, "publication_year"))
        date_published = text(first_of(data, "date_published"))
        dates = [self._date(entry) for entry in as_list(data.get("dates"))]
        if date_published and not any(d.date_type == ISSUED for d in dates):
            dates.append(DateData(date=date_published, date_type=ISSUED))
        if publication_year is None and date_published:
            publication_year = date_published

        record = BibliographicData(
            identifier=self.normalize_identifier(raw_identifier),
            raw_identifier=raw_identifier,
            url=text(data.get("url")),
            content_url=[text(u) for u in as_list(data.get("content_url")) if text(u)],
            creators=self._people(first_of(data, "creators", "creator", "author")),
            contributors=self._people(first_of(data, "contributors", "contributor")),
            titles=[
                self._title(entry)
                for entry in as_list(first_of(data, "titles", "title"))
            ],
            publisher=self._publisher(data.get("publisher")),
            publication_year=publication_year,
            types=self._types(data.get("types")),
            dates=dates,
            language=text(data.get("language")),
            alternate_identifiers=[
                self._alternate_identifier(entry)
                for entry in as_list(data.get("alternate_identifiers"))
            ],
            related_identifiers=[
                self._related_identifier(entry)
                for entry in as_list(data.get("related_identifiers"))
            ],
            rights_list=[
                self._rights(entry)
                for entry in as_list(first_of(data, "rights_list", "license"))
            ],
            subjects=[
                self._subject(entry)
                for entry in as_list(first_of(data, "subjects", "keywords"))
            ],
            descriptions=[
                self._description(entry)
                for entry in as_list(first_of(data, "descriptions", "description"))
            ],
            funding_references=[
                FundingReferenceData.model_validate(entry)
                for entry in as_list(data.get("funding_references"))
            ],
            geo_locations=[
                self._geo_location(entry)
                for entry in as_list(data.get("geo_locations"))
            ],
            sizes=[str(size) for size in as_list(data.get("sizes"))],
            formats=[str(media) for media in as_list(data.get("formats"))],
            version=text(first_of(data, "version", "version_info")),
            periodical=self._periodical(first_of(data, "periodical", "container")),
            schema_version=text(data.get("schema_version")),
            state=text(data.get("state")),
            service_provider=text(first_of(data, "service_provider", "provider")),
            raw=raw.strip(),
        )
        self.log.debug("Read %s", record.identifier or "record")
        return record

    def _people(self, entries: Any) -> list[PersonData]:
        people = []
        for entry in as_list(entries):
            if isinstance(entry, str):
                person = PersonData.resolve(name=entry)
            else:
                name_type = entry.get("type") or entry.get("name_type")
                person = PersonData.resolve(
                    name=text(entry.get("name")),
                    given_name=text(entry.get("given_name")),
                    family_name=text(entry.get("family_name")),
                    name_type=(
                        name_type
                        if name_type in ("Person", "Organization")
                        else name_type_from_attribute(name_type)
                    ),
                    identifier=text(first_of(entry, "id", "identifier")),
                    identifier_scheme=text(
                        first_of(entry, "identifier_scheme", "name_identifier_scheme")
                    ),
                    contributor_type=text(entry.get("contributor_type")),
                )
            if person is not None:
                people.append(person)
        return people

    @staticmethod
    def _title(entry: Any) -> TitleData:
        if isinstance(entry, str):
            return TitleData(text=entry)
        return TitleData(
            text=first_of(entry, "title", "text"),
            title_type=entry.get("title_type"),
            lang=entry.get("lang"),
        )

    @staticmethod
    def _publisher(value: Any) -> str | None:
        if isinstance(value, dict):
            return text(value.get("name"))
        return text(value)

    @staticmethod
    def _types(value: Any) -> ResourceTypesData:
        if not isinstance(value, dict):
            return ResourceTypesData()
        return ResourceTypesData(
            type=text(value.get("type")),
            resource_type=text(value.get("resource_type")),
            resource_type_general=text(value.get("resource_type_general")),
            citeproc=text(value.get("citeproc")),
            bibtex=text(value.get("bibtex")),
            ris=text(value.get("ris")),
        ).backfilled()

    @staticmethod
    def _date(entry: Any) -> DateData:
        if isinstance(entry, str):
            return DateData(date=entry)
        return DateData(
            date=text(entry.get("date")),
            date_type=entry.get("date_type"),
            date_information=entry.get("date_information"),
        )

    @staticmethod
    def _alternate_identifier(entry: Any) -> AlternateIdentifierData:
        return AlternateIdentifierData(
            value=first_of(entry, "alternate_identifier", "value"),
            type=first_of(entry, "alternate_identifier_type", "type"),
        )

    @staticmethod
    def _related_identifier(entry: Any) -> RelatedIdentifierData:
        return RelatedIdentifierData(
            value=first_of(entry, "related_identifier", "value"),
            type=first_of(entry, "related_identifier_type", "type"),
            relation_type=entry.get("relation_type"),
            resource_type_general=entry.get("resource_type_general"),
            related_metadata_scheme=entry.get("related_metadata_scheme"),
            scheme_uri=entry.get("scheme_uri"),
            scheme_type=entry.get("scheme_type"),
        )

    @staticmethod
    def _rights(entry: Any) -> RightsData:
        if isinstance(entry, str):
            return RightsData.model_validate(entry)
        return RightsData(
            name=first_of(entry, "rights", "name"),
            uri=first_of(entry, "rights_uri", "uri", "id"),
            lang=entry.get("lang"),
        )

    @staticmethod
    def _subject(entry: Any) -> SubjectData:
        if isinstance(entry, str):
            return SubjectData(text=entry)
        return SubjectData(
            text=first_of(entry, "subject", "text"),
            scheme=first_of(entry, "subject_scheme", "scheme"),
            scheme_uri=entry.get("scheme_uri"),
            value_uri=entry.get("value_uri"),
            lang=entry.get("lang"),
        )

    @staticmethod
    def _description(entry: Any) -> DescriptionData:
        if isinstance(entry, str):
            return DescriptionData(text=entry)
        return DescriptionData(
            text=first_of(entry, "description", "text"),
            type=first_of(entry, "description_type", "type"),
            lang=entry.get("lang"),
        )

    @staticmethod
    def _geo_location(entry: dict[str, Any]) -> GeoLocationData:
        point = first_of(entry, "geo_location_point", "point")
        box = first_of(entry, "geo_location_box", "box")
        return GeoLocationData(
            place=first_of(entry, "geo_location_place", "place"),
            point=point
            and {
                "latitude": text(first_of(point, "point_latitude", "latitude")),
                "longitude": text(first_of(point, "point_longitude", "longitude")),
            },
            box=box
            and {
                "west": text(first_of(box, "west_bound_longitude", "west")),
                "east": text(first_of(box, "east_bound_longitude", "east")),
                "south": text(first_of(box, "south_bound_latitude", "south")),
                "north": text(first_of(box, "north_bound_latitude", "north")),
            },
        )

    @staticmethod
    def _periodical(value: Any) -> PeriodicalData | None:
        if not isinstance(value, dict) or not value.get("title"):
            return None
        return PeriodicalData.model_validate(value)
