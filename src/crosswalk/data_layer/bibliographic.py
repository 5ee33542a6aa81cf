from __future__ import annotations

import re
from typing import Annotated

from pydantic import BeforeValidator, Field, field_validator

from crosswalk.data_layer.base.mutable import BaseMutableData
from crosswalk.data_layer.contributor import PersonData
from crosswalk.data_layer.date import DateData
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
from crosswalk.util.identifier import validate_doi

_YEAR = re.compile(r"^\d{4}$")


def _as_list(value: object) -> object:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    return value


class BibliographicData(BaseMutableData):
    """The canonical record every reader produces and every writer consumes.

    Sequence fields keep the order of the source document. Any field may be
    reassigned after reading; assignments are validated.
    """

    identifier: str | None = None
    raw_identifier: str | None = None
    creators: Annotated[list[PersonData], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    contributors: Annotated[list[PersonData], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    titles: Annotated[list[TitleData], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    publisher: str | None = None
    publication_year: str | None = None
    version: str | None = None
    language: str | None = None
    types: ResourceTypesData = Field(default_factory=ResourceTypesData)
    dates: Annotated[list[DateData], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    alternate_identifiers: Annotated[
        list[AlternateIdentifierData], BeforeValidator(_as_list)
    ] = Field(default_factory=list)
    related_identifiers: Annotated[
        list[RelatedIdentifierData], BeforeValidator(_as_list)
    ] = Field(default_factory=list)
    rights_list: Annotated[list[RightsData], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    subjects: Annotated[list[SubjectData], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    descriptions: Annotated[list[DescriptionData], BeforeValidator(_as_list)] = (
        Field(default_factory=list)
    )
    funding_references: Annotated[
        list[FundingReferenceData], BeforeValidator(_as_list)
    ] = Field(default_factory=list)
    geo_locations: Annotated[list[GeoLocationData], BeforeValidator(_as_list)] = (
        Field(default_factory=list)
    )
    sizes: Annotated[list[str], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    formats: Annotated[list[str], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    content_url: Annotated[list[str], BeforeValidator(_as_list)] = Field(
        default_factory=list
    )
    url: str | None = None
    periodical: PeriodicalData | None = None
    schema_version: str | None = None
    state: str | None = None
    service_provider: str | None = Field(default=None, exclude=True)
    raw: str | None = Field(default=None, exclude=True, repr=False)

    @field_validator("publication_year", mode="before")
    @classmethod
    def _publication_year(cls, value: object) -> str | None:
        if value is None or value == "":
            return None
        value = str(value).strip()
        # Dates such as "2011-10-01" carry the year in their first four digits.
        if not _YEAR.match(value) and _YEAR.match(value[:4]):
            value = value[:4]
        # Anything else, such as "n.d.", is kept for the schema to report.
        return value or None

    @field_validator("version", mode="before")
    @classmethod
    def _version_is_text(cls, value: object) -> str | None:
        # "1.2" arrives as a float from JSON sources. It is free text here.
        if value is None:
            return None
        return str(value)

    @property
    def doi(self) -> str | None:
        """The bare, lowercased DOI, e.g. ``10.5061/dryad.8515``."""
        return validate_doi(self.identifier)

    @property
    def title(self) -> str | None:
        """The main title: the first one without a title type."""
        for title in self.titles:
            if title.title_type is None:
                return title.text
        return self.titles[0].text if self.titles else None

    @property
    def has_content(self) -> bool:
        """Does this record carry anything besides identification?"""
        return bool(self.creators or self.titles or self.publisher)
