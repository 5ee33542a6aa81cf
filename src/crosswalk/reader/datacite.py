from __future__ import annotations

from typing import TYPE_CHECKING

from lxml import etree

from crosswalk.core.exceptions import ParseError
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.data_layer.contributor import PersonData
from crosswalk.data_layer.date import DateData
from crosswalk.data_layer.description import (
    SERIES_INFORMATION,
    DescriptionData,
    PeriodicalData,
)
from crosswalk.data_layer.funding import FundingReferenceData
from crosswalk.data_layer.geo_location import (
    GeoLocationBox,
    GeoLocationData,
    GeoLocationPoint,
)
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
from crosswalk.util.xmlparser import XMLParser

if TYPE_CHECKING:
    from lxml.etree import _Element

DATACITE_SERVICE_PROVIDER = "DataCite"


class DataciteXmlReader(TextReader, XMLParser):
    """Read a DataCite resource document of any kernel revision.

    The document's own namespace decides what the elements are called, and
    is recorded in the record's ``schema_version``. Elements a revision does
    not have are simply absent; nothing is defaulted here.
    """

    source_kind = SourceKind.DATACITE_XML

    def read(self, source: TextSource | etree._ElementTree) -> BibliographicData:
        if isinstance(source, etree._ElementTree):
            raw = None
            tree = source
        else:
            raw = self.load_source(source)
            try:
                tree = self._load_xml(raw)
            except etree.XMLSyntaxError as e:
                raise ParseError(
                    "Malformed XML document",
                    diagnostic=str(e),
                    source_kind=self.source_kind,
                ) from e

        root = tree.getroot()
        qname = etree.QName(root)
        if qname.localname != "resource":
            raise ParseError(
                f"Expected a resource element, found {qname.localname!r}",
                source_kind=self.source_kind,
            )
        if qname.namespace is None:
            raise ParseError(
                "Resource element has no schema namespace",
                source_kind=self.source_kind,
            )
        ns = {"dc": qname.namespace}

        identifier_tag = self._xpath1(root, "dc:identifier", ns)
        raw_identifier = self.text_of(identifier_tag)
        descriptions, periodical = self._descriptions(root, ns)

        record = BibliographicData(
            identifier=self.normalize_identifier(
                raw_identifier, self.attribute(identifier_tag, "identifierType")
            ),
            raw_identifier=raw_identifier,
            creators=self._people(root, "dc:creators/dc:creator", "creator", ns),
            contributors=self._people(
                root, "dc:contributors/dc:contributor", "contributor", ns
            ),
            titles=[
                TitleData(
                    text=text,
                    title_type=self.attribute(tag, "titleType"),
                    lang=self.lang(tag),
                )
                for tag in self._xpath(root, "dc:titles/dc:title", ns)
                if (text := self.text_of(tag))
            ],
            publisher=self.text_of_optional_subtag(root, "dc:publisher", ns),
            publication_year=self.text_of_optional_subtag(
                root, "dc:publicationYear", ns
            ),
            types=self._types(root, ns),
            alternate_identifiers=[
                AlternateIdentifierData(
                    value=text, type=self.attribute(tag, "alternateIdentifierType")
                )
                for tag in self._xpath(
                    root, "dc:alternateIdentifiers/dc:alternateIdentifier", ns
                )
                if (text := self.text_of(tag))
            ],
            subjects=[
                SubjectData(
                    text=text,
                    scheme=self.attribute(tag, "subjectScheme"),
                    scheme_uri=self.attribute(tag, "schemeURI"),
                    value_uri=self.attribute(tag, "valueURI"),
                    lang=self.lang(tag),
                )
                for tag in self._xpath(root, "dc:subjects/dc:subject", ns)
                if (text := self.text_of(tag))
            ],
            funding_references=[
                self._funding_reference(tag, ns)
                for tag in self._xpath(
                    root, "dc:fundingReferences/dc:fundingReference", ns
                )
            ],
            dates=[
                DateData(
                    date=text,
                    date_type=self.attribute(tag, "dateType"),
                    date_information=self.attribute(tag, "dateInformation"),
                )
                for tag in self._xpath(root, "dc:dates/dc:date", ns)
                if (text := self.text_of(tag))
            ],
            language=self.text_of_optional_subtag(root, "dc:language", ns),
            related_identifiers=[
                RelatedIdentifierData(
                    value=text,
                    type=self.attribute(tag, "relatedIdentifierType"),
                    relation_type=self.attribute(tag, "relationType"),
                    resource_type_general=self.attribute(tag, "resourceTypeGeneral"),
                    related_metadata_scheme=self.attribute(
                        tag, "relatedMetadataScheme"
                    ),
                    scheme_uri=self.attribute(tag, "schemeURI"),
                    scheme_type=self.attribute(tag, "schemeType"),
                )
                for tag in self._xpath(
                    root, "dc:relatedIdentifiers/dc:relatedIdentifier", ns
                )
                if (text := self.text_of(tag))
            ],
            sizes=[
                text
                for tag in self._xpath(root, "dc:sizes/dc:size", ns)
                if (text := self.text_of(tag))
            ],
            formats=[
                text
                for tag in self._xpath(root, "dc:formats/dc:format", ns)
                if (text := self.text_of(tag))
            ],
            version=self.text_of_optional_subtag(root, "dc:version", ns),
            rights_list=self._rights(root, ns),
            descriptions=descriptions,
            periodical=periodical,
            geo_locations=[
                self._geo_location(tag, ns)
                for tag in self._xpath(root, "dc:geoLocations/dc:geoLocation", ns)
            ],
            schema_version=qname.namespace,
            service_provider=DATACITE_SERVICE_PROVIDER,
            raw=raw,
        )
        self.log.debug(
            "Read %s (%s)", record.identifier or "record", record.schema_version
        )
        return record

    def _name_identifier(
        self, tag: _Element | None
    ) -> tuple[str | None, str | None]:
        identifier = self.text_of(tag)
        if identifier is None:
            return None, None
        scheme = self.attribute(tag, "nameIdentifierScheme")
        scheme_uri = self.attribute(tag, "schemeURI")
        if (
            scheme_uri
            and (scheme or "").upper() != "ORCID"
            and not identifier.startswith(("http://", "https://"))
        ):
            identifier = scheme_uri.rstrip("/") + "/" + identifier
        return identifier, scheme

    def _people(
        self, root: _Element, expression: str, prefix: str, ns: dict[str, str]
    ) -> list[PersonData]:
        people = []
        for tag in self._xpath(root, expression, ns):
            name_tag = self._xpath1(tag, f"dc:{prefix}Name", ns)
            identifier, scheme = self._name_identifier(
                self._xpath1(tag, "dc:nameIdentifier", ns)
            )
            person = PersonData.resolve(
                name=self.text_of(name_tag),
                given_name=self.text_of_optional_subtag(tag, "dc:givenName", ns),
                family_name=self.text_of_optional_subtag(tag, "dc:familyName", ns),
                name_type=name_type_from_attribute(
                    self.attribute(name_tag, "nameType")
                ),
                identifier=identifier,
                identifier_scheme=scheme,
                contributor_type=self.attribute(tag, "contributorType"),
            )
            if person is not None:
                people.append(person)
        return people

    def _types(self, root: _Element, ns: dict[str, str]) -> ResourceTypesData:
        tag = self._xpath1(root, "dc:resourceType", ns)
        if tag is None:
            return ResourceTypesData()
        return ResourceTypesData(
            resource_type=self.text_of(tag),
            resource_type_general=self.attribute(tag, "resourceTypeGeneral"),
        ).backfilled()

    def _funding_reference(
        self, tag: _Element, ns: dict[str, str]
    ) -> FundingReferenceData:
        funder_identifier = self._xpath1(tag, "dc:funderIdentifier", ns)
        award_number = self._xpath1(tag, "dc:awardNumber", ns)
        return FundingReferenceData(
            funder_name=self.text_of_optional_subtag(tag, "dc:funderName", ns),
            funder_identifier=self.text_of(funder_identifier),
            funder_identifier_type=self.attribute(
                funder_identifier, "funderIdentifierType"
            ),
            award_number=self.text_of(award_number),
            award_uri=self.attribute(award_number, "awardURI"),
            award_title=self.text_of_optional_subtag(tag, "dc:awardTitle", ns),
        )

    def _rights(self, root: _Element, ns: dict[str, str]) -> list[RightsData]:
        # Kernel 3 and later wrap rights in a rightsList. Older kernels have
        # a single rights element directly under the resource.
        rights_list = []
        for tag in self._xpath(root, "dc:rightsList/dc:rights | dc:rights", ns):
            name = self.text_of(tag)
            uri = self.attribute(tag, "rightsURI")
            if uri is None:
                if name is None:
                    continue
                rights = RightsData.model_validate(name)
                if self.lang(tag):
                    rights = rights.model_copy(update={"lang": self.lang(tag)})
            else:
                rights = RightsData(name=name, uri=uri, lang=self.lang(tag))
            rights_list.append(rights)
        return rights_list

    def _descriptions(
        self, root: _Element, ns: dict[str, str]
    ) -> tuple[list[DescriptionData], PeriodicalData | None]:
        """Read descriptions, taking the first series description apart.

        The first SeriesInformation description names the periodical the
        work appeared in.
        """
        descriptions = []
        periodical = None
        for tag in self._xpath(root, "dc:descriptions/dc:description", ns):
            text = self.text_of(tag)
            if text is None:
                continue
            description_type = self.attribute(tag, "descriptionType")
            if description_type == SERIES_INFORMATION and periodical is None:
                periodical = PeriodicalData(title=text)
                continue
            descriptions.append(
                DescriptionData(text=text, type=description_type, lang=self.lang(tag))
            )
        return descriptions, periodical

    def _point(
        self, tag: _Element | None, ns: dict[str, str]
    ) -> GeoLocationPoint | None:
        if tag is None:
            return None
        latitude = self.text_of_optional_subtag(tag, "dc:pointLatitude", ns)
        longitude = self.text_of_optional_subtag(tag, "dc:pointLongitude", ns)
        if latitude is None and longitude is None:
            # Kernel 3: "latitude longitude"
            parts = (self.text_of(tag) or "").split()
            if len(parts) != 2:
                return None
            latitude, longitude = parts
        if latitude is None or longitude is None:
            return None
        return GeoLocationPoint(latitude=latitude, longitude=longitude)

    def _box(self, tag: _Element | None, ns: dict[str, str]) -> GeoLocationBox | None:
        if tag is None:
            return None
        if len(tag):
            values = [
                self.text_of_optional_subtag(tag, f"dc:{name}", ns)
                for name in (
                    "westBoundLongitude",
                    "eastBoundLongitude",
                    "southBoundLatitude",
                    "northBoundLatitude",
                )
            ]
            if None in values:
                return None
            west, east, south, north = values
        else:
            # Kernel 3: "south west north east"
            parts = (self.text_of(tag) or "").split()
            if len(parts) != 4:
                return None
            south, west, north, east = parts
        return GeoLocationBox(west=west, east=east, south=south, north=north)

    def _geo_location(self, tag: _Element, ns: dict[str, str]) -> GeoLocationData:
        return GeoLocationData(
            place=self.text_of_optional_subtag(tag, "dc:geoLocationPlace", ns),
            point=self._point(self._xpath1(tag, "dc:geoLocationPoint", ns), ns),
            box=self._box(self._xpath1(tag, "dc:geoLocationBox", ns), ns),
        )
