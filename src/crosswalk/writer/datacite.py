from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lxml import builder, etree

from crosswalk.core import vocabulary
from crosswalk.data_layer.bibliographic import BibliographicData
from crosswalk.data_layer.contributor import PersonData
from crosswalk.data_layer.description import SERIES_INFORMATION
from crosswalk.data_layer.geo_location import GeoLocationData
from crosswalk.util.identifier import normalize_orcid
from crosswalk.util.log import LoggerType, pluralize
from crosswalk.util.personal_names import name_type_attribute
from crosswalk.util.xmlparser import XML_LANG
from crosswalk.writer.base import TargetFormat, Writer, WriteResult
from crosswalk.writer.schema import (
    XSI_NS,
    SchemaValidator,
    SchemaVersion,
    schema_version_or_latest,
)

if TYPE_CHECKING:
    from lxml.etree import _Element

ORCID_SCHEME_URI = "https://orcid.org"
DEFAULT_CONTRIBUTOR_TYPE = "Other"
DEFAULT_DATE_TYPE = "Issued"
DEFAULT_DESCRIPTION_TYPE = "Abstract"


def _attributes(**kwargs: str | None) -> dict[str, str]:
    return {k: v for k, v in kwargs.items() if v is not None}


class ResourceBuilder:
    """Build the resource element for one record and one schema version.

    Children are emitted in a fixed order. Anything the schema version
    cannot express is left out and logged.
    """

    def __init__(
        self, record: BibliographicData, version: SchemaVersion, log: LoggerType
    ) -> None:
        self.record = record
        self.version = version
        self.capabilities = version.capabilities
        self.log = log
        self.E = builder.ElementMaker(
            namespace=version.namespace,
            nsmap={None: version.namespace, "xsi": XSI_NS},
        )

    def build(self) -> _Element:
        children = [
            self.identifier(),
            self.creators(),
            self.titles(),
            self.publisher(),
            self.publication_year(),
            self.resource_type(),
            self.alternate_identifiers(),
            self.subjects(),
            self.contributors(),
            self.funding_references(),
            self.dates(),
            self.language(),
            self.related_identifiers(),
            self.sizes(),
            self.formats(),
            self.version_(),
            self.rights(),
            self.descriptions(),
            self.geo_locations(),
        ]
        resource = self.E.resource(*[c for c in children if c is not None])
        resource.set(f"{{{XSI_NS}}}schemaLocation", self.version.schema_location)
        return resource

    def _dropped(self, field: str, count: int = 1) -> None:
        if count:
            self.log.debug(
                "kernel-%s cannot express %s; dropped %d value(s)",
                self.version.revision,
                field,
                count,
            )

    def _lang(self, lang: str | None) -> str | None:
        if lang is None:
            return None
        if not self.capabilities.lang:
            self._dropped("xml:lang")
            return None
        return lang

    def _element(
        self,
        tag: str,
        text: str | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> _Element:
        element = self.E(tag, {k: v for k, v in (attributes or {}).items() if v})
        if text is not None:
            element.text = text
        return element

    def _container(self, tag: str, children: list[_Element]) -> _Element | None:
        if not children:
            return None
        return self.E(tag, *children)

    def identifier(self) -> _Element | None:
        doi = self.record.doi
        if doi is None:
            if self.record.identifier:
                self._dropped("non-DOI identifier")
            return None
        raw = self.record.raw_identifier
        # A bare DOI keeps the spelling it was read with.
        text = raw if raw and raw.lower() == doi else doi.upper()
        return self._element("identifier", text, {"identifierType": "DOI"})

    def _person(self, prefix: str, person: PersonData) -> list[_Element]:
        name_type = None
        if person.type is not None:
            if self.capabilities.name_type:
                name_type = name_type_attribute(person.type)
            else:
                self._dropped("nameType")
        elements = [
            self._element(f"{prefix}Name", person.name, {"nameType": name_type})
        ]

        if self.capabilities.structured_names:
            if person.given_name:
                elements.append(self._element("givenName", person.given_name))
            if person.family_name:
                elements.append(self._element("familyName", person.family_name))

        if person.identifier:
            orcid = normalize_orcid(person.identifier)
            if orcid:
                attributes = {
                    "nameIdentifierScheme": "ORCID",
                    "schemeURI": ORCID_SCHEME_URI,
                }
            else:
                attributes = {
                    "nameIdentifierScheme": person.identifier_scheme or "URL"
                }
            elements.append(
                self._element("nameIdentifier", orcid or person.identifier, attributes)
            )
        return elements

    def creators(self) -> _Element | None:
        return self._container(
            "creators",
            [
                self.E.creator(*self._person("creator", creator))
                for creator in self.record.creators
            ],
        )

    def contributors(self) -> _Element | None:
        return self._container(
            "contributors",
            [
                self.E.contributor(
                    {
                        "contributorType": contributor.contributor_type
                        or DEFAULT_CONTRIBUTOR_TYPE
                    },
                    *self._person("contributor", contributor),
                )
                for contributor in self.record.contributors
            ],
        )

    def titles(self) -> _Element | None:
        return self._container(
            "titles",
            [
                self._element(
                    "title",
                    title.text,
                    {"titleType": title.title_type, XML_LANG: self._lang(title.lang)},
                )
                for title in self.record.titles
            ],
        )

    def publisher(self) -> _Element | None:
        publisher = self.record.publisher
        if publisher is None and self.record.periodical is not None:
            publisher = self.record.periodical.title
        if publisher is None:
            return None
        return self._element("publisher", publisher)

    def publication_year(self) -> _Element | None:
        if self.record.publication_year is None:
            return None
        return self._element("publicationYear", self.record.publication_year)

    def resource_type(self) -> _Element | None:
        types = self.record.types
        if types.resource_type_general:
            text = types.resource_type
        else:
            text = types.resource_type or types.type
        if text is None and types.resource_type_general is None:
            return None
        resource_type_general = (
            types.resource_type_general
            or vocabulary.resource_type_general_for(types.type)
        )
        return self._element(
            "resourceType", text, {"resourceTypeGeneral": resource_type_general}
        )

    def alternate_identifiers(self) -> _Element | None:
        return self._container(
            "alternateIdentifiers",
            [
                self._element(
                    "alternateIdentifier",
                    identifier.value,
                    {"alternateIdentifierType": identifier.type},
                )
                for identifier in self.record.alternate_identifiers
            ],
        )

    def subjects(self) -> _Element | None:
        elements = []
        for subject in self.record.subjects:
            attributes = {
                "subjectScheme": subject.scheme,
                XML_LANG: self._lang(subject.lang),
            }
            if self.capabilities.subject_uris:
                attributes.update(
                    schemeURI=subject.scheme_uri, valueURI=subject.value_uri
                )
            elif subject.scheme_uri or subject.value_uri:
                self._dropped("subject schemeURI/valueURI")
            elements.append(self._element("subject", subject.text, attributes))
        return self._container("subjects", elements)

    def funding_references(self) -> _Element | None:
        references = self.record.funding_references
        if not self.capabilities.funding_references:
            self._dropped("fundingReferences", len(references))
            return None

        elements = []
        for reference in references:
            children = []
            if reference.funder_name:
                children.append(self._element("funderName", reference.funder_name))
            if reference.funder_identifier:
                children.append(
                    self._element(
                        "funderIdentifier",
                        reference.funder_identifier,
                        {"funderIdentifierType": reference.funder_identifier_type},
                    )
                )
            if reference.award_number or reference.award_uri:
                children.append(
                    self._element(
                        "awardNumber",
                        reference.award_number or "",
                        {"awardURI": reference.award_uri},
                    )
                )
            if reference.award_title:
                children.append(self._element("awardTitle", reference.award_title))
            elements.append(self.E.fundingReference(*children))
        return self._container("fundingReferences", elements)

    def dates(self) -> _Element | None:
        elements = []
        for date in self.record.dates:
            attributes = {"dateType": date.date_type or DEFAULT_DATE_TYPE}
            if self.capabilities.date_information:
                attributes["dateInformation"] = date.date_information
            elif date.date_information:
                self._dropped("dateInformation")
            elements.append(self._element("date", date.date, attributes))
        return self._container("dates", elements)

    def language(self) -> _Element | None:
        if self.record.language is None:
            return None
        return self._element("language", self.record.language)

    def related_identifiers(self) -> _Element | None:
        elements = []
        for related in self.record.related_identifiers:
            attributes = {
                "relatedIdentifierType": related.type,
                "relationType": related.relation_type,
            }
            if self.capabilities.related_resource_type_general:
                attributes["resourceTypeGeneral"] = related.resource_type_general
            elif related.resource_type_general:
                self._dropped("relatedIdentifier resourceTypeGeneral")
            # Only metadata relations may describe the related schema.
            if related.describes_metadata and self.capabilities.related_metadata:
                attributes.update(
                    relatedMetadataScheme=related.related_metadata_scheme,
                    schemeURI=related.scheme_uri,
                    schemeType=related.scheme_type,
                )
            elements.append(
                self._element("relatedIdentifier", related.value, attributes)
            )
        return self._container("relatedIdentifiers", elements)

    def sizes(self) -> _Element | None:
        return self._container(
            "sizes", [self._element("size", size) for size in self.record.sizes]
        )

    def formats(self) -> _Element | None:
        return self._container(
            "formats",
            [self._element("format", media_type) for media_type in self.record.formats],
        )

    def version_(self) -> _Element | None:
        if self.record.version is None:
            return None
        return self._element("version", self.record.version)

    def rights(self) -> _Element | None:
        rights_list = self.record.rights_list
        if not rights_list:
            return None

        if not self.capabilities.rights_list:
            # Older kernels have a single free-text rights element.
            first = rights_list[0]
            self._dropped("rights beyond the first", len(rights_list) - 1)
            return self._element("rights", first.name or first.uri)

        return self.E.rightsList(
            *[
                self._element(
                    "rights",
                    rights.name,
                    {"rightsURI": rights.uri, XML_LANG: self._lang(rights.lang)},
                )
                for rights in rights_list
            ]
        )

    def descriptions(self) -> _Element | None:
        elements = []
        periodical = self.record.periodical
        if periodical is not None and not any(
            description.type == SERIES_INFORMATION
            and description.text == periodical.title
            for description in self.record.descriptions
        ):
            elements.append(
                self._element(
                    "description",
                    periodical.title,
                    {"descriptionType": SERIES_INFORMATION},
                )
            )

        for description in self.record.descriptions:
            elements.append(
                self._element(
                    "description",
                    description.text,
                    {
                        "descriptionType": description.type
                        or DEFAULT_DESCRIPTION_TYPE,
                        XML_LANG: self._lang(description.lang),
                    },
                )
            )
        return self._container("descriptions", elements)

    def _geo_location(self, location: GeoLocationData) -> _Element:
        children = []
        if location.place:
            children.append(self._element("geoLocationPlace", location.place))
        structured = self.capabilities.geo_locations == "structured"
        point = location.point
        if point is not None:
            if structured:
                children.append(
                    self.E.geoLocationPoint(
                        self._element("pointLongitude", point.longitude),
                        self._element("pointLatitude", point.latitude),
                    )
                )
            else:
                children.append(
                    self._element(
                        "geoLocationPoint", f"{point.latitude} {point.longitude}"
                    )
                )
        box = location.box
        if box is not None:
            if structured:
                children.append(
                    self.E.geoLocationBox(
                        self._element("westBoundLongitude", box.west),
                        self._element("eastBoundLongitude", box.east),
                        self._element("southBoundLatitude", box.south),
                        self._element("northBoundLatitude", box.north),
                    )
                )
            else:
                children.append(
                    self._element(
                        "geoLocationBox",
                        f"{box.south} {box.west} {box.north} {box.east}",
                    )
                )
        return self.E.geoLocation(*children)

    def geo_locations(self) -> _Element | None:
        locations = self.record.geo_locations
        if self.capabilities.geo_locations is None:
            self._dropped("geoLocations", len(locations))
            return None
        return self._container(
            "geoLocations",
            [self._geo_location(location) for location in locations],
        )


class DataciteXmlWriter(Writer):
    """Write a record as a DataCite resource document and validate it."""

    target_format = TargetFormat.DATACITE_XML

    def __init__(
        self,
        validator: SchemaValidator | None = None,
        default_schema_version: str | None = None,
    ) -> None:
        self.validator = validator or SchemaValidator()
        self.default_schema_version = default_schema_version

    def build(self, record: BibliographicData, version: SchemaVersion) -> _Element:
        return ResourceBuilder(record, version, self.log).build()

    def serialize(
        self, record: BibliographicData, schema_version: str | None = None
    ) -> WriteResult:
        """Serialize a record for a schema version.

        The version used is, in order of preference, ``schema_version``, the
        version the record was read from, and this writer's default. An
        unrecognized version falls back to the latest one, which is what
        the result's ``schema_version`` then reports.
        """
        requested = (
            schema_version or record.schema_version or self.default_schema_version
        )
        version = schema_version_or_latest(requested)
        root = self.build(record, version)
        document = etree.tostring(
            root, encoding="UTF-8", xml_declaration=True, pretty_print=True
        ).decode("utf-8")
        errors = self.validator.validate(document, version)
        if errors:
            self.log.info(
                "%s is not valid for kernel-%s (%s)",
                record.identifier or "Record",
                version.revision,
                pluralize(len(errors), "error"),
            )
        return WriteResult(
            document=document, errors=errors, schema_version=version.namespace
        )
