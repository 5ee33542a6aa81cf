"""Schema-kernel revisions, what each of them can express, and validation.

Every known revision is described by one SchemaVersion. Writers never
branch on the revision itself; they ask its Capabilities whether a field
can be written.
"""

from __future__ import annotations

import logging
import re
from importlib.resources import as_file
from pathlib import Path
from typing import Literal, Protocol

from frozendict import frozendict
from lxml import etree

from crosswalk.core.exceptions import (
    SchemaDefinitionNotFound,
    UnresolvedSchemaVersion,
)
from crosswalk.data_layer.base.frozen import BaseFrozenData
from crosswalk.service.logging.configuration import LogLevel
from crosswalk.util.log import LoggerMixin, log_elapsed_time, pluralize
from crosswalk.util.resources import schema_definition

KERNEL_NAMESPACE_PREFIX = "http://datacite.org/schema/kernel-"
SCHEMA_LOCATION_PREFIX = "http://schema.datacite.org/meta/kernel-"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

_KERNEL_SUFFIX = re.compile(r"kernel-([\d.]+)/?$")

log = logging.getLogger(__name__)


class Capabilities(BaseFrozenData):
    """The optional parts of the canonical record a revision can express."""

    structured_names: bool = False
    name_type: bool = False
    rights_list: bool = False
    lang: bool = False
    subject_uris: bool = False
    related_metadata: bool = False
    related_resource_type_general: bool = False
    date_information: bool = False
    geo_locations: Literal["string", "structured"] | None = None
    funding_references: bool = False


class SchemaVersion(BaseFrozenData):
    revision: str
    capabilities: Capabilities

    @property
    def namespace(self) -> str:
        return f"{KERNEL_NAMESPACE_PREFIX}{self.revision}"

    @property
    def schema_location(self) -> str:
        return f"{self.namespace} {SCHEMA_LOCATION_PREFIX}{self.revision}/metadata.xsd"


_KERNEL_2 = Capabilities()

KNOWN_SCHEMA_VERSIONS: frozendict[str, SchemaVersion] = frozendict(
    {
        "2.1": SchemaVersion(revision="2.1", capabilities=_KERNEL_2),
        "2.2": SchemaVersion(revision="2.2", capabilities=_KERNEL_2),
        "3": SchemaVersion(
            revision="3",
            capabilities=Capabilities(
                rights_list=True,
                lang=True,
                subject_uris=True,
                related_metadata=True,
                geo_locations="string",
            ),
        ),
        "4": SchemaVersion(
            revision="4",
            capabilities=Capabilities(
                structured_names=True,
                name_type=True,
                rights_list=True,
                lang=True,
                subject_uris=True,
                related_metadata=True,
                related_resource_type_general=True,
                date_information=True,
                geo_locations="structured",
                funding_references=True,
            ),
        ),
    }
)

# Minor releases share the namespace and element set of their major revision.
REVISION_ALIASES: frozendict[str, str] = frozendict(
    {
        "3.0": "3",
        "3.1": "3",
        "4.0": "4",
        "4.1": "4",
        "4.2": "4",
        "4.3": "4",
    }
)

LATEST_REVISION = "4"
LATEST_SCHEMA_VERSION = KNOWN_SCHEMA_VERSIONS[LATEST_REVISION]


def revision_of(version: str | None) -> str | None:
    """Find the known revision for a namespace URI or a bare revision string.

    'http://datacite.org/schema/kernel-4.1', 'kernel-4.1' and '4.1' all
    yield '4'. Returns None if the revision is not known.
    """
    if not version:
        return None
    version = version.strip()
    match = _KERNEL_SUFFIX.search(version)
    revision = match.group(1) if match else version
    revision = REVISION_ALIASES.get(revision, revision)
    return revision if revision in KNOWN_SCHEMA_VERSIONS else None


def resolve_schema_version(version: str | None) -> SchemaVersion:
    """Look up a schema version. None means the latest.

    :raise UnresolvedSchemaVersion: If the version is not a known revision.
    """
    if version is None:
        return LATEST_SCHEMA_VERSION
    revision = revision_of(version)
    if revision is None:
        raise UnresolvedSchemaVersion(
            version, fallback=LATEST_SCHEMA_VERSION.namespace
        )
    return KNOWN_SCHEMA_VERSIONS[revision]


def schema_version_or_latest(version: str | None) -> SchemaVersion:
    """Look up a schema version, falling back to the latest one.

    The fallback is logged. Callers can detect it by comparing the
    namespace of the result with what they asked for.
    """
    try:
        return resolve_schema_version(version)
    except UnresolvedSchemaVersion as e:
        log.warning("%s. Falling back to %s.", e.message, e.fallback)
        return LATEST_SCHEMA_VERSION


class SchemaDefinitionLoader(Protocol):
    def load(self, revision: str) -> etree.XMLSchema:
        """Return the parsed schema definition for a known revision.

        :raise SchemaDefinitionNotFound: If no definition is available.
        :raise etree.LxmlError: If the definition is not a valid schema.
        """
        ...


class PackageSchemaLoader(LoggerMixin):
    """Load schema definitions shipped with this package.

    Definitions live in ``kernel-<revision>/metadata.xsd``, either inside the
    package's resources or under ``schema_directory`` if one is given. Each
    definition is parsed at most once per loader.
    """

    def __init__(self, schema_directory: Path | None = None) -> None:
        self.schema_directory = schema_directory
        self._schemas: dict[str, etree.XMLSchema] = {}

    @log_elapsed_time(
        log_level=LogLevel.debug,
        message_prefix="Parsing schema definition",
        skip_start=True,
    )
    def _parse(self, path: Path) -> etree.XMLSchema:
        # Parse from a real path so relative imports inside the
        # definition resolve next to it.
        if not path.is_file():
            raise SchemaDefinitionNotFound(f"No schema definition at {path}")
        return etree.XMLSchema(etree.parse(str(path)))

    def load(self, revision: str) -> etree.XMLSchema:
        if revision in self._schemas:
            return self._schemas[revision]

        name = f"kernel-{revision}"
        if self.schema_directory is not None:
            schema = self._parse(self.schema_directory / name / "metadata.xsd")
        else:
            with as_file(schema_definition(revision)) as path:
                schema = self._parse(path)
        self.log.debug("Loaded schema definition for %s", name)
        self._schemas[revision] = schema
        return schema


class SchemaValidator(LoggerMixin):
    """Validate documents against the definition for their schema version.

    Validation failures are returned as data, never raised.
    """

    def __init__(self, loader: SchemaDefinitionLoader | None = None) -> None:
        self.loader = loader or PackageSchemaLoader()

    @staticmethod
    def format_error(error: etree._LogEntry) -> str:
        return f"{error.line}:{error.column}: {error.level_name}: {error.message}"

    def validate(
        self, document: str | bytes, schema_version: SchemaVersion | str | None
    ) -> list[str]:
        """Validate a document.

        :return: The validation errors, in document order. An empty list
            means the document is valid.
        """
        if not isinstance(schema_version, SchemaVersion):
            schema_version = schema_version_or_latest(schema_version)

        try:
            schema = self.loader.load(schema_version.revision)
        except SchemaDefinitionNotFound as e:
            return [str(e)]
        except etree.LxmlError as e:
            return [
                f"Schema definition for kernel-{schema_version.revision} "
                f"could not be parsed: {e}"
            ]

        if isinstance(document, str):
            document = document.encode("utf-8")
        try:
            root = etree.fromstring(document)
        except etree.XMLSyntaxError as e:
            return [f"Document is not well-formed: {e}"]

        if schema.validate(root):
            return []
        errors = [self.format_error(error) for error in schema.error_log]
        self.log.debug(
            "Document failed validation against kernel-%s with %s",
            schema_version.revision,
            pluralize(len(errors), "error"),
        )
        return errors
