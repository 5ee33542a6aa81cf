from __future__ import annotations

from collections.abc import Callable

from frozendict import frozendict

from crosswalk.core.exceptions import CrosswalkValueError
from crosswalk.writer.base import TargetFormat, Writer
from crosswalk.writer.bibtex import BibtexWriter
from crosswalk.writer.crosscite import CrossciteJsonWriter
from crosswalk.writer.datacite import DataciteXmlWriter
from crosswalk.writer.schema import SchemaValidator

WRITERS: frozendict[TargetFormat, Callable[[SchemaValidator | None], Writer]] = (
    frozendict(
        {
            TargetFormat.DATACITE_XML: lambda validator: DataciteXmlWriter(
                validator=validator
            ),
            TargetFormat.CROSSCITE_JSON: lambda validator: CrossciteJsonWriter(),
            TargetFormat.BIBTEX: lambda validator: BibtexWriter(),
        }
    )
)


def writer_for(
    target_format: TargetFormat | str, validator: SchemaValidator | None = None
) -> Writer:
    """Get a writer for a target format.

    :param validator: The schema validator for formats that have a schema.
    :raise CrosswalkValueError: If there is no writer for the format.
    """
    try:
        factory = WRITERS[TargetFormat(target_format)]
    except ValueError as e:
        raise CrosswalkValueError(f"No writer for format {target_format!r}") from e
    return factory(validator)
