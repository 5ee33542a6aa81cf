from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import SettingsConfigDict

from crosswalk.service.configuration.service_configuration import (
    ServiceConfiguration,
)
from crosswalk.util.identifier import DoiNormalizer
from crosswalk.writer.schema import revision_of

LATEST_KERNEL_NAMESPACE = "http://datacite.org/schema/kernel-4"


class CrosswalkConfiguration(ServiceConfiguration):
    # Schema namespace used when neither the caller nor the record names one.
    default_schema_version: str = LATEST_KERNEL_NAMESPACE

    doi_resolver: str = "https://doi.org/"
    sandbox_doi_resolver: str = "https://handle.test.datacite.org/"

    # Directory holding kernel-*/metadata.xsd files. When unset, the schema
    # definitions shipped with the package are used.
    schema_directory: Path | None = None

    @field_validator("doi_resolver", "sandbox_doi_resolver")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        if not value.endswith("/"):
            value += "/"
        return value

    @field_validator("default_schema_version")
    @classmethod
    def _known_schema_version(cls, value: str) -> str:
        if revision_of(value) is None:
            raise ValueError(f"Unknown schema version: {value!r}")
        return value

    def doi_normalizer(self) -> DoiNormalizer:
        return DoiNormalizer(self.doi_resolver, self.sandbox_doi_resolver)

    model_config = SettingsConfigDict(env_prefix="CROSSWALK_")
