from __future__ import annotations

from typing import Literal, Self

from pydantic import model_validator

from crosswalk.data_layer.base.frozen import BaseFrozenData
from crosswalk.util.identifier import normalize_orcid
from crosswalk.util.personal_names import (
    ORGANIZATION,
    PERSON,
    clean_name,
    display_name,
)


class PersonData(BaseFrozenData):
    """A creator or contributor, in citation order.

    If ``family_name`` is present, ``name`` is always its display form
    ('Family, Given'). An entry with no structured parts only has ``name``
    and no ``type``, unless it is an organization.
    """

    name: str
    type: Literal["Person", "Organization"] | None = None
    given_name: str | None = None
    family_name: str | None = None
    identifier: str | None = None
    identifier_scheme: str | None = None
    contributor_type: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _loose_shapes(cls, data: object) -> object:
        if isinstance(data, str):
            return {"name": data}
        # Allow construction from parts alone; the after-validator then
        # rewrites name into its canonical form.
        if (
            isinstance(data, dict)
            and not data.get("name")
            and data.get("family_name")
        ):
            data = {**data, "name": data["family_name"]}
        return data

    @model_validator(mode="after")
    def _display_name_matches_parts(self) -> Self:
        # We update self.__dict__ directly here because the class
        # is "frozen" by the time the validator runs.
        if self.family_name:
            self.__dict__["name"] = display_name(self.family_name, self.given_name)
            if self.type is None:
                self.__dict__["type"] = PERSON
        return self

    @classmethod
    def resolve(
        cls,
        *,
        name: str | None = None,
        given_name: str | None = None,
        family_name: str | None = None,
        name_type: str | None = None,
        identifier: str | None = None,
        identifier_scheme: str | None = None,
        contributor_type: str | None = None,
    ) -> Self | None:
        """Build an entry from whatever name information a source had.

        :return: None if there is no usable name at all.
        """
        name = clean_name(name)
        given_name = clean_name(given_name)
        family_name = clean_name(family_name)
        if identifier_scheme and identifier_scheme.upper() == "ORCID":
            identifier = normalize_orcid(identifier) or identifier

        common = dict(
            identifier=identifier,
            identifier_scheme=identifier_scheme if identifier else None,
            contributor_type=contributor_type,
        )

        if name_type == ORGANIZATION:
            name = name or family_name
            if not name:
                return None
            return cls(name=name, type=ORGANIZATION, **common)

        if family_name:
            return cls(
                name=display_name(family_name, given_name),
                type=PERSON,
                given_name=given_name,
                family_name=family_name,
                **common,
            )

        name = name or given_name
        if not name:
            return None
        return cls(name=name, **common)

    @property
    def is_organization(self) -> bool:
        return self.type == ORGANIZATION
