from __future__ import annotations

from typing import Self

from pydantic import model_validator

from crosswalk.data_layer.base.frozen import BaseFrozenData
from crosswalk.util.identifier import normalize_id


class RightsData(BaseFrozenData):
    name: str | None = None
    uri: str | None = None
    lang: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: object) -> object:
        # A bare rights statement may itself be a license URL, so try to
        # derive an identifier from it.
        if isinstance(data, str):
            return {"name": data, "uri": normalize_id(data)}
        return data

    @model_validator(mode="after")
    def _name_or_uri(self) -> Self:
        if not self.name and not self.uri:
            raise ValueError("Either 'name' or 'uri' is required")
        return self
