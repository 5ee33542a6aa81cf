from __future__ import annotations

from typing import Annotated

from pydantic import StringConstraints, model_validator

from crosswalk.data_layer.base.frozen import BaseFrozenData


class SubjectData(BaseFrozenData):
    text: Annotated[str, StringConstraints(strip_whitespace=True)]
    scheme: str | None = None
    scheme_uri: str | None = None
    value_uri: str | None = None
    lang: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: object) -> object:
        if isinstance(data, str):
            return {"text": data}
        return data
