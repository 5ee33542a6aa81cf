from __future__ import annotations

from pydantic import model_validator

from crosswalk.data_layer.base.frozen import BaseFrozenData

SERIES_INFORMATION = "SeriesInformation"


class DescriptionData(BaseFrozenData):
    text: str
    # The writer emits "Abstract" when this is unset.
    type: str | None = None
    lang: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: object) -> object:
        if isinstance(data, str):
            return {"text": data}
        return data


class PeriodicalData(BaseFrozenData):
    """The series or container a work was published in."""

    title: str
    type: str = "Periodical"
    id: str | None = None
