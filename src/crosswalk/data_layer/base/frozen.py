from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseFrozenData(BaseModel):
    """Base for the entries of a record: titles, people, dates and so on.

    Entries are values. Changing one means building a new one, usually with
    ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)
