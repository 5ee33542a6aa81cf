from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from crosswalk.util.log import LoggerMixin


class BaseMutableData(BaseModel, LoggerMixin):
    model_config = ConfigDict(
        frozen=False,
        # We set validate_assignment to True so that direct edits of a record
        # ("change title", "change state") are validated the same way the
        # readers' output is. Every assignment pays for a validation pass.
        validate_assignment=True,
        extra="forbid",
    )
