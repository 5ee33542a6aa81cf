from __future__ import annotations

import logging
from enum import StrEnum

from pydantic import field_validator
from pydantic_settings import SettingsConfigDict

from crosswalk.service.configuration.service_configuration import (
    ServiceConfiguration,
)


class LogLevel(StrEnum):
    """The log levels crosswalk uses.

    Values are the logging module's level names, so a member can be passed
    anywhere logging accepts a level.
    """

    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"

    @property
    def levelno(self) -> int:
        return logging.getLevelNamesMapping()[self.value]

    @classmethod
    def from_level(cls, level: int | str) -> LogLevel:
        """Look up a level by number, or by name in any case.

        :raise ValueError: If the level is not one of ours.
        """
        name = logging.getLevelName(level) if isinstance(level, int) else level
        try:
            return cls(str(name).upper())
        except ValueError:
            raise ValueError(f"'{level}' is not a valid LogLevel") from None


class LoggingConfiguration(ServiceConfiguration):
    level: LogLevel = LogLevel.info

    # Emit one JSON object per log record instead of plain text.
    json_format: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _any_case_level(cls, value: object) -> object:
        if isinstance(value, (int, str)) and not isinstance(value, LogLevel):
            return LogLevel.from_level(value)
        return value

    model_config = SettingsConfigDict(env_prefix="CROSSWALK_LOG_")
