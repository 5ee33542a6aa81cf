from __future__ import annotations

from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails
from pydantic_settings import BaseSettings, SettingsConfigDict

from crosswalk.core.exceptions import CannotLoadConfiguration


class ServiceConfiguration(BaseSettings):
    """Settings read once from the environment, or from a ``.env`` file.

    Subclasses declare their settings as fields and set their own
    ``env_prefix``. A setting that fails validation is reported as a
    CannotLoadConfiguration naming the environment variable to fix.
    """

    model_config = SettingsConfigDict(
        env_prefix="CROSSWALK_",
        str_strip_whitespace=True,
        frozen=True,
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    def __init__(self, *args: Any, **kwargs: Any):
        try:
            super().__init__(*args, **kwargs)
        except ValidationError as e:
            message = "Error loading settings from environment:"
            for error in e.errors():
                location = self._environment_location(error)
                if location:
                    message += f"\n  {location}:  {error['msg']}"
                else:
                    message += f"\n  {error['msg']}"
            raise CannotLoadConfiguration(message) from e

    @classmethod
    def _environment_location(cls, error: ErrorDetails) -> str | None:
        """The environment variable (and nested path) an error refers to.

        Errors raised by model validators have no location.
        """
        if not error["loc"]:
            return None
        field, *nested = (str(part) for part in error["loc"])
        if field in cls.model_fields:
            variable = f"{cls.model_config.get('env_prefix')}{field}"
        else:
            # An alias, which is used as the variable name as-is.
            variable = field
        delimiter = cls.model_config.get("env_nested_delimiter") or "__"
        return delimiter.join(part.upper() for part in (variable, *nested))
