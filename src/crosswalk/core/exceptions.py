from __future__ import annotations

from typing import Any


class BaseCrosswalkException(Exception):
    """Base class for all Exceptions in the crosswalk package."""

    def __init__(self, message: str | None = None):
        """Initializes a new instance of BaseCrosswalkException class

        :param message: String containing description of the exception that occurred
        """
        super().__init__(message)
        self.message = message

    def __getstate__(self) -> dict[str, Any]:
        return {"dict": self.__dict__, "args": self.args}

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        # state is always a dict from __getstate__, but the signature must
        # accept None to match BaseException.__setstate__
        assert state is not None
        self.__dict__.update(state["dict"])
        self.args = state["args"]

    def __reduce__(self) -> tuple[Any, ...]:
        state = self.__getstate__()
        return self.__class__.__new__, (self.__class__,), state


class CrosswalkValueError(BaseCrosswalkException, ValueError): ...


class CannotLoadConfiguration(BaseCrosswalkException):
    """The configuration could not be loaded from the environment."""


class ParseError(BaseCrosswalkException):
    """A source document could not be interpreted as the declared shape.

    This is fatal to a single conversion. No partially populated record is
    ever returned alongside it.
    """

    def __init__(
        self,
        message: str | None,
        diagnostic: str | None = None,
        source_kind: str | None = None,
    ) -> None:
        """Constructor.

        :param message: A short human-readable description of the failure.
        :param diagnostic: The underlying syntax diagnostic, usually the
            message of the exception raised by the XML, JSON or BibTeX parser.
        :param source_kind: The kind of source the reader was trying to parse.
        """
        super().__init__(message)
        self.diagnostic = diagnostic
        self.source_kind = source_kind

    def __str__(self) -> str:
        if self.diagnostic:
            return f"{self.message}: {self.diagnostic}"
        return str(self.message)


class UnresolvedSchemaVersion(BaseCrosswalkException):
    """A schema-version string did not match any known schema kernel.

    Writers catch this and fall back to the latest known revision, so it
    only escapes from strict lookups.
    """

    def __init__(self, requested: str | None, fallback: str | None = None) -> None:
        super().__init__(f"Unknown schema version: {requested!r}")
        self.requested = requested
        self.fallback = fallback


class SchemaDefinitionNotFound(BaseCrosswalkException):
    """No schema definition is available for a known schema revision."""
