from __future__ import annotations

import logging
import socket
import sys
from collections.abc import Mapping
from typing import Any

from crosswalk.service.logging.configuration import LoggingConfiguration
from crosswalk.util.json import json_serializer

ROOT_LOGGER_NAME = "crosswalk"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format each log record as one JSON object."""

    def __init__(self) -> None:
        super().__init__()
        self.hostname = socket.getfqdn()

    @staticmethod
    def _text(value: Any) -> Any:
        # Interpolating bytes into a str message would show their repr.
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def _message(self, record: logging.LogRecord) -> str:
        message = self._text(record.msg)
        if not record.args:
            return str(message)

        args: tuple[Any, ...] | dict[str, Any]
        if isinstance(record.args, Mapping):
            args = {self._text(k): self._text(v) for k, v in record.args.items()}
        else:
            args = tuple(self._text(arg) for arg in record.args)
        try:
            return str(message % args)
        except Exception as e:
            # A broken log call is reported in the log rather than raised
            # into the conversion that made it.
            return (
                f"Log message could not be formatted. Exception: {e!r}. "
                f"Original message: message={message!r} args={args!r}"
            )

    def format(self, record: logging.LogRecord) -> str:
        data = dict(
            host=self.hostname,
            name=record.name,
            level=record.levelname,
            filename=record.filename,
            message=self._message(record),
            timestamp=self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        )
        if record.exc_info:
            data["traceback"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack"] = self.formatStack(record.stack_info)
        return json_serializer(data)


def setup_logging(
    config: LoggingConfiguration | None = None,
    stream: Any = None,
) -> logging.Handler:
    """Install a single handler on the package logger.

    Calling this more than once replaces the handler installed by the
    previous call rather than adding another one.
    """
    config = config or LoggingConfiguration()
    handler = logging.StreamHandler(stream or sys.stderr)
    if config.json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, "_crosswalk_handler", False):
            logger.removeHandler(existing)
    handler._crosswalk_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(config.level.levelno)
    return handler
