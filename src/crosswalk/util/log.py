import functools
import logging
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TypeVar

from typing_extensions import ParamSpec

from crosswalk.service.logging.configuration import LogLevel

if TYPE_CHECKING:
    LoggerType = logging.Logger | logging.LoggerAdapter[logging.Logger]
else:
    LoggerType = logging.Logger | logging.LoggerAdapter

P = ParamSpec("P")
T = TypeVar("T")


def _elapsed_message(prefix: str, outcome: str, tic: float) -> str:
    elapsed_time = time.perf_counter() - tic
    return f"{prefix}{outcome}. (elapsed time: {elapsed_time:0.4f} seconds)"


def log_elapsed_time(
    *,
    log_level: LogLevel,
    message_prefix: str | None = None,
    skip_start: bool = False,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator for logging how long a method takes.

    The decorated function must be a method of a LoggerMixin subclass; its
    first argument supplies the logger.

    :param log_level: The log level to use for the emitted log records.
    :param message_prefix: Optional string to be prepended to the emitted log records.
    :param skip_start: Boolean indicating whether to skip the starting message.
    """
    prefix = f"{message_prefix}: " if message_prefix else ""

    def outer(fn: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            if not args or not hasattr(args[0], "logger"):
                raise RuntimeError(
                    "Decorator must be applied to a method of a LoggerMixin subclass."
                )
            log_method = getattr(args[0].logger(), log_level.name)

            if not skip_start:
                log_method(f"{prefix}Starting...")
            tic = time.perf_counter()
            value = fn(*args, **kwargs)
            log_method(_elapsed_message(prefix, "Completed", tic))
            return value

        return wrapper

    return outer


@contextmanager
def elapsed_time_logging(
    *,
    log_method: Callable[[str], None],
    message_prefix: str | None = None,
    skip_start: bool = False,
) -> Generator[None, None, None]:
    """Context manager for logging how long a block takes.

    If the block raises, the completion message names the exception and the
    exception propagates.
    """
    prefix = f"{message_prefix}: " if message_prefix else ""
    if not skip_start:
        log_method(f"{prefix}Starting...")
    tic = time.perf_counter()
    outcome = "Completed"
    try:
        yield
    except Exception as e:
        outcome = f"Failed (raised {e.__class__.__name__})"
        raise
    finally:
        log_method(_elapsed_message(prefix, outcome, tic))


class LoggerMixin:
    """Mixin that adds a logger named after the module and class."""

    @classmethod
    @functools.cache
    def logger(cls) -> logging.Logger:
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @property
    def log(self) -> LoggerType:
        return self.logger()


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """'1 error', '2 errors'."""
    if plural is None:
        plural = singular + "s"
    return f"{count} {singular if count == 1 else plural}"
