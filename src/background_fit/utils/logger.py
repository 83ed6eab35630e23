from enum import Enum
from functools import wraps
import logging
from typing import Any, Callable

from loguru import logger
from returns.result import Failure, Result, Success


class FailureLevel(Enum):
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


def log_failure(failure_message: str, failure_level: FailureLevel, error: Any) -> None:
    logger.debug(f"{failure_message}: {type(error).__name__}: {error}")
    logger.log(failure_level.name, f"{failure_message}: {error}")


def _log_result(
    result: Result,
    failure_message: str,
    success_message: str | None,
    failure_level: FailureLevel,
) -> None:
    match result:
        case Success():
            if success_message:
                logger.info(success_message)
        case Failure(error):
            log_failure(failure_message, failure_level, error)


def log_railway_function(
    failure_message: str,
    success_message: str | None = None,
    failure_level: FailureLevel = FailureLevel.ERROR,
) -> Callable:
    """
    Log the outcome of a function returning a `returns` `Result` container.

    Successes are logged at INFO with `success_message` (when given), failures at
    `failure_level` with `failure_message` followed by the error.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            result = func(*args, **kwargs)
            if isinstance(result, Result):
                _log_result(result, failure_message, success_message, failure_level)
            return result

        return wrapper

    return decorator
