"""Observability helpers for instrumenting service operations."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from site_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")
_SCALARS = (str, int, float, bool, type(None))


def _preview_kwargs(kwargs: Dict[str, Any], max_keys: int = 6) -> Dict[str, Any]:
    """First few keyword arguments; models and collections are shown by type name."""

    preview = {
        key: value if isinstance(value, _SCALARS) else type(value).__name__
        for key, value in list(kwargs.items())[:max_keys]
    }
    if len(kwargs) > max_keys:
        preview["truncated"] = True
    return redact_for_log(preview)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _validated_kwargs(
    operation: str, input_model: type[BaseModel], kwargs: Dict[str, Any], correlation_id: str
) -> Dict[str, Any]:
    try:
        return input_model.model_validate(kwargs).model_dump()
    except ValidationError as exc:
        log_event(
            LOGGER,
            logging.WARNING,
            "operation_validation_failed",
            operation=operation,
            correlation_id=correlation_id,
            errors=exc.errors(include_url=False),
        )
        raise


def instrument_operation(
    operation: str,
    input_model: type[BaseModel] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, completion or failure of ``operation`` with its duration.

    When ``input_model`` is given, keyword arguments are validated (and
    coerced) through it before the call; a :class:`ValidationError` is logged
    and re-raised.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            if input_model is not None:
                kwargs = _validated_kwargs(operation, input_model, kwargs, correlation_id)

            log_event(
                LOGGER,
                logging.INFO,
                "operation_started",
                operation=operation,
                correlation_id=correlation_id,
                kwargs=_preview_kwargs(kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "operation_failed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "operation_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_operation"]
