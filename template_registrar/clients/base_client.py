"""Base class for timed outbound service clients."""

from __future__ import annotations

import logging
import time
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

_TEXT_PREVIEW_LIMIT = 512


class BaseClient(Generic[T]):
    """Run outbound requests and log how long each one took."""

    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def _execute_timed(
        self,
        operation: Callable[[], T],
        *,
        name: Optional[str] = None,
    ) -> T:
        """Run ``operation`` and log its latency at DEBUG level."""
        label = name or getattr(operation, "__name__", "<anonymous>")

        started_at = time.perf_counter()
        try:
            return operation()
        finally:
            elapsed_ms = (time.perf_counter() - started_at) * 1000.0
            if self._logger.isEnabledFor(logging.DEBUG):
                self._logger.debug(
                    "Operation %s completed in %.2f ms",
                    label,
                    elapsed_ms,
                )


def preview_text(
    value: Optional[str], *, limit: int = _TEXT_PREVIEW_LIMIT
) -> str:
    """Shorten response bodies before they land in logs or error causes."""
    if not value:
        return "<empty>"
    if len(value) <= limit:
        return value
    return f"{value[:limit]}...<truncated>"
