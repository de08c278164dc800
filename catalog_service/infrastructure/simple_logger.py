"""LoggerPort implementation on top of the standard logging module."""

from __future__ import annotations

import logging
from typing import Any

from ..ports.logger import LoggerPort


class SimpleLogger(LoggerPort):
    """Logger that appends keyword context as ``key=value`` pairs.

    Context is rendered into the message, never passed as ``extra``.
    """

    def __init__(self, name: str = "catalog_service"):
        self._logger = logging.getLogger(name)

    @staticmethod
    def _render(message: str, context: dict[str, Any]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} | {pairs}"

    def debug(self, message: str, **context: Any) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(self._render(message, context))

    def info(self, message: str, **context: Any) -> None:
        self._logger.info(self._render(message, context))

    def warning(self, message: str, **context: Any) -> None:
        self._logger.warning(self._render(message, context))

    def error(self, message: str, **context: Any) -> None:
        self._logger.error(self._render(message, context))

    def exception(
        self, message: str, exc_info: BaseException | None = None, **context: Any
    ) -> None:
        self._logger.error(self._render(message, context), exc_info=exc_info or True)
