"""Logger port for infrastructure logging."""

from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """Structured logging contract: a message plus keyword context."""

    @abstractmethod
    def debug(self, message: str, **context: Any) -> None: ...

    @abstractmethod
    def info(self, message: str, **context: Any) -> None: ...

    @abstractmethod
    def warning(self, message: str, **context: Any) -> None: ...

    @abstractmethod
    def error(self, message: str, **context: Any) -> None: ...

    @abstractmethod
    def exception(
        self, message: str, exc_info: BaseException | None = None, **context: Any
    ) -> None:
        """Log an error together with its traceback."""
        ...
