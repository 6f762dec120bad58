from __future__ import annotations

from fileapi.services.logger.interface import LoggingInterface
from fileapi.services.logger.memory_logger import MemoryLogger
from fileapi.services.logger.pretty_logger import PrettyLogger


class LoggerFactory:
    """Creates one logger per implementation name and hands out the cached instance."""

    _registry: dict[str, type[LoggingInterface]] = {
        "pretty": PrettyLogger,
        "memory": MemoryLogger,
    }

    def __init__(self, default_impl: str = "pretty") -> None:
        self._check(default_impl)
        self._default_impl = default_impl
        self._instances: dict[str, LoggingInterface] = {}

    @classmethod
    def _check(cls, name: str) -> None:
        if name not in cls._registry:
            raise ValueError(
                f"Unknown logger implementation: '{name}' "
                f"(available: {', '.join(cls._registry)})"
            )

    def create(self, impl_name: str | None = None) -> LoggingInterface:
        name = impl_name or self._default_impl
        if name not in self._instances:
            self._check(name)
            self._instances[name] = self._registry[name]()
        return self._instances[name]
