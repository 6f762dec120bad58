import os
from typing import Any


class ModuleConfig:
    """Parsed module arguments (from module.json defaults and the command line).

    ``get_str`` and ``get_int`` are what modules read their settings with;
    a value of the wrong shape raises ValueError naming the argument.
    """

    def __init__(self, args: dict[str, Any]) -> None:
        self._args = args

    def get(self, key: str, default: Any = None) -> Any:
        return self._args.get(key, default)

    def get_str(self, key: str, default: str = "") -> str:
        value = self._args.get(key)
        if value is None:
            return default
        if not isinstance(value, str):
            raise ValueError(f"Module argument '--{key}' must be a string, got {value!r}")
        return value

    def get_int(self, key: str, default: int) -> int:
        value = self._args.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Module argument '--{key}' must be an integer, got {value!r}") from None

    def __contains__(self, key: str) -> bool:
        return key in self._args

    def __repr__(self) -> str:
        return f"ModuleConfig({self._args})"


class PlatformConfig:
    """Process environment merged with ``--env`` / ``--env-file`` overrides."""

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self._env = dict(os.environ)
        if overrides:
            self._env.update(overrides)

    def get(self, key: str, default: str = "") -> str:
        return self._env.get(key, default)

    @property
    def log_impl(self) -> str:
        """Logger used when no --log flag is given (``LOG_IMPL``, else pretty)."""
        return self._env.get("LOG_IMPL") or "pretty"
