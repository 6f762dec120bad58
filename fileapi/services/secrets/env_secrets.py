from __future__ import annotations

import os
from collections.abc import Mapping

from fileapi.services.secrets.interface import SecretsInterface


class EnvSecrets(SecretsInterface):
    """Settings taken from the process environment.

    ``overrides`` (from ``--env`` / ``--env-file``) shadow the real environment.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = {**os.environ, **(overrides or {})}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def get_or_default(self, key: str, default: str) -> str:
        value = self._values.get(key)
        return default if value is None else value

    def require(self, key: str) -> str:
        if key not in self._values:
            raise KeyError(f"Required setting '{key}' is not set")
        return self._values[key]
