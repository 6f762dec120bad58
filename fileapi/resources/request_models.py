"""Typed request bodies for the create and update operations.

Fields are ``None`` when the body lacks them or carries a non-string value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fileapi.resources.errors import ValidationError
from fileapi.services.filesystem.interface import is_flat_name

INVALID_PARAMS = "Parámetros inválidos"


def _str_field(body: Mapping[str, Any], name: str) -> str | None:
    value = body.get(name)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class CreateFileRequest:
    filename: str | None = None
    content: str | None = None

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> CreateFileRequest:
        return cls(filename=_str_field(body, "filename"), content=_str_field(body, "content"))

    def require(self) -> tuple[str, str]:
        """Return ``(filename, content)`` or raise ValidationError."""
        if not self.filename or not self.content or not is_flat_name(self.filename):
            raise ValidationError(INVALID_PARAMS)
        return self.filename, self.content


@dataclass(frozen=True)
class UpdateFileRequest:
    content: str | None = None

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> UpdateFileRequest:
        return cls(content=_str_field(body, "content"))

    def require(self) -> str:
        if not self.content:
            raise ValidationError(INVALID_PARAMS)
        return self.content
