from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

_NO_CONTENT: Any = object()


@dataclass(frozen=True)
class Envelope:
    """Uniform response body: always ``message``, ``content`` only when set."""

    message: str
    content: Any = field(default=_NO_CONTENT)

    @property
    def has_content(self) -> bool:
        return self.content is not _NO_CONTENT

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.has_content:
            body["content"] = self.content
        return body
