"""Failures a resource operation reports to the caller.

Each carries the literal message for the response envelope and the HTTP
status it maps to. None of them are retried.
"""

from __future__ import annotations


class ResourceError(Exception):
    status: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ResourceError):
    """A required field is absent or empty."""

    status = 422


class Conflict(ResourceError):
    """The file already exists."""

    status = 409


class NotFound(ResourceError):
    status = 404


class UnsupportedContent(ResourceError):
    """The content fails the format check the operation requires."""

    status = 415
