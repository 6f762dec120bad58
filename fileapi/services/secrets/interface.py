from abc import ABC, abstractmethod


class SecretsInterface(ABC):
    """Read-only access to deployment settings such as storage roots and credentials."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def get_or_default(self, key: str, default: str) -> str: ...

    @abstractmethod
    def require(self, key: str) -> str:
        """Return the value for *key*. Raises KeyError when it is not configured."""
        ...
