from abc import ABC, abstractmethod


# Longest name most filesystems and object stores accept for one entry
MAX_NAME_BYTES = 255

# Stores may keep in-flight writes under this prefix; callers cannot use it
RESERVED_PREFIX = ".tmp-"


def is_flat_name(name: str) -> bool:
    """True if *name* addresses a single entry of the flat store namespace."""
    if not name or name in (".", ".."):
        return False
    if name.startswith(RESERVED_PREFIX) or len(name.encode("utf-8", errors="replace")) > MAX_NAME_BYTES:
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name


def has_extension(name: str, extension: str) -> bool:
    """Case-sensitive comparison of the text after the last dot of *name*."""
    _, dot, ext = name.rpartition(".")
    return bool(dot) and ext == extension


class FileSystemInterface(ABC):
    """Blob store keyed by filename. The namespace is flat: no directories."""

    @abstractmethod
    def list(self, prefix: str = "") -> list[str]:
        """Return the filenames starting with *prefix*, in enumeration order."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool: ...

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Return the stored bytes. Raises FileNotFoundError if missing."""
        ...

    @abstractmethod
    def write(self, path: str, data: bytes) -> None:
        """Create or overwrite *path* with *data*."""
        ...

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove *path*. Returns False if there was nothing to remove."""
        ...

    @abstractmethod
    def health_check(self) -> bool: ...
