from fileapi.services.filesystem.interface import FileSystemInterface


class MemoryFileSystem(FileSystemInterface):
    """Dict-backed blob store for unit tests."""

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self._files: dict[str, bytes] = dict(files or {})

    def list(self, prefix: str = "") -> list[str]:
        return sorted(name for name in self._files if name.startswith(prefix))

    def exists(self, path: str) -> bool:
        return path in self._files

    def read(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError:
            raise FileNotFoundError(f"File not found: {path}") from None

    def write(self, path: str, data: bytes) -> None:
        self._files[path] = bytes(data)

    def delete(self, path: str) -> bool:
        return self._files.pop(path, None) is not None

    def health_check(self) -> bool:
        return True
