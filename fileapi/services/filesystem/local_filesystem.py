import os
import tempfile
from pathlib import Path

from fileapi.services.filesystem.interface import RESERVED_PREFIX, FileSystemInterface, is_flat_name
from fileapi.services.secrets.interface import SecretsInterface


class LocalFileSystem(FileSystemInterface):
    """Blob store backed by a single directory on local disk.

    Config (via secrets):
        FS_LOCAL_ROOT - directory holding the files (default: /tmp/fileapi)
    """

    def __init__(self, secrets: SecretsInterface) -> None:
        self._root = Path(secrets.get_or_default("FS_LOCAL_ROOT", "/tmp/fileapi"))

    def _resolve(self, path: str) -> Path:
        if not is_flat_name(path):
            raise ValueError(f"Not a flat filename: {path!r}")
        return self._root / path

    def list(self, prefix: str = "") -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(
            p.name for p in self._root.iterdir()
            if p.is_file() and p.name.startswith(prefix) and not p.name.startswith(RESERVED_PREFIX)
        )

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def read(self, path: str) -> bytes:
        full = self._resolve(path)
        if not full.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return full.read_bytes()

    def write(self, path: str, data: bytes) -> None:
        full = self._resolve(path)
        self._root.mkdir(parents=True, exist_ok=True)
        # Temp file + rename so readers never see a half-written body
        fd, tmp = tempfile.mkstemp(dir=self._root, prefix=RESERVED_PREFIX)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, full)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def delete(self, path: str) -> bool:
        full = self._resolve(path)
        try:
            full.unlink()
        except FileNotFoundError:
            return False
        return True

    def health_check(self) -> bool:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return os.access(self._root, os.W_OK)
