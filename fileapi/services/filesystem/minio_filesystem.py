"""MinIO (S3-compatible) blob store."""

from __future__ import annotations

import io

from fileapi.services.filesystem.interface import FileSystemInterface, is_flat_name
from fileapi.services.secrets.interface import SecretsInterface

_MISSING_CODES = {"NoSuchKey", "NoSuchObject"}


class MinioFileSystem(FileSystemInterface):
    """Blob store kept as top-level objects of one MinIO bucket.

    Config (via secrets):
        FS_MINIO_ENDPOINT   - host:port of the server (default: localhost:9000)
        FS_MINIO_ACCESS_KEY - access key (default: minioadmin)
        FS_MINIO_SECRET_KEY - secret key (default: minioadmin)
        FS_MINIO_BUCKET     - bucket name (default: fileapi)
        FS_MINIO_SECURE     - use HTTPS (default: false)
    """

    def __init__(self, secrets: SecretsInterface) -> None:
        from minio import Minio

        self._bucket = secrets.get_or_default("FS_MINIO_BUCKET", "fileapi")
        self._client = Minio(
            secrets.get_or_default("FS_MINIO_ENDPOINT", "localhost:9000"),
            access_key=secrets.get_or_default("FS_MINIO_ACCESS_KEY", "minioadmin"),
            secret_key=secrets.get_or_default("FS_MINIO_SECRET_KEY", "minioadmin"),
            secure=secrets.get_or_default("FS_MINIO_SECURE", "false").lower() == "true",
        )
        if not self._client.bucket_exists(self._bucket):
            self._client.make_bucket(self._bucket)

    def _key(self, path: str) -> str:
        if not is_flat_name(path):
            raise ValueError(f"Not a flat filename: {path!r}")
        return path

    def list(self, prefix: str = "") -> list[str]:
        # Non-recursive listing keeps the namespace flat
        objects = self._client.list_objects(self._bucket, prefix=prefix or None, recursive=False)
        return sorted(o.object_name for o in objects if o.object_name and not o.is_dir)

    def exists(self, path: str) -> bool:
        from minio.error import S3Error

        try:
            self._client.stat_object(self._bucket, self._key(path))
        except S3Error as exc:
            if exc.code in _MISSING_CODES:
                return False
            raise
        return True

    def read(self, path: str) -> bytes:
        from minio.error import S3Error

        try:
            response = self._client.get_object(self._bucket, self._key(path))
        except S3Error as exc:
            if exc.code in _MISSING_CODES:
                raise FileNotFoundError(f"File not found: {path}") from exc
            raise
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    def write(self, path: str, data: bytes) -> None:
        self._client.put_object(self._bucket, self._key(path), io.BytesIO(data), length=len(data))

    def delete(self, path: str) -> bool:
        if not self.exists(path):
            return False
        self._client.remove_object(self._bucket, self._key(path))
        return True

    def health_check(self) -> bool:
        from minio.error import MinioException

        try:
            return self._client.bucket_exists(self._bucket)
        except (MinioException, OSError):
            return False
