"""CSV file resource: list, create, read, update and destroy.

Files are stored verbatim. Reading converts the stored text into records
keyed by the header row (see ``parse_csv_records``).
"""

from __future__ import annotations

from fileapi.resources.csv_records import parse_csv_records
from fileapi.resources.envelope import Envelope
from fileapi.resources.errors import Conflict, NotFound, UnsupportedContent
from fileapi.resources.json_validation import is_valid_json
from fileapi.resources.request_models import CreateFileRequest, UpdateFileRequest
from fileapi.services.filesystem.interface import FileSystemInterface, has_extension, is_flat_name
from fileapi.services.logger.factory import LoggerFactory
from fileapi.services.logger.interface import LoggingInterface

MSG_LISTED = "Listado de ficheros"
MSG_EXISTS = "El fichero ya existe"
MSG_SAVED = "Guardado con éxito"
MSG_NOT_FOUND = "Fichero no encontrado"
MSG_READ = "Fichero leído con éxito"
MSG_INVALID_CONTENT = "Contenido no válido"
MSG_UPDATED = "Fichero actualizado exitosamente"
MSG_DELETED = "Fichero eliminado exitosamente"


class CsvResource:
    """Handlers for ``/csv``.

    ``read_prefix`` is prepended to the id by ``read`` and ``destroy`` only;
    ``create`` and ``update`` address the filename as given.
    """

    log: LoggingInterface

    def __init__(self, fs: FileSystemInterface, logger: LoggerFactory, read_prefix: str = "") -> None:
        self.fs = fs
        self.log = logger.create()
        self.read_prefix = read_prefix

    def _prefixed(self, file_id: str) -> str:
        path = f"{self.read_prefix}{file_id}"
        if not is_flat_name(file_id) or not is_flat_name(path) or not self.fs.exists(path):
            raise NotFound(MSG_NOT_FOUND)
        return path

    def list(self) -> Envelope:
        names = [name for name in self.fs.list() if has_extension(name, "csv")]
        return Envelope(MSG_LISTED, names)

    def create(self, request: CreateFileRequest) -> Envelope:
        filename, content = request.require()
        if self.fs.exists(filename):
            raise Conflict(MSG_EXISTS)
        self.fs.write(filename, content.encode("utf-8"))
        self.log.info("File created", resource="csv", filename=filename, size=len(content))
        return Envelope(MSG_SAVED)

    def read(self, file_id: str) -> Envelope:
        path = self._prefixed(file_id)
        records = parse_csv_records(self.fs.read(path))
        self.log.debug("File read", resource="csv", filename=path, records=len(records))
        return Envelope(MSG_READ, records)

    def update(self, file_id: str, request: UpdateFileRequest) -> Envelope:
        if not is_flat_name(file_id) or not self.fs.exists(file_id):
            raise NotFound(MSG_NOT_FOUND)
        content = request.require()
        # Update content is checked as JSON, not CSV
        if not is_valid_json(content):
            raise UnsupportedContent(MSG_INVALID_CONTENT)
        self.fs.write(file_id, content.encode("utf-8"))
        self.log.info("File updated", resource="csv", filename=file_id, size=len(content))
        return Envelope(MSG_UPDATED)

    def destroy(self, file_id: str) -> Envelope:
        path = self._prefixed(file_id)
        self.fs.delete(path)
        self.log.info("File deleted", resource="csv", filename=path)
        return Envelope(MSG_DELETED)
