"""JSON file resource: list, create, read, update and destroy.

Only well-formed JSON may be written, and listing hides ``.json`` files
whose stored content is not well-formed.
"""

from __future__ import annotations

import posixpath

from fileapi.resources.envelope import Envelope
from fileapi.resources.errors import Conflict, NotFound, UnsupportedContent, ValidationError
from fileapi.resources.json_validation import is_valid_json, parse_json_content
from fileapi.resources.request_models import INVALID_PARAMS, CreateFileRequest, UpdateFileRequest
from fileapi.services.filesystem.interface import FileSystemInterface, has_extension, is_flat_name
from fileapi.services.logger.factory import LoggerFactory
from fileapi.services.logger.interface import LoggingInterface

MSG_OK = "Operación exitosa"
MSG_EXISTS = "El fichero ya existe"
MSG_NOT_JSON = "Contenido no es un JSON válido"
MSG_SAVED = "Fichero guardado exitosamente"
MSG_NOT_FOUND = "El fichero no existe"
MSG_UPDATED = "Fichero actualizado exitosamente"
MSG_DELETED = "Fichero eliminado exitosamente"
MSG_INVALID_ID = "Parámetro inválido"


class JsonResource:
    log: LoggingInterface

    def __init__(self, fs: FileSystemInterface, logger: LoggerFactory) -> None:
        self.fs = fs
        self.log = logger.create()

    def _existing(self, file_id: str) -> str:
        if not is_flat_name(file_id) or not self.fs.exists(file_id):
            raise NotFound(MSG_NOT_FOUND)
        return file_id

    def list(self) -> Envelope:
        valid: list[str] = []
        for name in self.fs.list():
            if not has_extension(name, "json"):
                continue
            try:
                data = self.fs.read(name)
            except FileNotFoundError:
                continue  # removed since listing
            if is_valid_json(data):
                valid.append(posixpath.basename(name))
            else:
                self.log.debug("Skipping malformed JSON file", resource="json", filename=name)
        return Envelope(MSG_OK, valid)

    def create(self, request: CreateFileRequest) -> Envelope:
        filename, content = request.require()
        if self.fs.exists(filename):
            raise Conflict(MSG_EXISTS)
        if not is_valid_json(content):
            raise UnsupportedContent(MSG_NOT_JSON)
        self.fs.write(filename, content.encode("utf-8"))
        self.log.info("File created", resource="json", filename=filename, size=len(content))
        return Envelope(MSG_SAVED)

    def read(self, file_id: str) -> Envelope:
        path = self._existing(file_id)
        try:
            value = parse_json_content(self.fs.read(path))
        except ValueError:
            # Written around the API; report it without content
            self.log.warn("Stored file is not valid JSON", resource="json", filename=path)
            value = None
        return Envelope(MSG_OK, value)

    def update(self, file_id: str, request: UpdateFileRequest) -> Envelope:
        if not file_id:
            raise ValidationError(INVALID_PARAMS)
        content = request.require()
        path = self._existing(file_id)
        if not is_valid_json(content):
            raise UnsupportedContent(MSG_NOT_JSON)
        self.fs.write(path, content.encode("utf-8"))
        self.log.info("File updated", resource="json", filename=path, size=len(content))
        return Envelope(MSG_UPDATED)

    def destroy(self, file_id: str) -> Envelope:
        if not file_id:
            raise ValidationError(MSG_INVALID_ID)
        path = self._existing(file_id)
        self.fs.delete(path)
        self.log.info("File deleted", resource="json", filename=path)
        return Envelope(MSG_DELETED)
