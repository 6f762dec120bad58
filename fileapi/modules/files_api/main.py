"""Files API service.

Stores CSV and JSON files in the configured blob store and exposes them
over HTTP. Every response body is an envelope ``{"message": ...}`` with a
``"content"`` key on successful list and read calls.

Endpoints (``{prefix}`` from the module args, empty by default)::

    GET    {prefix}/csv            list CSV filenames
    POST   {prefix}/csv            create   body: filename, content
    GET    {prefix}/csv/{id}       read as header-keyed records
    PUT    {prefix}/csv/{id}       update   body: content (must be JSON)
    DELETE {prefix}/csv/{id}

    GET    {prefix}/json           list filenames holding valid JSON
    POST   {prefix}/json           create   body: filename, content
    GET    {prefix}/json/{id}      read as parsed JSON
    PUT    {prefix}/json/{id}      update   body: content
    DELETE {prefix}/json/{id}

    GET    /health

Request bodies may be JSON objects or form-encoded.
"""

from __future__ import annotations

import asyncio
import functools
import json
from collections.abc import Mapping
from typing import Any, Callable

from aiohttp import web

from fileapi.config.context import ModuleConfig
from fileapi.modules.base import Module
from fileapi.resources.csv_resource import CsvResource
from fileapi.resources.envelope import Envelope
from fileapi.resources.errors import ResourceError
from fileapi.resources.json_resource import JsonResource
from fileapi.resources.request_models import CreateFileRequest, UpdateFileRequest
from fileapi.services.filesystem.interface import FileSystemInterface
from fileapi.services.lifecycle.lifecycle_manager import LifecycleManager
from fileapi.services.logger.factory import LoggerFactory
from fileapi.services.logger.interface import LoggingInterface
from fileapi.services.metrics.interface import MetricsInterface

_dumps = functools.partial(json.dumps, ensure_ascii=False)

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_body(request: web.Request) -> Mapping[str, Any]:
    """Request parameters from a JSON object or form body; {} when unreadable."""
    if request.content_type in _FORM_TYPES:
        return await request.post()
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class FilesApiModule(Module):
    log: LoggingInterface

    def __init__(
        self,
        config: ModuleConfig,
        logger: LoggerFactory,
        fs: FileSystemInterface,
        lifecycle: LifecycleManager,
        metrics: MetricsInterface,
    ) -> None:
        self.config = config
        self.logger = logger
        self.fs = fs
        self.lifecycle = lifecycle
        self.metrics = metrics
        self._runner: web.AppRunner | None = None

    async def initialize(self) -> None:
        self.log = self.logger.create()
        self.host = self.config.get_str("host", "0.0.0.0")
        self.port = self.config.get_int("port", 8000)
        self.prefix = self.config.get_str("prefix")
        self.csv_files = CsvResource(self.fs, self.logger, read_prefix=self.config.get_str("csv-read-prefix"))
        self.json_files = JsonResource(self.fs, self.logger)

    async def validate(self) -> None:
        if self.prefix and (not self.prefix.startswith("/") or self.prefix.endswith("/")):
            self.log.error("Validation failed: bad prefix", module="files_api", prefix=self.prefix)
            raise ValueError(f"prefix must start with '/' and not end with '/', got {self.prefix!r}")
        if not self.fs.health_check():
            self.log.error("Validation failed: file store unavailable", module="files_api")
            raise ValueError("file store is not available")

    async def execute(self) -> int:
        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        self.log.info("Files API listening", module="files_api", host=self.host, port=self.port, prefix=self.prefix)
        self.lifecycle.on_shutdown(self._stop_server)

        while not self.lifecycle.is_shutting_down:
            await asyncio.sleep(0.1)
        return 0

    async def teardown(self) -> None:
        await self._stop_server()

    async def _stop_server(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

    def create_app(self) -> web.Application:
        app = web.Application()
        for name, resource in (("csv", self.csv_files), ("json", self.json_files)):
            base = f"{self.prefix}/{name}"
            app.router.add_get(base, functools.partial(self._list, name, resource))
            app.router.add_post(base, functools.partial(self._create, name, resource))
            app.router.add_get(base + "/{id}", functools.partial(self._read, name, resource))
            app.router.add_put(base + "/{id}", functools.partial(self._update, name, resource))
            app.router.add_delete(base + "/{id}", functools.partial(self._destroy, name, resource))
        app.router.add_get("/health", self._health)
        return app

    # ── Request handlers ──────────────────────────────────────────────────

    async def _list(self, name: str, resource: CsvResource | JsonResource, request: web.Request) -> web.Response:
        return await self._respond(name, request, resource.list)

    async def _create(self, name: str, resource: CsvResource | JsonResource, request: web.Request) -> web.Response:
        body = CreateFileRequest.from_body(await read_body(request))
        return await self._respond(name, request, lambda: resource.create(body))

    async def _read(self, name: str, resource: CsvResource | JsonResource, request: web.Request) -> web.Response:
        file_id = request.match_info["id"]
        return await self._respond(name, request, lambda: resource.read(file_id))

    async def _update(self, name: str, resource: CsvResource | JsonResource, request: web.Request) -> web.Response:
        file_id = request.match_info["id"]
        body = UpdateFileRequest.from_body(await read_body(request))
        return await self._respond(name, request, lambda: resource.update(file_id, body))

    async def _destroy(self, name: str, resource: CsvResource | JsonResource, request: web.Request) -> web.Response:
        file_id = request.match_info["id"]
        return await self._respond(name, request, lambda: resource.destroy(file_id))

    async def _health(self, request: web.Request) -> web.Response:
        if await asyncio.to_thread(self.fs.health_check):
            return web.json_response({"status": "ok"})
        return web.json_response({"status": "unavailable"}, status=503)

    async def _respond(self, name: str, request: web.Request, operation: Callable[[], Envelope]) -> web.Response:
        try:
            # Store calls block (disk fsync, object storage round trips)
            envelope = await asyncio.to_thread(operation)
            status = 200
        except ResourceError as exc:
            envelope = Envelope(exc.message)
            status = exc.status
            self.log.info(
                "Request rejected",
                resource=name,
                method=request.method,
                path=request.path,
                status=status,
                reason=exc.message,
            )
        self.metrics.counter(
            "http_requests_total",
            tags={"service": "files_api", "resource": name, "method": request.method, "status": str(status)},
        )
        return web.json_response(envelope.to_dict(), status=status, dumps=_dumps)


module_class = FilesApiModule
