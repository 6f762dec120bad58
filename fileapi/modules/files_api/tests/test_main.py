"""Tests for the Files API module using aiohttp TestClient and MemoryFileSystem."""

from __future__ import annotations

import asyncio
import json
import threading

import pytest
from aiohttp import FormData
from aiohttp.test_utils import TestClient, TestServer

from fileapi.config.context import ModuleConfig
from fileapi.modules.files_api.main import FilesApiModule
from fileapi.services.filesystem.memory_filesystem import MemoryFileSystem
from fileapi.services.lifecycle.lifecycle_manager import LifecycleManager
from fileapi.services.logger.factory import LoggerFactory
from fileapi.services.metrics.memory_metrics import MemoryMetrics


# ── Fixtures ──────────────────────────────────────────────────────────────────


async def _setup_module(
    fs: MemoryFileSystem | None = None, **args: object
) -> FilesApiModule:
    module = FilesApiModule(
        config=ModuleConfig({"port": 0, **args}),
        logger=LoggerFactory(default_impl="memory"),
        fs=fs or MemoryFileSystem(),
        lifecycle=LifecycleManager(),
        metrics=MemoryMetrics(),
    )
    await module.initialize()
    return module


@pytest.fixture
def fs() -> MemoryFileSystem:
    return MemoryFileSystem()


@pytest.fixture
async def module(fs: MemoryFileSystem) -> FilesApiModule:
    return await _setup_module(fs)


@pytest.fixture
async def client(module: FilesApiModule):
    async with TestClient(TestServer(module.create_app())) as cli:
        yield cli


# ── JSON resource ─────────────────────────────────────────────────────────────


async def test_json_create_read_delete_read(client: TestClient) -> None:
    resp = await client.post("/json", json={"filename": "a.json", "content": '{"k":1}'})
    assert resp.status == 200
    assert await resp.json() == {"message": "Fichero guardado exitosamente"}

    resp = await client.get("/json/a.json")
    assert resp.status == 200
    assert await resp.json() == {"message": "Operación exitosa", "content": {"k": 1}}

    resp = await client.delete("/json/a.json")
    assert resp.status == 200
    assert await resp.json() == {"message": "Fichero eliminado exitosamente"}

    resp = await client.get("/json/a.json")
    assert resp.status == 404
    assert await resp.json() == {"message": "El fichero no existe"}


async def test_json_invalid_content_rejected_and_not_listed(client: TestClient, fs: MemoryFileSystem) -> None:
    resp = await client.post("/json", json={"filename": "b.json", "content": "not json"})
    assert resp.status == 415
    assert await resp.json() == {"message": "Contenido no es un JSON válido"}

    fs.write("b.json", b"not json")
    fs.write("ok.json", b"[]")
    resp = await client.get("/json")
    assert resp.status == 200
    assert await resp.json() == {"message": "Operación exitosa", "content": ["ok.json"]}


async def test_json_create_missing_params(client: TestClient) -> None:
    resp = await client.post("/json", json={"filename": "a.json"})
    assert resp.status == 422
    assert await resp.json() == {"message": "Parámetros inválidos"}


async def test_json_create_conflict(client: TestClient, fs: MemoryFileSystem) -> None:
    fs.write("existingfile.json", json.dumps({"key": "value"}).encode())
    resp = await client.post(
        "/json", json={"filename": "existingfile.json", "content": json.dumps({"key": "value"})}
    )
    assert resp.status == 409
    assert await resp.json() == {"message": "El fichero ya existe"}


async def test_json_update(client: TestClient, fs: MemoryFileSystem) -> None:
    fs.write("existingfile.json", b'{"key": "value"}')
    new = json.dumps({"new_key": "new_value"})
    resp = await client.put("/json/existingfile.json", json={"content": new})
    assert resp.status == 200
    assert await resp.json() == {"message": "Fichero actualizado exitosamente"}
    assert fs.read("existingfile.json") == new.encode()


async def test_json_update_errors(client: TestClient, fs: MemoryFileSystem) -> None:
    resp = await client.put("/json/nonexistentfile.json", json={"content": "{}"})
    assert resp.status == 404
    resp = await client.put("/json/nonexistentfile.json", json={})
    assert resp.status == 422

    fs.write("existingfile.json", b"{}")
    resp = await client.put("/json/existingfile.json", json={"content": "This is not a JSON"})
    assert resp.status == 415
    assert await resp.json() == {"message": "Contenido no es un JSON válido"}


async def test_json_deeply_nested_content_rejected(client: TestClient, fs: MemoryFileSystem) -> None:
    resp = await client.post("/json", json={"filename": "d.json", "content": "[" * 100000})
    assert resp.status == 415
    assert not fs.exists("d.json")

    fs.write("d.json", b"[" * 100000)
    resp = await client.get("/json")
    assert resp.status == 200
    assert await resp.json() == {"message": "Operación exitosa", "content": []}

    fs.write("d.csv", b"a\n1")
    resp = await client.put("/csv/d.csv", json={"content": "[" * 100000})
    assert resp.status == 415


async def test_json_destroy_missing(client: TestClient) -> None:
    resp = await client.delete("/json/nonexistentfile.json")
    assert resp.status == 404
    assert await resp.json() == {"message": "El fichero no existe"}


# ── CSV resource ──────────────────────────────────────────────────────────────


async def test_csv_create_and_read_records(client: TestClient) -> None:
    resp = await client.post("/csv", json={"filename": "d.csv", "content": "a,b\n1,2\n\n"})
    assert resp.status == 200
    assert await resp.json() == {"message": "Guardado con éxito"}

    resp = await client.get("/csv/d.csv")
    assert resp.status == 200
    assert await resp.json() == {"message": "Fichero leído con éxito", "content": [{"a": "1", "b": "2"}]}


async def test_csv_list(client: TestClient, fs: MemoryFileSystem) -> None:
    fs.write("b.csv", b"x")
    fs.write("a.csv", b"x")
    fs.write("a.json", b"{}")
    resp = await client.get("/csv")
    assert await resp.json() == {"message": "Listado de ficheros", "content": ["a.csv", "b.csv"]}


async def test_csv_update_missing_checked_before_content(client: TestClient) -> None:
    resp = await client.put("/csv/missing.csv", json={"content": "{}"})
    assert resp.status == 404
    assert await resp.json() == {"message": "Fichero no encontrado"}


async def test_csv_update_requires_json(client: TestClient, fs: MemoryFileSystem) -> None:
    fs.write("d.csv", b"a\n1")
    resp = await client.put("/csv/d.csv", json={"content": "a\n2"})
    assert resp.status == 415
    assert await resp.json() == {"message": "Contenido no válido"}
    resp = await client.put("/csv/d.csv", json={"content": "[1]"})
    assert resp.status == 200


async def test_csv_destroy(client: TestClient, fs: MemoryFileSystem) -> None:
    fs.write("d.csv", b"a\n1")
    resp = await client.delete("/csv/d.csv")
    assert resp.status == 200
    resp = await client.delete("/csv/d.csv")
    assert resp.status == 404
    assert await resp.json() == {"message": "Fichero no encontrado"}


async def test_csv_create_twice(client: TestClient) -> None:
    body = {"filename": "d.csv", "content": "a\n1"}
    assert (await client.post("/csv", json=body)).status == 200
    assert (await client.post("/csv", json=body)).status == 409


# ── Request bodies ────────────────────────────────────────────────────────────


async def test_form_encoded_body(client: TestClient, fs: MemoryFileSystem) -> None:
    resp = await client.post("/json", data={"filename": "f.json", "content": '{"x": [1]}'})
    assert resp.status == 200
    assert fs.read("f.json") == b'{"x": [1]}'


async def test_multipart_body(client: TestClient, fs: MemoryFileSystem) -> None:
    form = FormData()
    form.add_field("filename", "m.csv")
    form.add_field("content", "a\n1")
    form.add_field("extra", b"binary", filename="blob.bin")
    resp = await client.post("/csv", data=form)
    assert resp.status == 200
    assert fs.read("m.csv") == b"a\n1"


async def test_malformed_json_body_is_missing_params(client: TestClient) -> None:
    resp = await client.post("/json", data=b"{broken", headers={"Content-Type": "application/json"})
    assert resp.status == 422


async def test_non_object_json_body_is_missing_params(client: TestClient) -> None:
    resp = await client.post("/json", json=["a.json", "{}"])
    assert resp.status == 422


async def test_filename_with_path_rejected(client: TestClient, fs: MemoryFileSystem) -> None:
    resp = await client.post("/json", json={"filename": "../a.json", "content": "{}"})
    assert resp.status == 422
    assert fs.list() == []


async def test_over_long_id_is_not_found(client: TestClient) -> None:
    resp = await client.get("/json/" + "a" * 300 + ".json")
    assert resp.status == 404
    assert await resp.json() == {"message": "El fichero no existe"}
    resp = await client.delete("/csv/" + "a" * 300 + ".csv")
    assert resp.status == 404


async def test_utf8_body_not_escaped(client: TestClient) -> None:
    resp = await client.get("/json/nada.json")
    assert "El fichero no existe" in await resp.text()
    resp = await client.post("/json", json={})
    assert "Parámetros inválidos" in await resp.text()


# ── Service concerns ──────────────────────────────────────────────────────────


async def test_prefix_moves_routes(fs: MemoryFileSystem) -> None:
    module = await _setup_module(fs, prefix="/api")
    fs.write("a.json", b"{}")
    async with TestClient(TestServer(module.create_app())) as client:
        assert (await client.get("/api/json")).status == 200
        assert (await client.get("/json")).status == 404
        assert (await client.get("/health")).status == 200


async def test_csv_read_prefix(fs: MemoryFileSystem) -> None:
    module = await _setup_module(fs, **{"csv-read-prefix": "app-"})
    fs.write("app-d.csv", b"a\n1")
    async with TestClient(TestServer(module.create_app())) as client:
        resp = await client.get("/csv/d.csv")
        assert await resp.json() == {"message": "Fichero leído con éxito", "content": [{"a": "1"}]}


async def test_health(client: TestClient, fs: MemoryFileSystem, monkeypatch: pytest.MonkeyPatch) -> None:
    resp = await client.get("/health")
    assert resp.status == 200
    assert await resp.json() == {"status": "ok"}
    monkeypatch.setattr(fs, "health_check", lambda: False)
    resp = await client.get("/health")
    assert resp.status == 503


async def test_slow_store_call_does_not_hold_other_requests(
    client: TestClient, fs: MemoryFileSystem, monkeypatch: pytest.MonkeyPatch
) -> None:
    release = threading.Event()
    real_list = fs.list

    def slow_list(prefix: str = "") -> list[str]:
        release.wait(5)
        return real_list(prefix)

    monkeypatch.setattr(fs, "list", slow_list)
    pending = asyncio.ensure_future(client.get("/csv"))
    await asyncio.sleep(0.05)
    assert (await client.get("/health")).status == 200
    assert not pending.done()
    release.set()
    assert (await pending).status == 200


async def test_rejections_logged_and_counted(client: TestClient, module: FilesApiModule) -> None:
    await client.get("/json/nada.json")
    await client.get("/json")
    entry = module.log.find("Request rejected")[0]
    assert entry.ctx["status"] == 404
    assert entry.ctx["resource"] == "json"
    metrics: MemoryMetrics = module.metrics  # type: ignore[assignment]
    assert metrics.count(
        "http_requests_total", service="files_api", resource="json", method="GET", status="404"
    ) == 1
    assert metrics.counters["http_requests_total"] == 2


async def test_validate_rejects_bad_prefix() -> None:
    module = await _setup_module(prefix="api/")
    with pytest.raises(ValueError, match="prefix must start with '/'"):
        await module.validate()


async def test_validate_rejects_unhealthy_store(fs: MemoryFileSystem, monkeypatch: pytest.MonkeyPatch) -> None:
    module = await _setup_module(fs)
    monkeypatch.setattr(fs, "health_check", lambda: False)
    with pytest.raises(ValueError, match="file store is not available"):
        await module.validate()
    assert "Validation failed: file store unavailable" in module.log.messages


async def test_run_stops_when_lifecycle_shuts_down(fs: MemoryFileSystem) -> None:
    lifecycle = LifecycleManager()
    module = FilesApiModule(
        config=ModuleConfig({"port": 0, "host": "127.0.0.1"}),
        logger=LoggerFactory(default_impl="memory"),
        fs=fs,
        lifecycle=lifecycle,
        metrics=MemoryMetrics(),
    )
    await lifecycle.shutdown()
    assert await module.run() == 0
    assert module._runner is None
    assert "Files API listening" in module.log.messages
