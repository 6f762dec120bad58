"""Maps (flag, implementation name) to a dotted class path.

Paths are imported lazily so that optional backends (minio) are only needed
when selected.
"""

import importlib
from typing import Any

REGISTRY: dict[str, dict[str, str]] = {
    "fs": {
        "memory": "fileapi.services.filesystem.memory_filesystem.MemoryFileSystem",
        "local": "fileapi.services.filesystem.local_filesystem.LocalFileSystem",
        "minio": "fileapi.services.filesystem.minio_filesystem.MinioFileSystem",
    },
    "metrics": {
        "noop": "fileapi.services.metrics.interface.NoopMetrics",
        "memory": "fileapi.services.metrics.memory_metrics.MemoryMetrics",
    },
}

INTERFACE_TYPES: dict[str, str] = {
    "fs": "fileapi.services.filesystem.interface.FileSystemInterface",
    "metrics": "fileapi.services.metrics.interface.MetricsInterface",
}


def resolve_class(dotted_path: str) -> type[Any]:
    module_path, class_name = dotted_path.rsplit(".", 1)
    return getattr(importlib.import_module(module_path), class_name)


def resolve_implementation(flag_name: str, impl_name: str) -> type[Any]:
    impls = REGISTRY.get(flag_name)
    if impls is None:
        raise ValueError(f"Unknown interface flag: --{flag_name}")
    dotted = impls.get(impl_name)
    if dotted is None:
        raise ValueError(
            f"Unknown implementation '{impl_name}' for --{flag_name} "
            f"(available: {', '.join(impls)})"
        )
    return resolve_class(dotted)


def resolve_interface_type(flag_name: str) -> type[Any]:
    dotted = INTERFACE_TYPES.get(flag_name)
    if dotted is None:
        raise ValueError(f"Unknown interface flag: --{flag_name}")
    return resolve_class(dotted)
