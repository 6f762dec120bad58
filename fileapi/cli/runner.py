"""Command line entry point: ``python -m fileapi run <module> [flags] [module args]``.

Global flags pick service implementations and environment overrides; the
remaining ``--name value`` pairs are checked against the module's
``module.json`` argument list.
"""

from __future__ import annotations

import asyncio
import importlib
import json
import sys
from pathlib import Path
from typing import Any

from fileapi.config.container import Container
from fileapi.config.context import ModuleConfig, PlatformConfig
from fileapi.config.env_loader import load_env_file
from fileapi.modules.base import Module
from fileapi.services.lifecycle.lifecycle_manager import LifecycleManager
from fileapi.services.logger.factory import LoggerFactory
from fileapi.services.registry import resolve_implementation, resolve_interface_type
from fileapi.services.secrets.env_secrets import EnvSecrets
from fileapi.services.secrets.interface import SecretsInterface

MODULES_DIR = Path(__file__).resolve().parent.parent / "modules"

USAGE = "Usage: python -m fileapi run <module_name> [flags] [module args]"

# Implementation flags and their defaults. --log falls back to LOG_IMPL, then "pretty".
_IMPL_FLAGS: dict[str, str] = {
    "fs": "local",
    "metrics": "noop",
}

_SERVICE_TYPES = {"service"}


def load_module_descriptor(module_name: str) -> dict[str, Any]:
    module_json = MODULES_DIR / module_name / "module.json"
    if not module_json.is_file():
        raise FileNotFoundError(f"module '{module_name}' not found at {module_json}")
    with open(module_json, encoding="utf-8") as f:
        return json.load(f)


def parse_module_args(descriptor: dict[str, Any], raw_args: list[str]) -> dict[str, Any]:
    """Match ``--name value`` pairs against the descriptor's arg definitions."""
    parsed: dict[str, str] = {}
    i = 0
    while i < len(raw_args):
        arg = raw_args[i]
        if arg.startswith("--"):
            if i + 1 < len(raw_args) and not raw_args[i + 1].startswith("--"):
                parsed[arg[2:]] = raw_args[i + 1]
                i += 2
                continue
            parsed[arg[2:]] = "true"
        i += 1

    known = {d["name"] for d in descriptor.get("args", [])}
    errors = [f"Unknown argument: --{name}" for name in parsed if name not in known]
    result: dict[str, Any] = {}

    for arg_def in descriptor.get("args", []):
        name = arg_def["name"]
        if name in parsed:
            try:
                result[name] = _cast_value(parsed[name], arg_def.get("type", "string"))
            except ValueError:
                errors.append(f"Invalid {arg_def['type']} for --{name}: '{parsed[name]}'")
                continue
        elif "default" in arg_def:
            result[name] = arg_def["default"]
        elif arg_def.get("required", False):
            errors.append(f"Missing required argument: --{name}")

        if name in result and "choices" in arg_def and result[name] not in arg_def["choices"]:
            errors.append(
                f"Invalid value for --{name}: '{result[name]}' "
                f"(choices: {', '.join(str(c) for c in arg_def['choices'])})"
            )

    if errors:
        raise ValueError("; ".join(errors))
    return result


def _cast_value(value: str, type_name: str) -> Any:
    match type_name:
        case "integer":
            return int(value)
        case "boolean":
            return value.lower() in ("true", "1", "yes")
        case _:
            return value


def _parse_env_overrides(raw: str) -> dict[str, str]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"--env value is not valid JSON: {exc}") from exc
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise ValueError("--env must be a JSON object with string keys and values")
    return data


def extract_global_flags(remaining: list[str]) -> tuple[dict[str, str], dict[str, str], list[str]]:
    """Split global flags off the argument list.

    Returns ``(impl_flags, env_overrides, module_args)``. ``impl_flags`` holds
    the defaults for any implementation flag not given. Values from
    ``--env`` win over those loaded with ``--env-file``.
    """
    impl_flags = dict(_IMPL_FLAGS)
    env_overrides: dict[str, str] = {}
    env_file: str | None = None
    module_args: list[str] = []
    global_names = set(_IMPL_FLAGS) | {"log", "env", "env-file"}

    i = 0
    while i < len(remaining):
        flag = remaining[i]
        name = flag[2:] if flag.startswith("--") else ""
        if name in global_names:
            if i + 1 >= len(remaining):
                raise ValueError(f"Missing value for --{name}")
            value = remaining[i + 1]
            if name == "env":
                env_overrides.update(_parse_env_overrides(value))
            elif name == "env-file":
                env_file = value
            else:
                impl_flags[name] = value
            i += 2
        else:
            module_args.append(flag)
            i += 1

    if env_file:
        env_overrides = {**load_env_file(env_file), **env_overrides}
    return impl_flags, env_overrides, module_args


def print_module_help(descriptor: dict[str, Any]) -> None:
    version = descriptor.get("version", "")
    print(f"\n  {descriptor['display_name']}{' v' + version if version else ''}")
    print(f"  {descriptor['description']}\n")

    args = descriptor.get("args", [])
    if args:
        print("  Module arguments:")
        for arg in args:
            required = " (required)" if arg.get("required") else ""
            default = f" [default: {arg['default']!r}]" if "default" in arg else ""
            print(f"    --{arg['name']:20s} {arg['description']}{required}{default}")
        print()

    print("  Global flags:")
    print(f"    --{'fs':20s} File store: memory, local, minio [default: local]")
    print(f"    --{'metrics':20s} Metrics: noop, memory [default: noop]")
    print(f"    --{'log':20s} Logging format: pretty, memory [default: pretty]")
    print(f"    --{'env':20s} JSON object of environment overrides")
    print(f"    --{'env-file':20s} Environment file name (loads .env/<name>.env)")
    print()


def build_container(
    impl_flags: dict[str, str],
    env_overrides: dict[str, str],
    module_args: dict[str, Any],
) -> Container:
    """Register configuration, logging, lifecycle and the selected implementations."""
    container = Container()

    secrets = EnvSecrets(overrides=env_overrides)
    container.register_instance(SecretsInterface, secrets)
    platform = PlatformConfig(overrides=env_overrides)
    container.register_instance(PlatformConfig, platform)
    container.register_instance(ModuleConfig, ModuleConfig(module_args))

    log_impl = impl_flags.get("log") or platform.log_impl
    logger_factory = LoggerFactory(default_impl=log_impl)
    container.register_instance(LoggerFactory, logger_factory)
    container.register_instance(LifecycleManager, LifecycleManager(log=logger_factory.create()))

    for flag_name, impl_name in impl_flags.items():
        if flag_name == "log":
            continue
        impl_cls = resolve_implementation(flag_name, impl_name)
        container.register_instance(resolve_interface_type(flag_name), container.resolve(impl_cls))

    return container


async def _run_service_module(module_instance: Module, container: Container) -> int:
    lifecycle = container.get(LifecycleManager)
    lifecycle.install_signal_handlers(asyncio.get_running_loop())
    try:
        return await module_instance.run()
    finally:
        await lifecycle.shutdown()


def run_module(argv: list[str]) -> tuple[int, Module | None]:
    """Parse *argv*, build the container and run the module to completion."""
    if len(argv) < 2 or argv[0] != "run":
        raise ValueError(USAGE)

    module_name, remaining = argv[1], argv[2:]
    descriptor = load_module_descriptor(module_name)

    if "--help" in remaining or "-h" in remaining:
        print_module_help(descriptor)
        return 0, None

    impl_flags, env_overrides, raw_args = extract_global_flags(remaining)
    module_args = parse_module_args(descriptor, raw_args)
    container = build_container(impl_flags, env_overrides, module_args)

    mod = importlib.import_module(f"fileapi.modules.{module_name}.main")
    if not hasattr(mod, "module_class"):
        raise AttributeError(f"Module 'fileapi.modules.{module_name}.main' must define 'module_class'")
    module_instance: Module = container.resolve(mod.module_class)

    if descriptor.get("type", "job") in _SERVICE_TYPES:
        exit_code = asyncio.run(_run_service_module(module_instance, container))
    else:
        exit_code = asyncio.run(module_instance.run())
    return exit_code, module_instance


def run_cli(argv: list[str] | None = None) -> None:
    args = argv if argv is not None else sys.argv[1:]
    try:
        exit_code, _ = run_module(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)
