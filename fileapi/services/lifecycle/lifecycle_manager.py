"""Shutdown orchestration: signal handling plus ordered cleanup hooks."""

from __future__ import annotations

import asyncio
import inspect
import signal
from typing import Awaitable, Callable, Union

from fileapi.services.logger.interface import LoggingInterface

ShutdownHook = Union[Callable[[], None], Callable[[], Awaitable[None]]]


class LifecycleManager:
    def __init__(self, log: LoggingInterface | None = None) -> None:
        self._log = log
        self._hooks: list[ShutdownHook] = []
        self._shutting_down = False
        self._shutdown_done = False

    @property
    def is_shutting_down(self) -> bool:
        """Polled by the service loop to know when to stop."""
        return self._shutting_down

    def on_shutdown(self, callback: ShutdownHook) -> None:
        """Register a cleanup callback. Hooks run in reverse registration order."""
        self._hooks.append(callback)

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._on_signal, sig)

    async def shutdown(self) -> None:
        if self._shutdown_done:
            return
        self._shutting_down = True
        self._shutdown_done = True

        for hook in reversed(self._hooks):
            try:
                result = hook()
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                # Remaining hooks still run
                if self._log:
                    self._log.error("Shutdown hook failed", hook=getattr(hook, "__name__", repr(hook)), error=str(exc))

    def _on_signal(self, sig: signal.Signals) -> None:
        if self._shutting_down:
            return
        self._shutting_down = True
        if self._log:
            self._log.info("Shutdown requested", signal=sig.name)
