import sys
from datetime import datetime, timezone
from typing import Any

from fileapi.services.logger.interface import LoggingInterface

_COLORS = {
    "INFO": "\033[32m",
    "WARN": "\033[33m",
    "ERROR": "\033[31m",
    "DEBUG": "\033[36m",
}
_RESET = "\033[0m"


class PrettyLogger(LoggingInterface):
    """Colorized one-line-per-entry logger on stderr."""

    def __init__(self, stream: Any = None) -> None:
        self._stream = stream

    def info(self, msg: str, **ctx: Any) -> None:
        self._log("INFO", msg, ctx)

    def warn(self, msg: str, **ctx: Any) -> None:
        self._log("WARN", msg, ctx)

    def error(self, msg: str, **ctx: Any) -> None:
        self._log("ERROR", msg, ctx)

    def debug(self, msg: str, **ctx: Any) -> None:
        self._log("DEBUG", msg, ctx)

    def _log(self, level: str, msg: str, ctx: dict[str, Any]) -> None:
        ts = datetime.now(timezone.utc).strftime("%H:%M:%S")
        extra = "".join(f" {k}={v}" for k, v in ctx.items())
        stream = self._stream or sys.stderr
        print(f"{_COLORS[level]}{ts} [{level}]{_RESET} {msg}{extra}", file=stream)
