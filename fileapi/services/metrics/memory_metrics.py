from __future__ import annotations

from fileapi.services.metrics.interface import MetricsInterface

TagKey = tuple[tuple[str, str], ...]


def _tag_key(tags: dict[str, str] | None) -> TagKey:
    return tuple(sorted((tags or {}).items()))


class MemoryMetrics(MetricsInterface):
    """In-memory metrics for assertions in tests."""

    def __init__(self) -> None:
        self.counters: dict[str, float] = {}
        self.tagged_counters: dict[tuple[str, TagKey], float] = {}
        self.gauges: dict[str, float] = {}
        self.histograms: dict[str, list[float]] = {}

    def counter(self, name: str, value: float = 1, tags: dict[str, str] | None = None) -> None:
        self.counters[name] = self.counters.get(name, 0) + value
        key = (name, _tag_key(tags))
        self.tagged_counters[key] = self.tagged_counters.get(key, 0) + value

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.gauges[name] = value

    def histogram(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.histograms.setdefault(name, []).append(value)

    def count(self, name: str, **tags: str) -> float:
        """Counter total for *name* restricted to the exact tag set given."""
        return self.tagged_counters.get((name, _tag_key(tags)), 0)
