"""Light-weight timing of the game loop's tick phases."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional


@dataclass
class PerfStat:
    """Aggregated timing information for a single label."""

    count: int = 0
    total: float = 0.0
    max_time: float = 0.0
    over_budget: int = 0

    def add(self, elapsed: float, budget: Optional[float]) -> None:
        self.count += 1
        self.total += elapsed
        if elapsed > self.max_time:
            self.max_time = elapsed
        if budget is not None and elapsed > budget:
            self.over_budget += 1

    @property
    def average(self) -> float:
        """Return the average time in seconds."""

        return self.total / self.count if self.count else 0.0


class _Section:
    """Context manager that records a section's runtime."""

    __slots__ = ("_profiler", "_name", "_start")

    def __init__(self, profiler: "TickProfiler", name: str) -> None:
        self._profiler = profiler
        self._name = name
        self._start: Optional[float] = None

    def __enter__(self) -> "_Section":
        if self._profiler.enabled:
            self._start = self._profiler._clock()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._start is not None:
            self._profiler._record(self._name, self._profiler._clock() - self._start)
            self._start = None
        return False


class TickProfiler:
    """Collect per-phase timings of the game loop.

    ``budget`` is the tick length in seconds.  Every recorded sample longer
    than the budget counts as an overrun for its section, which is how slow
    terminals show up in the ``--profile`` summary.
    """

    def __init__(
        self,
        *,
        budget: Optional[float] = None,
        clock: Optional[Callable[[], float]] = None,
        enabled: bool = True,
    ) -> None:
        self._clock = clock or time.perf_counter
        self.budget = budget
        self.enabled = enabled
        self._stats: Dict[str, PerfStat] = {}

    def reset(self) -> None:
        """Clear accumulated statistics."""

        self._stats.clear()

    def _record(self, name: str, elapsed: float) -> None:
        stat = self._stats.get(name)
        if stat is None:
            stat = PerfStat()
            self._stats[name] = stat
        stat.add(elapsed, self.budget)

    def section(self, name: str) -> _Section:
        """Return a context manager tracking ``name``'s runtime."""

        return _Section(self, name)

    def snapshot(self) -> Dict[str, PerfStat]:
        """Return a copy of the accumulated statistics."""

        return {name: replace(stat) for name, stat in self._stats.items()}

    def summary(
        self, *, sort_by: str = "total", descending: bool = True
    ) -> List[Dict[str, float | int]]:
        """Return a sorted summary of the collected statistics."""

        key_map = {
            "total": lambda item: item[1].total,
            "count": lambda item: item[1].count,
            "average": lambda item: item[1].average,
            "max": lambda item: item[1].max_time,
            "over_budget": lambda item: item[1].over_budget,
        }
        if sort_by not in key_map:
            raise ValueError(f"Unknown sort key: {sort_by}")
        items = sorted(self._stats.items(), key=key_map[sort_by], reverse=descending)
        return [
            {
                "name": name,
                "count": stat.count,
                "total": stat.total,
                "average": stat.average,
                "max": stat.max_time,
                "over_budget": stat.over_budget,
            }
            for name, stat in items
        ]

    def time_function(self, name: str, func: Callable[..., object], *args, **kwargs):
        """Execute ``func`` inside a named section and return its result."""

        with self.section(name):
            return func(*args, **kwargs)


def format_summary(summary: List[Dict[str, float | int]], limit: int = 10) -> str:
    """Render ``summary`` rows as a single log-friendly line."""

    if not summary:
        return "No timings recorded."
    parts: List[str] = []
    for row in summary[:limit]:
        parts.append(
            f"{row['name']}: total={row['total'] * 1000.0:.3f}ms, "
            f"count={int(row['count'])}, avg={row['average'] * 1000.0:.3f}ms, "
            f"max={row['max'] * 1000.0:.3f}ms, over_budget={int(row['over_budget'])}"
        )
    return "; ".join(parts)


__all__ = ["PerfStat", "TickProfiler", "format_summary"]
