from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Protocol


@dataclass
class Timer:
    start: float = field(default_factory=time.time)
    def ms(self) -> int:
        return int((time.time() - self.start) * 1000)


class Meter(Protocol):
    def mark(self, n: int = 1) -> None: ...


class MetricsSink(Protocol):
    def meter(self, name: str) -> Meter: ...


class CountingMeter:
    def __init__(self, name: str):
        self.name = name
        self._count = 0
        self._lock = threading.Lock()

    def mark(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    @property
    def count(self) -> int:
        return self._count


class InMemoryMetrics:
    """Process-local meters keyed by name. Handles are created once and reused."""

    def __init__(self) -> None:
        self._meters: Dict[str, CountingMeter] = {}
        self._lock = threading.Lock()

    def meter(self, name: str) -> CountingMeter:
        with self._lock:
            m = self._meters.get(name)
            if m is None:
                m = CountingMeter(name)
                self._meters[name] = m
            return m

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return {k: m.count for k, m in self._meters.items()}
