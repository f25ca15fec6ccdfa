"""Shared data structures used across the browsing components."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum


@dataclass(slots=True)
class TrafficCounters:
    """Process-wide request counters and data meter."""

    good_requests: int = 0
    bad_requests: int = 0
    data_meter: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_page(self, size: int) -> int:
        with self._lock:
            self.data_meter += size
            return self.data_meter

    def record_status(self, status_code: int) -> None:
        with self._lock:
            if status_code == 200:
                self.good_requests += 1
            else:
                self.bad_requests += 1

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {
                "good_requests": self.good_requests,
                "bad_requests": self.bad_requests,
                "data_meter": self.data_meter,
            }


@dataclass(slots=True)
class TraversalState:
    """Position of a single branch: the page to fetch next and hops left."""

    url: str
    depth: int


class BranchOutcome(str, Enum):
    COMPLETED = "completed"
    FETCH_ERROR = "fetch_error"
    DEAD_END = "dead_end"


@dataclass(slots=True)
class BranchResult:
    """What happened during one root-to-leaf traversal."""

    root_url: str
    depth: int
    visited: list[str] = field(default_factory=list)
    outcome: BranchOutcome = BranchOutcome.COMPLETED

    @property
    def fetch_count(self) -> int:
        return len(self.visited)
