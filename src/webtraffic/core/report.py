"""Session summary written when the generator shuts down."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from .config import SessionConfig
from .models import TrafficCounters
from .utils import human_bytes


@dataclass
class SessionSummary:
    """Counters and runtime configuration state at the end of a session."""

    good_requests: int = 0
    bad_requests: int = 0
    data_meter: int = 0
    branches: int = 0
    min_wait: int = 0
    max_wait: int = 0
    blacklist: List[str] = field(default_factory=list)

    @classmethod
    def collect(cls, config: SessionConfig, counters: TrafficCounters, branches: int) -> "SessionSummary":
        snapshot = counters.snapshot()
        min_wait, max_wait = config.wait_bounds()
        return cls(
            good_requests=snapshot["good_requests"],
            bad_requests=snapshot["bad_requests"],
            data_meter=snapshot["data_meter"],
            branches=branches,
            min_wait=min_wait,
            max_wait=max_wait,
            blacklist=config.get("blacklist"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "good_requests": self.good_requests,
            "bad_requests": self.bad_requests,
            "data_meter": self.data_meter,
            "data_meter_human": human_bytes(self.data_meter),
            "branches": self.branches,
            "min_wait": self.min_wait,
            "max_wait": self.max_wait,
            "blacklist": list(self.blacklist),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def save(self, path: Path) -> None:
        path.write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "SessionSummary":
        raw = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            good_requests=raw.get("good_requests", 0),
            bad_requests=raw.get("bad_requests", 0),
            data_meter=raw.get("data_meter", 0),
            branches=raw.get("branches", 0),
            min_wait=raw.get("min_wait", 0),
            max_wait=raw.get("max_wait", 0),
            blacklist=list(raw.get("blacklist", [])),
        )
