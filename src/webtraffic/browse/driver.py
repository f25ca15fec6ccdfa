"""Outer loop that keeps starting new branches from the root URLs."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional

from ..core.config import SessionConfig
from ..core.models import BranchResult
from .engine import TraversalEngine
from .links import is_blacklisted

logger = logging.getLogger(__name__)


class Driver:
    """Picks a root and a depth, browses, pauses, and starts over."""

    def __init__(
        self,
        config: SessionConfig,
        engine: TraversalEngine,
        *,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.engine = engine
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.branches = 0

    def run_forever(self) -> None:
        self.run(None)

    def run(self, iterations: Optional[int] = None) -> None:
        """Runs ``iterations`` root-to-leaf branches, or forever when ``None``."""

        completed = 0
        while iterations is None or completed < iterations:
            self.run_once()
            completed += 1
            if iterations is not None and completed >= iterations:
                break

            pause = self.config.get("root_pause")
            logger.info("Pausing %ss before choosing another Root URL.", pause)
            self.sleep(pause)

    def run_once(self) -> Optional[BranchResult]:
        root_url = self.choose_root()
        if root_url is None:
            logger.warning("Every root URL is blacklisted; nothing to browse")
            return None

        depth = self.choose_depth()
        logger.info("Randomly selected %s as the Root URL for recursive browsing.", root_url)
        logger.debug("Randomly selected depth=%d", depth)

        result = self.engine.browse(root_url, depth)
        self.branches += 1
        logger.debug(
            "Branch finished root_url=%s depth=%d outcome=%s fetches=%d",
            result.root_url,
            result.depth,
            result.outcome.value,
            result.fetch_count,
        )
        return result

    def choose_root(self) -> Optional[str]:
        blacklist = self.config.get("blacklist")
        candidates = [url for url in self.config.get("root_urls") if not is_blacklisted(url, blacklist)]
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def choose_depth(self) -> int:
        min_depth, max_depth = self.config.depth_bounds()
        return self.rng.randint(min_depth, max_depth)
