"""Rate-limit adaptation for the inter-hop wait bounds."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.config import SessionConfig

logger = logging.getLogger(__name__)

BACKOFF_INCREMENT_SECONDS = 10


@dataclass(slots=True)
class BackoffController:
    """Ratchets ``min_wait`` and ``max_wait`` up every time a 429 is seen.

    The increase is permanent for the life of the process; there is no cap
    and no decay.
    """

    config: SessionConfig
    increment: int = BACKOFF_INCREMENT_SECONDS

    def on_rate_limited(self, url: str) -> tuple[int, int]:
        min_wait, max_wait = self.config.raise_wait_bounds(self.increment)
        logger.warning(
            "We're making requests too frequently... sleeping longer url=%s min_wait=%d max_wait=%d",
            url,
            min_wait,
            max_wait,
        )
        return min_wait, max_wait
