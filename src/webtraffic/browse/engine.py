"""Random-walk traversal from a root URL down to a drawn depth."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional

from ..core.config import SessionConfig
from ..core.errors import FetchError
from ..core.models import BranchOutcome, BranchResult, TraversalState
from .fetcher import Fetcher
from .links import extract_links, filter_links

logger = logging.getLogger(__name__)


class TraversalEngine:
    """Follows one random link per page until the depth runs out.

    A page that cannot be fetched, or that offers no link outside the
    blacklist, is itself blacklisted and ends the branch. The terminal
    fetch at depth 0 never blacklists.
    """

    def __init__(
        self,
        config: SessionConfig,
        fetcher: Fetcher,
        *,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.rng = rng or random.Random()
        self.sleep = sleep

    def browse(self, url: str, depth: int) -> BranchResult:
        if depth < 0:
            raise ValueError("depth must not be negative")

        result = BranchResult(root_url=url, depth=depth)
        state = TraversalState(url=url, depth=depth)

        while True:
            logger.info("Recursively browsing url=%s depth=%d", state.url, state.depth)
            result.visited.append(state.url)

            if state.depth == 0:
                try:
                    self.fetcher.fetch(state.url)
                except FetchError as exc:
                    logger.warning("Final page error url=%s error=%s", state.url, exc.reason)
                return result

            try:
                content = self.fetcher.fetch(state.url)
            except FetchError as exc:
                logger.warning("Stopping and blacklisting: page error url=%s error=%s", state.url, exc.reason)
                self.config.add_to_blacklist(state.url)
                result.outcome = BranchOutcome.FETCH_ERROR
                return result

            valid_links = filter_links(extract_links(content), self.config.get("blacklist"))
            logger.debug("Valid links found link_count=%d", len(valid_links))

            if not valid_links:
                logger.warning("Stopping and blacklisting: no links url=%s", state.url)
                self.config.add_to_blacklist(state.url)
                result.outcome = BranchOutcome.DEAD_END
                return result

            min_wait, max_wait = self.config.wait_bounds()
            sleep_time = self.rng.randint(min_wait, max_wait)
            logger.debug("Pausing sleep_time=%d", sleep_time)
            self.sleep(sleep_time)

            state.url = self.rng.choice(valid_links)
            state.depth -= 1
