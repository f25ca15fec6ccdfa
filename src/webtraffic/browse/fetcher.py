"""Single bounded HTTP GET with request accounting."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from ..core.config import SessionConfig
from ..core.errors import FetchError
from ..core.models import TrafficCounters
from ..core.utils import human_bytes
from .backoff import BackoffController

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 5
ERROR_PENALTY_SECONDS = 30
RATE_LIMITED_STATUS = 429


class Fetcher:
    """Fetches pages through a shared ``requests.Session``.

    Non-200 responses are returned like any other page; only transport
    failures raise :class:`FetchError`, after a fixed penalty sleep.
    """

    def __init__(
        self,
        config: SessionConfig,
        counters: TrafficCounters,
        *,
        backoff: Optional[BackoffController] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        error_penalty: float = ERROR_PENALTY_SECONDS,
    ) -> None:
        self.config = config
        self.counters = counters
        self.backoff = backoff or BackoffController(config)
        self.session = session or requests.Session()
        self.sleep = sleep
        self.timeout = timeout
        self.error_penalty = error_penalty

    def fetch(self, url: str) -> bytes:
        logger.debug("Requesting page... url=%s", url)
        headers = {"User-Agent": self.config.get("user_agent")}

        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout, stream=True)
        except ValueError as exc:
            # unusable URL (InvalidURL, MissingSchema, urllib3 LocationParseError): nothing was sent
            logger.debug("Cannot build request url=%s err=%s", url, exc)
            raise FetchError(url, exc) from exc
        except requests.RequestException as exc:
            logger.debug("Request failed url=%s err=%s, pausing %ss", url, exc, self.error_penalty)
            self.sleep(self.error_penalty)
            raise FetchError(url, exc) from exc

        try:
            content = response.content
        except requests.RequestException as exc:
            raise FetchError(url, exc) from exc
        finally:
            response.close()

        page_size = len(content)
        data_meter = self.counters.record_page(page_size)
        logger.debug(
            "Page size and data meter page_size=%s data_meter=%s",
            human_bytes(page_size),
            human_bytes(data_meter),
        )

        status = response.status_code
        self.counters.record_status(status)
        if status != 200:
            logger.warning("Non-200 response status url=%s status=%d", url, status)
            if status == RATE_LIMITED_STATUS:
                self.backoff.on_rate_limited(url)

        snapshot = self.counters.snapshot()
        logger.debug(
            "Request counters good_requests=%d bad_requests=%d",
            snapshot["good_requests"],
            snapshot["bad_requests"],
        )
        return content

    def close(self) -> None:
        self.session.close()
