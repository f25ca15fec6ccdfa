"""Exception hierarchy shared by the traffic generator."""

from __future__ import annotations


class WebTrafficError(Exception):
    """Base class for every error raised by ``webtraffic``."""


class ConfigError(WebTrafficError):
    """Raised when the session configuration is unusable."""


class FetchError(WebTrafficError):
    """Raised when a page could not be retrieved at the transport level."""

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
