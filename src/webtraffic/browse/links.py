"""Best-effort link extraction and blacklist filtering."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

LINK_PATTERN = re.compile(r'href="(https?://[^"]+)"')


def extract_links(body: bytes) -> List[str]:
    """Returns every absolute ``http(s)`` href in ``body``, in document order.

    Duplicates are kept. This is a text scan, not an HTML parser: links in
    single quotes, relative links and other schemes are never returned.
    """

    text = body.decode("utf-8", errors="replace")
    return LINK_PATTERN.findall(text)


def is_blacklisted(url: str, blacklist: Iterable[str]) -> bool:
    """Substring match: ``"facebook.com"`` also excludes ``"facebook.com.example"``."""

    return any(entry in url for entry in blacklist)


def filter_links(links: Sequence[str], blacklist: Iterable[str]) -> List[str]:
    entries = list(blacklist)
    return [link for link in links if not is_blacklisted(link, entries)]
