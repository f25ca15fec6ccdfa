"""Configuration loading and the live session configuration store."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".webtraffic.yaml"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0 Safari/537.36"
)

INT_KEYS = ("max_depth", "min_depth", "max_wait", "min_wait", "root_pause")
LIST_KEYS = ("root_urls", "blacklist")


@dataclass(slots=True)
class SessionConfig:
    """Mutable key/value store consulted before every browsing decision.

    The engine writes ``blacklist``, ``min_wait`` and ``max_wait`` back into
    this object while running, so components must read from it each time
    instead of caching values.
    """

    root_urls: list[str] = field(default_factory=list)
    blacklist: list[str] = field(default_factory=list)
    min_depth: int = 3
    max_depth: int = 10
    min_wait: int = 5
    max_wait: int = 10
    root_pause: int = 10
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False
    source_path: Optional[Path] = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    # ------------------------------------------------------------------
    # Key/value access
    # ------------------------------------------------------------------
    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if not f.name.startswith("_") and f.name != "source_path")

    def get(self, key: str) -> Any:
        if key not in self.keys():
            raise KeyError(key)
        with self._lock:
            value = getattr(self, key)
            return list(value) if isinstance(value, list) else value

    def set(self, key: str, value: Any) -> None:
        if key not in self.keys():
            raise KeyError(key)
        with self._lock:
            setattr(self, key, _coerce(key, value))

    def as_dict(self) -> dict[str, Any]:
        with self._lock:
            return {key: self.get(key) for key in self.keys()}

    # ------------------------------------------------------------------
    # Mutations performed by the browsing engine
    # ------------------------------------------------------------------
    def add_to_blacklist(self, url: str) -> bool:
        """Appends ``url`` unless already present. Returns ``True`` if added."""

        with self._lock:
            if url in self.blacklist:
                return False
            self.blacklist.append(url)
            return True

    def raise_wait_bounds(self, increment: int) -> tuple[int, int]:
        with self._lock:
            self.min_wait += increment
            self.max_wait += increment
            return self.min_wait, self.max_wait

    def wait_bounds(self) -> tuple[int, int]:
        with self._lock:
            return self.min_wait, self.max_wait

    def depth_bounds(self) -> tuple[int, int]:
        with self._lock:
            return self.min_depth, self.max_depth

    def validate(self) -> None:
        with self._lock:
            if not self.root_urls:
                raise ConfigError("at least one root URL must be configured (root_urls)")
            for key in INT_KEYS:
                if getattr(self, key) < 0:
                    raise ConfigError(f"{key} must not be negative")
            if self.min_depth > self.max_depth:
                raise ConfigError(
                    f"min_depth ({self.min_depth}) is greater than max_depth ({self.max_depth})"
                )
            if self.min_wait > self.max_wait:
                raise ConfigError(
                    f"min_wait ({self.min_wait}) is greater than max_wait ({self.max_wait})"
                )


def _coerce(key: str, value: Any) -> Any:
    try:
        if key in INT_KEYS:
            return int(value)
        if key in LIST_KEYS:
            return _as_list(value)
        if key == "verbose":
            return _as_bool(value)
        if key == "user_agent":
            return str(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid value for {key}: {value!r}") from exc
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Iterable):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    raise TypeError(f"expected a list, got {type(value).__name__}")


def find_config_file(explicit: Optional[str] = None) -> Optional[Path]:
    """Returns the config path to read: explicit, then ``$PWD``, then ``$HOME``."""

    if explicit:
        return Path(explicit)

    for directory in (Path.cwd(), Path.home()):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return dict(data)


def _environment_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key in SessionConfig.keys():
        value = os.getenv(key.upper())
        if value is not None and value != "":
            overrides[key] = value
    return overrides


def load_configuration(
    config_file: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SessionConfig:
    """Builds a validated ``SessionConfig``.

    Precedence, lowest first: defaults, YAML file, environment (``.env``
    included), then ``overrides`` (command line flags). ``None`` values in
    ``overrides`` are treated as not given.
    """

    load_dotenv()

    config = SessionConfig()
    path = find_config_file(config_file)
    if path is not None:
        try:
            file_values = read_config_file(path)
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Failed to read config file config_file=%s err=%s", path, exc)
        else:
            logger.info("Using config file: %s", path)
            config.source_path = path
            _apply(config, file_values, origin=str(path))
    else:
        logger.error("Failed to read config file config_file=%s err=%s", CONFIG_FILE_NAME, "not found")

    _apply(config, _environment_overrides(), origin="environment")
    _apply(
        config,
        {key: value for key, value in (overrides or {}).items() if value is not None},
        origin="command line",
    )

    config.validate()
    return config


def _apply(config: SessionConfig, values: Mapping[str, Any], *, origin: str) -> None:
    known = set(SessionConfig.keys())
    for key, value in values.items():
        if key not in known:
            logger.debug("Ignoring unknown configuration key key=%s origin=%s", key, origin)
            continue
        config.set(key, value)
