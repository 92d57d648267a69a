"""
Service configuration.

Settings are read from environment variables once and cached; tests can
build their own Settings or clear the cache with get_settings.cache_clear().
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Tuple

STORE_BACKENDS = ("sqlite", "memory")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from e


def parse_bind_addr(bind_addr: str) -> Tuple[str, int]:
    """
    Split a "host:port" bind address; an empty host means all interfaces.

    Examples:
        ":8080" -> ("0.0.0.0", 8080)
        "127.0.0.1:9000" -> ("127.0.0.1", 9000)
    """
    host, sep, port = bind_addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"BIND_ADDR must look like 'host:port', got '{bind_addr}'")
    return host or "0.0.0.0", int(port)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the books API."""

    bind_addr: str = ":8080"
    api_url: str = "http://localhost:8080"
    book_store: str = "sqlite"
    db_path: Path = Path("data/bookStore.db")
    collection: str = "books"
    default_limit: int = 20
    max_limit: int = 1000
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.book_store not in STORE_BACKENDS:
            raise ValueError(
                f"BOOK_STORE must be one of {STORE_BACKENDS}, got '{self.book_store}'"
            )

        if self.max_limit < 0:
            raise ValueError(f"MAX_LIMIT cannot be negative, got {self.max_limit}")

        if not (0 <= self.default_limit <= self.max_limit):
            raise ValueError(
                f"DEFAULT_LIMIT must be between 0 and MAX_LIMIT ({self.max_limit}), "
                f"got {self.default_limit}"
            )

        parse_bind_addr(self.bind_addr)

    @property
    def host(self) -> str:
        return parse_bind_addr(self.bind_addr)[0]

    @property
    def port(self) -> int:
        return parse_bind_addr(self.bind_addr)[1]

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment, falling back to defaults."""
        return cls(
            bind_addr=os.getenv("BIND_ADDR", ":8080"),
            api_url=os.getenv("API_URL", "http://localhost:8080").rstrip("/"),
            book_store=os.getenv("BOOK_STORE", "sqlite").lower(),
            db_path=Path(os.getenv("DB_PATH", "data/bookStore.db")),
            collection=os.getenv("COLLECTION", "books"),
            default_limit=_int_env("DEFAULT_LIMIT", 20),
            max_limit=_int_env("MAX_LIMIT", 1000),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings for the running process."""
    return Settings.from_env()
