from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

MIN_URLS = 1
MAX_URLS = 10000
MIN_TIMEOUT = 1
MAX_TIMEOUT = 10000

# extra time (ms) on top of the requested timeout for connection setup
DEFAULT_GRACE_MS = 1500
DEFAULT_MAX_BODY_BYTES = 2 * 1024 * 1024
DEFAULT_USER_AGENT = "SpiderWeb/0.1"


def load_env() -> None:
    """
    Load environment variables from a .env file in the working directory if
    present. Existing variables are not overridden.
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


@dataclass
class SpiderConfig:
    grace_ms: int = DEFAULT_GRACE_MS
    user_agent: str = DEFAULT_USER_AGENT
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES  # 0 = unlimited
    parser: str = "html.parser"

    @classmethod
    def from_env(cls) -> "SpiderConfig":
        return cls(
            grace_ms=int(os.getenv("SPIDERWEB_GRACE_MS", str(DEFAULT_GRACE_MS))),
            user_agent=os.getenv("SPIDERWEB_USER_AGENT", DEFAULT_USER_AGENT),
            max_body_bytes=int(
                os.getenv("SPIDERWEB_MAX_BODY_BYTES", str(DEFAULT_MAX_BODY_BYTES))
            ),
            parser=os.getenv("SPIDERWEB_PARSER", "html.parser"),
        )

    def fetch_timeout(self, timeout_ms: int) -> float:
        """Seconds allowed for the whole fetch."""
        return (timeout_ms + self.grace_ms) / 1000.0
