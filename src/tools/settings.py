"""
Configuration for the signaling relay, read from the environment.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"

# Seconds a rejected or ended call is kept before it is purged
DEFAULT_CALL_PURGE_DELAY = 5.0

DEFAULT_LOG_DIR = "/var/signaling-relay/logs"


@dataclass
class RelaySettings:
    """Relay configuration settings."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    call_purge_delay: float = DEFAULT_CALL_PURGE_DELAY
    cors_allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    log_dir: str = DEFAULT_LOG_DIR

    def __post_init__(self):
        """Override defaults from environment variables."""
        self.host = os.environ.get("HOST", self.host)
        self.port = int(os.environ.get("PORT", self.port))
        self.call_purge_delay = float(
            os.environ.get("CALL_PURGE_DELAY", self.call_purge_delay)
        )
        self.log_dir = os.environ.get("RELAY_LOG_DIR", self.log_dir)

        origins = os.environ.get("CORS_ALLOWED_ORIGINS")
        if origins:
            self.cors_allowed_origins = [
                origin.strip() for origin in origins.split(",") if origin.strip()
            ]

    @property
    def cors_setting(self):
        """Value for socketio's cors_allowed_origins argument."""
        if self.cors_allowed_origins == ["*"]:
            return "*"
        return self.cors_allowed_origins


@lru_cache(maxsize=1)
def get_settings() -> RelaySettings:
    """Return a cached RelaySettings instance."""
    return RelaySettings()
