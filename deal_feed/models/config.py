"""
Configuration models for the system.
"""

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from ..utils.logging import LogLevel

DEFAULT_ACTOR = "did:plc:knj5sw5al3sukl6vhkpi7637"
DEFAULT_API_URL = "https://public.api.bsky.app/xrpc/app.bsky.feed.getAuthorFeed"
DEFAULT_LIMIT = 50


def _validate_http_url(url: str, label: str) -> None:
    """Raise ValueError unless url is an absolute http(s) URL."""
    if not isinstance(url, str) or not url.strip():
        raise ValueError(f"{label} cannot be empty")

    parsed_url = urlparse(url)
    if not parsed_url.scheme or not parsed_url.netloc:
        raise ValueError(f"Invalid {label} format: {url}")

    if parsed_url.scheme not in ["http", "https"]:
        raise ValueError(f"{label} must use HTTP or HTTPS: {url}")


@dataclass
class FeedConfig:
    """Upstream author feed settings."""

    actor: str = DEFAULT_ACTOR
    limit: int = DEFAULT_LIMIT
    api_url: str = DEFAULT_API_URL
    timeout: int = 30

    def validate(self) -> bool:
        """Validate feed configuration."""
        if not isinstance(self.actor, str) or not self.actor.strip():
            raise ValueError("Feed actor cannot be empty")

        if not isinstance(self.limit, int) or not (1 <= self.limit <= 100):
            raise ValueError("Feed limit must be an integer between 1 and 100")

        _validate_http_url(self.api_url, "Feed API URL")

        if not isinstance(self.timeout, int) or self.timeout <= 0:
            raise ValueError("Feed timeout must be a positive integer")

        return True


@dataclass
class ServerConfig:
    """HTTP server settings for the served feed endpoint."""

    host: str = "127.0.0.1"
    port: int = 8080

    def validate(self) -> bool:
        """Validate server configuration."""
        if not isinstance(self.host, str) or not self.host.strip():
            raise ValueError("Server host cannot be empty")

        if not isinstance(self.port, int) or not (1 <= self.port <= 65535):
            raise ValueError("Server port must be between 1 and 65535")

        return True


@dataclass
class ClientConfig:
    """Settings for the polling client."""

    endpoint: str = "http://127.0.0.1:8080/deals"
    poll_interval: int = 60
    seen_state_file: str = "state/seen_deals.json"
    preferences_file: str = "state/filter_preferences.json"

    def validate(self) -> bool:
        """Validate client configuration."""
        _validate_http_url(self.endpoint, "Client endpoint")

        if not isinstance(self.poll_interval, int) or self.poll_interval < 5:
            raise ValueError("Poll interval must be at least 5 seconds")

        if not self.seen_state_file or not self.seen_state_file.strip():
            raise ValueError("Seen state file path cannot be empty")

        if not self.preferences_file or not self.preferences_file.strip():
            raise ValueError("Preferences file path cannot be empty")

        return True


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    log_dir: Optional[str] = None

    def validate(self) -> bool:
        """Validate logging configuration."""
        if not isinstance(self.level, str) or self.level.upper() not in LogLevel.__members__:
            raise ValueError(f"Unknown log level: {self.level}")

        return True


@dataclass
class Configuration:
    """System configuration."""

    feed: FeedConfig = field(default_factory=FeedConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> bool:
        """Validate system configuration."""
        self.feed.validate()
        self.server.validate()
        self.client.validate()
        self.logging.validate()

        return True
