import os
from dataclasses import dataclass
from typing import Any, Dict


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Config:
    """Configuration management for the query console."""

    # Origin shared by the generation and execution endpoints
    API_URL: str = os.getenv("QUERYCONSOLE_API_URL", "http://localhost:3000")

    # HTTP client configuration
    HTTP_TIMEOUT: float = float(os.getenv("QUERYCONSOLE_HTTP_TIMEOUT", "30.0"))

    # Artificial delay applied by the connect and schema steps (seconds)
    SUBMIT_DELAY: float = float(os.getenv("QUERYCONSOLE_SUBMIT_DELAY", "1.0"))

    # History retention
    HISTORY_LIMIT: int = int(os.getenv("QUERYCONSOLE_HISTORY_LIMIT", "500"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def get_api_url(cls) -> str:
        """Get the API origin without a trailing slash."""
        return cls.API_URL.rstrip("/")

    @classmethod
    def get_http_timeout(cls) -> float:
        """Get the HTTP timeout in seconds."""
        return cls.HTTP_TIMEOUT

    @classmethod
    def get_submit_delay(cls) -> float:
        """Get the artificial submit delay in seconds."""
        return cls.SUBMIT_DELAY

    @classmethod
    def get_history_limit(cls) -> int:
        """Get the maximum number of history entries kept."""
        return cls.HISTORY_LIMIT

    @classmethod
    def get_log_level(cls) -> str:
        """Get the log level name, upper-cased."""
        return cls.LOG_LEVEL.upper()


@dataclass
class ConsoleSettings:
    """Validated settings for one console session."""

    api_url: str = "http://localhost:3000"
    http_timeout: float = 30.0
    submit_delay: float = 1.0
    history_limit: int = 500
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.api_url:
            raise ValueError("api_url cannot be empty")
        if not self.api_url.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL: {self.api_url}")
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")
        if self.submit_delay < 0:
            raise ValueError("submit_delay must be non-negative")
        if self.history_limit <= 0:
            raise ValueError("history_limit must be positive")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")
        self.api_url = self.api_url.rstrip("/")

    @classmethod
    def from_env(cls) -> "ConsoleSettings":
        """Build settings from the environment-backed Config class."""
        return cls(
            api_url=Config.get_api_url(),
            http_timeout=Config.get_http_timeout(),
            submit_delay=Config.get_submit_delay(),
            history_limit=Config.get_history_limit(),
            log_level=Config.get_log_level(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary format."""
        return {
            "api_url": self.api_url,
            "http_timeout": self.http_timeout,
            "submit_delay": self.submit_delay,
            "history_limit": self.history_limit,
            "log_level": self.log_level,
        }
