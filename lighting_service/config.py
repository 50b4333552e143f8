"""
Configuration management for the lighting service.

Handles:
- Listening address and port (``PORT``)
- Artificial response delay (``LIGHTING_DELAY_MS``)
- Cross-origin header values
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_HOST = "::"  # Dual-stack, IPv4 and IPv6
DEFAULT_PORT = 3000
DEFAULT_DELAY_MS = 700

DEFAULT_ALLOW_ORIGIN = "*"
DEFAULT_ALLOW_HEADERS = "Origin, X-Requested-With, Content-Type, Accept"


def _int_from_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


@dataclass
class ServerConfig:
    """Configuration for the HTTP server."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    delay_ms: int = DEFAULT_DELAY_MS  # Simulated latency before every request
    allow_origin: str = DEFAULT_ALLOW_ORIGIN
    allow_headers: str = DEFAULT_ALLOW_HEADERS

    @property
    def delay_seconds(self) -> float:
        return max(self.delay_ms, 0) / 1000.0


@dataclass
class Config:
    """
    Main lighting service configuration.

    Nothing is stored on disk; every value comes from the environment or
    from command-line overrides.
    """
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build configuration from environment variables."""
        environ = os.environ if environ is None else environ

        server = ServerConfig(
            port=_int_from_env(environ, "PORT", DEFAULT_PORT),
            delay_ms=max(_int_from_env(environ, "LIGHTING_DELAY_MS", DEFAULT_DELAY_MS), 0),
        )
        return cls(server=server)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
