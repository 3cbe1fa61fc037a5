"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return [o.strip() for o in origins.split(",") if o.strip()]


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "120"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class StorageConfig:
    """Local persistence configuration."""

    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("DATA_DIR", Path.home() / ".card-arcade"))
    )
    state_key: str = "cardGameState"


@dataclass(frozen=True)
class BlackjackConfig:
    """Blackjack table configuration."""

    starting_chips: int = 1000
    default_bet: int = 10
    min_bet: int = 10
    reshuffle_threshold: int = 10  # Fresh deck when fewer cards remain
    dealer_stands_on: int = 17
    blackjack_return: float = 2.5  # Total return on a natural, bet included


@dataclass(frozen=True)
class SolitaireConfig:
    """Klondike configuration."""

    draw_count: int = 3
    foundation_points: int = 10
    tableau_points: int = 5


@dataclass(frozen=True)
class ProgressConfig:
    """Experience and coin economy."""

    starting_coins: int = 100
    win_experience: int = 50
    loss_experience: int = 10
    win_coins: int = 20
    loss_coins: int = 5


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    session_ttl: int = 86400  # Session timeout in seconds

    storage: StorageConfig = field(default_factory=StorageConfig)
    blackjack: BlackjackConfig = field(default_factory=BlackjackConfig)
    solitaire: SolitaireConfig = field(default_factory=SolitaireConfig)
    progress: ProgressConfig = field(default_factory=ProgressConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
