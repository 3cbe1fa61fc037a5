"""Persisted player progress and settings."""

import math
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class GameType(str, Enum):
    """Games that keep statistics."""

    SOLITAIRE = "solitaire"
    HEARTS = "hearts"
    BLACKJACK = "blackjack"
    WAR = "war"


class GameStats(BaseModel):
    """Per-game statistics."""

    model_config = ConfigDict(frozen=True)

    games_played: int = Field(default=0, ge=0)
    games_won: int = Field(default=0, ge=0)
    best_time: float = Field(default=math.inf, ge=0)  # inf until the first win
    current_streak: int = Field(default=0, ge=0)
    best_streak: int = Field(default=0, ge=0)

    @field_validator("best_time", mode="before")
    @classmethod
    def _missing_time_is_infinite(cls, value: object) -> object:
        # JSON has no infinity, so an unset best time is stored as null
        return math.inf if value is None else value

    @field_serializer("best_time")
    def _serialize_best_time(self, value: float) -> float | None:
        return None if math.isinf(value) else value

    @property
    def has_best_time(self) -> bool:
        """Check if a winning time has been recorded."""
        return not math.isinf(self.best_time)

    @property
    def win_rate(self) -> float:
        """Fraction of games won."""
        if self.games_played == 0:
            return 0.0
        return self.games_won / self.games_played


def _default_stats() -> dict[GameType, GameStats]:
    return {game_type: GameStats() for game_type in GameType}


class PlayerData(BaseModel):
    """The one player profile of this installation."""

    model_config = ConfigDict(frozen=True)

    name: str = "Player"
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    coins: int = Field(default=100, ge=0)
    achievements: list[str] = Field(default_factory=list)
    stats: dict[GameType, GameStats] = Field(default_factory=_default_stats)

    @field_validator("achievements")
    @classmethod
    def _unique_achievements(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @field_validator("stats")
    @classmethod
    def _stats_for_every_game(cls, value: dict[GameType, GameStats]) -> dict[GameType, GameStats]:
        return {game_type: value.get(game_type, GameStats()) for game_type in GameType}


class GameSettings(BaseModel):
    """User preferences stored with the progress."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sound_enabled: bool = True
    animations_enabled: bool = True
    auto_complete_enabled: bool = True
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    card_back: str = "classic"
    theme: Literal["light", "dark", "system"] = "system"


class AppState(BaseModel):
    """Everything persisted under the single storage key."""

    model_config = ConfigDict(frozen=True)

    player: PlayerData = Field(default_factory=PlayerData)
    settings: GameSettings = Field(default_factory=GameSettings)
    current_game: GameType | None = None
    is_playing: bool = False
    is_paused: bool = False
    game_time: int = Field(default=0, ge=0)
    score: int = 0
