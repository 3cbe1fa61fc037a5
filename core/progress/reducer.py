"""State transitions for player progress, one handler per action."""

from dataclasses import dataclass, field
from typing import Any, Callable, Union

from config import ProgressConfig
from core.progress.models import AppState, GameSettings, GameStats, GameType


@dataclass(frozen=True)
class StartGame:
    game_type: GameType


@dataclass(frozen=True)
class EndGame:
    game_type: GameType
    won: bool
    elapsed_time: float


@dataclass(frozen=True)
class PauseGame:
    pass


@dataclass(frozen=True)
class ResumeGame:
    pass


@dataclass(frozen=True)
class UpdateScore:
    score: int


@dataclass(frozen=True)
class UpdateTime:
    time: int


@dataclass(frozen=True)
class UpdateSettings:
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResetGame:
    pass


@dataclass(frozen=True)
class LoadSavedState:
    state: AppState


Action = Union[
    StartGame,
    EndGame,
    PauseGame,
    ResumeGame,
    UpdateScore,
    UpdateTime,
    UpdateSettings,
    ResetGame,
    LoadSavedState,
]


def record_result(stats: GameStats, won: bool, elapsed_time: float) -> GameStats:
    """
    Return stats with one more finished game folded in.

    Raises:
        ValueError: If elapsed_time is negative
    """
    if elapsed_time < 0:
        raise ValueError(f"Elapsed time cannot be negative: {elapsed_time}")

    streak = stats.current_streak + 1 if won else 0
    best_time = stats.best_time
    if won and elapsed_time < best_time:
        best_time = elapsed_time

    return GameStats(
        games_played=stats.games_played + 1,
        games_won=stats.games_won + 1 if won else stats.games_won,
        best_time=best_time,
        current_streak=streak,
        best_streak=max(stats.best_streak, streak),
    )


def _start_game(state: AppState, action: StartGame, economy: ProgressConfig) -> AppState:
    return state.model_copy(
        update={
            "current_game": action.game_type,
            "is_playing": True,
            "is_paused": False,
            "game_time": 0,
            "score": 0,
        }
    )


def _end_game(state: AppState, action: EndGame, economy: ProgressConfig) -> AppState:
    player = state.player
    stats = dict(player.stats)
    stats[action.game_type] = record_result(stats[action.game_type], action.won, action.elapsed_time)

    player = player.model_copy(
        update={
            "experience": player.experience
            + (economy.win_experience if action.won else economy.loss_experience),
            "coins": player.coins + (economy.win_coins if action.won else economy.loss_coins),
            "stats": stats,
        }
    )
    return state.model_copy(update={"player": player, "is_playing": False, "is_paused": False})


def _pause_game(state: AppState, action: PauseGame, economy: ProgressConfig) -> AppState:
    return state.model_copy(update={"is_paused": True})


def _resume_game(state: AppState, action: ResumeGame, economy: ProgressConfig) -> AppState:
    return state.model_copy(update={"is_paused": False})


def _update_score(state: AppState, action: UpdateScore, economy: ProgressConfig) -> AppState:
    return state.model_copy(update={"score": action.score})


def _update_time(state: AppState, action: UpdateTime, economy: ProgressConfig) -> AppState:
    return state.model_copy(update={"game_time": max(0, action.time)})


def _update_settings(state: AppState, action: UpdateSettings, economy: ProgressConfig) -> AppState:
    # Validate the merged settings so a bad value never reaches storage
    settings = GameSettings.model_validate({**state.settings.model_dump(), **action.changes})
    return state.model_copy(update={"settings": settings})


def _reset_game(state: AppState, action: ResetGame, economy: ProgressConfig) -> AppState:
    return state.model_copy(
        update={
            "current_game": None,
            "is_playing": False,
            "is_paused": False,
            "game_time": 0,
            "score": 0,
        }
    )


def _load_saved_state(state: AppState, action: LoadSavedState, economy: ProgressConfig) -> AppState:
    return action.state


_HANDLERS: dict[type, Callable[[AppState, Any, ProgressConfig], AppState]] = {
    StartGame: _start_game,
    EndGame: _end_game,
    PauseGame: _pause_game,
    ResumeGame: _resume_game,
    UpdateScore: _update_score,
    UpdateTime: _update_time,
    UpdateSettings: _update_settings,
    ResetGame: _reset_game,
    LoadSavedState: _load_saved_state,
}


def reduce(state: AppState, action: Action, economy: ProgressConfig | None = None) -> AppState:
    """
    Apply an action to the state and return the new state.

    The input state is never modified.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown progress action: {action!r}")
    return handler(state, action, economy or ProgressConfig())
