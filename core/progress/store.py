"""Player progress store: reducer state plus persistence."""

import logging
from typing import Any, Callable

from pydantic import ValidationError

from config import ProgressConfig
from core.progress.models import AppState, GameSettings, GameStats, GameType, PlayerData
from core.progress.reducer import (
    Action,
    EndGame,
    LoadSavedState,
    PauseGame,
    ResetGame,
    ResumeGame,
    StartGame,
    UpdateScore,
    UpdateSettings,
    UpdateTime,
    reduce,
)
from core.progress.storage import BlobStore, InMemoryBlobStore

logger = logging.getLogger(__name__)

STATE_KEY = "cardGameState"

StateListener = Callable[[AppState], None]


def initial_state(economy: ProgressConfig | None = None) -> AppState:
    """Return the zero state of a fresh installation."""
    economy = economy or ProgressConfig()
    return AppState(player=PlayerData(coins=economy.starting_coins))


class ProgressStore:
    """
    Single writer of the player's progress.

    Game engines receive a store at construction and report finished rounds
    through end_game(). Every change is written to the blob store straight
    away; the saved snapshot is read back when the store is created.
    """

    def __init__(
        self,
        storage: BlobStore | None = None,
        key: str = STATE_KEY,
        economy: ProgressConfig | None = None,
    ) -> None:
        """
        Initialize the store and rehydrate any saved state.

        Args:
            storage: Where snapshots live (in memory if omitted)
            key: Storage key of the snapshot
            economy: Experience and coin rewards
        """
        self._storage = storage or InMemoryBlobStore()
        self._key = key
        self._economy = economy or ProgressConfig()
        self._listeners: list[StateListener] = []
        self._state = self._load()

    def _load(self) -> AppState:
        """Read the saved snapshot, falling back to a fresh profile."""
        try:
            blob = self._storage.get(self._key)
        except UnicodeDecodeError as exc:
            logger.warning("Discarding unreadable saved progress: %s", exc)
            return initial_state(self._economy)
        except OSError as exc:
            logger.warning("Could not read saved progress: %s", exc)
            return initial_state(self._economy)

        if blob is None:
            return initial_state(self._economy)

        try:
            return AppState.model_validate_json(blob)
        except ValidationError as exc:
            logger.warning("Discarding unreadable saved progress (%d errors)", exc.error_count())
            return initial_state(self._economy)

    def _save(self) -> None:
        try:
            self._storage.set(self._key, self._state.model_dump_json())
        except OSError as exc:
            logger.error("Could not save progress: %s", exc)

    @property
    def state(self) -> AppState:
        """Return the current state."""
        return self._state

    @property
    def player(self) -> PlayerData:
        """Return the player profile."""
        return self._state.player

    @property
    def settings(self) -> GameSettings:
        """Return the user settings."""
        return self._state.settings

    def stats_for(self, game_type: GameType) -> GameStats:
        """Return the statistics of one game."""
        return self._state.player.stats[game_type]

    def subscribe(self, listener: StateListener) -> None:
        """Call a listener with the new state after every change."""
        self._listeners.append(listener)

    def dispatch(self, action: Action) -> AppState:
        """Apply an action, persist the result and notify listeners."""
        new_state = reduce(self._state, action, self._economy)
        if new_state == self._state:
            return self._state

        self._state = new_state
        self._save()
        for listener in self._listeners:
            listener(new_state)
        return new_state

    def start_game(self, game_type: GameType) -> AppState:
        """Mark a game as being played."""
        return self.dispatch(StartGame(game_type))

    def end_game(self, game_type: GameType, won: bool, elapsed_time: float) -> AppState:
        """
        Record one finished game.

        Callers must invoke this exactly once per round; a second call counts
        a second game. A negative elapsed_time raises ValueError and nothing
        is recorded.
        """
        logger.info("Game over: %s won=%s in %ss", game_type.value, won, elapsed_time)
        return self.dispatch(EndGame(game_type, won, elapsed_time))

    def pause_game(self) -> AppState:
        return self.dispatch(PauseGame())

    def resume_game(self) -> AppState:
        return self.dispatch(ResumeGame())

    def update_score(self, score: int) -> AppState:
        return self.dispatch(UpdateScore(score))

    def update_time(self, time: int) -> AppState:
        return self.dispatch(UpdateTime(time))

    def update_settings(self, **changes: Any) -> AppState:
        """Change some settings; unknown or invalid values raise ValidationError."""
        return self.dispatch(UpdateSettings(changes))

    def reset_game(self) -> AppState:
        """Leave the current game without recording a result."""
        return self.dispatch(ResetGame())

    def load_saved_state(self, state: AppState) -> AppState:
        """Replace the whole state, e.g. from an imported snapshot."""
        return self.dispatch(LoadSavedState(state))

    def reload(self) -> AppState:
        """Re-read the snapshot from storage, discarding in-memory changes."""
        self._state = self._load()
        return self._state
