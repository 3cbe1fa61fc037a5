"""Cross-game player progress and its persistence."""

from core.progress.models import AppState, GameSettings, GameStats, GameType, PlayerData
from core.progress.storage import BlobStore, FileBlobStore, InMemoryBlobStore
from core.progress.store import STATE_KEY, ProgressStore, initial_state

__all__ = [
    "AppState",
    "GameSettings",
    "GameStats",
    "GameType",
    "PlayerData",
    "BlobStore",
    "FileBlobStore",
    "InMemoryBlobStore",
    "STATE_KEY",
    "ProgressStore",
    "initial_state",
]
