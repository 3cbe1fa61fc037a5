"""Shared application state handed to the routes."""

from config import config
from core.progress import FileBlobStore, ProgressStore

# Global progress store instance
_progress_store: ProgressStore | None = None


def get_progress_store() -> ProgressStore:
    """Get or create the progress store of this installation."""
    global _progress_store
    if _progress_store is None:
        _progress_store = ProgressStore(
            storage=FileBlobStore(config.storage.data_dir),
            key=config.storage.state_key,
            economy=config.progress,
        )
    return _progress_store
