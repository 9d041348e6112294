"""Service layer: long-running loops that drive the summary pipeline."""

from src.core.services.end_of_game_watcher import EndOfGameWatcher

__all__ = ["EndOfGameWatcher"]
