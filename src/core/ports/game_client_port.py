"""Port for the local game client API (gameflow phase + end-of-game stats)."""

from abc import ABC, abstractmethod
from typing import Any


class GameClientPort(ABC):
    """Read-only view of the running game client.

    Adapters own the HTTP transport, authentication and retries; the core
    only ever sees decoded JSON.
    """

    @abstractmethod
    async def get_gameflow_phase(self) -> str:
        """Current gameflow phase (e.g. ``"InProgress"``, ``"EndOfGame"``)."""
        pass

    @abstractmethod
    async def get_end_of_game_stats(self) -> dict[str, Any] | None:
        """Raw end-of-game stats block, or None if not available yet."""
        pass
