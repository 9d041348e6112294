"""Port interfaces between the core and the outside world.

Adapters for the local game client implement these; the core depends only
on the abstract contract.
"""

from __future__ import annotations

from src.core.ports.game_client_port import GameClientPort

__all__ = ["GameClientPort"]
