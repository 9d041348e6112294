"""Detect end-of-game transitions in the local client and summarize them once."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping

from src.config.settings import AFKThresholds
from src.contracts.match_summary import ClutchStats, MatchSummary
from src.core.errors import MalformedPayloadError
from src.core.ingest.normalizer import extract_game_id
from src.core.observability import (
    clear_correlation_id,
    set_correlation_id,
    trace_collaborator,
)
from src.core.ports.game_client_port import GameClientPort
from src.core.scoring.pipeline import summarize_match

logger = logging.getLogger(__name__)

END_OF_GAME_PHASE = "EndOfGame"

SummaryCallback = Callable[[MatchSummary], Awaitable[None]]
ClutchProvider = Callable[[], Mapping[str, ClutchStats] | None]


class EndOfGameWatcher:
    """Poll the gameflow phase and emit one summary per finished match.

    A summary is produced only on a transition *into* ``EndOfGame``, only
    outside the cooldown window, and only if the payload's game id differs
    from the last one processed.
    """

    def __init__(
        self,
        *,
        client: GameClientPort,
        thresholds: AFKThresholds | None = None,
        viewer_name: str = "",
        poll_interval_seconds: float = 3.0,
        cooldown_seconds: float = 30.0,
        on_summary: SummaryCallback | None = None,
        clutch_provider: ClutchProvider | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._thresholds = thresholds or AFKThresholds()
        self._viewer_name = viewer_name
        self._poll_interval = max(0.0, poll_interval_seconds)
        self._cooldown = max(0.0, cooldown_seconds)
        self._on_summary = on_summary
        self._clutch_provider = clutch_provider
        self._clock = clock

        self._current_phase = ""
        self._last_end_of_game_at: float | None = None
        self._last_game_id: str | None = None

    @property
    def current_phase(self) -> str:
        return self._current_phase

    @property
    def last_game_id(self) -> str | None:
        return self._last_game_id

    async def poll_once(self) -> MatchSummary | None:
        """Check the phase once; return a summary if a new match just ended."""
        try:
            phase = await self._client.get_gameflow_phase()
        except Exception as exc:
            logger.warning("gameflow_phase_fetch_failed: %s", exc)
            return None

        previous, self._current_phase = self._current_phase, phase or ""
        if self._current_phase != previous:
            logger.info("gameflow_phase_changed", extra={"phase": phase, "previous": previous})

        if self._current_phase != END_OF_GAME_PHASE or previous == END_OF_GAME_PHASE:
            return None

        now = self._clock()
        if (
            self._last_end_of_game_at is not None
            and now - self._last_end_of_game_at < self._cooldown
        ):
            logger.info(
                "end_of_game_cooldown_active",
                extra={"seconds_since_last": round(now - self._last_end_of_game_at, 1)},
            )
            return None
        self._last_end_of_game_at = now

        logger.info("end_of_game_detected")
        return await self._process_end_of_game()

    @trace_collaborator
    async def _fetch_end_of_game_stats(self) -> dict | None:
        return await self._client.get_end_of_game_stats()

    async def _process_end_of_game(self) -> MatchSummary | None:
        try:
            payload = await self._fetch_end_of_game_stats()
        except Exception as exc:
            logger.warning("end_of_game_stats_fetch_failed: %s", exc)
            return None

        if not payload:
            logger.warning("end_of_game_stats_missing")
            return None

        game_id = extract_game_id(payload) if isinstance(payload, Mapping) else ""
        if game_id and game_id == self._last_game_id:
            logger.info("end_of_game_duplicate_skipped", extra={"game_id": game_id})
            return None

        clutch = self._clutch_provider() if self._clutch_provider else None

        set_correlation_id(game_id or "unknown")
        try:
            summary = summarize_match(
                payload,
                thresholds=self._thresholds,
                viewer_name=self._viewer_name,
                clutch_stats=clutch,
            )
        except MalformedPayloadError as exc:
            logger.warning("end_of_game_payload_malformed: %s", exc)
            return None
        finally:
            clear_correlation_id()

        if game_id:
            self._last_game_id = game_id

        if summary is None:
            return None

        if self._on_summary is not None:
            try:
                await self._on_summary(summary)
            except Exception:
                logger.exception("summary_callback_failed", extra={"game_id": game_id})

        return summary

    async def run(self, stop_event: asyncio.Event) -> None:
        """Poll until ``stop_event`` is set."""
        logger.info(
            "end_of_game_watcher_started",
            extra={"poll_interval": self._poll_interval, "cooldown": self._cooldown},
        )
        while not stop_event.is_set():
            await self.poll_once()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._poll_interval)
            except TimeoutError:
                continue
        logger.info("end_of_game_watcher_stopped")
