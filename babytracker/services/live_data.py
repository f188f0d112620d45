"""Periodic refresh of the server's "today" view for the current baby."""

import asyncio
import contextlib
import logging
import os
from datetime import datetime
from typing import Any, Optional

import requests
from pydantic import BaseModel

from babytracker.models import LiveBabyData

from .api_client import ApiClient
from .events import REFRESH_LIVE_DATA, EventBus, bus
from .store import BabyTrackerStore

logger = logging.getLogger(__name__)

REFRESH_INTERVAL = float(os.getenv("BABYTRACK_LIVE_REFRESH_SECONDS", "15"))
REFRESH_DELAY = 0.1  # seconds given to the server to persist a write before re-reading


class LiveDataState(BaseModel):
    model_config = {"frozen": True}

    data: Optional[LiveBabyData] = None
    loading: bool = False
    error: Optional[str] = None
    timestamp: Optional[datetime] = None
    sequence: int = 0


class LiveDataPoller:
    """Polls live data on an interval and whenever a refresh is requested.

    Every request is numbered; a response is only used if no later request
    has already been answered, so a slow response cannot overwrite newer data.
    """

    def __init__(
        self,
        store: BabyTrackerStore,
        client: ApiClient,
        events: EventBus = bus,
        interval: float = REFRESH_INTERVAL,
        refresh_delay: float = REFRESH_DELAY,
    ):
        self.store = store
        self.client = client
        self.events = events
        self.interval = interval
        self.refresh_delay = refresh_delay
        self._state = LiveDataState()
        self._issued = 0
        self._applied = 0
        self._wake = asyncio.Event()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> LiveDataState:
        return self._state

    def _email(self) -> Optional[str]:
        profile = self.store.state.user_profile
        return profile.email if profile is not None else self.store.identity.get_email()

    async def refresh(self) -> LiveDataState:
        """Fetch once now; also the manual retry after an error."""
        baby = self.store.state.current_baby
        email = self._email()
        if baby is None or not email:
            self._state = self._state.model_copy(update={"error": "Missing baby or user info", "loading": False})
            return self._state

        self._issued += 1
        sequence = self._issued
        revision = self.store.state.entries_revision
        self._state = self._state.model_copy(update={"loading": True})

        try:
            payload = await asyncio.to_thread(self.client.get_live_data, baby.id, email)
            live = LiveBabyData.from_response(payload)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error fetching live data for baby %s: %s", baby.id, exc)
            if sequence < self._applied:
                return self._state
            self._applied = sequence
            self._state = self._state.model_copy(update={
                "error": str(exc),
                "loading": self._issued > sequence,
                "sequence": sequence,
            })
            return self._state

        if sequence < self._applied:
            logger.debug("Dropping stale live-data response #%d (latest is #%d)", sequence, self._applied)
            return self._state
        self._applied = sequence
        self._state = LiveDataState(
            data=live,
            loading=self._issued > sequence,
            timestamp=self.store.clock(),
            sequence=sequence,
        )
        self.store.apply_live_data(live, revision)
        return self._state

    def _on_refresh_requested(self, **_: Any) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(loop.call_later, self.refresh_delay, self._wake.set)

    async def run(self) -> None:
        self._loop = asyncio.get_running_loop()
        unsubscribe = self.events.subscribe(REFRESH_LIVE_DATA, self._on_refresh_requested)
        try:
            while True:
                await self.refresh()
                try:
                    await asyncio.wait_for(self._wake.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
                self._wake.clear()
        finally:
            unsubscribe()
            self._loop = None

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="live-data-poller")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
