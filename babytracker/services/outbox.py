"""Background queue pushing local changes to the server with retries."""

import asyncio
import contextlib
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

import requests

from babytracker.models import Baby, Entry, UserProfile
from babytracker.models.entry import entry_type_of
from babytracker.utils import generate_id

from .api_client import ApiClient
from .events import EventBus, bus, request_refresh

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = int(os.getenv("BABYTRACK_SYNC_MAX_ATTEMPTS", "4"))
BACKOFF_SECONDS = float(os.getenv("BABYTRACK_SYNC_BACKOFF_SECONDS", "0.5"))


class SyncStatus(str, Enum):
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"
    LOCAL = "local"  # nothing to sync against (no profile or no email)


class SyncOp(str, Enum):
    CREATE_ENTRY = "create_entry"
    UPDATE_ENTRY = "update_entry"
    DELETE_ENTRY = "delete_entry"
    SAVE_BABY = "save_baby"
    ENSURE_USER = "ensure_user"
    UPDATE_PROFILE = "update_profile"
    UPDATE_SETTINGS = "update_settings"


@dataclass(frozen=True)
class SyncTask:
    """One server call, with the state it needs captured at enqueue time."""
    op: SyncOp
    entity_id: str
    entry: Optional[Entry] = None
    baby: Optional[Baby] = None
    profile: Optional[UserProfile] = None
    data: dict = field(default_factory=dict)
    task_id: str = field(default_factory=generate_id)


StatusListener = Callable[[SyncTask, SyncStatus], None]

_REFRESHING_OPS = {SyncOp.CREATE_ENTRY, SyncOp.UPDATE_ENTRY}


def is_retryable(exc: Exception) -> bool:
    """Transport failures, throttling and server errors are worth retrying."""
    if isinstance(exc, requests.HTTPError):
        resp = exc.response
        return resp is None or resp.status_code >= 500 or resp.status_code == 429
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


class SyncOutbox:
    def __init__(
        self,
        client: ApiClient,
        on_status: Optional[StatusListener] = None,
        events: EventBus = bus,
        max_attempts: int = MAX_ATTEMPTS,
        backoff: float = BACKOFF_SECONDS,
    ):
        self.client = client
        self.on_status = on_status
        self.events = events
        self.max_attempts = max(1, max_attempts)
        self.backoff = backoff
        self._queue: asyncio.Queue[SyncTask] = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def enqueue(self, task: SyncTask) -> SyncTask:
        self._queue.put_nowait(task)
        self._report(task, SyncStatus.PENDING)
        return task

    def _report(self, task: SyncTask, status: SyncStatus) -> None:
        if self.on_status is not None:
            self.on_status(task, status)

    def dispatch(self, task: SyncTask) -> Any:
        """Perform the blocking HTTP call(s) for ``task``; None means skipped."""
        match task.op:
            case SyncOp.CREATE_ENTRY:
                return self.client.create_entry(task.baby, task.profile, task.entry)
            case SyncOp.UPDATE_ENTRY:
                return self.client.update_entry(task.entry.baby_id, task.entry)
            case SyncOp.DELETE_ENTRY:
                entry = task.entry
                return self.client.delete_entry(entry.baby_id, entry.id, entry_type_of(entry))
            case SyncOp.SAVE_BABY:
                return self.client.save_baby(task.baby, task.profile)
            case SyncOp.ENSURE_USER:
                return self.client.ensure_user_exists(task.profile)
            case SyncOp.UPDATE_PROFILE:
                return self.client.update_profile(task.data)
            case SyncOp.UPDATE_SETTINGS:
                if task.profile is None:
                    return None
                return self.client.update_settings(task.profile.id, task.data)
        raise ValueError(f"Unknown sync operation: {task.op}")

    async def process(self, task: SyncTask) -> SyncStatus:
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = await asyncio.to_thread(self.dispatch, task)
            except requests.RequestException as exc:
                if attempt < self.max_attempts and is_retryable(exc):
                    delay = self.backoff * 2 ** (attempt - 1)
                    logger.warning(
                        "Sync %s %s failed (attempt %d/%d): %s; retrying in %.1fs",
                        task.op.value, task.entity_id, attempt, self.max_attempts, exc, delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                self._log_failure(task, exc)
                self._report(task, SyncStatus.FAILED)
                return SyncStatus.FAILED

            status = SyncStatus.LOCAL if result is None else SyncStatus.SYNCED
            self._report(task, status)
            if status is SyncStatus.SYNCED and task.op in _REFRESHING_OPS:
                request_refresh(source=task.op.value, events=self.events)
            return status
        return SyncStatus.FAILED

    def _log_failure(self, task: SyncTask, exc: Exception) -> None:
        if task.op is SyncOp.DELETE_ENTRY:
            logger.error(
                "Could not delete %s on the server; it was removed locally and may reappear: %s",
                task.entity_id, exc,
            )
        else:
            logger.error("Sync %s %s failed: %s", task.op.value, task.entity_id, exc)

    async def run(self) -> None:
        while True:
            task = await self._queue.get()
            try:
                await self.process(task)
            except Exception:
                logger.exception("Unexpected error syncing %s", task.entity_id)
                self._report(task, SyncStatus.FAILED)
            finally:
                self._queue.task_done()

    def start(self) -> asyncio.Task:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self.run(), name="sync-outbox")
        return self._worker

    async def drain(self) -> None:
        """Wait until every queued task has been processed."""
        await self._queue.join()

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None
