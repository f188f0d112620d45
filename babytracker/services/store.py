"""Application state container.

``BabyTrackerStore`` holds one immutable ``StoreState`` at a time. Every
mutator builds the next snapshot, publishes it to subscribers, then queues the
matching server call on the sync outbox. Local state is updated first and is
never rolled back when the server call fails; the outcome is tracked per
entity in ``StoreState.sync_status``.
"""

import asyncio
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

import requests

from babytracker.health.age import age_in_weeks
from babytracker.health.recommendations import (
    next_feeding_time,
    recommended_daily_sleep,
    recommended_feeding_interval,
)
from babytracker.models import (
    AppSettings,
    Baby,
    DiaperEntry,
    Entry,
    FamilyMember,
    FeedingEntry,
    GrowthEntry,
    LiveBabyData,
    Notification,
    NotificationSettings,
    Preferences,
    SleepEntry,
    UserProfile,
)
from babytracker.models.diaper import DiaperType
from babytracker.models.entry import ENTRY_MODELS, entry_timestamp, entry_type_of
from babytracker.models.feeding import FeedingKind, FeedingMood
from babytracker.models.sleep import SleepQuality
from babytracker.utils import day_bounds, generate_id

from . import notification_service
from .api_client import ApiClient, ProfileNotFoundError
from .identity import IdentityStore
from .outbox import SyncOp, SyncOutbox, SyncStatus, SyncTask
from .profile_loader import parse_profile, parse_settings
from .state import FeedingSession, SleepTimer, StoreState

logger = logging.getLogger(__name__)

EXPORT_VERSION = "2.1.0"
NIGHT_SLEEP_MINUTES = 120

Listener = Callable[[StoreState], None]
Clock = Callable[[], datetime]

_COLLECTIONS = {
    "feeding": "feedings",
    "sleep": "sleeps",
    "diaper": "diapers",
    "growth": "growth",
}
_UNSYNCED = {SyncStatus.PENDING, SyncStatus.FAILED, SyncStatus.LOCAL}


class BabyTrackerStore:
    def __init__(
        self,
        client: Optional[ApiClient] = None,
        outbox: Optional[SyncOutbox] = None,
        identity: Optional[IdentityStore] = None,
        clock: Clock = datetime.now,
        state: Optional[StoreState] = None,
    ):
        self.client = client
        self.identity = identity or (client.identity if client is not None else IdentityStore())
        self.clock = clock
        self._state = state or StoreState()
        self._listeners: list[Listener] = []
        self.outbox: Optional[SyncOutbox] = None
        if outbox is not None:
            self.attach_outbox(outbox)

    # ── Plumbing ───────────────────────────────────────────────────────────

    @property
    def state(self) -> StoreState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot; returns the unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def attach_outbox(self, outbox: SyncOutbox) -> None:
        self.outbox = outbox
        outbox.on_status = self._on_sync_status

    def _commit(self, touches_entries: bool = False, **changes: Any) -> StoreState:
        changes["revision"] = self._state.revision + 1
        if touches_entries:
            changes["entries_revision"] = self._state.entries_revision + 1
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def _sync(self, op: SyncOp, entity_id: str, **fields: Any) -> None:
        if self.outbox is None:
            logger.debug("No outbox attached, %s %s stays local", op.value, entity_id)
            return
        self.outbox.enqueue(SyncTask(op=op, entity_id=entity_id, **fields))

    def _on_sync_status(self, task: SyncTask, status: SyncStatus) -> None:
        if task.op is SyncOp.DELETE_ENTRY and status is SyncStatus.SYNCED:
            self.forget_sync_status(task.entity_id)
            return
        self.mark_sync_status(task.entity_id, status)

    def forget_sync_status(self, entity_id: str) -> None:
        if entity_id not in self._state.sync_status:
            return
        statuses = {k: v for k, v in self._state.sync_status.items() if k != entity_id}
        self._commit(sync_status=statuses)

    def mark_sync_status(self, entity_id: str, status: SyncStatus) -> None:
        statuses = {**self._state.sync_status, entity_id: status}
        self._commit(sync_status=statuses)

    def sync_status_of(self, entity_id: str) -> Optional[SyncStatus]:
        return self._state.sync_status.get(entity_id)

    def _baby_for(self, baby_id: str) -> Optional[Baby]:
        for baby in self._state.babies:
            if baby.id == baby_id:
                return baby
        current = self._state.current_baby
        return current if current is not None and current.id == baby_id else None

    # ── Entries (shared) ───────────────────────────────────────────────────

    def _add_entry(self, entry: Entry, **extra: Any) -> StoreState:
        attr = _COLLECTIONS[entry_type_of(entry)]
        state = self._commit(
            touches_entries=True,
            **{attr: getattr(self._state, attr) + (entry,)},
            **extra,
        )
        baby = self._baby_for(entry.baby_id)
        if baby is None:
            logger.warning("Baby %s is not loaded, %s %s kept local", entry.baby_id, attr, entry.id)
            return state
        self._sync(SyncOp.CREATE_ENTRY, entry.id, entry=entry, baby=baby, profile=state.user_profile)
        return self._state

    def _update_entry(self, entry_type: str, entry_id: str, updates: Mapping[str, Any]) -> StoreState:
        attr = _COLLECTIONS[entry_type]
        model = ENTRY_MODELS[entry_type]
        updated: Optional[Entry] = None
        items = []
        for item in getattr(self._state, attr):
            if item.id == entry_id:
                updated = model.model_validate({**item.model_dump(), **updates, "id": item.id})
                items.append(updated)
            else:
                items.append(item)
        if updated is None:
            logger.warning("No %s entry with id %s to update", entry_type, entry_id)
            return self._state
        self._commit(touches_entries=True, **{attr: tuple(items)})
        self._sync(SyncOp.UPDATE_ENTRY, entry_id, entry=updated)
        return self._state

    def _remove_entry(self, entry_type: str, entry_id: str) -> StoreState:
        attr = _COLLECTIONS[entry_type]
        items = getattr(self._state, attr)
        removed = next((item for item in items if item.id == entry_id), None)
        if removed is None:
            logger.warning("No %s entry with id %s to remove", entry_type, entry_id)
            return self._state
        self._commit(touches_entries=True, **{attr: tuple(i for i in items if i.id != entry_id)})
        self._sync(SyncOp.DELETE_ENTRY, entry_id, entry=removed)
        return self._state

    def _current_baby_or_warn(self, action: str) -> Optional[Baby]:
        baby = self._state.current_baby
        if baby is None:
            logger.warning("No current baby selected, ignoring %s", action)
        return baby

    # ── Babies ─────────────────────────────────────────────────────────────

    def set_current_baby(self, baby: Optional[Baby]) -> StoreState:
        return self._commit(current_baby=baby)

    def add_baby(self, baby: Baby) -> StoreState:
        state = self._commit(
            babies=self._state.babies + (baby,),
            current_baby=self._state.current_baby or baby,
        )
        self._sync(SyncOp.SAVE_BABY, baby.id, baby=baby, profile=state.user_profile)
        return self._state

    def update_baby(self, baby_id: str, **updates: Any) -> StoreState:
        baby = self._baby_for(baby_id)
        if baby is None:
            logger.warning("No baby with id %s to update", baby_id)
            return self._state
        updated = Baby.model_validate({**baby.model_dump(), **updates, "id": baby_id})
        current = self._state.current_baby
        state = self._commit(
            babies=tuple(updated if b.id == baby_id else b for b in self._state.babies),
            current_baby=updated if current is not None and current.id == baby_id else current,
        )
        self._sync(SyncOp.SAVE_BABY, baby_id, baby=updated, profile=state.user_profile)
        return self._state

    # ── Feedings ───────────────────────────────────────────────────────────

    def add_feeding(self, entry: FeedingEntry) -> StoreState:
        return self._add_entry(entry)

    def update_feeding(self, entry_id: str, **updates: Any) -> StoreState:
        return self._update_entry("feeding", entry_id, updates)

    def remove_feeding(self, entry_id: str) -> StoreState:
        return self._remove_entry("feeding", entry_id)

    def quick_add_bottle(self, amount: Optional[float] = None) -> StoreState:
        baby = self._current_baby_or_warn("quick bottle")
        if baby is None:
            return self._state
        return self._add_entry(FeedingEntry(
            baby_id=baby.id,
            kind="bottle",
            amount=amount if amount is not None else self._state.preferences.default_bottle_amount,
            start_time=self.clock(),
        ))

    def start_feeding_session(self, kind: FeedingKind = "bottle", amount: float = 0) -> StoreState:
        return self._commit(feeding_session=FeedingSession(
            is_active=True,
            kind=kind,
            amount=amount,
            start_time=self.clock(),
            session_id=generate_id("feeding"),
        ))

    def update_feeding_session(self, **changes: Any) -> StoreState:
        return self._commit(feeding_session=self._state.feeding_session.model_copy(update=changes))

    def end_feeding_session(self, mood: Optional[FeedingMood] = None) -> StoreState:
        session = self._state.feeding_session
        baby = self._state.current_baby
        if not session.is_active or session.start_time is None or baby is None:
            return self._state
        end = self.clock()
        entry = FeedingEntry(
            baby_id=baby.id,
            kind=session.kind,
            amount=session.amount or None,
            duration=int((end - session.start_time).total_seconds()),
            start_time=session.start_time,
            end_time=end,
            mood=mood,
        )
        return self._add_entry(entry, feeding_session=FeedingSession())

    # ── Sleeps ─────────────────────────────────────────────────────────────

    def add_sleep(self, entry: SleepEntry) -> StoreState:
        return self._add_entry(entry)

    def update_sleep(self, entry_id: str, **updates: Any) -> StoreState:
        return self._update_entry("sleep", entry_id, updates)

    def remove_sleep(self, entry_id: str) -> StoreState:
        return self._remove_entry("sleep", entry_id)

    def start_sleep_timer(self) -> StoreState:
        return self._commit(sleep_timer=SleepTimer(
            is_running=True,
            start_time=self.clock(),
            session_id=generate_id("sleep"),
        ))

    def update_sleep_timer(self, **changes: Any) -> StoreState:
        return self._commit(sleep_timer=self._state.sleep_timer.model_copy(update=changes))

    def refresh_timers(self) -> StoreState:
        """Bring the displayed seconds of running timers up to the clock."""
        now = self.clock()
        changes: dict[str, Any] = {}
        timer = self._state.sleep_timer
        if timer.is_running and timer.start_time is not None:
            changes["sleep_timer"] = timer.model_copy(
                update={"seconds": int((now - timer.start_time).total_seconds())}
            )
        session = self._state.feeding_session
        if session.is_active and session.start_time is not None:
            changes["feeding_session"] = session.model_copy(
                update={"timer_seconds": int((now - session.start_time).total_seconds())}
            )
        return self._commit(**changes) if changes else self._state

    def end_sleep_timer(self, quality: SleepQuality = "good") -> StoreState:
        timer = self._state.sleep_timer
        baby = self._state.current_baby
        if not timer.is_running or timer.start_time is None or baby is None:
            return self._state
        end = self.clock()
        minutes = int((end - timer.start_time).total_seconds() // 60)
        entry = SleepEntry(
            baby_id=baby.id,
            start_time=timer.start_time,
            end_time=end,
            quality=quality,
            type="night" if minutes > NIGHT_SLEEP_MINUTES else "nap",
            notes=f"Duration: {minutes}min",
        )
        return self._add_entry(entry, sleep_timer=SleepTimer())

    # ── Diapers ────────────────────────────────────────────────────────────

    def add_diaper(self, entry: DiaperEntry) -> StoreState:
        return self._add_entry(entry)

    def update_diaper(self, entry_id: str, **updates: Any) -> StoreState:
        return self._update_entry("diaper", entry_id, updates)

    def remove_diaper(self, entry_id: str) -> StoreState:
        return self._remove_entry("diaper", entry_id)

    def quick_add_diaper(self, diaper_type: DiaperType) -> StoreState:
        """One-tap diaper log. A dry diaper is not a change and records nothing."""
        if diaper_type == "dry":
            logger.info("Dry diaper, nothing recorded")
            return self._state
        baby = self._current_baby_or_warn("quick diaper")
        if baby is None:
            return self._state
        return self._add_entry(DiaperEntry(
            baby_id=baby.id,
            time=self.clock(),
            type=diaper_type,
            amount="normal",
            color="yellow" if diaper_type in ("soiled", "mixed") else None,
        ))

    # ── Growth ─────────────────────────────────────────────────────────────

    def add_growth_entry(self, entry: GrowthEntry) -> StoreState:
        if self._current_baby_or_warn("growth entry") is None:
            return self._state
        return self._add_entry(entry)

    def update_growth_entry(self, entry_id: str, **updates: Any) -> StoreState:
        if self._current_baby_or_warn("growth update") is None:
            return self._state
        return self._update_entry("growth", entry_id, updates)

    def remove_growth_entry(self, entry_id: str) -> StoreState:
        if self._current_baby_or_warn("growth removal") is None:
            return self._state
        return self._remove_entry("growth", entry_id)

    def get_growth_entries(self, baby_id: Optional[str] = None) -> list[GrowthEntry]:
        if baby_id is None:
            baby = self._state.current_baby
            if baby is None:
                return []
            baby_id = baby.id
        return sorted((g for g in self._state.growth if g.baby_id == baby_id), key=lambda g: g.date)

    # ── Notifications ──────────────────────────────────────────────────────

    @property
    def unread_count(self) -> int:
        return self._state.unread_count

    def add_notification(self, notification: Notification) -> StoreState:
        return self._commit(
            notifications=(notification,) + self._state.notifications,
            unread_count=self._state.unread_count + (0 if notification.is_read else 1),
        )

    def mark_as_read(self, notification_id: str) -> StoreState:
        target = next((n for n in self._state.notifications if n.id == notification_id), None)
        if target is None or target.is_read:
            return self._state
        return self._commit(
            notifications=tuple(
                n.model_copy(update={"is_read": True}) if n.id == notification_id else n
                for n in self._state.notifications
            ),
            unread_count=max(0, self._state.unread_count - 1),
        )

    def mark_all_as_read(self) -> StoreState:
        return self._commit(
            notifications=tuple(n.model_copy(update={"is_read": True}) for n in self._state.notifications),
            unread_count=0,
        )

    def remove_notification(self, notification_id: str) -> StoreState:
        target = next((n for n in self._state.notifications if n.id == notification_id), None)
        if target is None:
            return self._state
        return self._commit(
            notifications=tuple(n for n in self._state.notifications if n.id != notification_id),
            unread_count=self._state.unread_count - (0 if target.is_read else 1),
        )

    def clear_old_notifications(self) -> StoreState:
        """Drop every notification already read."""
        return self._commit(notifications=tuple(n for n in self._state.notifications if not n.is_read))

    def update_notification_settings(self, **changes: Any) -> StoreState:
        current = self._state.notification_settings
        return self._commit(
            notification_settings=NotificationSettings.model_validate({**current.model_dump(), **changes})
        )

    def generate_notifications(self) -> StoreState:
        state = self._state
        baby = state.current_baby
        if baby is None:
            return state
        now = self.clock()
        weeks = age_in_weeks(baby.birth_date, now)
        sleeps = [s for s in state.sleeps if s.baby_id == baby.id]
        generated = notification_service.generate_all(
            baby,
            self.last_feeding(),
            max(sleeps, key=lambda s: s.start_time, default=None),
            self.total_daily_sleep(),
            recommended_feeding_interval(weeks),
            recommended_daily_sleep(weeks),
            state.notification_settings,
            state.app_settings,
            now,
        )
        existing = {n.id for n in state.notifications}
        fresh = tuple(n for n in generated if n.id not in existing)
        if not fresh:
            return state
        return self._commit(
            notifications=fresh + state.notifications,
            unread_count=state.unread_count + len(fresh),
        )

    # ── Profile, settings & family ─────────────────────────────────────────

    def update_user_profile(self, **changes: Any) -> StoreState:
        profile = self._state.user_profile
        if profile is None:
            logger.warning("No profile loaded, ignoring profile update")
            return self._state
        updated = UserProfile.model_validate({**profile.model_dump(), **changes, "id": profile.id})
        self._commit(user_profile=updated)

        if updated.email != profile.email:
            logger.info("Email changed from %s to %s", profile.email, updated.email)
            self.identity.save_email(updated.email)
            if self.client is not None:
                self.client.invalidate_identity_cache()
            self._sync(SyncOp.ENSURE_USER, updated.id, profile=updated)
        else:
            data = updated.to_wire(include=set(changes))
            data["id"] = updated.id
            self._sync(SyncOp.UPDATE_PROFILE, updated.id, data=data, profile=updated)
        return self._state

    def update_app_settings(self, updates: Mapping[str, Any]) -> StoreState:
        """Apply ``updates`` group by group; untouched nested values are kept."""
        settings = (self._state.app_settings or AppSettings()).merge(updates)
        state = self._commit(app_settings=settings)
        if state.user_profile is not None:
            self._sync(
                SyncOp.UPDATE_SETTINGS, state.user_profile.id,
                data=settings.to_wire(), profile=state.user_profile,
            )
        return self._state

    def update_preferences(self, **changes: Any) -> StoreState:
        prefs = Preferences.model_validate({**self._state.preferences.model_dump(), **changes})
        state = self._commit(preferences=prefs)
        if state.user_profile is not None:
            self._sync(
                SyncOp.UPDATE_SETTINGS, state.user_profile.id,
                data=prefs.to_wire(), profile=state.user_profile,
            )
        return self._state

    def add_family_member(self, member: FamilyMember) -> StoreState:
        return self._commit(family_members=self._state.family_members + (member,))

    def remove_family_member(self, member_id: str) -> StoreState:
        return self._commit(
            family_members=tuple(m for m in self._state.family_members if m.id != member_id)
        )

    def update_family_member_permissions(self, member_id: str, **permissions: bool) -> StoreState:
        members = []
        for member in self._state.family_members:
            if member.id == member_id:
                merged = member.permissions.model_copy(update=permissions)
                member = member.model_copy(update={"permissions": merged})
            members.append(member)
        return self._commit(family_members=tuple(members))

    def _reset_profile(self) -> StoreState:
        if self.client is not None:
            self.client.invalidate_identity_cache()
        return self._commit(
            touches_entries=True,
            user_profile=None,
            current_baby=None,
            app_settings=None,
            babies=(),
            feedings=(),
            sleeps=(),
            diapers=(),
            growth=(),
            is_loading=False,
        )

    async def initialize_profile(self, email: Optional[str] = None) -> StoreState:
        """Load the household identified by ``email`` from the server.

        An unknown email clears the persisted identity; any other failure
        leaves it in place so the next start can retry.
        """
        profile = self._state.user_profile
        if profile is not None and profile.email == email:
            logger.info("Profile already loaded for %s", email)
            return self._state
        if not email:
            logger.info("No email provided, starting without a profile")
            return self._reset_profile()
        if self.client is None:
            logger.warning("No API client configured, cannot load profile for %s", email)
            return self._reset_profile()

        self._commit(is_loading=True)
        try:
            data = await asyncio.to_thread(self.client.get_profile, email)
            loaded = parse_profile(data)
        except ProfileNotFoundError:
            logger.warning("No profile found for %s, clearing stored identity", email)
            self.identity.clear()
            return self._reset_profile()
        except (requests.RequestException, ValueError):
            logger.exception("Failed to initialize profile for %s", email)
            return self._reset_profile()

        try:
            settings_data = await asyncio.to_thread(self.client.get_settings, loaded.profile.id)
        except requests.RequestException as exc:
            logger.warning("Failed to load user settings, using defaults: %s", exc)
            settings_data = None

        self.identity.save_email(email)
        return self._commit(
            touches_entries=True,
            user_profile=loaded.profile,
            babies=tuple(loaded.babies),
            current_baby=loaded.babies[0] if loaded.babies else None,
            feedings=tuple(loaded.feedings),
            sleeps=tuple(loaded.sleeps),
            diapers=tuple(loaded.diapers),
            growth=tuple(loaded.growth),
            app_settings=parse_settings(settings_data),
            is_loading=False,
        )

    def export_user_data(self) -> dict[str, Any]:
        state = self._state

        def wire(items: Iterable) -> list[dict]:
            return [item.to_wire() for item in items]

        return {
            "userProfile": state.user_profile.to_wire() if state.user_profile else None,
            "babies": wire(state.babies),
            "feedings": wire(state.feedings),
            "sleeps": wire(state.sleeps),
            "diapers": wire(state.diapers),
            "growth": wire(state.growth),
            "familyMembers": wire(state.family_members),
            "appSettings": state.app_settings.to_wire() if state.app_settings else None,
            "notifications": wire(state.notifications),
            "exportDate": self.clock().isoformat(),
            "version": EXPORT_VERSION,
        }

    # ── Live data ──────────────────────────────────────────────────────────

    def apply_live_data(self, live: LiveBabyData, requested_revision: int) -> bool:
        """Replace today's entries of the current baby with the server's view.

        Refused when local entries changed after the request was issued.
        Entries not yet confirmed by the server are kept.
        """
        state = self._state
        baby = state.current_baby
        if baby is None or (live.baby is not None and live.baby.id != baby.id):
            return False
        if state.entries_revision != requested_revision:
            logger.debug("Local entries changed since the live-data request, not applying it")
            return False

        today = self.clock().date()

        def merge(local: tuple, remote: tuple) -> tuple:
            # Local copies win over the server's until their sync is confirmed.
            unsynced = {e.id for e in local if state.sync_status.get(e.id) in _UNSYNCED}
            remote_ids = {e.id for e in remote}
            kept = tuple(
                e for e in local
                if e.id in unsynced or (
                    e.id not in remote_ids
                    and (e.baby_id != baby.id or entry_timestamp(e).date() != today)
                )
            )
            return kept + tuple(e for e in remote if e.baby_id == baby.id and e.id not in unsynced)

        changes: dict[str, Any] = {
            "feedings": merge(state.feedings, live.feedings),
            "sleeps": merge(state.sleeps, live.sleeps),
            "diapers": merge(state.diapers, live.diapers),
        }
        if live.baby is not None and state.sync_status.get(baby.id) not in _UNSYNCED:
            changes["current_baby"] = live.baby
            changes["babies"] = tuple(live.baby if b.id == baby.id else b for b in state.babies)
        self._commit(**changes)
        return True

    # ── Getters ────────────────────────────────────────────────────────────

    def today_feedings(self) -> list[FeedingEntry]:
        baby, today = self._state.current_baby, self.clock().date()
        if baby is None:
            return []
        return [f for f in self._state.feedings if f.baby_id == baby.id and f.start_time.date() == today]

    def today_sleeps(self) -> list[SleepEntry]:
        baby, today = self._state.current_baby, self.clock().date()
        if baby is None:
            return []
        return [s for s in self._state.sleeps if s.baby_id == baby.id and s.start_time.date() == today]

    def today_diapers(self) -> list[DiaperEntry]:
        baby, today = self._state.current_baby, self.clock().date()
        if baby is None:
            return []
        return [d for d in self._state.diapers if d.baby_id == baby.id and d.time.date() == today]

    def last_feeding(self) -> Optional[FeedingEntry]:
        return max(self.today_feedings(), key=lambda f: f.start_time, default=None)

    def next_feeding_time(self) -> datetime:
        last = self.last_feeding()
        return next_feeding_time(
            last.start_time if last else None,
            self._state.preferences.feeding_interval,
            self.clock(),
        )

    def total_daily_milk(self) -> float:
        """Milliliters of bottle feedings today; other kinds have no volume."""
        return sum(f.amount or 0 for f in self.today_feedings() if f.kind == "bottle")

    def total_daily_sleep(self) -> int:
        """Minutes of completed sleep falling within today."""
        baby = self._state.current_baby
        if baby is None:
            return 0
        start, end = day_bounds(self.clock().date())
        return sum(s.overlap_minutes(start, end) for s in self._state.sleeps if s.baby_id == baby.id)

    def active_sleep(self) -> Optional[SleepEntry]:
        baby = self._state.current_baby
        if baby is None:
            return None
        ongoing = [s for s in self._state.sleeps if s.baby_id == baby.id and s.is_active]
        return max(ongoing, key=lambda s: s.start_time, default=None)
