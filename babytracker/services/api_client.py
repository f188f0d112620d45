"""HTTP client mirroring local changes to the BabyTrack server."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import requests

from babytracker.models import Baby, DiaperEntry, Entry, FeedingEntry, GrowthEntry, SleepEntry, UserProfile
from babytracker.models.entry import entry_type_of

from .identity import IdentityStore

logger = logging.getLogger(__name__)

API_BASE = os.getenv("BABYTRACK_API_URL", "http://localhost:3000")
TIMEOUT = float(os.getenv("BABYTRACK_API_TIMEOUT", "10"))  # seconds

_NO_CACHE = {"Cache-Control": "no-cache", "Pragma": "no-cache"}

# The server stores feeding kinds under their French names and only sums
# "biberon" feedings into the daily milk total.
SERVER_FEEDING_KINDS = {"bottle": "biberon", "breast": "tétée", "solid": "solide"}


class ProfileNotFoundError(LookupError):
    """The server has no profile for this email."""


def entry_payload(entry: Entry) -> dict[str, Any]:
    """Request body for creating ``entry``; ``type`` carries the entry kind."""
    entry_type = entry_type_of(entry)
    body = entry.to_wire(exclude={"baby_id"}, exclude_none=True)
    match entry:
        case FeedingEntry(kind=kind):
            del body["kind"]
            body["feedingType"] = SERVER_FEEDING_KINDS.get(kind, kind)
        case SleepEntry():
            body["sleepType"] = body.pop("type")
        case DiaperEntry():
            body["diaperType"] = body.pop("type")
        case GrowthEntry():
            pass
    body["type"] = entry_type
    return body


def update_payload(entry: Entry, email: str) -> dict[str, Any]:
    """Request body for updating ``entry``. Feeding updates carry the kind as ``kind``."""
    body = entry_payload(entry)
    if isinstance(entry, FeedingEntry):
        body["kind"] = body.pop("feedingType")
    body["entryId"] = entry.id
    body["userEmail"] = email
    return body


class ApiClient:
    """Thin wrapper over the REST endpoints.

    Every call returns the decoded JSON body or raises ``requests.HTTPError``
    (``requests.RequestException`` for transport failures). Users and babies
    confirmed to exist on the server are remembered for the session so the
    "ensure" cascade does not run before every entry.
    """

    def __init__(
        self,
        base_url: str = API_BASE,
        identity: Optional[IdentityStore] = None,
        session: Optional[requests.Session] = None,
        timeout: float = TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.identity = identity or IdentityStore()
        self.session = session or requests.Session()
        self.timeout = timeout
        self._known_users: dict[str, dict] = {}
        self._known_babies: set[str] = set()

    def _request(
        self,
        method: str,
        path: str,
        payload: dict | None = None,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> Any:
        resp = self.session.request(
            method,
            f"{self.base_url}{path}",
            json=payload,
            params=params,
            headers=headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    # ── Users ──────────────────────────────────────────────────────────────

    def lookup_user(self, email: str, old_user_id: Optional[str] = None) -> Optional[dict]:
        result = self._request("POST", "/api/user/lookup", {
            "email": email,
            "oldUserData": {"id": old_user_id},
        })
        return result.get("user")

    def create_user(self, profile: UserProfile) -> dict:
        return self._request("POST", "/api/users", {
            "id": profile.id,
            "email": profile.email,
            "firstName": profile.first_name,
            "lastName": profile.last_name,
            "avatar": profile.avatar,
            "role": profile.role,
            "preferredName": profile.preferred_name,
            "timezone": profile.timezone,
            "language": profile.language,
            "phone": profile.phone,
        })

    def ensure_user_exists(self, profile: Optional[UserProfile]) -> Optional[dict]:
        """Server user for ``profile``, created when the lookup finds nothing.

        Returns None when there is no profile to sync.
        """
        if profile is None or not profile.email:
            logger.info("No user profile yet, skipping user sync")
            return None
        if profile.email in self._known_users:
            return self._known_users[profile.email]

        user = self.lookup_user(profile.email, profile.id)
        if user is None:
            logger.info("Creating server user for %s", profile.email)
            user = self.create_user(profile)
        self._known_users[profile.email] = user
        return user

    def invalidate_identity_cache(self) -> None:
        """Forget which users and babies were verified, e.g. after an email change."""
        self._known_users.clear()
        self._known_babies.clear()

    # ── Babies ─────────────────────────────────────────────────────────────

    def upsert_baby(self, baby: Baby, user_id: str) -> dict:
        payload = baby.to_wire()
        payload["userId"] = user_id
        return self._request("POST", "/api/babies", payload)

    def save_baby(self, baby: Baby, profile: Optional[UserProfile]) -> Optional[dict]:
        """Ensure the owner exists, then upsert the baby. An owner failure propagates."""
        user = self.ensure_user_exists(profile)
        if user is None:
            logger.info("No user profile available, skipping baby sync")
            return None
        result = self.upsert_baby(baby, user.get("id") or profile.id)
        self._known_babies.add(baby.id)
        return result

    def ensure_baby_exists(self, baby: Baby, profile: Optional[UserProfile]) -> Optional[dict]:
        if profile is not None and baby.id in self._known_babies:
            return {"id": baby.id}
        return self.save_baby(baby, profile)

    # ── Entries ────────────────────────────────────────────────────────────

    def create_entry(self, baby: Baby, profile: Optional[UserProfile], entry: Entry) -> Optional[dict]:
        user = self.ensure_user_exists(profile)
        if user is None or self.ensure_baby_exists(baby, profile) is None:
            return None
        payload = entry_payload(entry)
        # The server files the entry under this owner and filters reads by it.
        payload["userId"] = user.get("id") or profile.id
        return self._request("POST", f"/api/babies/{baby.id}/entries", payload)

    def update_entry(self, baby_id: str, entry: Entry) -> Optional[dict]:
        email = self.identity.get_email()
        if not email:
            logger.warning("No user email available, skipping %s update", entry_type_of(entry))
            return None
        return self._request("PUT", f"/api/babies/{baby_id}/entries", update_payload(entry, email))

    def delete_entry(self, baby_id: str, entry_id: str, entry_type: str) -> Optional[dict]:
        email = self.identity.get_email()
        if not email:
            logger.warning("No user email available, skipping %s deletion", entry_type)
            return None
        return self._request(
            "DELETE",
            f"/api/babies/{baby_id}/entries",
            params={"entryId": entry_id, "type": entry_type, "email": email},
        )

    # ── Profile & settings ─────────────────────────────────────────────────

    def get_profile(self, email: str) -> dict:
        resp = self.session.request(
            "GET",
            f"{self.base_url}/api/user/profile",
            params={"email": email},
            timeout=self.timeout,
        )
        if resp.status_code == 404:
            raise ProfileNotFoundError(email)
        resp.raise_for_status()
        return resp.json()

    def update_profile(self, data: dict) -> dict:
        return self._request("PUT", "/api/user/profile", data)

    def get_settings(self, user_id: str) -> dict:
        return self._request("GET", "/api/user/settings", params={"userId": user_id})

    def update_settings(self, user_id: str, settings: dict) -> dict:
        return self._request("PUT", "/api/user/settings", {"userId": user_id, **settings})

    # ── Live data ──────────────────────────────────────────────────────────

    def get_live_data(self, baby_id: str, email: str) -> dict:
        return self._request(
            "GET",
            f"/api/babies/{baby_id}/live-data",
            params={"email": email},
            headers=_NO_CACHE,
        )
