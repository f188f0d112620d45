"""Unit tests for ApiClient against a fake HTTP session."""

from datetime import datetime

import pytest
import requests

from babytracker.models import DiaperEntry, FeedingEntry, GrowthEntry, SleepEntry
from babytracker.services.api_client import ProfileNotFoundError, entry_payload, update_payload

ENTRIES = "/api/babies/b1/entries"


def _bottle(**kw) -> FeedingEntry:
    return FeedingEntry(id="f1", baby_id="b1", kind="bottle", amount=120, start_time=datetime(2024, 3, 10, 8), **kw)


def _known_user(session):
    session.add("POST", "/api/user/lookup", payload={"user": {"id": "u1", "email": "parent@example.com"}})
    session.add("POST", "/api/babies", payload={"id": "b1"})


# ── Payloads ───────────────────────────────────────────────────────────────


def test_feeding_payload_renames_kind():
    body = entry_payload(_bottle())
    assert body["type"] == "feeding"
    assert body["feedingType"] == "biberon"
    assert body["startTime"] == "2024-03-10T08:00:00"
    assert "kind" not in body
    assert "babyId" not in body
    assert "notes" not in body


@pytest.mark.parametrize("kind, sent", [("bottle", "biberon"), ("breast", "tétée"), ("solid", "solide"), ("snack", "snack")])
def test_feeding_kinds_use_server_values(kind, sent):
    assert entry_payload(_bottle().model_copy(update={"kind": kind}))["feedingType"] == sent


def test_feeding_update_payload_sends_kind():
    body = update_payload(_bottle().model_copy(update={"kind": "breast"}), "parent@example.com")
    assert body["kind"] == "tétée"
    assert "feedingType" not in body
    assert (body["type"], body["entryId"], body["userEmail"]) == ("feeding", "f1", "parent@example.com")


def test_sleep_and_diaper_payloads():
    sleep = entry_payload(SleepEntry(baby_id="b1", start_time=datetime(2024, 3, 10, 13), type="nap"))
    diaper = entry_payload(DiaperEntry(baby_id="b1", time=datetime(2024, 3, 10, 7), type="wet"))
    assert (sleep["type"], sleep["sleepType"]) == ("sleep", "nap")
    assert (diaper["type"], diaper["diaperType"]) == ("diaper", "wet")


def test_growth_payload():
    body = entry_payload(GrowthEntry(baby_id="b1", date=datetime(2024, 3, 1), weight=4300, head_circumference=38))
    assert body["type"] == "growth"
    assert body["headCircumference"] == 38


# ── Ensure cascade ─────────────────────────────────────────────────────────


def test_create_entry_runs_user_then_baby_then_entry(client, session, baby, profile):
    _known_user(session)
    session.add("POST", ENTRIES, payload={"id": "f1"})
    assert client.create_entry(baby, profile, _bottle()) == {"id": "f1"}
    assert [c.path for c in session.calls] == ["/api/user/lookup", "/api/babies", ENTRIES]
    assert session.calls[0].json == {"email": "parent@example.com", "oldUserData": {"id": "u1"}}
    assert session.calls[1].json["userId"] == "u1"
    assert session.calls[1].json["birthDate"] == "2024-01-15"


def test_created_entry_carries_owner_id(client, session, baby, profile):
    session.add("POST", "/api/user/lookup", payload={"user": {"id": "srv-42", "email": "parent@example.com"}})
    session.add("POST", "/api/babies", payload={"id": "b1"})
    session.add("POST", ENTRIES, payload={"id": "f1"})
    client.create_entry(baby, profile, _bottle())
    client.create_entry(baby, profile, _bottle(notes="cached"))
    assert [c.json["userId"] for c in session.calls_to("POST", ENTRIES)] == ["srv-42", "srv-42"]


def test_missing_user_is_created(client, session, baby, profile):
    session.add("POST", "/api/user/lookup", payload={"user": None})
    session.add("POST", "/api/users", payload={"id": "u1"})
    session.add("POST", "/api/babies", payload={"id": "b1"})
    session.add("POST", ENTRIES, payload={"id": "f1"})
    client.create_entry(baby, profile, _bottle())
    (created,) = session.calls_to("POST", "/api/users")
    assert created.json["email"] == "parent@example.com"
    assert created.json["firstName"] == "Marie"


def test_user_failure_prevents_entry_post(client, session, baby, profile):
    session.add("POST", "/api/user/lookup", status=500, payload={"error": "boom"})
    with pytest.raises(requests.HTTPError):
        client.create_entry(baby, profile, _bottle())
    assert session.calls_to("POST", ENTRIES) == []
    assert session.calls_to("POST", "/api/babies") == []


def test_verified_user_and_baby_are_cached(client, session, baby, profile):
    _known_user(session)
    session.add("POST", ENTRIES, payload={"id": "x"})
    client.create_entry(baby, profile, _bottle())
    client.create_entry(baby, profile, _bottle(notes="again"))
    assert len(session.calls_to("POST", "/api/user/lookup")) == 1
    assert len(session.calls_to("POST", "/api/babies")) == 1
    assert len(session.calls_to("POST", ENTRIES)) == 2


def test_invalidate_identity_cache(client, session, baby, profile):
    _known_user(session)
    client.save_baby(baby, profile)
    client.invalidate_identity_cache()
    client.save_baby(baby, profile)
    assert len(session.calls_to("POST", "/api/user/lookup")) == 2


def test_no_profile_means_no_request(client, session, baby):
    assert client.create_entry(baby, None, _bottle()) is None
    assert session.calls == []


# ── Update / delete ────────────────────────────────────────────────────────


def test_update_entry_sends_id_and_email(client, session):
    session.add("PUT", ENTRIES, payload={"ok": True})
    client.update_entry("b1", _bottle())
    (call,) = session.calls
    assert call.json["entryId"] == "f1"
    assert call.json["userEmail"] == "parent@example.com"
    assert call.json["kind"] == "biberon"
    assert "feedingType" not in call.json


def test_delete_entry_uses_query_params(client, session):
    session.add("DELETE", ENTRIES, payload={"ok": True})
    client.delete_entry("b1", "d1", "diaper")
    (call,) = session.calls
    assert call.params == {"entryId": "d1", "type": "diaper", "email": "parent@example.com"}


def test_update_and_delete_skipped_without_email(client, session, identity):
    identity.clear()
    assert client.update_entry("b1", _bottle()) is None
    assert client.delete_entry("b1", "f1", "feeding") is None
    assert session.calls == []


# ── Profile, settings, live data ───────────────────────────────────────────


def test_get_profile_not_found(client, session):
    session.add("GET", "/api/user/profile", status=404, payload={"error": "not found"})
    with pytest.raises(ProfileNotFoundError):
        client.get_profile("ghost@example.com")


def test_get_profile_server_error(client, session):
    session.add("GET", "/api/user/profile", status=500, payload={})
    with pytest.raises(requests.HTTPError):
        client.get_profile("parent@example.com")


def test_update_settings_includes_user_id(client, session):
    session.add("PUT", "/api/user/settings", payload={"ok": True})
    client.update_settings("u1", {"theme": "dark"})
    assert session.calls[0].json == {"userId": "u1", "theme": "dark"}


def test_live_data_request_disables_caching(client, session):
    session.add("GET", "/api/babies/b1/live-data", payload={"liveData": {}})
    client.get_live_data("b1", "parent@example.com")
    (call,) = session.calls
    assert call.params == {"email": "parent@example.com"}
    assert call.headers["Cache-Control"] == "no-cache"
