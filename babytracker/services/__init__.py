from .api_client import ApiClient, ProfileNotFoundError
from .events import REFRESH_LIVE_DATA, EventBus, bus, request_refresh
from .identity import IdentityStore
from .live_data import LiveDataPoller, LiveDataState
from .outbox import SyncOp, SyncOutbox, SyncStatus, SyncTask
from .state import StoreState
from .store import BabyTrackerStore

__all__ = [
    "ApiClient", "ProfileNotFoundError",
    "EventBus", "REFRESH_LIVE_DATA", "bus", "request_refresh",
    "IdentityStore",
    "LiveDataPoller", "LiveDataState",
    "SyncOp", "SyncOutbox", "SyncStatus", "SyncTask",
    "BabyTrackerStore", "StoreState",
]
