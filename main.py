"""BabyTrack sync client entry point.

Loads the household for the given (or remembered) email, then keeps the
local store in sync with the server until interrupted.

Usage:
    python main.py --email parent@example.com
"""

import argparse
import asyncio
import logging

from dotenv import load_dotenv

load_dotenv()  # load .env before anything reads os.getenv()

from babytracker.health.age import format_age
from babytracker.services import (
    ApiClient,
    BabyTrackerStore,
    IdentityStore,
    LiveDataPoller,
    StoreState,
    SyncOutbox,
)
from babytracker.utils import format_duration

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


def _log_summary(store: BabyTrackerStore) -> None:
    baby = store.state.current_baby
    if baby is None:
        return
    logger.info(
        "%s (%s): %d feedings, %.0f ml, %s sleep, %d diapers, next feeding %s",
        baby.name,
        format_age(baby.birth_date),
        len(store.today_feedings()),
        store.total_daily_milk(),
        format_duration(store.total_daily_sleep()),
        len(store.today_diapers()),
        store.next_feeding_time().strftime("%H:%M"),
    )


async def run(email: str | None) -> None:
    identity = IdentityStore()
    client = ApiClient(identity=identity)
    store = BabyTrackerStore(client=client, identity=identity)
    outbox = SyncOutbox(client)
    store.attach_outbox(outbox)

    await store.initialize_profile(email or identity.get_email())
    if store.state.user_profile is None:
        logger.warning("No profile loaded; pass --email to sign in")
        return

    last_revision = -1

    def on_change(state: StoreState) -> None:
        nonlocal last_revision
        if state.entries_revision != last_revision:
            last_revision = state.entries_revision
            _log_summary(store)

    store.subscribe(on_change)
    _log_summary(store)

    poller = LiveDataPoller(store, client)
    outbox.start()
    poller.start()
    logger.info("BabyTrack sync running for %s", store.state.user_profile.email)
    try:
        while True:
            await asyncio.sleep(60)
            store.generate_notifications()
    finally:
        await poller.stop()
        await outbox.drain()
        await outbox.stop()
        logger.info("BabyTrack sync stopped")


def main() -> None:
    parser = argparse.ArgumentParser(description="BabyTrack sync client")
    parser.add_argument("--email", help="household email (defaults to the remembered one)")
    args = parser.parse_args()
    try:
        asyncio.run(run(args.email))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
