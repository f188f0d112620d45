"""Export a household's data from the BabyTrack server to a JSON file.

Usage:
    python scripts/export_user_data.py parent@example.com backup.json
"""

import asyncio
import json
import sys

from dotenv import load_dotenv

load_dotenv()

from babytracker.services import ApiClient, BabyTrackerStore, IdentityStore


async def export(email: str, out_path: str) -> None:
    identity = IdentityStore()
    store = BabyTrackerStore(client=ApiClient(identity=identity), identity=identity)
    await store.initialize_profile(email)
    if store.state.user_profile is None:
        print(f"No profile found for {email}")
        sys.exit(1)

    data = store.export_user_data()
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    print(
        f"Exported {len(data['babies'])} babies, {len(data['feedings'])} feedings, "
        f"{len(data['sleeps'])} sleeps, {len(data['diapers'])} diapers to {out_path}"
    )


def main():
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    asyncio.run(export(sys.argv[1], sys.argv[2]))


if __name__ == "__main__":
    main()
