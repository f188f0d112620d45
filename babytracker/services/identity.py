"""Persisted household identification (the only session mechanism)."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

IDENTITY_PATH = Path(os.getenv("BABYTRACK_IDENTITY_PATH", "data/identity.json"))


class IdentityStore:
    """Stores the email the household signed in with, in a small JSON file."""

    def __init__(self, path: Path | str = IDENTITY_PATH):
        self.path = Path(path)

    def get_email(self) -> Optional[str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring unreadable identity file %s", self.path)
            return None
        return data.get("email") or None

    def save_email(self, email: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"email": email}), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
