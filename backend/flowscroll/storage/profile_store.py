"""
JSON-file profile persistence.

One file per user under `profiles_dir`. Every load runs the profile
through migration, so files written by older versions are upgraded
transparently; unreadable files fall back to a fresh profile.
"""

import json
import logging
import os
import tempfile
import threading
from functools import lru_cache
from pathlib import Path
from urllib.parse import quote

from pydantic import ValidationError

from flowscroll.config import get_settings
from flowscroll.tasks.models import UserStats
from flowscroll.tasks.profile import migrate_user_stats, new_user_stats

logger = logging.getLogger(__name__)


class ProfileStore:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._lock = threading.Lock()

    def path_for(self, user_id: str) -> Path:
        # Percent-encoding keeps distinct ids on distinct files and never emits a separator.
        return self.root / f"{quote(user_id, safe='')}.json"

    def exists(self, user_id: str) -> bool:
        return self.path_for(user_id).is_file()

    def load(self, user_id: str | None = None) -> UserStats:
        """Load and migrate a profile; a missing user gets a fresh one."""
        if not user_id:
            return new_user_stats()

        if not self.exists(user_id):
            logger.info(f"No stored profile for {user_id}, creating one")
            return new_user_stats(user_id)

        path = self.path_for(user_id)
        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
            profile = migrate_user_stats(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Unreadable profile {path.name}, starting fresh: {e}")
            return new_user_stats(user_id)

        stored_id = (raw.get("userId") or raw.get("user_id")) if isinstance(raw, dict) else None
        if stored_id and str(stored_id) != user_id:
            logger.warning(f"Profile {path.name} belongs to {stored_id}, not {user_id}; starting fresh")
            return new_user_stats(user_id)

        profile.user_id = user_id
        return profile

    def save(self, profile: UserStats) -> Path:
        """Write the profile atomically (temp file + rename)."""
        path = self.path_for(profile.user_id)
        data = profile.model_dump_json(by_alias=True)

        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        logger.debug(f"Saved profile {profile.user_id} ({len(profile.history)} results)")
        return path


@lru_cache
def get_profile_store() -> ProfileStore:
    return ProfileStore(get_settings().profiles_dir)
