"""
Preferences feature: per-owner preferences store.

Loaded once per request through ``get_preferences_store``, written back on
every mutation. Nothing is written until the first save; until then the
defaults are served.
"""

import copy
import logging
from datetime import datetime, timezone

from fastapi import Depends
from supabase import Client

from eido.core.dependencies import get_db
from eido.core.exceptions import UpstreamError
from eido.features.preferences.schemas import DEFAULT_WIDGETS, KNOWN_WIDGETS, MAX_RECENT_FILES

logger = logging.getLogger(__name__)

TABLE = "user_preferences"

DEFAULT_PREFERENCES = {
    "enabled_widgets": DEFAULT_WIDGETS,
    "recent_files": [],
}


def _clean_widgets(widgets: list) -> list[str]:
    """Keep known widget names in order; fall back to the defaults when none remain."""
    kept = [w for w in widgets if w in KNOWN_WIDGETS]
    return kept or list(DEFAULT_WIDGETS)


class PreferencesStore:
    """Preferences keyed by owner id, stored as one JSON document per user."""

    def __init__(self, db: Client):
        self.db = db

    def load(self, user_id: str) -> dict:
        """Stored preferences merged over the defaults."""
        try:
            result = (
                self.db.table(TABLE)
                .select("preferences")
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to load preferences for {user_id}: {e}")
            raise UpstreamError("preferences load", str(e)) from e

        prefs = copy.deepcopy(DEFAULT_PREFERENCES)
        if result.data:
            prefs.update(result.data[0].get("preferences") or {})
        prefs["enabled_widgets"] = _clean_widgets(prefs.get("enabled_widgets") or [])
        return prefs

    def save(self, user_id: str, changes: dict) -> dict:
        """Merge ``changes`` into the stored preferences and persist them."""
        prefs = self.load(user_id)
        prefs.update({k: v for k, v in changes.items() if v is not None})

        prefs["enabled_widgets"] = _clean_widgets(prefs["enabled_widgets"])
        prefs["recent_files"] = list(prefs.get("recent_files") or [])[:MAX_RECENT_FILES]

        try:
            self.db.table(TABLE).upsert({
                "user_id": user_id,
                "preferences": prefs,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except Exception as e:
            logger.error(f"Failed to save preferences for {user_id}: {e}")
            raise UpstreamError("preferences save", str(e)) from e

        return prefs

    def add_recent_file(self, user_id: str, file: dict) -> dict:
        """Put ``file`` first in the recent list, dropping an older entry for the same file."""
        recent = self.load(user_id)["recent_files"]
        recent = [f for f in recent if f.get("file_id") != file["file_id"]]
        recent.insert(0, file)
        return self.save(user_id, {"recent_files": recent})


def get_preferences_store(db: Client = Depends(get_db)) -> PreferencesStore:
    """Dependency: preferences store bound to the request's Supabase client."""
    return PreferencesStore(db)
