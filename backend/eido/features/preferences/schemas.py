"""
Preferences feature: Schemas for request/response models.
"""

from pydantic import BaseModel, ConfigDict

KNOWN_WIDGETS = ("flashcards", "quizzes", "calendar", "supertutor", "database", "practice")
DEFAULT_WIDGETS = ["flashcards", "quizzes", "calendar"]
MAX_RECENT_FILES = 10


class PreferencesUpdate(BaseModel):
    """Partial update. Keys not listed here are stored as given."""
    enabled_widgets: list[str] | None = None
    recent_files: list[dict] | None = None

    model_config = ConfigDict(extra="allow")


class RecentFile(BaseModel):
    """A file the user opened, shown in the "recent" strip."""
    file_id: str
    name: str
    class_id: str | None = None
    folder_id: str | None = None

    model_config = ConfigDict(extra="allow")
