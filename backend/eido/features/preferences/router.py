"""
Preferences feature: API routes.
"""

from fastapi import APIRouter, Depends

from eido.core.dependencies import get_current_user_id
from eido.core.exceptions import AppBaseError, app_error_to_http
from eido.features.preferences.schemas import PreferencesUpdate, RecentFile
from eido.features.preferences.service import PreferencesStore, get_preferences_store

router = APIRouter()


@router.get("/")
async def get_preferences(
    user_id: str = Depends(get_current_user_id),
    store: PreferencesStore = Depends(get_preferences_store),
):
    """Current preferences, defaults on first use."""
    try:
        prefs = store.load(user_id)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": prefs}


@router.put("/")
async def update_preferences(
    data: PreferencesUpdate,
    user_id: str = Depends(get_current_user_id),
    store: PreferencesStore = Depends(get_preferences_store),
):
    try:
        prefs = store.save(user_id, data.model_dump(exclude_none=True))
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": prefs}


@router.post("/recent-files")
async def add_recent_file(
    data: RecentFile,
    user_id: str = Depends(get_current_user_id),
    store: PreferencesStore = Depends(get_preferences_store),
):
    """Record that a file was opened."""
    try:
        prefs = store.add_recent_file(user_id, data.model_dump(exclude_none=True))
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": prefs}
