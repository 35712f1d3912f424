"""Display language preference endpoints."""

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from harakapay.core.i18n import locale_for, resolve_language
from harakapay.db.session import get_db
from harakapay.dependencies.auth import CurrentUser, get_current_user
from harakapay.models.user_preferences import UserPreferences
from harakapay.schemas.user_preferences import LanguagePreferenceRead, LanguagePreferenceUpdate
from harakapay.services.preferences import get_or_create_preferences, set_language

router = APIRouter(prefix="/preferences", tags=["preferences"])


def _to_read(prefs: UserPreferences) -> LanguagePreferenceRead:
    return LanguagePreferenceRead(
        user_id=prefs.user_id,
        language=prefs.language,
        locale=locale_for(prefs.language),
        updated_at=prefs.updated_at,
    )


@router.get("/language", response_model=LanguagePreferenceRead)
async def get_my_language(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    accept_language: str | None = Header(default=None),
):
    # First visit: take the device language and keep it
    prefs = get_or_create_preferences(db, current_user.id, initial_language=resolve_language(None, accept_language))
    return _to_read(prefs)


@router.put("/language", response_model=LanguagePreferenceRead)
async def update_my_language(
    update: LanguagePreferenceUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    prefs = set_language(db, current_user.id, update.language)
    return _to_read(prefs)
