import logging

from sqlalchemy.orm import Session

from harakapay.core.i18n import FALLBACK_LANGUAGE, SUPPORTED_LANGUAGES
from harakapay.core.settings import get_settings
from harakapay.models.user_preferences import UserPreferences

logger = logging.getLogger(__name__)


def get_saved_language(db: Session, user_id: str) -> str | None:
    prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
    return prefs.language if prefs else None


def get_or_create_preferences(db: Session, user_id: str, initial_language: str | None = None) -> UserPreferences:
    prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
    if prefs:
        return prefs
    language = initial_language or get_settings().default_language
    if language not in SUPPORTED_LANGUAGES:
        language = FALLBACK_LANGUAGE
    prefs = UserPreferences(user_id=user_id, language=language)
    db.add(prefs)
    db.commit()
    db.refresh(prefs)
    return prefs


def set_language(db: Session, user_id: str, language: str) -> UserPreferences:
    prefs = get_or_create_preferences(db, user_id, initial_language=language)
    if prefs.language != language:
        prefs.language = language
        db.commit()
        db.refresh(prefs)
    logger.info("User %s language set to %s", user_id, language)
    return prefs
