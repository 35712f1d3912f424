from fastapi import APIRouter

from harakapay.core.i18n import FALLBACK_LANGUAGE, SUPPORTED_LANGUAGES
from harakapay.core.theme import get_theme

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/theme")
def read_theme():
    return {
        **get_theme(),
        "languages": list(SUPPORTED_LANGUAGES),
        "default_language": FALLBACK_LANGUAGE,
    }
