"""User preference schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class LanguagePreferenceRead(BaseModel):
    user_id: str
    language: str
    locale: str
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LanguagePreferenceUpdate(BaseModel):
    language: Literal["fr", "en"]
