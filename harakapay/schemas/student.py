from typing import List, Literal

from pydantic import BaseModel, ConfigDict

from harakapay.schemas.dashboard import ChildCard, EmptyState


class LinkedStudent(BaseModel):
    id: str
    student_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    grade_level: str | None = None
    school_name: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class StudentMatch(LinkedStudent):
    match_confidence: Literal["high", "medium", "low"] = "low"


class LinkStudentRequest(BaseModel):
    student_id: str


class LinkedStudentsRead(BaseModel):
    state: str
    children: List[ChildCard]
    empty_state: EmptyState | None = None


class StudentMatchesRead(BaseModel):
    high: List[StudentMatch]
    medium: List[StudentMatch]
    low: List[StudentMatch]
