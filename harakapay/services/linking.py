"""Finding and linking a parent's children."""

import logging

from harakapay.repositories.students import StudentRepository
from harakapay.schemas.parent import Parent
from harakapay.schemas.student import StudentMatch, StudentMatchesRead
from harakapay.services.validation import normalize_phone

logger = logging.getLogger(__name__)


class AlreadyLinked(Exception):
    pass


def _same_text(a: str | None, b: str | None) -> bool:
    return bool(a and b) and a.strip().lower() == b.strip().lower()


def match_confidence(parent: Parent, row: dict) -> str:
    """Score how well a student's recorded parent contact matches ``parent``.

    Two or more matching fields is ``high``; a single email or phone match is
    ``medium``; a name-only match is ``low``.
    """
    email = _same_text(parent.email, row.get("parent_email"))
    phone = bool(parent.phone and row.get("parent_phone")) and normalize_phone(parent.phone) == normalize_phone(
        row.get("parent_phone")
    )
    name = _same_text(parent.full_name, row.get("parent_name"))
    score = sum((email, phone, name))
    if score >= 2:
        return "high"
    if email or phone:
        return "medium"
    return "low"


def find_matches(students: StudentRepository, parent: Parent) -> StudentMatchesRead:
    """Candidate students for ``parent``, minus the ones already linked."""
    linked_ids = {s.id for s in students.list_linked(parent.id)}
    grouped = {"high": [], "medium": [], "low": []}
    for row in students.find_candidates(parent):
        student = students.to_student(row)
        if student.id in linked_ids:
            continue
        confidence = match_confidence(parent, row)
        grouped[confidence].append(StudentMatch(**student.model_dump(), match_confidence=confidence))
    return StudentMatchesRead(**grouped)


def link_student(students: StudentRepository, parent: Parent, student_id: str) -> None:
    if any(s.id == student_id for s in students.list_linked(parent.id)):
        raise AlreadyLinked(f"Student {student_id} is already linked")
    students.link(parent.id, student_id)
