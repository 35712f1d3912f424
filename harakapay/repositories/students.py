import logging
import re

from harakapay.clients.supabase import SupabaseClient, quote_filter_value
from harakapay.repositories.errors import raise_for_error
from harakapay.schemas.parent import Parent
from harakapay.schemas.student import LinkedStudent

logger = logging.getLogger(__name__)

STUDENT_COLUMNS = "id, student_id, first_name, last_name, grade_level, avatar_url, parent_name, parent_email, parent_phone, schools(name)"


def _student_from_row(row: dict) -> LinkedStudent:
    school = row.get("schools") or {}
    return LinkedStudent(
        id=str(row["id"]),
        student_id=row.get("student_id"),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        grade_level=row.get("grade_level"),
        school_name=row.get("school_name") or school.get("name"),
        avatar_url=row.get("avatar_url"),
    )


class StudentRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    def list_linked(self, parent_id: str) -> list[LinkedStudent]:
        result = self.client.select(
            "parent_students",
            f"student_id, students({STUDENT_COLUMNS})",
            filters={"parent_id": parent_id},
            order="created_at.asc",
        )
        if not result.ok:
            raise_for_error(result.error, "linked students")
        return [_student_from_row(link["students"]) for link in result.data or [] if link.get("students")]

    def find_candidates(self, parent: Parent) -> list[dict]:
        """Return raw student rows whose recorded parent contact resembles ``parent``."""
        conditions = []
        if parent.email:
            conditions.append(f"parent_email.ilike.{quote_filter_value(parent.email)}")
        if parent.phone:
            digits = re.sub(r"[^0-9]", "", parent.phone)
            if len(digits) >= 9:
                conditions.append(f"parent_phone.ilike.*{digits[-9:]}")
        if parent.full_name:
            conditions.append(f"parent_name.ilike.{quote_filter_value('*' + parent.full_name + '*')}")
        if not conditions:
            return []
        result = self.client.select("students", STUDENT_COLUMNS, any_of=conditions, limit=50)
        if not result.ok:
            raise_for_error(result.error, "student matches")
        return list(result.data or [])

    def to_student(self, row: dict) -> LinkedStudent:
        return _student_from_row(row)

    def link(self, parent_id: str, student_id: str) -> None:
        result = self.client.insert(
            "parent_students",
            {
                "parent_id": parent_id,
                "student_id": student_id,
                "relationship_type": "parent",
                "is_primary": True,
                "can_make_payments": True,
                "can_receive_notifications": True,
            },
        )
        if not result.ok:
            raise_for_error(result.error, "student link")
        logger.info("Linked student %s to parent %s", student_id, parent_id)
