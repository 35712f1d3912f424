"""Parent-facing endpoints: profile, dashboard, children and fee plans."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from harakapay.clients.web_api import WebApiClient
from harakapay.core.i18n import translate
from harakapay.dependencies.remote import (
    get_academic_year_repository,
    get_current_parent,
    get_fee_assignment_repository,
    get_language,
    get_student_repository,
    get_web_api_client,
)
from harakapay.repositories.errors import RepositoryError
from harakapay.repositories.fee_assignments import AcademicYearRepository, FeeAssignmentRepository
from harakapay.repositories.students import StudentRepository
from harakapay.schemas.dashboard import DashboardRead
from harakapay.schemas.fee_plan import FeePlanResolution
from harakapay.schemas.fee_schedule import FeeCategoryCard, StudentFeesRead
from harakapay.schemas.parent import Parent
from harakapay.schemas.student import LinkedStudentsRead, LinkStudentRequest, StudentMatchesRead
from harakapay.services.fee_plans import FeePlanUnavailable, resolve_fee_plan
from harakapay.services.fee_schedules import FeeCategoryNotFound, fee_category, student_fees
from harakapay.services.linking import find_matches, link_student
from harakapay.services.presenters import child_card, empty_state, view_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/parent", tags=["parent"])

NOTHING_BILLABLE = ("no_fee_assignment", "no_payment_plan")


def ensure_linked_student(students: StudentRepository, parent: Parent, student_id: str) -> None:
    if not any(s.id == student_id for s in students.list_linked(parent.id)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found for this parent")


def _children_view(students: StudentRepository, parent: Parent, language: str) -> LinkedStudentsRead:
    linked = students.list_linked(parent.id)
    cards = [child_card(s, language) for s in linked]
    state = view_state(cards)
    return LinkedStudentsRead(
        state=state,
        children=cards,
        empty_state=empty_state("no_children", language) if state == "empty" else None,
    )


@router.get("/me", response_model=Parent)
def read_parent_profile(parent: Parent = Depends(get_current_parent)):
    return parent


@router.get("/dashboard", response_model=DashboardRead)
def read_dashboard(
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
    language: str = Depends(get_language),
):
    greeting = translate("dashboard.greeting", language, name=parent.first_name or parent.full_name)
    try:
        children = _children_view(students, parent, language)
    except RepositoryError as exc:
        # The dashboard still renders; the children section shows its error state
        logger.warning("Could not load children for parent %s: %s", parent.id, exc.message)
        return DashboardRead(parent=parent, greeting=greeting, state=view_state([], exc.message), children=[])
    return DashboardRead(
        parent=parent,
        greeting=greeting,
        state=children.state,
        children=children.children,
        empty_state=children.empty_state,
    )


@router.get("/children", response_model=LinkedStudentsRead)
def list_children(
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
    language: str = Depends(get_language),
):
    return _children_view(students, parent, language)


@router.get("/children/matches", response_model=StudentMatchesRead)
def list_child_matches(
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
):
    if not parent.full_name or not parent.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Profile is missing required information (name or email)",
        )
    return find_matches(students, parent)


@router.post("/children/link", response_model=LinkedStudentsRead, status_code=status.HTTP_201_CREATED)
def link_child(
    payload: LinkStudentRequest,
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
    language: str = Depends(get_language),
):
    link_student(students, parent, payload.student_id)
    return _children_view(students, parent, language)


@router.get("/students/{student_id}/fee-plan", response_model=FeePlanResolution)
def read_fee_plan(
    student_id: str,
    selected_month: str | None = None,
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
    academic_years: AcademicYearRepository = Depends(get_academic_year_repository),
    assignments: FeeAssignmentRepository = Depends(get_fee_assignment_repository),
    language: str = Depends(get_language),
):
    ensure_linked_student(students, parent, student_id)
    try:
        return resolve_fee_plan(
            student_id=student_id,
            academic_years=academic_years,
            assignments=assignments,
            selected_month=selected_month,
            language=language,
        )
    except FeePlanUnavailable as exc:
        if exc.reason not in NOTHING_BILLABLE:
            raise
        logger.info("Nothing billable for student %s: %s", student_id, exc.message)
        return FeePlanResolution(student_id=student_id, state="empty", empty_state=empty_state("no_fees", language))


@router.get("/students/{student_id}/fees", response_model=StudentFeesRead)
def read_student_fees(
    student_id: str,
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
    web: WebApiClient = Depends(get_web_api_client),
    language: str = Depends(get_language),
):
    ensure_linked_student(students, parent, student_id)
    return student_fees(web, student_id, language)


@router.get("/students/{student_id}/fees/{category_id}", response_model=FeeCategoryCard)
def read_fee_category(
    student_id: str,
    category_id: str,
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
    web: WebApiClient = Depends(get_web_api_client),
    language: str = Depends(get_language),
):
    ensure_linked_student(students, parent, student_id)
    try:
        return fee_category(web, student_id, category_id, language)
    except FeeCategoryNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fee category not found")
