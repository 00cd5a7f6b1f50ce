"""Organisation hierarchy service: divisions, departments, sections, assignments."""

from itertools import cycle
from typing import Any, Callable

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from workforce.models.organization import (
    Department,
    Division,
    OnboardingRequest,
    OrganizationalPosition,
    Section,
    UserDepartmentAssignment,
)
from workforce.models.user import User
from shared.enums import OnboardingStatus, UserRole
from shared.exceptions import ConflictError, NotFoundError, UserNotFoundError, ValidationError, WorkforceError

logger = structlog.get_logger(__name__)

# Organogram seeded on first run: (key, parent key, title, subtitle, division, level, order)
DEFAULT_POSITIONS = [
    ("head", None, "Head of Operations", "Chief Operations Officer", None, 0, 0),
    ("raf", "head", "Head of Operations: Contact Center (RAF)", None, "RAF", 1, 0),
    ("raf_ccm", "raf", "Contact Center Manager", "RAF Division", "RAF", 2, 0),
    ("raf_tl", "raf_ccm", "Team Leader", "RAF Team", "RAF", 3, 0),
    ("raf_agents", "raf_tl", "Agents", "Front-line Staff", "RAF", 4, 0),
    ("uif", "head", "Head of Operations: Contact Center (UIF)", None, "UIF", 1, 1),
    ("uif_ccm", "uif", "Contact Center Manager", "UIF Division", "UIF", 2, 0),
    ("uif_tl", "uif_ccm", "Team Leader", "UIF Team", "UIF", 3, 0),
    ("uif_agents", "uif_tl", "Agents", "Front-line Staff", "UIF", 4, 0),
]


def summarize_bulk(results: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Aggregates per-item results of a bulk operation.

    Args:
        results: Items shaped {"id", "success", "error"}

    Returns:
        Response dict with counts and a human-readable message
    """
    total = len(results)
    succeeded = sum(1 for r in results if r["success"])
    failed = total - succeeded
    if failed == 0:
        message = f"All {total} succeeded"
    elif succeeded == 0:
        message = f"All {total} failed"
    else:
        message = f"Partial success: {succeeded} succeeded, {failed} failed"
    return {
        "results": results,
        "total_requested": total,
        "success_count": succeeded,
        "failure_count": failed,
        "message": message,
    }


class OrganizationService:
    """Service for the division → department → section hierarchy."""

    def __init__(self, db: Session, acting_user: User | None = None):
        self.db = db
        self.acting_user = acting_user

    def _get(self, model, obj_id: int, label: str):
        obj = self.db.get(model, obj_id)
        if obj is None:
            raise NotFoundError(f"{label} not found")
        return obj

    # DIVISIONS

    def list_divisions(self) -> list[Division]:
        return list(self.db.scalars(select(Division).order_by(Division.name)).all())

    def create_division(self, data: dict[str, Any]) -> Division:
        if self.db.scalars(select(Division).where(Division.name == data["name"])).first():
            raise ConflictError(f"Division '{data['name']}' already exists")
        division = Division(**data)
        self.db.add(division)
        self.db.flush()
        return division

    def update_division(self, division_id: int, updates: dict[str, Any]) -> Division:
        division = self._get(Division, division_id, "Division")
        for key, value in updates.items():
            setattr(division, key, value)
        self.db.flush()
        return division

    def delete_division(self, division_id: int) -> None:
        division = self._get(Division, division_id, "Division")
        if division.departments:
            raise ValidationError("Division still has departments")
        self.db.delete(division)
        self.db.flush()

    # DEPARTMENTS

    def list_departments(self, division_id: int | None = None) -> list[Department]:
        query = select(Department)
        if division_id is not None:
            query = query.where(Department.division_id == division_id)
        return list(self.db.scalars(query.order_by(Department.name)).all())

    def create_department(self, data: dict[str, Any]) -> Department:
        if data.get("division_id") is not None:
            self._get(Division, data["division_id"], "Division")
        department = Department(**data)
        self.db.add(department)
        self.db.flush()
        return department

    def update_department(self, department_id: int, updates: dict[str, Any]) -> Department:
        department = self._get(Department, department_id, "Department")
        if updates.get("division_id") is not None:
            self._get(Division, updates["division_id"], "Division")
        for key, value in updates.items():
            setattr(department, key, value)
        self.db.flush()
        return department

    def delete_department(self, department_id: int) -> None:
        department = self._get(Department, department_id, "Department")
        in_use = self.db.scalars(select(User.id).where(User.department_id == department_id)).first()
        if in_use is not None:
            raise ValidationError("Department still has users")
        self.db.delete(department)
        self.db.flush()

    # SECTIONS

    def list_sections(self, department_id: int | None = None) -> list[Section]:
        query = select(Section)
        if department_id is not None:
            query = query.where(Section.department_id == department_id)
        return list(self.db.scalars(query.order_by(Section.name)).all())

    def create_section(self, data: dict[str, Any]) -> Section:
        self._get(Department, data["department_id"], "Department")
        section = Section(**data)
        self.db.add(section)
        self.db.flush()
        return section

    def update_section(self, section_id: int, updates: dict[str, Any]) -> Section:
        section = self._get(Section, section_id, "Section")
        if updates.get("department_id") is not None:
            self._get(Department, updates["department_id"], "Department")
        for key, value in updates.items():
            setattr(section, key, value)
        self.db.flush()
        return section

    def delete_section(self, section_id: int) -> None:
        section = self._get(Section, section_id, "Section")
        self.db.delete(section)
        self.db.flush()

    # ASSIGNMENTS

    def validate_combination(self, division_id: int, department_id: int, section_id: int | None) -> None:
        """
        Checks that the department belongs to the division and the section to the department.

        Raises:
            NotFoundError: If any referenced record is missing
            ValidationError: If the combination is inconsistent
        """
        self._get(Division, division_id, "Division")
        department = self._get(Department, department_id, "Department")
        if department.division_id is not None and department.division_id != division_id:
            raise ValidationError("Department does not belong to the selected division")
        if section_id is not None:
            section = self._get(Section, section_id, "Section")
            if section.department_id != department_id:
                raise ValidationError("Section does not belong to the selected department")

    def list_assignments(self, user_id: int | None = None) -> list[UserDepartmentAssignment]:
        query = select(UserDepartmentAssignment)
        if user_id is not None:
            query = query.where(UserDepartmentAssignment.user_id == user_id)
        return list(self.db.scalars(query.order_by(UserDepartmentAssignment.id)).all())

    def create_assignment(
        self, user_id: int, division_id: int, department_id: int, section_id: int | None = None
    ) -> UserDepartmentAssignment:
        """
        Places a user in a division/department/section.

        Raises:
            UserNotFoundError: If the user does not exist
            ValidationError: If the combination is inconsistent
            ConflictError: If the user already holds this combination
        """
        if self.db.get(User, user_id) is None:
            raise UserNotFoundError()
        self.validate_combination(division_id, department_id, section_id)

        existing = self.db.scalars(
            select(UserDepartmentAssignment).where(
                UserDepartmentAssignment.user_id == user_id,
                UserDepartmentAssignment.division_id == division_id,
                UserDepartmentAssignment.department_id == department_id,
                UserDepartmentAssignment.section_id.is_(None) if section_id is None
                else UserDepartmentAssignment.section_id == section_id,
            )
        ).first()
        if existing is not None:
            raise ConflictError("User already has this assignment")

        assignment = UserDepartmentAssignment(
            user_id=user_id,
            division_id=division_id,
            department_id=department_id,
            section_id=section_id,
            assigned_by=self.acting_user.id if self.acting_user else None,
        )
        self.db.add(assignment)
        self.db.flush()
        return assignment

    def delete_assignment(self, assignment_id: int) -> None:
        assignment = self._get(UserDepartmentAssignment, assignment_id, "Assignment")
        self.db.delete(assignment)
        self.db.flush()

    def _run_bulk(self, ids: list[int], action: Callable[[int], Any]) -> dict[str, Any]:
        """
        Runs an action for each id in order. A failing item does not stop the rest.
        """
        results = []
        for item_id in ids:
            try:
                outcome = action(item_id)
            except WorkforceError as e:
                results.append({"id": item_id, "success": False, "error": str(e)})
                continue
            result = {"id": item_id, "success": True, "error": None}
            if isinstance(outcome, UserDepartmentAssignment):
                result["assignment_id"] = outcome.id
            results.append(result)

        summary = summarize_bulk(results)
        logger.info(
            "bulk_operation_finished",
            total=summary["total_requested"],
            succeeded=summary["success_count"],
            failed=summary["failure_count"],
        )
        return summary

    def bulk_create_assignments(
        self, user_ids: list[int], division_id: int, department_id: int, section_id: int | None = None
    ) -> dict[str, Any]:
        """Assigns several users to the same combination, reporting each outcome."""
        return self._run_bulk(
            user_ids,
            lambda uid: self.create_assignment(uid, division_id, department_id, section_id),
        )

    def bulk_delete_assignments(self, assignment_ids: list[int]) -> dict[str, Any]:
        return self._run_bulk(assignment_ids, self.delete_assignment)

    def valid_combinations(self) -> list[tuple[int, int, int]]:
        """All (division, department, section) triples that are consistently linked."""
        combos = []
        for division in self.list_divisions():
            for department in self.list_departments(division_id=division.id):
                for section in self.list_sections(department_id=department.id):
                    combos.append((division.id, department.id, section.id))
        return combos

    def auto_assign_agents(self) -> dict[str, Any]:
        """
        Assigns every active agent without an assignment to a valid combination,
        spreading agents round-robin over the available combinations.

        Raises:
            ValidationError: If no valid combination exists
        """
        assigned_ids = select(UserDepartmentAssignment.user_id)
        agents = self.db.scalars(
            select(User)
            .where(
                User.role == UserRole.AGENT.value,
                User.is_active.is_(True),
                User.id.not_in(assigned_ids),
            )
            .order_by(User.id)
        ).all()

        combos = self.valid_combinations()
        if not combos:
            raise ValidationError("No valid division/department/section combinations exist")

        targets = dict(zip((a.id for a in agents), cycle(combos)))
        return self._run_bulk(
            [a.id for a in agents],
            lambda uid: self.create_assignment(uid, *targets[uid]),
        )

    # ORGANOGRAM

    def list_positions(self) -> list[OrganizationalPosition]:
        return list(self.db.scalars(
            select(OrganizationalPosition)
            .where(OrganizationalPosition.is_active.is_(True))
            .order_by(OrganizationalPosition.level, OrganizationalPosition.display_order, OrganizationalPosition.id)
        ).all())

    def position_tree(self) -> list[dict[str, Any]]:
        """Active positions nested under their parents."""
        positions = self.list_positions()
        nodes = {
            p.id: {
                "id": p.id,
                "title": p.title,
                "subtitle": p.subtitle,
                "parent_id": p.parent_id,
                "division": p.division,
                "level": p.level,
                "display_order": p.display_order,
                "is_active": p.is_active,
                "children": [],
            }
            for p in positions
        }
        roots = []
        for p in positions:
            node = nodes[p.id]
            if p.parent_id in nodes:
                nodes[p.parent_id]["children"].append(node)
            else:
                roots.append(node)
        return roots

    def seed_positions(self) -> int:
        """Creates the default organogram if none exists. Returns the number of rows added."""
        if self.db.scalars(select(OrganizationalPosition.id)).first() is not None:
            return 0
        created: dict[str, OrganizationalPosition] = {}
        for key, parent_key, title, subtitle, division, level, order in DEFAULT_POSITIONS:
            position = OrganizationalPosition(
                title=title,
                subtitle=subtitle,
                parent_id=created[parent_key].id if parent_key else None,
                division=division,
                level=level,
                display_order=order,
            )
            self.db.add(position)
            self.db.flush()
            created[key] = position
        return len(created)

    # ONBOARDING

    def create_onboarding_request(self, data: dict[str, Any]) -> OnboardingRequest:
        self.validate_combination(data["division_id"], data["department_id"], data.get("section_id"))
        request = OnboardingRequest(
            **data,
            requested_by=self.acting_user.id if self.acting_user else None,
        )
        self.db.add(request)
        self.db.flush()
        return request

    def list_onboarding_requests(self, requested_by: int | None = None) -> list[OnboardingRequest]:
        query = select(OnboardingRequest)
        if requested_by is not None:
            query = query.where(OnboardingRequest.requested_by == requested_by)
        return list(self.db.scalars(query.order_by(OnboardingRequest.created_at.desc())).all())

    def set_onboarding_status(self, request_id: int, status: OnboardingStatus) -> OnboardingRequest:
        request = self._get(OnboardingRequest, request_id, "Onboarding request")
        if request.status != OnboardingStatus.PENDING.value:
            raise ValidationError(f"Onboarding request is already {request.status}")
        request.status = OnboardingStatus(status).value
        self.db.flush()
        return request
