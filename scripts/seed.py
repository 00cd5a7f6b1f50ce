#!/usr/bin/env python
"""
Seeds an empty database: tables, admin account, default organisation and organogram.

Usage:
    python scripts/seed.py
"""

import structlog
from sqlalchemy import select

from workforce.core.config import get_settings
from workforce.core.database import create_tables, get_db_context
from workforce.core.logging import setup_logging
from workforce.models import Department, Division, Section, User
from workforce.services.organization_service import OrganizationService
from workforce.services.user_service import UserService
from shared.constants import DEFAULT_DIVISIONS
from shared.enums import UserRole

logger = structlog.get_logger(__name__)


def seed_admin(db) -> None:
    settings = get_settings()
    if db.scalars(select(User).where(User.username == settings.default_admin_username)).first():
        return
    UserService(db).create_user({
        "username": settings.default_admin_username,
        "password": settings.default_admin_password,
        "first_name": "System",
        "last_name": "Administrator",
        "role": UserRole.ADMIN,
    })
    logger.info("admin_seeded", username=settings.default_admin_username)


def seed_organisation(db) -> None:
    service = OrganizationService(db)
    for division_name, departments in DEFAULT_DIVISIONS.items():
        division = db.scalars(select(Division).where(Division.name == division_name)).first()
        if division is None:
            division = service.create_division({"name": division_name})
        for department_name, sections in departments.items():
            department = db.scalars(
                select(Department).where(
                    Department.name == department_name,
                    Department.division_id == division.id,
                )
            ).first()
            if department is None:
                department = service.create_department({"name": department_name, "division_id": division.id})
            for section_name in sections:
                exists = db.scalars(
                    select(Section).where(Section.name == section_name, Section.department_id == department.id)
                ).first()
                if exists is None:
                    service.create_section({"name": section_name, "department_id": department.id})
    added = service.seed_positions()
    logger.info("organisation_seeded", divisions=len(DEFAULT_DIVISIONS), positions_added=added)


def main() -> None:
    setup_logging()
    create_tables()
    with get_db_context() as db:
        seed_admin(db)
        seed_organisation(db)


if __name__ == "__main__":
    main()
