"""Organisation hierarchy models: divisions, departments, sections."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.models.base import Base, TimestampMixin
from shared.enums import OnboardingStatus

if TYPE_CHECKING:
    from workforce.models.user import User


class Division(Base, TimestampMixin):
    """Top level of the organisation (e.g. Telesales, Customer Service)."""

    __tablename__ = "divisions"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    departments: Mapped[list["Department"]] = relationship(back_populates="division")


class Department(Base, TimestampMixin):
    """Department, optionally belonging to a division."""

    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    division_id: Mapped[int | None] = mapped_column(
        ForeignKey("divisions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    division: Mapped["Division | None"] = relationship(back_populates="departments")
    sections: Mapped[list["Section"]] = relationship(
        back_populates="department",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Department {self.id}: {self.name}>"


class Section(Base, TimestampMixin):
    """Section within a department."""

    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    department_id: Mapped[int] = mapped_column(
        ForeignKey("departments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    department: Mapped["Department"] = relationship(back_populates="sections")


class UserDepartmentAssignment(Base, TimestampMixin):
    """
    Places a user in a (division, department, section) combination.

    A user may hold several assignments, but never the same combination twice.
    """

    __tablename__ = "user_department_assignments"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "division_id", "department_id", "section_id",
            name="uq_user_department_assignment",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    division_id: Mapped[int] = mapped_column(ForeignKey("divisions.id", ondelete="CASCADE"), nullable=False)
    department_id: Mapped[int] = mapped_column(ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)
    section_id: Mapped[int | None] = mapped_column(ForeignKey("sections.id", ondelete="CASCADE"), nullable=True)
    assigned_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), nullable=False)

    user: Mapped["User"] = relationship(foreign_keys=[user_id])
    division: Mapped["Division"] = relationship()
    department: Mapped["Department"] = relationship()
    section: Mapped["Section | None"] = relationship()


class OrganizationalPosition(Base, TimestampMixin):
    """Node of the organogram (Head of Operations down to Agents)."""

    __tablename__ = "organizational_positions"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(150), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(String(150))
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("organizational_positions.id", ondelete="CASCADE"),
        nullable=True,
    )
    division: Mapped[str | None] = mapped_column(String(100))
    level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class OnboardingRequest(Base, TimestampMixin):
    """Request to onboard a new employee into a division/department/section."""

    __tablename__ = "onboarding_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    division_id: Mapped[int] = mapped_column(ForeignKey("divisions.id", ondelete="CASCADE"), nullable=False)
    department_id: Mapped[int] = mapped_column(ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)
    section_id: Mapped[int | None] = mapped_column(ForeignKey("sections.id", ondelete="SET NULL"), nullable=True)
    requested_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=OnboardingStatus.PENDING.value, nullable=False)
