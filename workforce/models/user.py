"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce.models.base import Base, TimestampMixin
from shared.enums import UserRole

if TYPE_CHECKING:
    from workforce.models.organization import Department
    from workforce.models.team import TeamMember


class User(Base, TimestampMixin):
    """
    Application user. Every employee, from agent to admin, is a user.

    Attributes:
        id: Unique identifier
        username: Login name (unique)
        password_hash: bcrypt hash
        email: Email address (unique, optional)
        first_name: First name
        last_name: Last name
        role: One of UserRole
        department_id: Home department
        reports_to: Direct manager
        is_active: False once the user is terminated or disabled
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    profile_image_url: Mapped[str | None] = mapped_column(String(500))
    role: Mapped[str] = mapped_column(String(50), nullable=False, default=UserRole.AGENT.value, index=True)
    department_id: Mapped[int | None] = mapped_column(
        ForeignKey("departments.id", ondelete="SET NULL"),
        nullable=True,
    )
    reports_to: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    department: Mapped["Department | None"] = relationship(foreign_keys=[department_id])
    manager: Mapped["User | None"] = relationship(remote_side=[id], foreign_keys=[reports_to])
    memberships: Mapped[list["TeamMember"]] = relationship(back_populates="user")

    @property
    def full_name(self) -> str:
        """First and last name, falling back to the username."""
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.username

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.username} ({self.role})>"
