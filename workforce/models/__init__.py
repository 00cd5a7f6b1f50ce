"""ORM models."""

# Base classes and mixins
from workforce.models.base import Base, TimestampMixin

# Models
from workforce.models.user import User
from workforce.models.organization import (
    Department,
    Division,
    OnboardingRequest,
    OrganizationalPosition,
    Section,
    UserDepartmentAssignment,
)
from workforce.models.team import Team, TeamMember
from workforce.models.attendance import Attendance, AttendanceAudit
from workforce.models.asset import (
    Asset,
    AssetDetails,
    AssetIncident,
    AssetLossRecord,
    HistoricalAssetRecord,
)
from workforce.models.asset_state import AssetDailyState, AssetStateAudit
from workforce.models.transfer import Transfer, TransferAudit
from workforce.models.termination import Termination
from workforce.models.notification import Notification

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Division",
    "Department",
    "Section",
    "UserDepartmentAssignment",
    "OrganizationalPosition",
    "OnboardingRequest",
    "Team",
    "TeamMember",
    "Attendance",
    "AttendanceAudit",
    "Asset",
    "AssetDetails",
    "AssetIncident",
    "AssetLossRecord",
    "HistoricalAssetRecord",
    "AssetDailyState",
    "AssetStateAudit",
    "Transfer",
    "TransferAudit",
    "Termination",
    "Notification",
]
