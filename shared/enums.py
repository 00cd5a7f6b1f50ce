"""Enumerations for Workforce Manager.

All system-wide enums are defined here.
"""
from enum import Enum


# Display labels used in unreturned-asset listings
ASSET_STATE_LABELS: dict[str, str] = {
    "ready_for_collection": "Ready for Collection",
    "collected": "Collected",
    "not_collected": "Not Collected",
    "returned": "Returned",
    "not_returned": "Not Returned Yet",
    "lost": "Lost",
}


def get_asset_state_label(value: str) -> str:
    """Get display label for an asset state value."""
    return ASSET_STATE_LABELS.get(value, value)


class UserRole(str, Enum):
    """User roles"""
    ADMIN = "admin"                                            # Full access
    HR = "hr"                                                  # People operations
    CONTACT_CENTER_OPS_MANAGER = "contact_center_ops_manager"  # Oversees CC managers
    CONTACT_CENTER_MANAGER = "contact_center_manager"          # Oversees team leaders
    TEAM_LEADER = "team_leader"                                # Leads a team of agents
    AGENT = "agent"                                            # Front-line staff


class AssetType(str, Enum):
    """Equipment booked in and out every shift"""
    LAPTOP = "laptop"
    HEADSETS = "headsets"
    DONGLE = "dongle"


class AssetState(str, Enum):
    """Daily state of a booked asset"""
    READY_FOR_COLLECTION = "ready_for_collection"  # Start of day
    COLLECTED = "collected"                        # Booked in
    NOT_COLLECTED = "not_collected"                # Agent did not collect
    RETURNED = "returned"                          # Booked out
    NOT_RETURNED = "not_returned"                  # Still with the agent
    LOST = "lost"                                  # Reported lost


class AssetStatus(str, Enum):
    """Inventory status of an asset"""
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    MAINTENANCE = "maintenance"
    MISSING = "missing"


class AssetCondition(str, Enum):
    """Physical condition of an asset"""
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    DAMAGED = "damaged"


class IncidentType(str, Enum):
    """Asset incident type"""
    LOST = "lost"
    DAMAGED = "damaged"
    MISSING = "missing"
    UNRETURNED = "unreturned"
    MAINTENANCE = "maintenance"


class IncidentStatus(str, Enum):
    """Asset incident status"""
    REPORTED = "reported"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    CLOSED = "closed"


class LossStatus(str, Enum):
    """Asset loss record status"""
    REPORTED = "reported"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"


class ResetAction(str, Enum):
    """Action taken for a single state during the daily reset"""
    AUTO_MARK_UNRETURNED = "auto_mark_unreturned"
    RESET_COMPLETED_CYCLE = "reset_completed_cycle"
    RESET_NOT_COLLECTED = "reset_not_collected"
    PERSIST_PROBLEMATIC_STATE = "persist_problematic_state"
    RESET_READY_STATE = "reset_ready_state"
    RESET_UNKNOWN_STATE = "reset_unknown_state"
    INITIALIZE_NEW_STATE = "initialize_new_state"


class AttendanceStatus(str, Enum):
    """Attendance status of a working day"""
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    SICK = "sick"
    ON_LEAVE = "on leave"
    AWOL = "AWOL"
    SUSPENDED = "suspended"


class TransferType(str, Enum):
    """Transfer duration"""
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


class TransferStatus(str, Enum):
    """Transfer workflow status"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class TransferAction(str, Enum):
    """Transfer audit action"""
    CREATED = "created"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class TransferRole(str, Enum):
    """Work stream an agent is transferred into"""
    TAKING_CALLS = "taking_calls"
    ADMINISTRATIVE_WORK = "administrative_work"
    QUALITY_COMPLIANCE = "quality_compliance"
    TECHNICAL_SUPPORT = "technical_support"
    TRAINING_DEVELOPMENT = "training_development"
    OPERATIONAL_SUPPORT = "operational_support"
    LITIGATION = "litigation"
    AUDIT = "audit"


class TransferLocation(str, Enum):
    """Office location"""
    THANDANANI = "thandanani"
    SIXTEENTH = "16th"


class TerminationType(str, Enum):
    """Termination or status change type"""
    AWOL = "AWOL"
    SUSPENDED = "suspended"
    RESIGNATION = "resignation"
    TERMINATED = "terminated"
    VOLUNTARY = "voluntary"
    INVOLUNTARY = "involuntary"
    LAYOFF = "layoff"
    RETIREMENT = "retirement"


class AssetReturnStatus(str, Enum):
    """Return progress of equipment for a terminated user"""
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


class NotificationSeverity(str, Enum):
    """Notification severity"""
    INFO = "info"
    WARNING = "warning"
    URGENT = "urgent"


class NotificationSubject(str, Enum):
    """Entity a notification refers to"""
    TRANSFER = "transfer"
    TERMINATION = "termination"
    ASSET = "asset"
    SYSTEM = "system"
    DEPARTMENT = "department"
    TEAM = "team"


class OnboardingStatus(str, Enum):
    """Onboarding request status"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
