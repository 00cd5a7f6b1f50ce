"""Workforce Manager constants."""

# Asset types tracked by the daily book-in/book-out cycle
TRACKED_ASSET_TYPES = ("laptop", "headsets", "dongle")

# States from which an asset may be booked in
BOOK_IN_ALLOWED_STATES = ("ready_for_collection", "collected", "not_collected")

# States from which an asset may be marked as found
RECOVERABLE_STATES = ("not_returned", "lost")

# Reason markers written by the daily reset; used to detect a completed reset
RESET_REASON_MARKERS = ("Daily reset", "reset", "Persisting")

# Role groups
MANAGER_ROLES = ("contact_center_manager", "contact_center_ops_manager")
USER_DIRECTORY_ROLES = ("admin", "team_leader", "contact_center_manager", "contact_center_ops_manager")
ASSET_MANAGER_ROLES = ("admin", "hr", "team_leader")
ASSET_OVERSIGHT_ROLES = (
    "admin",
    "hr",
    "team_leader",
    "contact_center_manager",
    "contact_center_ops_manager",
)
PEOPLE_OPS_ROLES = ("admin", "hr", "team_leader")
HR_ADMIN_ROLES = ("admin", "hr")

# Fields visible to non-admin readers of the user directory
SAFE_USER_FIELDS = ("id", "username", "first_name", "last_name", "role", "department_id", "is_active")

# Default organisation seeded on first run
DEFAULT_DIVISIONS = {
    "Telesales": {
        "Sales Floor": ["Inbound", "Outbound"],
    },
    "Customer Service": {
        "Support": ["General Queries", "Escalations"],
        "Quality Assurance": ["Call Audits"],
    },
}
