"""Shared validators for Pydantic models and services."""

from datetime import date


def validate_end_not_before_start(end: date | None, start: date | None) -> date | None:
    """
    Checks that an end date does not precede the start date.

    Args:
        end: End date (optional)
        start: Start date

    Returns:
        The end date

    Raises:
        ValueError: If the end date is before the start date
    """
    if end is not None and start is not None and end < start:
        raise ValueError("End date cannot be before start date")
    return end


def validate_password_strength(value: str) -> str:
    """
    Checks the minimum password policy.

    Raises:
        ValueError: If the password is shorter than 6 characters
    """
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters long")
    return value


def normalize_username(value: str) -> str:
    """Strips whitespace and lowercases a username."""
    return value.strip().lower()
