"""Service for generating stable identifiers."""

from ulid import ULID


def generate_session_id() -> str:
    """Generate a review session ID using ULID (sortable by start time)."""
    return f"session_{ULID()}"
