"""Common utility functions."""
from typing import Optional
from uuid import UUID


def is_valid_uuid(uuid_string: str) -> bool:
    """Check if string is valid UUID."""
    try:
        UUID(uuid_string)
        return True
    except (TypeError, ValueError, AttributeError):
        return False


def normalize_uuid(uuid_string: str) -> Optional[str]:
    """Return the canonical lowercase dashed form of a UUID, or None if invalid."""
    try:
        return str(UUID(uuid_string))
    except (TypeError, ValueError, AttributeError):
        return None
