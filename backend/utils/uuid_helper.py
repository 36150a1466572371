"""
UUID generation helper for the application.

Provides consistent identifier generation across all entities.
"""
import uuid


def generate_uuid() -> str:
    """
    Generate a new UUID string.

    Returns:
        str: A new UUID4 string
    """
    return str(uuid.uuid4())


def is_valid_uuid(value: str) -> bool:
    """
    Check whether a string is a canonical UUID.

    Args:
        value: Candidate identifier

    Returns:
        bool: True if value parses as a UUID
    """
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
