import os
from typing import Any, Dict, List, Optional, Sequence


def get_env(name: str, default: Any = None) -> Any:
    """
    Retrieve an environment variable or return a default value.

    Args:
        name: Name of the environment variable.
        default: Value to return if the variable is not set.

    Returns:
        The environment variable value or the default.
    """
    return os.environ.get(name, default)


def first_env(names: Sequence[str], default: Any = None) -> Any:
    """
    Return the first non-blank value among several environment variables.

    Args:
        names: Variable names, checked in order.
        default: Value to return if none of them holds a value.

    Returns:
        The first usable value or the default.
    """
    for name in names:
        value = os.environ.get(name)
        if value and value.strip():
            return value.strip()
    return default


def bool_from_str(value: Optional[str]) -> Optional[bool]:
    """
    Convert a string to a boolean.

    Args:
        value: Input string representation of a boolean.

    Returns:
        True, False, or None if conversion is not possible.
    """
    if value is None:
        return None
    val = value.lower()
    if val in ("true", "1", "yes", "y", "t"):
        return True
    if val in ("false", "0", "no", "n", "f"):
        return False
    return None


def optional_float(value: Optional[str]) -> Optional[float]:
    """
    Convert a string to a float, treating blank values as unset.

    Args:
        value: Raw string, usually read from the environment.

    Returns:
        The parsed float, or None for None/blank input.

    Raises:
        ValueError: If a non-blank value is not a number.
    """
    if value is None or not value.strip():
        return None
    return float(value)


def csv_list(value: Optional[str]) -> List[str]:
    """
    Split a comma separated string into a list of trimmed, non-empty items.
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def format_error_response(
    status: int,
    error_type: str,
    field: str,
    message: str,
    details: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    """
    Format a standardized error response payload.

    Args:
        status: HTTP status code.
        error_type: Type of error.
        field: Field name associated with the error.
        message: Descriptive error message.
        details: Optional list of detailed error info.

    Returns:
        A dict suitable for a JSON error response.
    """
    return {
        "status": status,
        "error": {
            "type": error_type,
            "field": field,
            "message": message,
            "details": details,
        },
    }
