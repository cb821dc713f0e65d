"""
Validation functions for catalog entries and user input
"""
from typing import Any, Iterable, Optional, Tuple

# Values that clear a difficulty/playstyle filter
CLEAR_FILTER_VALUES = {"", "all", "any", "none", "*"}


def validate_catalog_entry(entry: Any, kind: str = "entry") -> Tuple[bool, Optional[str]]:
    """
    Validate a game / class / build entry of the catalog

    Args:
        entry: Parsed JSON object
        kind: Name used in the error message

    Returns:
        Tuple (is_valid, error_message)
    """
    if not isinstance(entry, dict):
        return False, f"{kind} must be an object"

    for key in ("id", "name"):
        value = entry.get(key)
        if not isinstance(value, str) or not value.strip():
            return False, f"{kind} is missing a non-empty '{key}'"

    return True, None


def validate_identifier(value: Any) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate an id typed by a user (class id, build id, game id)

    Returns:
        Tuple (is_valid, normalized_id, error_message)
    """
    if value is None:
        return False, None, "An id is required"
    text = str(value).strip()
    if not text:
        return False, None, "An id is required"
    if len(text) > 100:
        return False, None, "Id is too long"
    return True, text, None


def validate_filter_value(value: Any, options: Iterable[str]) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate a difficulty/playstyle filter value against the known options

    Returns:
        Tuple (is_valid, canonical_value, error_message); canonical_value is
        None when the filter should be cleared
    """
    text = "" if value is None else str(value).strip()
    if text.casefold() in CLEAR_FILTER_VALUES:
        return True, None, None

    for option in options:
        if option.casefold() == text.casefold():
            return True, option, None

    known = ", ".join(options) or "none"
    return False, None, f"'{text}' is not a valid value (known: {known})"
