"""Utilities for working with enums."""

from typing import Optional


def coerce_enum(enum_cls, value, default=None):
    """Coerce a loosely-typed value to an enum instance.

    Handles multiple input types:
    - Enum instances are returned as-is
    - Enum values are looked up directly
    - Strings are matched against member names and values, ignoring case,
      spaces, dashes and underscores ("tit-for-tat" finds TIT_FOR_TAT)
    - Anything else falls back to the default

    Args:
        enum_cls: The Enum class to coerce to
        value: The value to coerce
        default: Member returned when coercion fails (None if omitted)

    Returns:
        An instance of enum_cls, or default
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        pass

    if isinstance(value, str):
        wanted = _squash(value)
        for member in enum_cls:
            if wanted in (_squash(member.name), _squash(str(member.value))):
                return member
    return default


def _squash(text: Optional[str]) -> str:
    return "".join(ch for ch in (text or "").lower() if ch.isalnum())
