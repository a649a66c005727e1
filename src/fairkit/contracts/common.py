"""Shared coercion for request contracts.

Parameter extraction hands back strings, and "nothing" arrives as "null",
"undefined" or "". Those collapse to None once, here, at the edge.
"""

from typing import Any, Optional

NULL_SENTINELS = ("", "null", "none", "undefined")


def none_if_blank(value: Any) -> Optional[Any]:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in NULL_SENTINELS:
        return None
    return value


def text_or_none(value: Any) -> Optional[str]:
    """Blank sentinels to None, numbers to their string form."""
    value = none_if_blank(value)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return str(value).strip()


def to_bool(value: Any) -> bool:
    value = none_if_blank(value)
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)
