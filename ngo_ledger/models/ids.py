"""
Identifier normalization.

Older persisted data carries numeric ids, newer data uuid strings.
Every id entering the system passes through normalize_id so internal
code compares plain strings and never re-coerces.
"""

from typing import Any
from uuid import uuid4


def normalize_id(value: Any) -> str:
    """
    Canonical string form of an id.

    5, 5.0 and "5" all normalize to "5".

    Raises:
        ValueError: If the value is empty or None
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Invalid id: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    if not text:
        raise ValueError("Id cannot be empty")
    return text


def new_transaction_id() -> str:
    """Fresh id for a transaction created in this session."""
    return str(uuid4())
