"""Validation and sanitization of task fields.

Pure functions with no database access. Sanitizers normalise whitespace;
validators raise ``InvalidInput`` and return nothing.
"""

import math
from numbers import Real
from typing import Any, Optional

from .errors import InvalidInput

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
# Largest integer a JSON number carries exactly (2**53 - 1).
MAX_DUE_DATE = 9_007_199_254_740_991


def sanitize_title(title: str) -> str:
    """Trim surrounding whitespace from a title."""
    return title.strip()


def sanitize_description(description: Optional[str]) -> Optional[str]:
    """Trim surrounding whitespace from a description, passing ``None`` through."""
    if description is None:
        return None
    return description.strip()


def validate_task_title(title: Optional[str]) -> None:
    if not title or not title.strip():
        raise InvalidInput("Task title cannot be empty")
    if len(title.strip()) > MAX_TITLE_LENGTH:
        raise InvalidInput(f"Task title must be {MAX_TITLE_LENGTH} characters or less")


def validate_task_description(description: Optional[str]) -> None:
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidInput(f"Task description must be {MAX_DESCRIPTION_LENGTH} characters or less")


def validate_due_date(due_date: Any) -> None:
    """Reject malformed due dates.

    Dates in the past are accepted so that overdue work can still be tracked.
    """
    if due_date is None:
        return
    if isinstance(due_date, bool) or not isinstance(due_date, Real):
        raise InvalidInput("Invalid due date")
    if not math.isfinite(due_date) or due_date < 0:
        raise InvalidInput("Invalid due date")
    if due_date > MAX_DUE_DATE:
        raise InvalidInput("Invalid due date")
