"""Display helpers for task priorities, statuses and due dates."""

import time
from typing import Optional

from .models import TaskPriority, TaskStatus

_PRIORITY_LABELS = {
    TaskPriority.LOW: "Low",
    TaskPriority.MEDIUM: "Medium",
    TaskPriority.HIGH: "High",
}

_STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}

_PRIORITY_COLORS = {
    TaskPriority.LOW: "green",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.HIGH: "red",
}

_STATUS_COLORS = {
    TaskStatus.TODO: "gray",
    TaskStatus.IN_PROGRESS: "blue",
    TaskStatus.DONE: "green",
}

_PRIORITY_RANK = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


def format_priority(priority: TaskPriority) -> str:
    return _PRIORITY_LABELS[TaskPriority(priority)]


def format_status(status: TaskStatus) -> str:
    return _STATUS_LABELS[TaskStatus(status)]


def get_priority_color(priority: TaskPriority) -> str:
    return _PRIORITY_COLORS[TaskPriority(priority)]


def get_status_color(status: TaskStatus) -> str:
    return _STATUS_COLORS[TaskStatus(status)]


def is_overdue(due_date: Optional[int], now: Optional[int] = None) -> bool:
    """True when ``due_date`` (ms) lies before ``now`` (ms, defaults to the current time).

    A missing or zero due date is never overdue.
    """
    if not due_date:
        return False
    if now is None:
        now = int(time.time() * 1000)
    return due_date < now


def compare_priority(a: TaskPriority, b: TaskPriority) -> int:
    """Comparator ordering high before medium before low."""
    return _PRIORITY_RANK[TaskPriority(b)] - _PRIORITY_RANK[TaskPriority(a)]
