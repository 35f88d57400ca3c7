"""Database layer for the tasks table.

This is the only module that queries the ``tasks`` table. Every function
takes the session to work in, and every write commits its own change.
"""

import logging
import time
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import nulls_first
from sqlmodel import Session, select

from ..models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

# Columns that are set once at creation and never patched.
_IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})


def now_ms() -> int:
    return int(time.time() * 1000)


def _newest_first(query):
    return query.order_by(Task.created_at.desc(), Task.id.desc())


def create_task(session: Session, owner_id: str, fields: Mapping[str, Any]) -> str:
    """Insert a task owned by ``owner_id`` and return its id."""
    now = now_ms()
    values: Dict[str, Any] = {k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS}
    task = Task(**values, user_id=owner_id, created_at=now, updated_at=now)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task.id


def get_task_by_id(session: Session, task_id: str) -> Optional[Task]:
    return session.get(Task, task_id)


def list_by_owner(session: Session, owner_id: str) -> List[Task]:
    query = _newest_first(select(Task).where(Task.user_id == owner_id))
    return list(session.exec(query).all())


def list_by_owner_and_status(session: Session, owner_id: str, status: TaskStatus) -> List[Task]:
    query = _newest_first(
        select(Task).where(Task.user_id == owner_id, Task.status == TaskStatus(status))
    )
    return list(session.exec(query).all())


def list_by_owner_and_priority(session: Session, owner_id: str, priority: TaskPriority) -> List[Task]:
    query = _newest_first(
        select(Task).where(Task.user_id == owner_id, Task.priority == TaskPriority(priority))
    )
    return list(session.exec(query).all())


def list_by_owner_sorted_by_due_date(session: Session, owner_id: str) -> List[Task]:
    """Tasks ordered by ascending due date; tasks without one come first."""
    query = (
        select(Task)
        .where(Task.user_id == owner_id)
        .order_by(nulls_first(Task.due_date.asc()), Task.created_at.asc(), Task.id.asc())
    )
    return list(session.exec(query).all())


def update_task(session: Session, task_id: str, changes: Mapping[str, Any]) -> Optional[Task]:
    """Apply only the supplied fields and refresh ``updated_at``.

    Returns ``None`` when the task no longer exists.
    """
    task = session.get(Task, task_id)
    if task is None:
        logger.info("Update skipped, task %s no longer exists", task_id)
        return None

    for field, value in changes.items():
        if field in _IMMUTABLE_FIELDS:
            continue
        setattr(task, field, value)
    _touch(task)

    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def delete_task(session: Session, task_id: str) -> None:
    task = session.get(Task, task_id)
    if task is None:
        logger.info("Delete skipped, task %s no longer exists", task_id)
        return
    session.delete(task)
    session.commit()


def mark_task_complete(session: Session, task_id: str) -> Optional[Task]:
    task = session.get(Task, task_id)
    if task is None:
        logger.info("Completion skipped, task %s no longer exists", task_id)
        return None

    task.status = TaskStatus.DONE
    _touch(task)

    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def _touch(task: Task) -> None:
    # Never move backwards, even if the wall clock does.
    task.updated_at = max(now_ms(), task.updated_at)
