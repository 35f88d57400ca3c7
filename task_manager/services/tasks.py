"""Task operations with authentication, validation and ownership rules.

This layer composes the data access functions in ``task_manager.db.tasks``
and never queries the database itself. ``caller`` is the authenticated user
id, or ``None`` when the request carried no valid credentials.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from ..db import tasks as task_store
from ..errors import Forbidden, InvalidInput, NotFound, Unauthenticated
from ..models import Task, TaskPriority, TaskStatus
from ..schemas.task import TaskCreate, TaskUpdate
from ..validation import (
    sanitize_description,
    sanitize_title,
    validate_due_date,
    validate_task_description,
    validate_task_title,
)

logger = logging.getLogger(__name__)

# Fields that may be cleared with an explicit null on update.
_CLEARABLE_FIELDS = ("description", "due_date")


def require_auth(caller: Optional[str]) -> str:
    if not caller:
        raise Unauthenticated("User must be logged in")
    return caller


def _get_owned_task(session: Session, caller: str, task_id: str, action: str) -> Task:
    # Existence is checked before ownership.
    task = task_store.get_task_by_id(session, task_id)
    if task is None:
        raise NotFound("Task not found")
    if task.user_id != caller:
        logger.warning("User %s denied %s on task %s", caller, action, task_id)
        raise Forbidden(f"You can only {action} your own tasks")
    return task


def _get_update_data(data: TaskUpdate) -> Dict[str, Any]:
    return data.model_dump(exclude_unset=True)


def create(session: Session, caller: Optional[str], data: TaskCreate) -> str:
    """Create a task for ``caller`` and return its id."""
    user_id = require_auth(caller)

    title = sanitize_title(data.title)
    description = sanitize_description(data.description)
    validate_task_title(title)
    validate_task_description(description)
    validate_due_date(data.due_date)

    task_id = task_store.create_task(
        session,
        user_id,
        {
            "title": title,
            "description": description,
            "due_date": None if data.due_date is None else int(data.due_date),
            "priority": data.priority,
            "status": data.status or TaskStatus.TODO,
        },
    )
    logger.info("User %s created task %s", user_id, task_id)
    return task_id


def list_tasks(session: Session, caller: Optional[str]) -> List[Task]:
    return task_store.list_by_owner(session, require_auth(caller))


def list_by_status(session: Session, caller: Optional[str], status: TaskStatus) -> List[Task]:
    return task_store.list_by_owner_and_status(session, require_auth(caller), status)


def list_by_priority(session: Session, caller: Optional[str], priority: TaskPriority) -> List[Task]:
    return task_store.list_by_owner_and_priority(session, require_auth(caller), priority)


def list_by_due_date(session: Session, caller: Optional[str]) -> List[Task]:
    return task_store.list_by_owner_sorted_by_due_date(session, require_auth(caller))


def get(session: Session, caller: Optional[str], task_id: str) -> Task:
    user_id = require_auth(caller)
    return _get_owned_task(session, user_id, task_id, "view")


def update(session: Session, caller: Optional[str], task_id: str, data: TaskUpdate) -> Task:
    """Apply the fields set on ``data``; omitted fields are left untouched.

    An explicit null clears ``description`` or ``due_date``; it is rejected
    for every other field.
    """
    user_id = require_auth(caller)
    task = _get_owned_task(session, user_id, task_id, "update")

    supplied = _get_update_data(data)
    for field, value in supplied.items():
        if value is None and field not in _CLEARABLE_FIELDS:
            raise InvalidInput(f"Field '{field}' cannot be null")

    changes: Dict[str, Any] = {}

    if "title" in supplied:
        title = sanitize_title(supplied["title"])
        validate_task_title(title)
        changes["title"] = title

    if "description" in supplied:
        description = sanitize_description(supplied["description"])
        validate_task_description(description)
        changes["description"] = description

    if "due_date" in supplied:
        due_date = supplied["due_date"]
        validate_due_date(due_date)
        changes["due_date"] = None if due_date is None else int(due_date)

    if "priority" in supplied:
        changes["priority"] = TaskPriority(supplied["priority"])

    if "status" in supplied:
        changes["status"] = TaskStatus(supplied["status"])

    updated = task_store.update_task(session, task.id, changes)
    if updated is None:
        raise NotFound("Task not found")
    logger.info("User %s updated task %s (%s)", user_id, task_id, ", ".join(sorted(changes)) or "no fields")
    return updated


def mark_complete(session: Session, caller: Optional[str], task_id: str) -> Task:
    user_id = require_auth(caller)
    task = _get_owned_task(session, user_id, task_id, "update")

    completed = task_store.mark_task_complete(session, task.id)
    if completed is None:
        raise NotFound("Task not found")
    logger.info("User %s completed task %s", user_id, task_id)
    return completed


def remove(session: Session, caller: Optional[str], task_id: str) -> None:
    user_id = require_auth(caller)
    task = _get_owned_task(session, user_id, task_id, "delete")

    task_store.delete_task(session, task.id)
    logger.info("User %s deleted task %s", user_id, task_id)
