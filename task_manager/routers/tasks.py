from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from ..database import get_db
from ..errors import InvalidInput
from ..models import TaskPriority, TaskStatus
from ..schemas.task import Task as TaskSchema, TaskCreate, TaskCreated, TaskUpdate
from ..services import tasks as task_service
from .auth import get_current_user_id

router = APIRouter()

SORT_CREATED_AT = "created_at"
SORT_DUE_DATE = "due_date"


@router.get("/tasks", response_model=List[TaskSchema])
def get_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    sort: str = SORT_CREATED_AT,
    caller: Optional[str] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the caller's tasks.

    At most one of ``status``, ``priority`` or ``sort=due_date`` may be
    given. Without one, tasks come newest first.
    """
    if sort not in (SORT_CREATED_AT, SORT_DUE_DATE):
        raise InvalidInput("Invalid sort field", {"allowed": [SORT_CREATED_AT, SORT_DUE_DATE]})

    selectors = [status is not None, priority is not None, sort == SORT_DUE_DATE]
    if sum(selectors) > 1:
        raise InvalidInput("Only one of status, priority or sort=due_date may be given")

    if status is not None:
        return task_service.list_by_status(db, caller, status)
    if priority is not None:
        return task_service.list_by_priority(db, caller, priority)
    if sort == SORT_DUE_DATE:
        return task_service.list_by_due_date(db, caller)
    return task_service.list_tasks(db, caller)


@router.post("/tasks", response_model=TaskCreated, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    caller: Optional[str] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a new task owned by the caller."""
    return TaskCreated(id=task_service.create(db, caller, task))


@router.get("/tasks/{task_id}", response_model=TaskSchema)
def get_task(
    task_id: str,
    caller: Optional[str] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return task_service.get(db, caller, task_id)


@router.put("/tasks/{task_id}", response_model=TaskSchema)
def update_task(
    task_id: str,
    task_update: TaskUpdate,
    caller: Optional[str] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Update the supplied fields of a task."""
    return task_service.update(db, caller, task_id, task_update)


@router.patch("/tasks/{task_id}/complete", response_model=TaskSchema)
def mark_task_complete(
    task_id: str,
    caller: Optional[str] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Mark a task as done."""
    return task_service.mark_complete(db, caller, task_id)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    caller: Optional[str] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a task permanently."""
    task_service.remove(db, caller, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
