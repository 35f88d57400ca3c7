from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

from ..models import TaskPriority, TaskStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(_CamelModel):
    """Fields accepted when creating a task.

    Title and description are sanitized and length-checked by the service;
    ``status`` defaults to ``todo`` when omitted.
    """
    title: str
    description: Optional[str] = None
    due_date: Optional[Union[StrictInt, StrictFloat]] = None
    priority: TaskPriority
    status: Optional[TaskStatus] = None


class TaskUpdate(_CamelModel):
    """Partial update: only the fields the caller sets are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[Union[StrictInt, StrictFloat]] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None


class TaskCreated(_CamelModel):
    id: str


class Task(_CamelModel):
    """Persisted task as returned to clients."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[int] = None
    priority: TaskPriority
    status: TaskStatus
    user_id: str
    created_at: int
    updated_at: int
