import enum
from typing import Optional
from uuid import uuid4

from sqlalchemy import BigInteger, Column, Enum as SAEnum, Index
from sqlmodel import SQLModel, Field


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Task(SQLModel, table=True):
    """Task owned by a single user.

    Timestamps are integer milliseconds since the epoch. ``status`` and
    ``priority`` are stored as their enum values (``"in-progress"``).
    """
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_status", "user_id", "status"),
        Index("ix_tasks_user_priority", "user_id", "priority"),
        Index("ix_tasks_user_due_date", "user_id", "due_date"),
        Index("ix_tasks_user_created", "user_id", "created_at"),
    )

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: Optional[int] = Field(default=None, sa_column=Column(BigInteger, nullable=True))
    priority: TaskPriority = Field(
        sa_column=Column(
            SAEnum(TaskPriority, name="task_priority", values_callable=_enum_values),
            nullable=False,
        )
    )
    status: TaskStatus = Field(
        default=TaskStatus.TODO,
        sa_column=Column(
            SAEnum(TaskStatus, name="task_status", values_callable=_enum_values),
            nullable=False,
        ),
    )
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: int = Field(sa_column=Column(BigInteger, nullable=False))
    updated_at: int = Field(sa_column=Column(BigInteger, nullable=False))
