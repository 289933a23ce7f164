import uuid
from datetime import date, datetime
from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship
from utils.clock import utcnow
import enum


class TaskStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"


class SubmissionStatus(str, enum.Enum):
    in_process = "in_process"
    submitted = "submitted"


class Task(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True, index=True)
    name: str
    owner_name: str
    task_date: date
    status: TaskStatus = Field(default=TaskStatus.pending)
    comments: Optional[str] = None

    amount_received: float = Field(default=0)
    remaining_amount: float = Field(default=0)
    total_amount: float = Field(default=0)  # always amount_received + remaining_amount
    submission_status: SubmissionStatus = Field(default=SubmissionStatus.in_process)

    latitude: Optional[float] = None
    longitude: Optional[float] = None

    created_by: str = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    images: List["TaskImage"] = Relationship(back_populates="task")
    history: List["TaskHistory"] = Relationship(back_populates="task")


class TaskImage(SQLModel, table=True):
    __tablename__ = "task_images"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True, index=True)
    task_id: str = Field(foreign_key="task.id", index=True)
    image_url: str
    created_at: datetime = Field(default_factory=utcnow)

    task: Task = Relationship(back_populates="images")


class TaskHistory(SQLModel, table=True):
    """One changed field of one edit. Rows are only ever inserted."""

    __tablename__ = "task_history"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True, index=True)
    task_id: str = Field(foreign_key="task.id", index=True)
    field_name: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    changed_by: str = Field(foreign_key="user.id")
    change_reason: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    task: Task = Relationship(back_populates="history")
