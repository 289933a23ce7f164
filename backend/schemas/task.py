import math
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from models.task import SubmissionStatus, TaskStatus


def _required(value: str, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(message)
    return value


# Request schema for the create-task form
class TaskCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False, validate_default=True)

    name: str = ""
    owner_name: str = ""
    task_date: date
    status: TaskStatus = TaskStatus.pending
    comments: Optional[str] = None
    amount_received: float = 0
    remaining_amount: float = 0
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @field_validator("name")
    @classmethod
    def name_required(cls, v):
        return _required(v, "Task name is required")

    @field_validator("owner_name")
    @classmethod
    def owner_name_required(cls, v):
        return _required(v, "Owner name is required")

    @field_validator("task_date", mode="before")
    @classmethod
    def task_date_required(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Task date is required")
        return v

    @field_validator("comments")
    @classmethod
    def blank_comments_are_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("amount_received", "remaining_amount")
    @classmethod
    def amount_not_negative(cls, v):
        if v < 0:
            raise ValueError("Amount must be positive")
        return v

    @model_validator(mode="after")
    def location_is_complete(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Latitude and longitude must be provided together")
        if not math.isfinite(self.total_amount):
            raise ValueError("Amount is too large")
        return self

    @property
    def total_amount(self) -> float:
        return self.amount_received + self.remaining_amount

    @property
    def has_location(self) -> bool:
        return self.latitude is not None


# Request schema for the edit-task form
class TaskEdit(TaskCreate):
    change_reason: str = ""
    submission_status: Optional[SubmissionStatus] = None

    @field_validator("change_reason")
    @classmethod
    def change_reason_required(cls, v):
        return _required(v, "Please provide a reason for the changes")


# Response schemas
class TaskImageRead(BaseModel):
    id: str
    task_id: str
    image_url: str
    created_at: datetime

    class Config:
        from_attributes = True


class TaskRead(BaseModel):
    id: str
    name: str
    owner_name: str
    task_date: date
    status: TaskStatus
    comments: Optional[str]
    amount_received: float
    remaining_amount: float
    total_amount: float
    submission_status: SubmissionStatus
    latitude: Optional[float]
    longitude: Optional[float]
    created_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TaskDetail(TaskRead):
    images: List[TaskImageRead] = []


class TaskHistoryRead(BaseModel):
    id: str
    task_id: str
    field_name: str
    old_value: Optional[str]
    new_value: Optional[str]
    changed_by: str
    change_reason: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class TaskEditResponse(BaseModel):
    task: TaskDetail
    history: List[TaskHistoryRead]
