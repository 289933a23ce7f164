import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field
from utils.clock import utcnow
import enum


class UserRole(str, enum.Enum):
    employee = "employee"
    admin = "admin"


class User(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True, index=True)
    username: str = Field(index=True, unique=True, nullable=False)
    phone_number: str = Field(index=True, unique=True, nullable=False)
    password_hash: str = Field(nullable=False)
    role: UserRole = Field(default=UserRole.employee, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
