import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field
from utils.clock import as_utc, utcnow


class SessionToken(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    phone: str
    token: str = Field(unique=True, index=True)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utcnow)
    revoked: bool = Field(default=False)

    def is_active(self, now: datetime) -> bool:
        return not self.revoked and as_utc(self.expires_at) > as_utc(now)
