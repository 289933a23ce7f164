from typing import Iterator
from sqlmodel import SQLModel, Session, create_engine
from core.config import settings

# sqlite needs this to be shared across FastAPI's threadpool
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, connect_args=connect_args)


def create_db_and_tables():
    # table models must be imported before create_all sees them
    from models import session_token, task, user  # noqa: F401

    SQLModel.metadata.create_all(engine)


# ➜ Use this in FastAPI endpoints via Depends(get_session)
def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
