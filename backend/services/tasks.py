from typing import List, Optional
from fastapi import HTTPException
from sqlalchemy import case
from sqlmodel import Session, select
from models.task import Task, TaskHistory, TaskImage
from schemas.task import TaskDetail, TaskImageRead
from services.change_tracker import TRACKED_FIELD_NAMES

# rows of one edit share a timestamp; list them in tracked-field order
_FIELD_ORDER = case(
    {name: position for position, name in enumerate(TRACKED_FIELD_NAMES)},
    value=TaskHistory.field_name,
    else_=len(TRACKED_FIELD_NAMES),
)


def get_task_or_404(session: Session, task_id: str) -> Task:
    task = session.get(Task, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def list_tasks(session: Session, created_by: Optional[str] = None) -> List[Task]:
    """Tasks newest first, optionally only those one user created."""
    statement = select(Task)
    if created_by is not None:
        statement = statement.where(Task.created_by == created_by)
    return session.exec(statement.order_by(Task.created_at.desc())).all()


def list_task_images(session: Session, task_id: str) -> List[TaskImage]:
    return session.exec(
        select(TaskImage).where(TaskImage.task_id == task_id).order_by(TaskImage.created_at)
    ).all()


def list_task_history(session: Session, task_id: str) -> List[TaskHistory]:
    return session.exec(
        select(TaskHistory)
        .where(TaskHistory.task_id == task_id)
        .order_by(TaskHistory.created_at.desc(), _FIELD_ORDER)
    ).all()


def load_task_detail(session: Session, task: Task) -> TaskDetail:
    detail = TaskDetail.model_validate(task)
    detail.images = [TaskImageRead.model_validate(image) for image in list_task_images(session, task.id)]
    return detail
