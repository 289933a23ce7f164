from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session
from core.database import get_session
from models.user import User
from schemas.task import TaskDetail, TaskHistoryRead, TaskRead
from services.tasks import get_task_or_404, list_task_history, list_tasks, load_task_detail
from utils.security import admin_required

router = APIRouter(tags=["Admin"])


# All tasks, newest first
@router.get("", response_model=List[TaskRead])
def list_all_tasks(
    session: Session = Depends(get_session),
    admin: User = Depends(admin_required),
):
    return list_tasks(session)


@router.get("/tasks/{task_id}", response_model=TaskDetail)
def view_task(
    task_id: str,
    session: Session = Depends(get_session),
    admin: User = Depends(admin_required),
):
    task = get_task_or_404(session, task_id)
    return load_task_detail(session, task)


# Change history of one task, newest first
@router.get("/tasks/{task_id}/history", response_model=List[TaskHistoryRead])
def view_task_history(
    task_id: str,
    session: Session = Depends(get_session),
    admin: User = Depends(admin_required),
):
    task = get_task_or_404(session, task_id)
    return list_task_history(session, task.id)
