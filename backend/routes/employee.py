import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from pydantic import ValidationError
from sqlmodel import Session
from core.database import get_session
from models.task import Task, TaskStatus, SubmissionStatus
from models.user import User
from schemas.task import (
    TaskCreate,
    TaskDetail,
    TaskEdit,
    TaskEditResponse,
    TaskHistoryRead,
    TaskRead,
)
from services.change_tracker import apply_task_edit
from services.storage import ImageStorage, PendingImage, attach_images, get_storage, read_images
from services.tasks import get_task_or_404, list_tasks, load_task_detail
from utils.security import employee_required

router = APIRouter(tags=["Employee"])
logger = logging.getLogger(__name__)


def _form_error(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()],
    )


def _owned_task(session: Session, task_id: str, current_user: User) -> Task:
    task = get_task_or_404(session, task_id)
    if task.created_by != current_user.id:
        raise HTTPException(status_code=403, detail="Not your task")
    return task


async def _store_images(
    session: Session,
    storage: ImageStorage,
    task: Task,
    images: List[PendingImage],
    user_id: str,
):
    try:
        await attach_images(session, storage, task, images, user_id)
    except Exception:
        session.rollback()
        logger.exception("Error uploading images for task %s", task.id)
        raise HTTPException(status_code=500, detail="Task saved but image upload failed")


# Dashboard: the signed-in employee's tasks
@router.get("", response_model=List[TaskRead])
def get_my_tasks(
    current_user: User = Depends(employee_required),
    session: Session = Depends(get_session),
):
    return list_tasks(session, created_by=current_user.id)


@router.post("/create-task", response_model=TaskDetail, status_code=201)
async def create_task(
    name: str = Form(""),
    owner_name: str = Form(""),
    task_date: str = Form(""),
    status: TaskStatus = Form(TaskStatus.pending),
    comments: Optional[str] = Form(None),
    amount_received: float = Form(0),
    remaining_amount: float = Form(0),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    images: List[UploadFile] | None = File(None),
    current_user: User = Depends(employee_required),
    session: Session = Depends(get_session),
    storage: ImageStorage = Depends(get_storage),
):
    try:
        form = TaskCreate(
            name=name,
            owner_name=owner_name,
            task_date=task_date,
            status=status,
            comments=comments,
            amount_received=amount_received,
            remaining_amount=remaining_amount,
            latitude=latitude,
            longitude=longitude,
        )
    except ValidationError as e:
        raise _form_error(e)

    pending_images = await read_images(images or [])

    task = Task(
        name=form.name,
        owner_name=form.owner_name,
        task_date=form.task_date,
        status=form.status,
        comments=form.comments,
        amount_received=form.amount_received,
        remaining_amount=form.remaining_amount,
        total_amount=form.total_amount,
        latitude=form.latitude,
        longitude=form.longitude,
        submission_status=SubmissionStatus.in_process,
        created_by=current_user.id,
    )

    try:
        session.add(task)
        session.commit()
        session.refresh(task)
    except Exception:
        session.rollback()
        logger.exception("Error creating task")
        raise HTTPException(status_code=500, detail="Failed to create task")

    logger.info("Task %s created by %s", task.id, current_user.id)
    await _store_images(session, storage, task, pending_images, current_user.id)
    return load_task_detail(session, task)


# Load a task to pre-fill the edit form
@router.get("/edit-task/{task_id}", response_model=TaskDetail)
def get_task_for_edit(
    task_id: str,
    current_user: User = Depends(employee_required),
    session: Session = Depends(get_session),
):
    task = _owned_task(session, task_id, current_user)
    return load_task_detail(session, task)


@router.post("/edit-task/{task_id}", response_model=TaskEditResponse)
async def edit_task(
    task_id: str,
    name: str = Form(""),
    owner_name: str = Form(""),
    task_date: str = Form(""),
    status: TaskStatus = Form(...),
    comments: Optional[str] = Form(None),
    amount_received: float = Form(...),
    remaining_amount: float = Form(...),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    submission_status: Optional[SubmissionStatus] = Form(None),
    change_reason: str = Form(""),
    images: List[UploadFile] | None = File(None),
    current_user: User = Depends(employee_required),
    session: Session = Depends(get_session),
    storage: ImageStorage = Depends(get_storage),
):
    task = _owned_task(session, task_id, current_user)

    try:
        form = TaskEdit(
            name=name,
            owner_name=owner_name,
            task_date=task_date,
            status=status,
            comments=comments,
            amount_received=amount_received,
            remaining_amount=remaining_amount,
            latitude=latitude,
            longitude=longitude,
            submission_status=submission_status,
            change_reason=change_reason,
        )
    except ValidationError as e:
        raise _form_error(e)

    pending_images = await read_images(images or [])

    try:
        history = apply_task_edit(session, task, form, current_user.id)
    except Exception:
        logger.exception("Error updating task %s", task_id)
        raise HTTPException(status_code=500, detail="Failed to update task")

    await _store_images(session, storage, task, pending_images, current_user.id)
    return TaskEditResponse(
        task=load_task_detail(session, task),
        history=[TaskHistoryRead.model_validate(row) for row in history],
    )
