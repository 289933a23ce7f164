import logging
import os
import uuid
from dataclasses import dataclass
from typing import List

import aiofiles
from fastapi import HTTPException, UploadFile
from sqlmodel import Session

from core.config import settings
from models.task import Task, TaskImage

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif"}


@dataclass
class PendingImage:
    """A photo that passed validation and is ready to be uploaded."""

    filename: str
    content: bytes


class ImageStorage:
    """Object storage for task photos, kept on local disk under one bucket."""

    def __init__(self, root: str, bucket: str, public_base_url: str):
        self.root = root
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    def _full_path(self, path: str) -> str:
        full_path = os.path.normpath(os.path.join(self.root, self.bucket, path))
        bucket_dir = os.path.normpath(os.path.join(self.root, self.bucket))
        if not full_path.startswith(bucket_dir + os.sep):
            raise ValueError(f"Invalid storage path: {path}")
        return full_path

    async def upload(self, path: str, data: bytes) -> str:
        full_path = self._full_path(path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        async with aiofiles.open(full_path, "wb") as out_file:
            await out_file.write(data)
        return path

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}/uploads/{self.bucket}/{path}"


def get_storage() -> ImageStorage:
    return ImageStorage(settings.upload_dir, settings.image_bucket, settings.public_base_url)


def object_path(user_id: str, task_id: str, filename: str) -> str:
    file_ext = os.path.splitext(filename or "")[1].lower()
    return f"{user_id}/{task_id}/{uuid.uuid4()}{file_ext}"


async def read_images(files: List[UploadFile]) -> List[PendingImage]:
    """Validate every photo before anything is written."""
    images: List[PendingImage] = []
    for file in files:
        if file.content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid file type: {file.content_type}. Only images are allowed.",
            )
        content = await file.read()
        if len(content) > settings.max_image_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"Image '{file.filename}' is larger than {settings.max_image_bytes} bytes",
            )
        images.append(PendingImage(filename=file.filename or "", content=content))
    return images


async def attach_images(
    session: Session,
    storage: ImageStorage,
    task: Task,
    images: List[PendingImage],
    user_id: str,
) -> List[TaskImage]:
    """Upload photos one by one and reference each from the task."""
    saved: List[TaskImage] = []
    for image in images:
        path = object_path(user_id, task.id, image.filename)
        await storage.upload(path, image.content)

        task_image = TaskImage(task_id=task.id, image_url=storage.get_public_url(path))
        session.add(task_image)
        session.commit()
        session.refresh(task_image)
        saved.append(task_image)

    if saved:
        logger.info("Stored %d image(s) for task %s", len(saved), task.id)
    return saved
