# tests/test_storage.py

from __future__ import annotations

import os

import pytest

from services.storage import attach_images, object_path, PendingImage
from models.task import TaskImage


@pytest.mark.asyncio
async def test_upload_writes_under_bucket(storage) -> None:
    path = await storage.upload("u1/t1/photo.png", b"data")

    with open(os.path.join(storage.root, "task-images", "u1", "t1", "photo.png"), "rb") as fh:
        assert fh.read() == b"data"
    assert storage.get_public_url(path) == "http://testserver/uploads/task-images/u1/t1/photo.png"


@pytest.mark.asyncio
async def test_upload_refuses_paths_outside_bucket(storage) -> None:
    with pytest.raises(ValueError):
        await storage.upload("../../etc/passwd", b"x")


def test_object_path_is_scoped_to_user_and_task() -> None:
    path = object_path("user-1", "task-9", "Front Gate.JPG")

    assert path.startswith("user-1/task-9/")
    assert path.endswith(".jpg")
    assert path != object_path("user-1", "task-9", "Front Gate.JPG")


@pytest.mark.asyncio
async def test_attach_images_in_order(session, storage, employee, make_task) -> None:
    task = make_task(employee)
    images = [PendingImage("a.png", b"a"), PendingImage("b.gif", b"b")]

    saved = await attach_images(session, storage, task, images, employee.id)

    assert [os.path.splitext(i.image_url)[1] for i in saved] == [".png", ".gif"]
    assert all(isinstance(i, TaskImage) and i.task_id == task.id for i in saved)
