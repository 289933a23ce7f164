# tests/test_admin_routes.py

from __future__ import annotations

from datetime import timedelta

from models.task import TaskHistory
from utils.clock import utcnow


def test_admin_sees_all_tasks_newest_first(client, admin, employee, other_employee, make_task, auth_headers) -> None:
    now = utcnow()
    first = make_task(employee, created_at=now - timedelta(days=2))
    second = make_task(other_employee, created_at=now - timedelta(days=1))

    resp = client.get("/admin", headers=auth_headers(admin))

    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()] == [second.id, first.id]


def test_admin_routes_are_admin_only(client, employee, make_task, auth_headers) -> None:
    task = make_task(employee)
    headers = auth_headers(employee)

    assert client.get("/admin", headers=headers).status_code == 403
    assert client.get(f"/admin/tasks/{task.id}/history", headers=headers).status_code == 403


def test_task_detail(client, admin, employee, make_task, auth_headers) -> None:
    task = make_task(employee, comments="Cable run through false ceiling")

    resp = client.get(f"/admin/tasks/{task.id}", headers=auth_headers(admin))

    assert resp.status_code == 200
    body = resp.json()
    assert body["comments"] == "Cable run through false ceiling"
    assert body["latitude"] == task.latitude
    assert body["images"] == []


def test_unknown_task_is_404(client, admin, auth_headers) -> None:
    headers = auth_headers(admin)

    assert client.get("/admin/tasks/missing", headers=headers).status_code == 404
    assert client.get("/admin/tasks/missing/history", headers=headers).status_code == 404


def test_history_newest_first(client, session, admin, employee, make_task, auth_headers) -> None:
    task = make_task(employee)
    now = utcnow()
    session.add(
        TaskHistory(
            task_id=task.id,
            field_name="status",
            old_value="pending",
            new_value="completed",
            changed_by=employee.id,
            change_reason="Installed",
            created_at=now - timedelta(days=2),
        )
    )
    session.add(
        TaskHistory(
            task_id=task.id,
            field_name="comments",
            old_value="",
            new_value="Customer signed off",
            changed_by=employee.id,
            change_reason="Sign-off",
            created_at=now - timedelta(hours=2),
        )
    )
    session.commit()

    resp = client.get(f"/admin/tasks/{task.id}/history", headers=auth_headers(admin))

    assert resp.status_code == 200
    assert [(h["field_name"], h["change_reason"]) for h in resp.json()] == [
        ("comments", "Sign-off"),
        ("status", "Installed"),
    ]


def test_history_after_edit_through_the_api(client, admin, employee, make_task, auth_headers) -> None:
    task = make_task(employee)
    form = {
        "name": task.name,
        "owner_name": "Mehta Traders Pvt Ltd",
        "task_date": "2025-02-10",
        "status": "pending",
        "amount_received": "1000",
        "remaining_amount": "500",
        "change_reason": "Owner registered as a company",
    }
    assert client.post(f"/employee/edit-task/{task.id}", data=form, headers=auth_headers(employee)).status_code == 200

    resp = client.get(f"/admin/tasks/{task.id}/history", headers=auth_headers(admin))

    assert [(h["field_name"], h["old_value"], h["new_value"]) for h in resp.json()] == [
        ("owner_name", "Mehta Traders", "Mehta Traders Pvt Ltd"),
    ]


def test_rows_of_one_edit_follow_tracked_field_order(client, admin, employee, make_task, auth_headers) -> None:
    task = make_task(employee)
    form = {
        "name": "Install 6 dome cameras",
        "owner_name": task.owner_name,
        "task_date": "2025-02-10",
        "status": "completed",
        "comments": "NVR configured",
        "amount_received": "1000",
        "remaining_amount": "0",
        "change_reason": "Scope grew and balance waived",
    }
    assert client.post(f"/employee/edit-task/{task.id}", data=form, headers=auth_headers(employee)).status_code == 200

    resp = client.get(f"/admin/tasks/{task.id}/history", headers=auth_headers(admin))

    assert [h["field_name"] for h in resp.json()] == ["name", "status", "comments", "remaining_amount"]
