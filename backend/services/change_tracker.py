"""
Field-level change tracking for task edits.

An edit is diffed against the persisted task before the task row is touched.
Every tracked field whose value differs produces one TaskHistory row carrying
the editor and the single reason given for the whole edit. The history rows
and the task update are committed together.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional

from sqlmodel import Session

from models.task import Task, TaskHistory
from schemas.task import TaskEdit
from utils.clock import utcnow

logger = logging.getLogger(__name__)

# recorded in place of a value that was never set
EMPTY_MARKER = ""


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _as_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _as_amount(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _render(value: Any) -> str:
    if value is None:
        return EMPTY_MARKER
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class TrackedField:
    name: str
    normalize: Callable[[Any], Any]


@dataclass(frozen=True)
class FieldChange:
    field_name: str
    old_value: str
    new_value: str


TRACKED_FIELDS = (
    TrackedField("name", _as_text),
    TrackedField("owner_name", _as_text),
    TrackedField("task_date", _as_date),
    TrackedField("status", _as_text),
    TrackedField("comments", _as_text),
    TrackedField("amount_received", _as_amount),
    TrackedField("remaining_amount", _as_amount),
)

TRACKED_FIELD_NAMES = tuple(f.name for f in TRACKED_FIELDS)


def _read(record: Any, field_name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field_name)
    return getattr(record, field_name, None)


def diff_task(old: Any, new: Any) -> List[FieldChange]:
    """
    Compare the tracked fields of two task records.

    Both sides may be model instances, schemas or plain mappings. Values are
    normalized per field type first, so ``500``, ``500.0`` and ``"500"`` are the
    same amount and a missing comment equals an empty one. Treating absent and
    empty comments as equal departs on purpose from a plain text compare, which
    would record a spurious change when a blank comment is re-saved.
    """
    changes: List[FieldChange] = []
    for tracked in TRACKED_FIELDS:
        old_value = tracked.normalize(_read(old, tracked.name))
        new_value = tracked.normalize(_read(new, tracked.name))
        if old_value != new_value:
            changes.append(
                FieldChange(
                    field_name=tracked.name,
                    old_value=_render(old_value),
                    new_value=_render(new_value),
                )
            )
    return changes


def build_history(
    task_id: str,
    changes: List[FieldChange],
    changed_by: str,
    change_reason: str,
    created_at: Optional[datetime] = None,
) -> List[TaskHistory]:
    created_at = created_at or utcnow()
    return [
        TaskHistory(
            task_id=task_id,
            field_name=change.field_name,
            old_value=change.old_value,
            new_value=change.new_value,
            changed_by=changed_by,
            change_reason=change_reason,
            created_at=created_at,
        )
        for change in changes
    ]


def _apply_edit(task: Task, edit: TaskEdit, now: datetime) -> None:
    task.name = edit.name
    task.owner_name = edit.owner_name
    task.task_date = edit.task_date
    task.status = edit.status
    task.comments = edit.comments
    task.amount_received = edit.amount_received
    task.remaining_amount = edit.remaining_amount
    task.total_amount = edit.total_amount

    # an edit without coordinates keeps the stored location
    if edit.has_location:
        task.latitude = edit.latitude
        task.longitude = edit.longitude
    if edit.submission_status is not None:
        task.submission_status = edit.submission_status
    task.updated_at = now


def apply_task_edit(session: Session, task: Task, edit: TaskEdit, editor_id: str) -> List[TaskHistory]:
    """
    Record the history of ``edit`` and apply it to ``task`` in one transaction.

    Returns the history rows written, possibly none. On failure nothing is
    kept: neither history nor the task update.
    """
    now = utcnow()

    # diff against the persisted snapshot before the task is mutated
    changes = diff_task(task, edit)
    history = build_history(task.id, changes, editor_id, edit.change_reason, created_at=now)

    try:
        session.add_all(history)
        _apply_edit(task, edit, now)
        session.add(task)
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(task)
    logger.info(
        "Task %s edited by %s: %d tracked field(s) changed",
        task.id,
        editor_id,
        len(history),
    )
    return history
