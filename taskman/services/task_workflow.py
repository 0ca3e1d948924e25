# taskman/services/task_workflow.py
# Task status transitions and comments
import logging
from typing import Optional

from sqlalchemy.orm import Session

from taskman.errors import Forbidden, InvalidStatus, ValidationError
from taskman.models.task import Task, TaskComment, TaskStatus
from taskman.utils.access import AccessManager
from taskman.utils.auth import Identity

logger = logging.getLogger(__name__)

VALID_STATUSES = [s.value for s in TaskStatus]


def can_update_status(task: Task, actor: Identity) -> bool:
    """Only the assignee or an admin may move a task between statuses"""
    return actor.is_admin or (task.assigned_to is not None and task.assigned_to == actor.id)


def validate_status(new_status: Optional[str]) -> str:
    if not new_status:
        raise ValidationError("Status is required")
    if new_status not in VALID_STATUSES:
        raise InvalidStatus()
    return new_status


class TaskWorkflow:
    """Every status may move to every other; the only rule is who moves it"""

    def __init__(self, db: Session):
        self.db = db
        self.access = AccessManager(db)

    def set_status(self, task_id: int, new_status: Optional[str], actor: Identity) -> Task:
        # Reject bad values before touching storage
        new_status = validate_status(new_status)

        task = self.access.get_task(task_id)
        if not can_update_status(task, actor):
            raise Forbidden("You are not authorized to update this task status")

        if task.status == new_status:
            return task

        logger.info(f"Updating task {task.id} status from {task.status} to {new_status} by user {actor.id}")
        task.status = new_status
        self.db.commit()

        # Return the updated task with populated relationships
        self.db.expire_all()
        return self.access.get_task(task_id)

    def add_comment(self, task_id: int, text: str, actor: Identity) -> Task:
        task = self.access.get_task(task_id)
        if not text or not text.strip():
            raise ValidationError("Comment text is required")

        task.comments.append(TaskComment(text=text, posted_by=actor.id))
        self.db.commit()

        self.db.expire_all()
        return self.access.get_task(task_id)
