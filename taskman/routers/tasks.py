import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from taskman.database import get_db
from taskman.errors import NotFound, ValidationError
from taskman.models.project import Project
from taskman.models.task import Task
from taskman.models.user import User
from taskman.schemas.task import TaskCreate, TaskUpdate, TaskOut, TaskStatusUpdate, CommentCreate
from taskman.schemas.tokens import MessageOut
from taskman.services.task_workflow import TaskWorkflow
from taskman.utils.access import AccessManager
from taskman.utils.auth import Identity, get_current_identity, require_admin

logger = logging.getLogger(__name__)

router = APIRouter()


def ensure_project_exists(db: Session, project_id: int):
    if not db.query(Project.id).filter(Project.id == project_id).first():
        raise NotFound("Project not found")


def ensure_user_exists(db: Session, user_id: int):
    if not db.query(User.id).filter(User.id == user_id).first():
        raise NotFound("Assigned user not found")


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Create a new task (admin only); the caller is recorded as creator"""
    ensure_project_exists(db, task.project_id)
    if task.assigned_to is not None:
        ensure_user_exists(db, task.assigned_to)

    db_task = Task(
        title=task.title,
        description=task.description,
        project_id=task.project_id,
        assigned_to=task.assigned_to,
        priority=task.priority,
        status=task.status,
        due_date=task.due_date,
        created_by=current_user.id,
    )

    db.add(db_task)
    db.commit()

    logger.info(f"Task {db_task.id} created by admin {current_user.id}")
    return AccessManager(db).get_task(db_task.id)


@router.get("", response_model=List[TaskOut])
def get_all_tasks(
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Every task; any authenticated user may list them"""
    return AccessManager(db).task_query().order_by(Task.created_at.desc(), Task.id.desc()).all()


# Must be registered before /{task_id}
@router.get("/assigned-to-me", response_model=List[TaskOut])
def get_my_tasks(
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Tasks assigned to the caller"""
    tasks = AccessManager(db).tasks_assigned_to(current_user.id).order_by(Task.created_at.desc(), Task.id.desc()).all()
    logger.debug(f"Found {len(tasks)} tasks assigned to user {current_user.id}")
    return tasks


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    return AccessManager(db).get_task(task_id)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Update any task field (admin only)"""
    access = AccessManager(db)
    task = access.get_task(task_id)

    # Apply updates (only fields provided in request)
    update_data = task_update.model_dump(exclude_unset=True)

    if "project_id" in update_data:
        if update_data["project_id"] is None:
            raise ValidationError("project_id cannot be empty")
        ensure_project_exists(db, update_data["project_id"])
    if update_data.get("assigned_to") is not None:
        ensure_user_exists(db, update_data["assigned_to"])

    for key, value in update_data.items():
        if value is None and key in ("title", "description", "priority", "status"):
            raise ValidationError(f"{key} cannot be empty")
        setattr(task, key, value)

    db.commit()
    db.expire_all()
    return access.get_task(task_id)


@router.delete("/{task_id}", response_model=MessageOut)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Delete a task (admin only)"""
    task = AccessManager(db).get_task(task_id)

    db.delete(task)
    db.commit()

    logger.info(f"Task {task_id} deleted by admin {current_user.id}")
    return {"message": "Task deleted successfully"}


@router.post("/{task_id}/comments", response_model=TaskOut)
def add_comment(
    task_id: int,
    comment: CommentCreate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Append a comment; any authenticated user may comment on any task"""
    return TaskWorkflow(db).add_comment(task_id, comment.text, current_user)


@router.patch("/{task_id}/status", response_model=TaskOut)
def update_task_status(
    task_id: int,
    status_update: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Change only the status (assignee or admin)"""
    return TaskWorkflow(db).set_status(task_id, status_update.status, current_user)
