# taskman/routers/user.py
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List

from taskman.config.settings import Settings
from taskman.database import get_db
from taskman.errors import DuplicateEmail, Forbidden, NotFound, ValidationError
from taskman.models.user import User
from taskman.models.task import Task
from taskman.models.project import Project
from taskman.schemas.user import UserCreate, UserOut, UserUpdate, RoleUpdate
from taskman.schemas.project import ProjectOut
from taskman.schemas.task import TaskOut
from taskman.schemas.tokens import MessageOut
from taskman.services.auth_service import AuthService, normalize_email
from taskman.utils.access import AccessManager
from taskman.utils.auth import Identity, get_current_identity, get_settings, require_admin
from taskman.utils.permissions import default_permissions
from taskman.utils.security import hash_password

logger = logging.getLogger(__name__)

router = APIRouter()


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def ensure_admin_or_self(current_user: Identity, user_id: int):
    if not current_user.is_admin and current_user.id != user_id:
        raise Forbidden("Access denied")


@router.get("", response_model=List[UserOut])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Get all users (admin only)"""
    return db.query(User).order_by(User.id).all()


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    user: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: Identity = Depends(require_admin)
):
    """Create a new user with role-derived permissions (admin only)"""
    return AuthService(db, settings).register(
        name=user.name,
        email=user.email,
        password=user.password,
        department=user.department,
        role=user.role,
    )


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Get a specific user by ID (admin or self)"""
    ensure_admin_or_self(current_user, user_id)
    return get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: Identity = Depends(get_current_identity)
):
    """Update profile fields (admin or self); role changes go through /{user_id}/role"""
    ensure_admin_or_self(current_user, user_id)
    db_user = get_user_or_404(db, user_id)

    update_data = user_update.model_dump(exclude_unset=True)

    # Check if email already exists for another user
    if update_data.get("email"):
        update_data["email"] = normalize_email(update_data["email"])
        existing_user = AuthService(db, settings).find_by_email(update_data["email"])
        if existing_user and existing_user.id != user_id:
            raise DuplicateEmail()

    # Handle password update separately (hash it if provided)
    if "password" in update_data:
        password = update_data.pop("password")
        if password:
            db_user.hashed_password = hash_password(password)

    for field, value in update_data.items():
        if value is None:
            raise ValidationError(f"{field} cannot be empty")
        setattr(db_user, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail()
    db.refresh(db_user)
    return db_user


@router.put("/{user_id}/role", response_model=UserOut)
def update_user_role(
    user_id: int,
    role_update: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Change a user's role and reset permissions to the role defaults (admin only)"""
    db_user = get_user_or_404(db, user_id)
    db_user.role = role_update.role
    db_user.permissions = default_permissions(role_update.role)
    db.commit()
    db.refresh(db_user)

    logger.info(f"User {db_user.id} role changed to {db_user.role} by admin {current_user.id}")
    return db_user


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Delete a user (admin only)"""
    db_user = get_user_or_404(db, user_id)

    managed = db.query(Project).filter(Project.project_manager_id == user_id).count()
    if managed:
        raise ValidationError(f"User manages {managed} project(s); assign a new project manager first")

    db.delete(db_user)
    db.commit()

    logger.info(f"User {user_id} deleted by admin {current_user.id}")
    return {"message": "User deleted successfully"}


@router.get("/{user_id}/tasks", response_model=List[TaskOut])
def get_user_tasks(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Tasks assigned to a user, newest first (admin or self)"""
    ensure_admin_or_self(current_user, user_id)
    return AccessManager(db).tasks_assigned_to(user_id).order_by(Task.created_at.desc(), Task.id.desc()).all()


@router.get("/{user_id}/projects", response_model=List[ProjectOut])
def get_user_projects(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Projects a user manages or belongs to, newest first (admin or self)"""
    ensure_admin_or_self(current_user, user_id)
    return AccessManager(db).projects_for_user(user_id).order_by(Project.created_at.desc(), Project.id.desc()).all()
