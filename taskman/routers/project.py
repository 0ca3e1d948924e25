# taskman/routers/project.py
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from taskman.database import get_db
from taskman.errors import Forbidden, NotFound, ValidationError
from taskman.models.project import Project, Milestone
from taskman.models.user import User
from taskman.schemas.project import ProjectCreate, ProjectUpdate, ProjectOut, TeamMemberAdd, MilestoneCreate, MilestoneUpdate
from taskman.schemas.tokens import MessageOut
from taskman.utils.access import AccessManager
from taskman.utils.auth import Identity, get_current_identity, require_admin

logger = logging.getLogger(__name__)

router = APIRouter()


def get_user_or_404(db: Session, user_id: int, label: str = "User") -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound(f"{label} not found")
    return user


def reload_project(db: Session, project_id: int) -> Project:
    db.expire_all()
    return AccessManager(db).get_project(project_id)


@router.get("", response_model=List[ProjectOut])
def get_all_projects(
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Projects visible to the caller, newest first"""
    query = AccessManager(db).visible_projects(current_user)
    return query.order_by(Project.created_at.desc(), Project.id.desc()).all()


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    project_data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Create a new project (admin only)"""
    get_user_or_404(db, project_data.project_manager_id, "Project manager")

    team = []
    if project_data.team:
        member_ids = list(dict.fromkeys(project_data.team))
        team = db.query(User).filter(User.id.in_(member_ids)).all()
        if len(team) != len(member_ids):
            raise NotFound("One or more team members not found")

    db_project = Project(
        name=project_data.name,
        description=project_data.description,
        client_name=project_data.client.name,
        client_email=project_data.client.email,
        client_phone=project_data.client.phone,
        start_date=project_data.start_date,
        end_date=project_data.end_date,
        status=project_data.status,
        budget=project_data.budget,
        project_manager_id=project_data.project_manager_id,
        team=team,
    )

    db.add(db_project)
    db.commit()

    logger.info(f"Project {db_project.id} created by admin {current_user.id}")
    return reload_project(db, db_project.id)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Get a specific project if the caller may see it"""
    return AccessManager(db).get_accessible_project(current_user, project_id)


@router.put("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Update project fields (admin, project manager or team member)"""
    project = AccessManager(db).get_accessible_project(current_user, project_id)

    update_data = project_update.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if value is None:
            raise ValidationError(f"{field} cannot be empty")

    if "project_manager_id" in update_data:
        get_user_or_404(db, update_data["project_manager_id"], "Project manager")

    client = update_data.pop("client", None)
    if client is not None:
        project.client_name = client["name"]
        project.client_email = client["email"]
        project.client_phone = client.get("phone")

    for field, value in update_data.items():
        setattr(project, field, value)

    project.updated_at = datetime.now(timezone.utc)
    db.commit()
    return reload_project(db, project_id)


@router.delete("/{project_id}", response_model=MessageOut)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Delete a project together with its tasks (admin only)"""
    project = AccessManager(db).get_project(project_id)
    task_count = len(project.tasks)

    db.delete(project)
    db.commit()

    logger.info(f"Project {project_id} deleted by admin {current_user.id} ({task_count} tasks removed)")
    return {"message": "Project deleted successfully"}


@router.post("/{project_id}/team", response_model=ProjectOut)
def add_team_member(
    project_id: int,
    member: TeamMemberAdd,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Add a user to the project team (admin only); adding an existing member is a no-op"""
    project = AccessManager(db).get_project(project_id)
    user = get_user_or_404(db, member.user_id)

    if all(existing.id != user.id for existing in project.team):
        project.team.append(user)
        project.updated_at = datetime.now(timezone.utc)
        db.commit()

    return reload_project(db, project_id)


@router.delete("/{project_id}/team/{user_id}", response_model=ProjectOut)
def remove_team_member(
    project_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(require_admin)
):
    """Remove a user from the project team (admin only)"""
    project = AccessManager(db).get_project(project_id)

    project.team = [existing for existing in project.team if existing.id != user_id]
    project.updated_at = datetime.now(timezone.utc)
    db.commit()

    return reload_project(db, project_id)


@router.post("/{project_id}/milestones", response_model=ProjectOut)
def add_milestone(
    project_id: int,
    milestone: MilestoneCreate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Add a milestone (admin, project manager or team member)"""
    project = AccessManager(db).get_accessible_project(current_user, project_id)

    project.milestones.append(Milestone(
        title=milestone.title,
        description=milestone.description,
        due_date=milestone.due_date,
    ))
    project.updated_at = datetime.now(timezone.utc)
    db.commit()

    return reload_project(db, project_id)


@router.put("/{project_id}/milestones/{milestone_id}", response_model=ProjectOut)
def update_milestone(
    project_id: int,
    milestone_id: int,
    milestone_update: MilestoneUpdate,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity)
):
    """Mark a milestone complete or incomplete (admin, project manager or team member)"""
    access = AccessManager(db)
    project = access.get_project(project_id)

    milestone = next((m for m in project.milestones if m.id == milestone_id), None)
    if not milestone:
        raise NotFound("Milestone not found")

    if not access.can_access_project(current_user, project):
        raise Forbidden("Access denied")

    milestone.completed = milestone_update.completed
    if milestone_update.completed:
        milestone.completed_at = datetime.now(timezone.utc)
    project.updated_at = datetime.now(timezone.utc)
    db.commit()

    return reload_project(db, project_id)
