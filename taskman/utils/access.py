# taskman/utils/access.py
from sqlalchemy import or_
from sqlalchemy.orm import Session, Query, selectinload

from taskman.errors import Forbidden, NotFound
from taskman.models.project import Project, project_members
from taskman.models.task import Task, TaskComment
from taskman.utils.auth import Identity


class AccessManager:
    """Visibility and mutation rules for projects and tasks"""

    def __init__(self, db: Session):
        self.db = db

    def project_query(self) -> Query:
        return self.db.query(Project).options(
            selectinload(Project.project_manager),
            selectinload(Project.team),
            selectinload(Project.milestones),
            selectinload(Project.documents),
        )

    def task_query(self) -> Query:
        return self.db.query(Task).options(
            selectinload(Task.project),
            selectinload(Task.assignee),
            selectinload(Task.creator),
            selectinload(Task.comments).selectinload(TaskComment.author),
            selectinload(Task.attachments),
        )

    def visible_projects(self, identity: Identity) -> Query:
        """Admin sees every project; everyone else only projects they manage or belong to"""
        query = self.project_query()
        if identity.is_admin:
            return query
        return self.projects_for_user(identity.id, query)

    def projects_for_user(self, user_id: int, query: Query = None) -> Query:
        query = query if query is not None else self.project_query()
        member_of = self.db.query(project_members.c.project_id).filter(project_members.c.user_id == user_id)
        return query.filter(
            or_(
                Project.project_manager_id == user_id,
                Project.id.in_(member_of),
            )
        )

    def can_access_project(self, identity: Identity, project: Project) -> bool:
        """View and edit rights share one rule: admin, project manager or team member"""
        return identity.is_admin or project.is_member(identity.id)

    def get_project(self, project_id: int) -> Project:
        project = self.project_query().filter(Project.id == project_id).first()
        if not project:
            raise NotFound("Project not found")
        return project

    def get_accessible_project(self, identity: Identity, project_id: int) -> Project:
        project = self.get_project(project_id)
        if not self.can_access_project(identity, project):
            raise Forbidden("Access denied")
        return project

    def get_task(self, task_id: int) -> Task:
        task = self.task_query().filter(Task.id == task_id).first()
        if not task:
            raise NotFound("Task not found")
        return task

    def tasks_assigned_to(self, user_id: int) -> Query:
        return self.task_query().filter(Task.assigned_to == user_id)
