from .user import User
from .project import Project, Milestone, ProjectDocument, project_members
from .task import Task, TaskComment, TaskAttachment, TaskStatus, TaskPriority
