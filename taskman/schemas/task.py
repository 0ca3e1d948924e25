from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from .user import UserRef
from .project import ProjectRef
from taskman.models.task import TaskPriority, TaskStatus

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    project_id: int
    assigned_to: Optional[int] = None
    priority: TaskPriority = TaskPriority.MEDIUM.value
    status: TaskStatus = TaskStatus.PENDING.value
    due_date: Optional[datetime] = None

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
        "use_enum_values": True,
    }

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    project_id: Optional[int] = None
    assigned_to: Optional[int] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
        "use_enum_values": True,
    }

class TaskStatusUpdate(BaseModel):
    # Checked by the status workflow so that bad values map to InvalidStatus
    status: Optional[str] = None

    model_config = {
        "extra": "forbid",
    }

class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1)

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

class CommentOut(BaseModel):
    id: int
    text: str
    posted_by: Optional[int] = None
    author: Optional[UserRef] = None
    created_at: datetime

    model_config = {
        "from_attributes": True
    }

class AttachmentOut(BaseModel):
    id: int
    name: str
    url: str
    uploaded_by: Optional[int] = None
    uploaded_at: datetime

    model_config = {
        "from_attributes": True
    }

class TaskOut(BaseModel):
    id: int
    title: str
    description: str
    status: str
    priority: str
    due_date: Optional[datetime] = None

    project_id: int
    project: ProjectRef

    # Who it's assigned to…
    assigned_to: Optional[int] = None
    assignee: Optional[UserRef] = None

    # …and who created it
    created_by: Optional[int] = None
    creator: Optional[UserRef] = None

    comments: List[CommentOut] = []
    attachments: List[AttachmentOut] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
