from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Literal
from datetime import datetime
from .user import UserRef

ProjectStatus = Literal["planning", "in-progress", "review", "completed", "on-hold"]

class ClientContact(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

class ClientOut(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    client: ClientContact
    start_date: datetime
    end_date: datetime
    status: ProjectStatus = "planning"
    budget: float
    project_manager_id: int
    team: List[int] = []

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    client: Optional[ClientContact] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[ProjectStatus] = None
    budget: Optional[float] = None
    project_manager_id: Optional[int] = None

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

class TeamMemberAdd(BaseModel):
    user_id: int

    model_config = {
        "extra": "forbid",
    }

class MilestoneCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    due_date: datetime

    model_config = {
        "extra": "forbid",
        "str_strip_whitespace": True,
    }

class MilestoneUpdate(BaseModel):
    completed: bool

    model_config = {
        "extra": "forbid",
    }

class MilestoneOut(BaseModel):
    id: int
    title: str
    description: str
    due_date: datetime
    completed: bool
    completed_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

class DocumentOut(BaseModel):
    id: int
    name: str
    url: str
    type: Optional[str] = None
    uploaded_by: Optional[int] = None
    uploaded_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

class ProjectOut(BaseModel):
    id: int
    name: str
    description: str
    client: ClientOut
    start_date: datetime
    end_date: datetime
    status: str
    budget: float
    project_manager_id: int
    project_manager: UserRef
    team: List[UserRef]
    milestones: List[MilestoneOut] = []
    documents: List[DocumentOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

class ProjectRef(BaseModel):
    id: int
    name: str

    model_config = {
        "from_attributes": True
    }
