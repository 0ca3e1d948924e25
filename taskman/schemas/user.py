from pydantic import BaseModel, BeforeValidator, EmailStr, Field
from typing import Annotated, List, Optional
from datetime import datetime
from taskman.utils.permissions import Department, Role


def strip_text(value):
    if isinstance(value, str):
        return value.strip()
    return value

# Names are trimmed; passwords are kept exactly as typed
Name = Annotated[str, BeforeValidator(strip_text), Field(min_length=1)]

class UserCreate(BaseModel):
    name: Name
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role
    department: Department

    model_config = {
        "extra": "forbid",
        "use_enum_values": True,
    }

class PublicRegister(BaseModel):
    name: Name
    email: EmailStr
    password: str = Field(..., min_length=6)
    department: Department

    model_config = {
        "extra": "forbid",
        "use_enum_values": True,
    }

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    model_config = {
        "extra": "forbid",
    }

class UserUpdate(BaseModel):
    name: Optional[Name] = None
    email: Optional[EmailStr] = None
    department: Optional[Department] = None
    password: Optional[str] = Field(None, min_length=6)

    model_config = {
        "extra": "forbid",
        "use_enum_values": True,
    }

class RoleUpdate(BaseModel):
    role: Role

    model_config = {
        "extra": "forbid",
        "use_enum_values": True,
    }

class UserRef(BaseModel):
    id: int
    name: str
    email: str

    model_config = {
        "from_attributes": True
    }

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    department: str
    permissions: List[str] = []
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
