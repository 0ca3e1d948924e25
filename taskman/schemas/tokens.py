# taskman/schemas/tokens.py
from typing import Optional
from pydantic import BaseModel
from taskman.schemas.user import UserOut

class Token(BaseModel):
    user: UserOut
    token: str
    dashboard_route: Optional[str] = None

    model_config = {
        "from_attributes": True
    }

class RegisteredUser(BaseModel):
    user: UserOut
    token: Optional[str] = None

class MessageOut(BaseModel):
    message: str
