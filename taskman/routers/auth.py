from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from taskman.config.settings import Settings
from taskman.database import get_db
from taskman.errors import NotFound
from taskman.models.user import User
from taskman.schemas.user import UserCreate, PublicRegister, UserLogin, UserOut
from taskman.schemas.tokens import Token, RegisteredUser
from taskman.services.auth_service import AuthService
from taskman.utils.auth import Identity, get_current_identity, get_settings, require_admin
from taskman.utils.permissions import Role, dashboard_route

router = APIRouter()


def get_auth_service(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(db, settings)


@router.post("/register", response_model=RegisteredUser, status_code=status.HTTP_201_CREATED)
def register(
    user: UserCreate,
    service: AuthService = Depends(get_auth_service),
    current_user: Identity = Depends(require_admin),
):
    """Register a new user with any role and department (admin only)"""
    new_user = service.register(
        name=user.name,
        email=user.email,
        password=user.password,
        department=user.department,
        role=user.role,
    )
    return {"user": new_user, "token": service.issue_token(new_user)}


@router.post("/register/public", response_model=RegisteredUser, status_code=status.HTTP_201_CREATED)
def register_public(user: PublicRegister, service: AuthService = Depends(get_auth_service)):
    """Self-service registration; the account is always an employee"""
    new_user = service.register(
        name=user.name,
        email=user.email,
        password=user.password,
        department=user.department,
        role=Role.EMPLOYEE.value,
    )
    return {"user": new_user}


@router.post("/login", response_model=Token)
def login(user: UserLogin, service: AuthService = Depends(get_auth_service)):
    db_user, token = service.login(user.email, user.password)
    return {
        "user": db_user,
        "token": token,
        "dashboard_route": dashboard_route(db_user.role),
    }


@router.get("/me", response_model=UserOut)
def get_current_user_info(
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_identity),
):
    """Get current user information"""
    user = db.query(User).filter(User.id == current_user.id).first()
    if not user:
        raise NotFound("User not found")
    return user
