# taskman/services/auth_service.py
import logging
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskman.config.settings import Settings
from taskman.errors import DuplicateEmail, InvalidCredentials
from taskman.models.user import User
from taskman.utils.permissions import Role, default_permissions
from taskman.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Registration, credential checks and token issuance"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()

    def register(self, name: str, email: str, password: str, department: str, role: str = Role.EMPLOYEE.value) -> User:
        """Create a user with the permissions implied by its role.

        Raises DuplicateEmail when the address is already registered.
        """
        email = normalize_email(email)
        if self.find_by_email(email):
            logger.info(f"Registration rejected, email already registered: {email}")
            raise DuplicateEmail()

        user = User(
            name=name,
            email=email,
            hashed_password=hash_password(password),
            role=role,
            department=department,
            permissions=default_permissions(role),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent registration took the address after the lookup above
            self.db.rollback()
            logger.info(f"Registration rejected, email registered concurrently: {email}")
            raise DuplicateEmail()
        self.db.refresh(user)

        logger.info(f"User {user.id} registered with role {user.role}")
        return user

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and return the user with a fresh access token.

        Unknown email and wrong password both raise InvalidCredentials.
        """
        user = self.find_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            logger.info(f"Failed login attempt for {normalize_email(email)}")
            raise InvalidCredentials()

        # Accounts created before permissions existed get them from their role
        if not user.permissions:
            logger.info(f"User {user.id} has no permissions, assigning defaults for role {user.role}")
            user.permissions = default_permissions(user.role)
            self.db.commit()
            self.db.refresh(user)

        logger.info(f"Login successful for user {user.id} with role {user.role}")
        return user, self.issue_token(user)

    def issue_token(self, user: User) -> str:
        return create_access_token(user.id, user.role, self.settings)
