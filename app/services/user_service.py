# app/services/user_service.py
from typing import List

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.data.database import transaction, utcnow
from app.data.models.user import ROLES, UserModel
from app.domain.errors import ConflictError, NotFoundError
from app.domain.schemas import RegisterIn, UserRead
from app.domain.validators import is_valid_email, password_problem
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def to_user_read(user: UserModel) -> UserRead:
    return UserRead(
        user_id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
    )


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> UserModel:
        if not is_valid_email(payload.email):
            raise ValueError("Invalid email format")

        problem = password_problem(payload.password)
        if problem:
            raise ValueError(problem)

        if self.repo.exists(payload.username, payload.email):
            raise ConflictError("Username or email already exists")

        with transaction(self.db):
            user = self.repo.create_user(
                UserModel(
                    username=payload.username,
                    email=payload.email,
                    password_hash=hash_password(payload.password),
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                )
            )

        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    def authenticate(self, login: str, password: str) -> UserModel | None:
        """Username or email plus password; records the login time on success."""
        user = self.repo.find_by_login(login)
        if not user or not pwd_context.verify(password, user.password_hash):
            logger.info(f"Failed login attempt for {login!r}")
            return None

        with transaction(self.db):
            user.last_login = utcnow()

        return user

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    # =====================================================
    # ADMIN
    # =====================================================
    def list_users(self) -> List[UserModel]:
        return self.repo.list_users()

    def set_role(self, user_id: int, role: str) -> UserModel:
        if role not in ROLES:
            raise ValueError("Invalid role")

        user = self.get_user(user_id)
        with transaction(self.db):
            user.role = role

        logger.info(f"User {user_id} role set to {role}")
        return user
