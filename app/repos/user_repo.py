from typing import List

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def find_by_login(self, login: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(or_(UserModel.username == login, UserModel.email == login))
        ).scalars().first()

    def exists(self, username: str, email: str) -> bool:
        return self.db.execute(
            select(UserModel.id).where(or_(UserModel.username == username, UserModel.email == email))
        ).first() is not None

    def list_users(self) -> List[UserModel]:
        return list(
            self.db.execute(
                select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id.desc())
            ).scalars()
        )

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.flush()
        return user
