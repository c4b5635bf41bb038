from sqlalchemy import func, or_, select

from app.hrhub.db.models import User
from app.hrhub.repos.base import as_uuid


class UserRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, user_id: str):
        user_uuid = as_uuid(user_id)
        if user_uuid is None:
            return None
        return self.db.get(User, user_uuid)

    def get_by_login(self, login: str):
        normalized = login.strip().lower()
        stmt = select(User).where(
            or_(func.lower(User.username) == normalized, func.lower(User.email) == normalized)
        )
        return self.db.execute(stmt).scalars().first()

    def create(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
