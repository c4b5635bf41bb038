from app.hrhub.core.error_catalog import unauthorized
from app.hrhub.core.security import create_session_token, verify_password
from app.hrhub.db.models import utcnow
from app.hrhub.repos.users import UserRepository


class AuthService:
    def __init__(self, db):
        self.db = db
        self.repo = UserRepository(db)

    def login(self, identifier: str, password: str):
        user = self.repo.get_by_login(identifier)
        if user is None or not verify_password(password, user.hashed_password):
            raise unauthorized("Invalid credentials")
        if not user.is_active:
            raise unauthorized("User is inactive")
        user.last_login_at = utcnow()
        self.db.commit()
        return user, create_session_token(user)
