import logging
from typing import Optional

from app.core.database import Database
from app.core.exceptions import ValidationError
from app.core.security import get_password_hash, verify_password
from app.models.user import User
from app.schemas.user import User as UserSchema, UserCreate
from app.services.validation import validate_payload

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, database: Database):
        self.database = database

    def get_user(self, user_id: int) -> Optional[UserSchema]:
        """Get user by ID"""
        with self.database.session() as db:
            user = db.get(User, user_id)
            return UserSchema.model_validate(user) if user else None

    def create_user(self, data) -> UserSchema:
        """Register a new user with a hashed password"""
        payload = validate_payload(UserCreate, data)

        with self.database.transaction() as db:
            if db.query(User).filter(User.email == payload.email).first():
                raise ValidationError("User already exists with this email",
                                      errors=[{"param": "email", "msg": "Email already registered"}])
            if db.query(User).filter(User.username == payload.username).first():
                raise ValidationError("Username already taken",
                                      errors=[{"param": "username", "msg": "Username already registered"}])

            db_user = User(
                email=payload.email,
                username=payload.username,
                hashed_password=get_password_hash(payload.password),
                role=payload.role,
                is_active=payload.is_active,
            )
            db.add(db_user)
            db.flush()
            result = UserSchema.model_validate(db_user)

        logger.info("Registered user %s (%s)", result.username, result.role.value)
        return result

    def set_password(self, username: str, password: str) -> bool:
        """Reset the password of an existing account"""
        with self.database.transaction() as db:
            user = db.query(User).filter(User.username == username).first()
            if user is None:
                return False
            user.hashed_password = get_password_hash(password)
        return True

    def authenticate_user(self, username: str, password: str) -> Optional[UserSchema]:
        """Authenticate by username or email"""
        with self.database.session() as db:
            user = db.query(User).filter(User.username == username).first()
            if not user:
                user = db.query(User).filter(User.email == username).first()

            if not user or not verify_password(password, user.hashed_password):
                return None

            return UserSchema.model_validate(user)
