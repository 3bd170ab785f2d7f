"""User management utilities.

This module provides user management functionality including user storage,
password hashing and credential checks.
"""

import logging
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS, ROLE_STUDENT, ROLES
from core.exceptions import ConflictError, StoreError, UnauthorizedError, ValidationError
from models.user import UserModel
from schemas.user import User
from utils.converters import model_to_user

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    if len(password) > BCRYPT_MAX_BYTES:
        password = password[:BCRYPT_MAX_BYTES]
    return password


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        if isinstance(hashed_password, str):
            hashed_password = hashed_password.encode("utf-8")
        try:
            return bcrypt.checkpw(_password_bytes(plain_password), hashed_password)
        except ValueError as e:
            # Malformed stored hash
            logger.error("Password verification error: %s", e)
            return False

    def create_user(
        self,
        email: str,
        name: str,
        password: str,
        role: str = ROLE_STUDENT,
        institution: str = "",
    ) -> User:
        """Create a new user.

        Args:
            email: Unique email address.
            name: Display name.
            password: Plain text password.
            role: User role ('student' or 'teacher').
            institution: Tenant the user belongs to.

        Returns:
            Created User object.

        Raises:
            ValidationError: If a required field is empty or the role is unknown.
            ConflictError: If the email is already registered.
            StoreError: If the database rejects the insert for another reason.
        """
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not email or not name or not password:
            raise ValidationError("email, name and password are required")
        if role not in ROLES:
            raise ValidationError(f"Invalid role: {role}")

        model = UserModel(
            email=email,
            name=name,
            password_hash=self.hash_password(password),
            role=role,
            institution=(institution or "").strip(),
        )

        # The unique index on email is the source of truth; two concurrent
        # registrations both reach the insert and one of them fails here.
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            # email is the only unique column a new user row can collide on
            reason = str(e.orig).lower()
            if "unique" in reason or "duplicate" in reason:
                raise ConflictError("Email already exists") from e
            logger.exception("Failed to create user %s", email)
            raise StoreError() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to create user %s", email)
            raise StoreError() from e

        logger.info("Created user: %s (id=%s, role=%s)", email, model.id, role)
        return model_to_user(model)

    def authenticate(self, email: str, password: str) -> User:
        """Check an email/password pair.

        Raises:
            UnauthorizedError: If the email is unknown or the password wrong.
        """
        user = self.get_user_by_email(email)
        if user is None or not self.verify_password(password, user.password_hash):
            raise UnauthorizedError("Invalid credentials")
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email.

        Args:
            email: Email address to look up.

        Returns:
            User object if found, None otherwise.
        """
        email = (email or "").strip().lower()
        model = self.db.query(UserModel).filter(UserModel.email == email).first()
        if model:
            return model_to_user(model)
        return None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by user ID.

        Args:
            user_id: User ID to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if model:
            return model_to_user(model)
        return None
