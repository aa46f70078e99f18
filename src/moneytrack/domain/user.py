"""User domain service."""

from typing import Optional

from passlib.context import CryptContext

from moneytrack.database.base import Database
from moneytrack.domain.entities import User as UserEntity
from moneytrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    email_in_use,
    user_not_found,
)
from moneytrack.domain.validation import require_text

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def _normalize_email(email: Optional[str]) -> str:
    email = require_text(email, "email").lower()
    if "@" not in email:
        raise ValidationError(f"Invalid email address '{email}'")
    return email


class UserService:
    """Service for managing users."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, name: str, email: str, password: str) -> int:
        """Create a user.

        Args:
            name: Display name
            email: Email address, unique across users
            password: Plaintext password, stored hashed

        Returns:
            User ID

        Raises:
            ValidationError: If a field is missing or malformed
            ConflictError: If the email is already in use
        """
        name = require_text(name, "name")
        email = _normalize_email(email)
        password = require_text(password, "password")

        if self.db.get_user_by_email(email) is not None:
            raise ConflictError(email_in_use(email))

        return self.db.create_user(name=name, email=email, password_hash=hash_password(password))

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Get user by ID, or None if not found."""
        return self.db.get_user(user_id)

    def require_user(self, user_id: int) -> UserEntity:
        """Get user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        return user

    def list_users(self) -> list[UserEntity]:
        """List all users."""
        return self.db.list_users()

    def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> UserEntity:
        """Update user fields that are provided.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the new email belongs to another user
        """
        existing = self.require_user(user_id)

        if name is not None:
            name = require_text(name, "name")
        if email is not None:
            email = _normalize_email(email)
            if email != existing.email and self.db.get_user_by_email(email) is not None:
                raise ConflictError(email_in_use(email))
        password_hash = None
        if password is not None:
            password_hash = hash_password(require_text(password, "password"))

        self.db.update_user(user_id, name=name, email=email, password_hash=password_hash)
        return self.require_user(user_id)

    def delete_user(self, user_id: int) -> None:
        """Delete a user and everything it owns.

        Raises:
            NotFoundError: If the user does not exist
        """
        self.require_user(user_id)
        self.db.delete_user(user_id)

    def authenticate(self, email: str, password: str) -> Optional[UserEntity]:
        """Return the user if the password matches, otherwise None."""
        user = self.db.get_user_by_email(_normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user
