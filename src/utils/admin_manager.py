"""Administrator account management.

This module provides administrator storage, password hashing and first-run
provisioning.
"""

import logging
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import AdminAlreadyExistsError
from models.admin import AdminModel
from schemas.admin import Admin
from utils.converters import admin_to_model, model_to_admin

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    return password[:BCRYPT_MAX_BYTES]


class AdminManager:
    """Manages administrator persistence and password checks using SQLAlchemy."""

    def __init__(self, db: Session, bcrypt_rounds: int = BCRYPT_ROUNDS):
        """Initialize AdminManager.

        Args:
            db: SQLAlchemy Session.
            bcrypt_rounds: Cost factor for new password hashes.
        """
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh salt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Returns:
            True if password matches, False otherwise (including malformed hashes).
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def create_admin(
        self, username: str, password: str, email: Optional[str] = None
    ) -> Admin:
        """Create a new administrator.

        Args:
            username: Username for the new administrator.
            password: Plain text password.
            email: Optional email address.

        Returns:
            Created Admin object.

        Raises:
            AdminAlreadyExistsError: If username already exists.
            ValueError: If username or password is empty.
        """
        username = (username or "").strip()
        if not username or not password:
            raise ValueError("Username and password are required")

        existing = (
            self.db.query(AdminModel).filter(AdminModel.username == username).first()
        )
        if existing:
            raise AdminAlreadyExistsError(f"Admin '{username}' already exists")

        admin = Admin(
            username=username,
            password_hash=self.hash_password(password),
            email=email,
        )

        # Two concurrent requests can both pass the check above; the unique
        # constraint on username catches the second one.
        try:
            model = admin_to_model(admin)
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise AdminAlreadyExistsError(f"Admin '{username}' already exists") from e

        logger.info("Created admin: %s", username)
        return admin

    def get_admin_by_username(self, username: str) -> Optional[Admin]:
        """Get an administrator by username.

        Returns:
            Admin object if found, None otherwise.
        """
        model = (
            self.db.query(AdminModel).filter(AdminModel.username == username).first()
        )
        if model:
            return model_to_admin(model)
        return None

    def count_admins(self) -> int:
        return self.db.query(AdminModel).count()

    def ensure_initial_admin(
        self,
        username: Optional[str],
        password: Optional[str],
        email: Optional[str] = None,
    ) -> Optional[Admin]:
        """Provision the first administrator from explicit credentials.

        Nothing is created when an administrator already exists. When none
        exists and no credentials are given, a warning is logged and the
        admin API stays unusable until one is created.

        Args:
            username: Configured username (ADMIN_USERNAME).
            password: Configured password (ADMIN_PASSWORD).
            email: Configured email (ADMIN_EMAIL).

        Returns:
            The created Admin, or None if nothing was created.
        """
        if self.count_admins() > 0:
            return None

        if not username or not password:
            logger.warning(
                "No administrator account exists. Set ADMIN_USERNAME and "
                "ADMIN_PASSWORD or run 'python src/main.py create-admin'."
            )
            return None

        admin = self.create_admin(username, password, email)
        logger.info("Provisioned initial admin: %s", username)
        return admin
