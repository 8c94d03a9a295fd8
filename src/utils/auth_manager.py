"""Administrator authentication.

Issues and validates the signed, time-limited bearer tokens used by the
admin API.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

import pytz
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.exceptions import InvalidCredentialsError, UnauthorizedError
from schemas.admin import Admin
from utils.admin_manager import AdminManager

logger = logging.getLogger(__name__)


class AuthManager:
    """Logs administrators in and verifies their tokens."""

    def __init__(
        self,
        admin_manager: AdminManager,
        secret_key: str = JWT_SECRET_KEY,
        algorithm: str = JWT_ALGORITHM,
        expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.admin_manager = admin_manager
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def create_access_token(
        self, data: dict, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create a JWT access token.

        Args:
            data: Data to encode in the token.
            expires_delta: Optional expiration time delta.

        Returns:
            Encoded JWT token string.
        """
        to_encode = data.copy()
        now = datetime.now(pytz.utc)
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.expire_minutes)
        to_encode.update({"iat": now, "exp": now + expires_delta})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def login(self, username: str, password: str) -> Tuple[str, Admin]:
        """Check credentials and issue a token.

        Returns:
            (token, admin) tuple.

        Raises:
            InvalidCredentialsError: If the username is unknown or the
                password does not match. Both cases look the same.
        """
        admin = self.admin_manager.get_admin_by_username(username)
        if admin is None or not self.admin_manager.verify_password(
            password, admin.password_hash
        ):
            logger.info("Failed login attempt for username: %s", username)
            raise InvalidCredentialsError()

        token = self.create_access_token({"sub": admin.username})
        logger.info("Admin logged in: %s", admin.username)
        return token, admin

    def verify(self, token: Optional[str]) -> Admin:
        """Validate a token and resolve the administrator it names.

        Raises:
            UnauthorizedError: If the token is missing, malformed, expired,
                badly signed, or names an administrator that no longer exists.
        """
        if not token:
            raise UnauthorizedError("Missing authentication token")
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise UnauthorizedError("Invalid or expired authentication token")

        username = payload.get("sub")
        if not username:
            raise UnauthorizedError("Invalid or expired authentication token")

        admin = self.admin_manager.get_admin_by_username(username)
        if admin is None:
            raise UnauthorizedError("Admin account no longer exists")
        return admin
