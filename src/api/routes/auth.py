"""Authentication routes.

This module handles HTTP endpoints for administrator login and provides the
get_current_admin dependency that guards the admin API.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.dependencies import AuthManagerDep
from core.exceptions import InvalidCredentialsError, UnauthorizedError
from schemas.admin import Admin, CurrentAdminResponse, LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Auth"])

# HTTP Bearer token security; missing headers are reported by verify()
security = HTTPBearer(auto_error=False)


def get_current_admin(
    auth_manager: AuthManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Admin:
    """Get the administrator named by the bearer token.

    Args:
        auth_manager: Injected AuthManager instance.
        credentials: HTTP Bearer token credentials.

    Returns:
        Current Admin object.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired.
    """
    token = credentials.credentials if credentials else None
    try:
        return auth_manager.verify(token)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post("/login", response_model=LoginResponse, summary="Administrator login")
def login(req: LoginRequest, auth_manager: AuthManagerDep) -> LoginResponse:
    """Login with username and password.

    Args:
        req: Login request with username and password.
        auth_manager: Injected AuthManager instance.

    Returns:
        LoginResponse with a bearer token valid for 24 hours.

    Raises:
        HTTPException: 401 if login fails.
    """
    try:
        token, admin = auth_manager.login(req.username, req.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
    return LoginResponse(token=token, username=admin.username)


@router.get("/me", response_model=CurrentAdminResponse, summary="Current administrator")
def get_current_admin_info(
    current_admin: Admin = Depends(get_current_admin),
) -> CurrentAdminResponse:
    return CurrentAdminResponse(username=current_admin.username, email=current_admin.email)
