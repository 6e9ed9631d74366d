"""
Fleet Management API — Authentication Routes
============================================

What:  Log in, sign up and inspect the current principal.
How:   Credentials are checked by AuthService; ADMIN accounts can only be
       created by an admin. Both entry points answer with
       `{accessToken, user: {id, email}}`.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_api.database import get_db_session
from fleet_api.dependencies import (
    ADMIN_AUTHORITY,
    get_auth_service,
    get_current_principal,
    get_optional_principal,
)
from fleet_api.exceptions import PermissionDeniedError
from fleet_api.models.role import RoleName
from fleet_api.schemas.auth import (
    AuthResponse,
    CreateUserRequest,
    LoginRequest,
    PrincipalResponse,
)
from fleet_api.schemas.common import ErrorResponse
from fleet_api.services.auth_service import AuthService
from fleet_api.services.token_service import TokenPayload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/log-in",
    response_model=AuthResponse,
    response_model_by_alias=True,
    responses={
        401: {"description": "Incorrect password", "model": ErrorResponse},
        404: {"description": "No user with that email", "model": ErrorResponse},
    },
    summary="Log in with email and password",
)
async def log_in(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    return await auth_service.login(db, body.email, body.password)


@router.post(
    "/sign-up",
    response_model=AuthResponse,
    response_model_by_alias=True,
    status_code=201,
    responses={
        400: {"description": "Unknown role", "model": ErrorResponse},
        401: {"description": "A bearer token was sent but is invalid", "model": ErrorResponse},
        403: {"description": "ADMIN role requested without an admin token", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create a user with a role and return its token",
)
async def sign_up(
    body: CreateUserRequest,
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
    principal: Optional[TokenPayload] = Depends(get_optional_principal),
) -> AuthResponse:
    """
    Register a new user.

    The role must name an existing role (ADMIN or USER); the password is
    stored as an argon2 hash and never echoed back. Anyone may create a
    USER; only a caller holding ROLE_ADMIN may create an ADMIN.
    """
    if RoleName.lookup(body.role) is RoleName.ADMIN and not (
        principal and principal.has_authority(ADMIN_AUTHORITY)
    ):
        logger.warning(
            "ADMIN sign-up for %s refused (caller id=%s)",
            body.email, principal.user_id if principal else None,
        )
        raise PermissionDeniedError(
            message="Only administrators can create ADMIN users.",
            context={"required_authority": ADMIN_AUTHORITY},
        )

    return await auth_service.create_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        role_name=body.role,
    )


@router.get(
    "/me",
    response_model=PrincipalResponse,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Claims of the authenticated caller",
)
async def me(principal: TokenPayload = Depends(get_current_principal)) -> PrincipalResponse:
    return PrincipalResponse(
        user_id=principal.user_id,
        email=principal.email,
        authorities=principal.authorities,
    )
