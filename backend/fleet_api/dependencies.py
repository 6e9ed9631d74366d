"""
Fleet Management API — FastAPI Dependencies
===========================================

What:  Wires configured collaborators into routes and resolves the caller.
How:   Settings are read here, once, and passed into constructors; the
       services themselves never touch secrets.

    get_token_issuer()      → TokenIssuer(JWT_* settings)
    get_auth_service()      → AuthService(TokenIssuer, argon2, DB timeout)
    get_email_service()     → EmailService(MailSettings(MAIL_* settings))
    get_current_principal   → bearer token → TokenPayload (401 on failure)
    get_optional_principal  → same, but None when no token is sent
    require_authority(name) → dependency raising 403 without `name`
"""

import logging
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_api.config import settings
from fleet_api.database import get_db_session
from fleet_api.exceptions import AuthenticationError, NotFoundError, PermissionDeniedError
from fleet_api.services.auth_service import AuthService
from fleet_api.services.email_service import EmailService, MailSettings
from fleet_api.services.token_service import TokenIssuer, TokenPayload

logger = logging.getLogger(__name__)

ADMIN_AUTHORITY = "ROLE_ADMIN"

# auto_error=False so a missing header goes through our 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        expires_minutes=settings.jwt_expires_minutes,
    )


@lru_cache
def get_auth_service() -> AuthService:
    return AuthService(
        token_issuer=get_token_issuer(),
        query_timeout=settings.db_query_timeout,
    )


@lru_cache
def get_email_service() -> EmailService:
    return EmailService(
        MailSettings(
            host=settings.mail_host,
            port=settings.mail_port,
            username=settings.mail_username,
            password=settings.mail_password,
            sender=settings.mail_from,
            use_tls=settings.mail_use_tls,
            timeout=settings.mail_timeout,
            static_attachment_path=settings.mail_static_attachment_path,
        )
    )


async def _resolve_principal(
    token: str,
    db: AsyncSession,
    token_issuer: TokenIssuer,
    auth_service: AuthService,
) -> TokenPayload:
    claims = token_issuer.decode(token)

    try:
        principal = await auth_service.load_principal(db, claims.email)
    except NotFoundError:
        logger.info("Token for user id=%s refers to a deleted account", claims.user_id)
        raise AuthenticationError("Invalid token.")

    if not (
        principal.is_enabled
        and principal.account_non_expired
        and principal.account_non_locked
        and principal.credentials_non_expired
    ):
        raise AuthenticationError("Account is disabled.")

    return TokenPayload(
        user_id=claims.user_id,
        email=principal.email,
        authorities=principal.authorities,
    )


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenPayload:
    """
    Resolve the bearer token into the calling principal.

    The token must verify, and its user must still exist and be active;
    authorities come from the stored role, not only from the token.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token.")
    return await _resolve_principal(credentials.credentials, db, token_issuer, auth_service)


async def get_optional_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[TokenPayload]:
    """None for anonymous callers; a token that is sent must still be valid."""
    if credentials is None or not credentials.credentials:
        return None
    return await _resolve_principal(credentials.credentials, db, token_issuer, auth_service)


def require_authority(authority: str) -> Callable:
    """Dependency factory: 403 unless the principal holds `authority`."""

    async def _guard(
        principal: TokenPayload = Depends(get_current_principal),
    ) -> TokenPayload:
        if not principal.has_authority(authority):
            logger.warning(
                "User id=%s denied: requires %s, has %s",
                principal.user_id, authority, principal.authorities,
            )
            raise PermissionDeniedError(
                message="You do not have permission to perform this action.",
                context={"required_authority": authority},
            )
        return principal

    return _guard
