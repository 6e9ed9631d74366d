"""
Fleet Management API — Authentication Service
=============================================

What:  Verifies credentials, issues tokens and registers users with a role.
Who:   Called by the /api/auth routes.

Flows:
    login:        find user by email → verify argon2 hash → issue token
    create_user:  resolve role → reject duplicate email → hash → insert → issue token
    load_principal: find user by email → credentials + single ROLE_<name> authority

The service is stateless apart from its collaborators (TokenIssuer and the
argon2 PasswordHasher); the database session is passed to every call.
"""

import logging
from dataclasses import dataclass
from typing import List

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, VerifyMismatchError
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_api.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidRoleError,
    NotFoundError,
)
from fleet_api.models.role import RoleName
from fleet_api.models.user import User
from fleet_api.repositories.user_repository import RoleRepository, UserRepository
from fleet_api.schemas.auth import AuthResponse, UserSummary
from fleet_api.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Credentials and authorities of a stored user."""
    email: str
    password: str
    is_enabled: bool
    account_non_expired: bool
    account_non_locked: bool
    credentials_non_expired: bool
    authorities: List[str]


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(
        self,
        token_issuer: TokenIssuer,
        password_hasher: PasswordHasher | None = None,
        query_timeout: float | None = None,
    ):
        self.token_issuer = token_issuer
        self.password_hasher = password_hasher or PasswordHasher()
        self.query_timeout = query_timeout

    # ── Public operations ─────────────────────────────────────────────────

    async def login(self, db: AsyncSession, email: str, password: str) -> AuthResponse:
        """
        Authenticate by email and password.

        Raises:
            NotFoundError: no user with that email
            InvalidCredentialsError: password does not match the stored hash
        """
        email = normalize_email(email)
        user = await self._require_user(db, email)

        if not self._password_matches(password, user.password):
            logger.warning("Login rejected for user id=%s: bad password", user.id)
            raise InvalidCredentialsError()

        logger.info("User id=%s logged in", user.id)
        return self._auth_response(user, [user.role.role_name.authority])

    async def create_user(
        self,
        db: AsyncSession,
        name: str,
        email: str,
        password: str,
        role_name: str,
    ) -> AuthResponse:
        """
        Register a user holding `role_name` and return a token for it.

        Raises:
            InvalidRoleError: unknown role, or a known role missing from the roles table
            DuplicateEmailError: the email is already registered
        """
        role_kind = RoleName.lookup(role_name)
        if role_kind is None:
            raise InvalidRoleError(role_name)

        role = await RoleRepository(db, self.query_timeout).find_by_role_name(role_kind)
        if role is None:
            logger.error("Role %s is not seeded in the roles table", role_kind.value)
            raise InvalidRoleError(role_name)

        email = normalize_email(email)
        users = UserRepository(db, self.query_timeout)
        if await users.exists_by_email(email):
            raise DuplicateEmailError(email)

        user = User(
            name=name.strip(),
            email=email,
            password=self.password_hasher.hash(password),
            role=role,
            is_enabled=True,
            account_non_expired=True,
            account_non_locked=True,
            credentials_non_expired=True,
        )
        await users.add(user)
        logger.info("Created user id=%s with role %s", user.id, role_kind.value)

        return self._auth_response(user, [role_kind.authority])

    async def load_principal(self, db: AsyncSession, email: str) -> Principal:
        """
        Load the stored credentials and authorities for `email`.

        Raises:
            NotFoundError: no user with that email
        """
        user = await self._require_user(db, normalize_email(email))
        return Principal(
            email=user.email,
            password=user.password,
            is_enabled=user.is_enabled,
            account_non_expired=user.account_non_expired,
            account_non_locked=user.account_non_locked,
            credentials_non_expired=user.credentials_non_expired,
            authorities=[user.role.role_name.authority],
        )

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _require_user(self, db: AsyncSession, email: str) -> User:
        user = await UserRepository(db, self.query_timeout).find_by_email(email)
        if user is None:
            raise NotFoundError(
                resource="user",
                message=f"User not found with email: {email}",
            )
        return user

    def _password_matches(self, password: str, password_hash: str) -> bool:
        try:
            return self.password_hasher.verify(password_hash, password)
        except (VerifyMismatchError, VerificationError):
            return False

    def _auth_response(self, user: User, authorities: List[str]) -> AuthResponse:
        token = self.token_issuer.issue(user.id, user.email, authorities)
        return AuthResponse(
            access_token=token,
            user=UserSummary(id=user.id, email=user.email),
        )
