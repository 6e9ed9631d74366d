"""
Fleet Management API — Token Issuer
===================================

What:  Issues and validates signed JWT bearer tokens.
How:   PyJWT with a shared HMAC secret. The secret, algorithm, issuer and
       lifetime are constructor arguments; nothing is read from global state.

Token claims:
    sub          user id (string)
    email        user email
    authorities  comma-separated authority list, e.g. "ROLE_ADMIN"
    iss/iat/exp  issuer, issued-at, expiry
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List

import jwt

from fleet_api.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    email: str
    authorities: List[str]

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities


class TokenIssuer:
    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "fleet-management-api",
        expires_minutes: int = 30,
    ):
        if not secret_key:
            raise ValueError("TokenIssuer requires a non-empty secret key")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.expires_minutes = expires_minutes

    def issue(self, user_id: int, email: str, authorities: Iterable[str]) -> str:
        """Create a signed access token for the given principal."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "authorities": ",".join(authorities),
            "iss": self.issuer,
            "iat": now,
            "exp": now + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> TokenPayload:
        """
        Verify signature, issuer and expiry, then return the principal claims.

        Raises:
            AuthenticationError: expired, forged or malformed token.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["sub", "exp", "iss"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired.") from exc
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected bearer token: %s", type(exc).__name__)
            raise AuthenticationError("Invalid token.") from exc

        email = payload.get("email")
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise AuthenticationError("Invalid token.") from exc
        if not email:
            raise AuthenticationError("Invalid token.")

        raw_authorities = payload.get("authorities") or ""
        authorities = [item for item in raw_authorities.split(",") if item]
        return TokenPayload(user_id=user_id, email=email, authorities=authorities)
