"""
Bearer-token gate shared by every protected route.

The gate resolves the caller once per request. Handlers receive the
resolved identity and never look at the Authorization header themselves.
"""

from dataclasses import dataclass
from typing import Optional

from starlette.requests import Request

from app.core.logging import logger
from app.core.security import verify_token
from app.features.auth.models import User
from app.features.auth.service import AuthService
from app.shared.exceptions import CredentialsException


class AuthError(CredentialsException):
    """Raised by the gate when a request cannot be authenticated."""


@dataclass(frozen=True)
class Identity:
    """The authenticated doctor behind a request."""

    user_id: str
    email: str
    role: str
    user: User


def extract_bearer_token(request: Request) -> Optional[str]:
    """Return the token from `Authorization: Bearer <token>`, if present."""
    header = request.headers.get("Authorization")
    if not header:
        return None

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None

    return token.strip()


class Authenticator:
    """Resolves a request to an Identity or raises AuthError."""

    def __init__(self, dev_user_email: Optional[str] = None):
        self.dev_user_email = dev_user_email

    async def resolve(self, request: Request) -> Identity:
        token = extract_bearer_token(request)

        if token is None:
            if self.dev_user_email:
                return await self._resolve_dev_user()
            raise AuthError("Unauthorized - No token provided")

        user_id = verify_token(token)
        if user_id is None:
            raise AuthError("Unauthorized - Invalid token")

        user = await AuthService.get_user_by_id(user_id)
        if user is None or not user.is_active:
            raise AuthError("Unauthorized - User not found")

        return self._identity(user)

    async def _resolve_dev_user(self) -> Identity:
        user = await AuthService.get_user_by_email(self.dev_user_email)
        if user is None or not user.is_active:
            raise AuthError("Unauthorized - No token provided")

        logger.warning(f"Unauthenticated request served as development user {user.email}")
        return self._identity(user)

    @staticmethod
    def _identity(user: User) -> Identity:
        return Identity(
            user_id=str(user.id),
            email=user.email,
            role=user.role,
            user=user,
        )
