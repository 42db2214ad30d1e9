from fastapi import Depends, Request
from app.features.auth.gate import Identity
from app.features.auth.models import User
from app.shared.exceptions import CredentialsException


async def get_current_identity(request: Request) -> Identity:
    """
    Dependency returning the identity resolved by the auth gate.

    Raises:
        CredentialsException: If the route was not behind the gate
    """
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise CredentialsException("Authentication required")
    return identity


async def get_current_user(
    identity: Identity = Depends(get_current_identity)
) -> User:
    """Dependency to get the current authenticated user document."""
    return identity.user


async def get_current_user_id(
    identity: Identity = Depends(get_current_identity)
) -> str:
    """Dependency to get the current doctor's id."""
    return identity.user_id
