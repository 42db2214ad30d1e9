from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.config import settings


# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Tokens minted for anything other than API access carry a "purpose" claim
OAUTH_STATE_PURPOSE = "google_calendar_state"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT. Expires after ACCESS_TOKEN_EXPIRE_MINUTES unless told otherwise."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    return encoded_jwt


def create_user_token(user) -> str:
    """Issue the API access token for a user."""
    return create_access_token(
        data={"sub": str(user.id), "email": user.email, "role": user.role}
    )


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        return None


def verify_token(token: str) -> Optional[str]:
    """
    Verify an API access token.

    Returns:
        The user id the token was issued for, or None if the token is
        invalid, expired, or was minted for another purpose.
    """
    payload = decode_token(token)
    if payload is None or payload.get("purpose"):
        return None

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None

    return user_id


def create_oauth_state(user_id: str) -> str:
    """Short-lived signed state naming the user who started the OAuth flow."""
    return create_access_token(
        data={"sub": user_id, "purpose": OAUTH_STATE_PURPOSE},
        expires_delta=timedelta(minutes=10),
    )


def read_oauth_state(state: str) -> Optional[str]:
    """Return the user id carried by an OAuth state token, if it is valid."""
    payload = decode_token(state)
    if payload is None or payload.get("purpose") != OAUTH_STATE_PURPOSE:
        return None
    return payload.get("sub")
