from typing import Optional
from app.features.auth.models import User
from app.features.auth.schemas import RegisterRequest, LoginRequest, UserResponse
from app.core.security import (
    verify_password,
    get_password_hash,
    create_user_token,
)
from app.shared.exceptions import BadRequestException, CredentialsException
from app.shared.repository import parse_object_id
from app.core.logging import logger


class AuthService:
    """Authentication service for handling auth business logic."""

    @staticmethod
    def user_to_response(user: User) -> UserResponse:
        """Convert User document to response schema (never exposes hashes or OAuth tokens)."""
        return UserResponse(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            is_active=user.is_active,
            calendar_connected=user.calendar_connected,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @staticmethod
    async def register(register_data: RegisterRequest) -> tuple[User, str]:
        """
        Register a new doctor account.

        Returns:
            tuple: (user, access_token)
        """
        existing_user = await User.find_one(User.email == register_data.email)
        if existing_user:
            raise BadRequestException("User with this email already exists")

        user = User(
            email=register_data.email,
            password_hash=get_password_hash(register_data.password),
            first_name=register_data.first_name,
            last_name=register_data.last_name,
        )
        await user.insert()
        logger.info(f"Registered user {user.id} ({user.email})")

        return user, create_user_token(user)

    @staticmethod
    async def login(login_data: LoginRequest) -> tuple[User, str]:
        """
        Authenticate user and return access token.

        Returns:
            tuple: (user, access_token)
        """
        user = await User.find_one(User.email == login_data.email)
        if not user:
            raise CredentialsException("Invalid email or password")

        if not verify_password(login_data.password, user.password_hash):
            raise CredentialsException("Invalid email or password")

        if not user.is_active:
            raise CredentialsException("Account is inactive")

        return user, create_user_token(user)

    @staticmethod
    async def change_password(user: User, current_password: str, new_password: str) -> bool:
        """Change user password after checking the current one."""
        if not verify_password(current_password, user.password_hash):
            raise BadRequestException("Current password is incorrect")

        user.password_hash = get_password_hash(new_password)
        user.update_timestamp()
        await user.save()
        logger.info(f"Password changed for user {user.id}")

        return True

    @staticmethod
    async def update_profile(user: User, update_data: dict) -> User:
        """
        Update user profile information.

        Args:
            user: User document to update
            update_data: Fields to update (first_name, last_name)
        """
        if update_data.get("first_name") is not None:
            user.first_name = update_data["first_name"]
        if update_data.get("last_name") is not None:
            user.last_name = update_data["last_name"]

        user.update_timestamp()
        await user.save()
        return user

    @staticmethod
    async def get_user_by_email(email: str) -> Optional[User]:
        """Get user by email."""
        return await User.find_one(User.email == email)

    @staticmethod
    async def get_user_by_id(user_id: str) -> Optional[User]:
        """Get user by ID."""
        object_id = parse_object_id(user_id)
        if object_id is None:
            return None
        return await User.get(object_id)
