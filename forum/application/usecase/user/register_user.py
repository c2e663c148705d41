"""Register user use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import UserService
from forum.domain.value import UserId, Username


class RegisterUserRequest(BaseModel):
    """Register user request."""

    user_id: str  # User ID from the identity header
    username: Username
    display_name: str | None = Field(default=None, max_length=100)


class RegisterUserResponse(BaseModel):
    """Register user response."""

    user_id: str
    username: str
    display_name: str | None
    created: bool
    created_at: datetime


class RegisterUserUseCase(BaseUseCase):
    """Use case for creating the forum profile of an authenticated identity."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize register user use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: RegisterUserRequest) -> RegisterUserResponse:
        """Execute registration. Re-registering an existing ID is a no-op.

        Raises:
            AlreadyExistsError: If another user holds the username
        """
        user, created = await self.user_service.register_user(
            user_id=UserId(UUID(request.user_id)),
            username=request.username,
            display_name=request.display_name,
        )

        return RegisterUserResponse(
            user_id=str(user.id),
            username=user.username.root,
            display_name=user.display_name,
            created=created,
            created_at=user.created_at,
        )
