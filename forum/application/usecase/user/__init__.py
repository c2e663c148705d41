"""User use cases."""

from .get_user_karma import (
    GetUserKarmaRequest,
    GetUserKarmaResponse,
    GetUserKarmaUseCase,
)
from .register_user import (
    RegisterUserRequest,
    RegisterUserResponse,
    RegisterUserUseCase,
)
from .update_user_profile import (
    UpdateUserProfileRequest,
    UpdateUserProfileResponse,
    UpdateUserProfileUseCase,
)

__all__ = [
    "GetUserKarmaRequest",
    "GetUserKarmaResponse",
    "GetUserKarmaUseCase",
    "RegisterUserRequest",
    "RegisterUserResponse",
    "RegisterUserUseCase",
    "UpdateUserProfileRequest",
    "UpdateUserProfileResponse",
    "UpdateUserProfileUseCase",
]
