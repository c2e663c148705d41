"""User routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from forum.application.usecase.user import (
    GetUserKarmaRequest,
    GetUserKarmaResponse,
    GetUserKarmaUseCase,
    RegisterUserRequest,
    RegisterUserResponse,
    RegisterUserUseCase,
    UpdateUserProfileRequest,
    UpdateUserProfileResponse,
    UpdateUserProfileUseCase,
)
from forum.domain.value import Username
from forum.interface.api.dependencies import get_current_user_id

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


class RegisterUserAPIRequest(BaseModel):
    """API request for registering the caller's forum profile."""

    username: Username
    display_name: str | None = Field(default=None, max_length=100)


class UpdateUserProfileAPIRequest(BaseModel):
    """API request for updating the caller's profile."""

    display_name: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=500)


@router.post(
    "",
    response_model=RegisterUserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    request: RegisterUserAPIRequest,
    response: Response,
    register_user_use_case: FromDishka[RegisterUserUseCase],
    user_id: str = Depends(get_current_user_id),
) -> RegisterUserResponse:
    """Register the calling identity as a forum user.

    Returns 201 on creation and 200 if the ID was already registered.
    """
    result = await register_user_use_case.execute(
        RegisterUserRequest(
            user_id=user_id,
            username=request.username,
            display_name=request.display_name,
        )
    )
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result


@router.get("/{user_id}/karma", response_model=GetUserKarmaResponse)
async def get_user_karma(
    user_id: UUID,
    get_user_karma_use_case: FromDishka[GetUserKarmaUseCase],
) -> GetUserKarmaResponse:
    """Get a user's karma and content counts."""
    return await get_user_karma_use_case.execute(
        GetUserKarmaRequest(user_id=str(user_id))
    )


@router.patch("/me", response_model=UpdateUserProfileResponse)
async def update_my_profile(
    request: UpdateUserProfileAPIRequest,
    update_user_profile_use_case: FromDishka[UpdateUserProfileUseCase],
    user_id: str = Depends(get_current_user_id),
) -> UpdateUserProfileResponse:
    """Update the caller's display name and bio.

    Omitted fields are kept; an empty string clears a field.
    """
    return await update_user_profile_use_case.execute(
        UpdateUserProfileRequest(
            user_id=user_id,
            display_name=request.display_name,
            bio=request.bio,
        )
    )
