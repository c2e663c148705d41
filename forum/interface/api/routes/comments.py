"""Comment routes."""

from typing import Optional
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from forum.application.usecase.comment import (
    CollapseCommentRequest,
    CollapseCommentUseCase,
    CommentResponse,
    CreateCommentRequest,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentUseCase,
    EditCommentRequest,
    EditCommentUseCase,
    GetThreadRequest,
    GetThreadResponse,
    GetThreadUseCase,
)
from forum.domain.value import ThreadSortOrder
from forum.interface.api.dependencies import get_current_user_id, get_optional_user_id

router = APIRouter(prefix="/posts", tags=["comments"], route_class=DishkaRoute)


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    content: str = Field(min_length=1, max_length=10000)
    parent_id: UUID | None = None  # Parent comment ID for replies


class EditCommentAPIRequest(BaseModel):
    """API request for editing a comment."""

    content: str = Field(min_length=1, max_length=10000)


class CollapseCommentAPIRequest(BaseModel):
    """API request for collapsing a comment."""

    collapsed: bool = True


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: UUID,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    user_id: str = Depends(get_current_user_id),
) -> CommentResponse:
    """Comment on a post or reply to another comment."""
    return await create_comment_use_case.execute(
        CreateCommentRequest(
            post_id=str(post_id),
            content=request.content,
            author_id=user_id,
            parent_id=str(request.parent_id) if request.parent_id else None,
        )
    )


@router.get("/{post_id}/comments", response_model=GetThreadResponse)
async def get_thread(
    post_id: UUID,
    get_thread_use_case: FromDishka[GetThreadUseCase],
    sort: ThreadSortOrder = Query(default=ThreadSortOrder.BEST),
    limit: Optional[int] = Query(default=None, ge=1),
    root: Optional[UUID] = Query(default=None),
    viewer_id: str | None = Depends(get_optional_user_id),
) -> GetThreadResponse:
    """Get a post's comment thread, or the subtree under ``root``.

    Deleted comments with live replies appear as ``[deleted]``.
    """
    return await get_thread_use_case.execute(
        GetThreadRequest(
            post_id=str(post_id),
            sort=sort,
            limit=limit,
            root_comment_id=str(root) if root else None,
            viewer_id=viewer_id,
        )
    )


@router.patch("/{post_id}/comments/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    post_id: UUID,
    comment_id: UUID,
    request: EditCommentAPIRequest,
    edit_comment_use_case: FromDishka[EditCommentUseCase],
    user_id: str = Depends(get_current_user_id),
) -> CommentResponse:
    """Edit a comment. Only the author may edit."""
    return await edit_comment_use_case.execute(
        EditCommentRequest(
            post_id=str(post_id),
            comment_id=str(comment_id),
            user_id=user_id,
            content=request.content,
        )
    )


@router.delete("/{post_id}/comments/{comment_id}", response_model=CommentResponse)
async def delete_comment(
    post_id: UUID,
    comment_id: UUID,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    user_id: str = Depends(get_current_user_id),
) -> CommentResponse:
    """Soft-delete a comment. Only the author may delete."""
    return await delete_comment_use_case.execute(
        DeleteCommentRequest(
            post_id=str(post_id), comment_id=str(comment_id), user_id=user_id
        )
    )


@router.patch(
    "/{post_id}/comments/{comment_id}/moderation", response_model=CommentResponse
)
async def collapse_comment(
    post_id: UUID,
    comment_id: UUID,
    request: CollapseCommentAPIRequest,
    collapse_comment_use_case: FromDishka[CollapseCommentUseCase],
    user_id: str = Depends(get_current_user_id),
) -> CommentResponse:
    """Collapse or expand a comment. Only community moderators may."""
    return await collapse_comment_use_case.execute(
        CollapseCommentRequest(
            post_id=str(post_id),
            comment_id=str(comment_id),
            moderator_id=user_id,
            collapsed=request.collapsed,
        )
    )
