"""Test configuration and fixtures."""

from datetime import datetime
from typing import Optional
from uuid import uuid4

import logfire
from dishka import AsyncContainer

from forum.domain.model import Comment, Community, Post, User
from forum.domain.repository import CommentRepository, PostRepository
from forum.domain.service import (
    CommentService,
    CommunityService,
    PostService,
    UserService,
)
from forum.domain.value import CommentId, PostId, Slug, UserId, Username

# Keep telemetry local while testing
logfire.configure(send_to_logfire=False, console=False)


async def make_user(env: AsyncContainer, username: Optional[str] = None) -> User:
    """Register a user with a random ID.

    Args:
        env: Request-scoped test container
        username: Username to register (random if omitted)

    Returns:
        The registered user
    """
    user_service = await env.get(UserService)
    name = username or f"user_{uuid4().hex[:8]}"
    user, _ = await user_service.register_user(UserId(uuid4()), Username(name))
    return user


async def make_community(
    env: AsyncContainer, creator: User, slug: Optional[str] = None
) -> Community:
    """Create a community owned by ``creator``."""
    community_service = await env.get(CommunityService)
    slug_str = slug or f"c-{uuid4().hex[:8]}"
    return await community_service.create_community(
        creator.id, name=f"Community {slug_str}", slug=Slug(slug_str)
    )


async def make_post(
    env: AsyncContainer,
    author: User,
    community: Community,
    title: str = "Test Post",
    created_at: Optional[datetime] = None,
) -> Post:
    """Create a text post, optionally backdated to ``created_at``."""
    post_service = await env.get(PostService)
    post = await post_service.create_post(
        author.id, community.id, title=title, content="Test content"
    )
    if created_at is None:
        return post

    # Backdating bypasses the service; only the in-memory store allows it
    post_repo = await env.get(PostRepository)
    backdated = post.model_copy(update={"created_at": created_at})
    await post_repo.create(backdated)
    return backdated


async def make_comment(
    env: AsyncContainer,
    author: User,
    post_id: PostId,
    content: str = "Test comment",
    parent_id: Optional[CommentId] = None,
    created_at: Optional[datetime] = None,
) -> Comment:
    """Create a comment or a reply, optionally backdated to ``created_at``."""
    comment_service = await env.get(CommentService)
    comment = await comment_service.create_comment(
        post_id, author.id, content, parent_id=parent_id
    )
    if created_at is None:
        return comment

    comment_repo = await env.get(CommentRepository)
    backdated = comment.model_copy(update={"created_at": created_at})
    await comment_repo.create(backdated)
    return backdated
