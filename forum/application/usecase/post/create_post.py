"""Create post use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from forum.application.usecase.base import BaseUseCase
from forum.domain.model import Post
from forum.domain.service import CommunityService, PostService, UserService
from forum.domain.value import PostType, Slug, UserId, VoteValue


class CreatePostRequest(BaseModel):
    """Create post request."""

    community: Slug
    title: str = Field(min_length=3, max_length=300)
    content: str | None = None
    type: PostType = PostType.TEXT
    url: str | None = None
    nsfw: bool = False
    spoiler: bool = False
    author_id: str  # User ID from the identity header


class PostResponse(BaseModel):
    """A single post."""

    post_id: str
    author_id: str
    community_id: str
    title: str
    content: str | None
    type: PostType
    url: str | None
    score: int
    upvotes: int
    downvotes: int
    comment_count: int
    hot_score: float
    controversy_score: float
    deleted: bool
    locked: bool
    pinned: bool
    nsfw: bool
    spoiler: bool
    edited: bool
    created_at: datetime
    updated_at: datetime
    user_vote: int | None = None


def to_post_response(post: Post, user_vote: Optional[VoteValue] = None) -> PostResponse:
    """Build the response model of a post."""
    return PostResponse(
        post_id=str(post.id),
        author_id=str(post.author_id),
        community_id=str(post.community_id),
        title=post.title,
        content=post.content,
        type=post.type,
        url=post.url,
        score=post.score,
        upvotes=post.upvotes,
        downvotes=post.downvotes,
        comment_count=post.comment_count,
        hot_score=post.hot_score,
        controversy_score=post.controversy_score,
        deleted=post.deleted,
        locked=post.locked,
        pinned=post.pinned,
        nsfw=post.nsfw,
        spoiler=post.spoiler,
        edited=post.edited,
        created_at=post.created_at,
        updated_at=post.updated_at,
        user_vote=int(user_vote) if user_vote is not None else None,
    )


class CreatePostUseCase(BaseUseCase):
    """Use case for creating a new post."""

    def __init__(
        self,
        post_service: PostService,
        community_service: CommunityService,
        user_service: UserService,
    ) -> None:
        """Initialize create post use case.

        Args:
            post_service: Post domain service
            community_service: Community domain service
            user_service: User domain service
        """
        self.post_service = post_service
        self.community_service = community_service
        self.user_service = user_service

    async def execute(self, request: CreatePostRequest) -> PostResponse:
        """Execute create post flow.

        Raises:
            NotFoundError: If the author or community doesn't exist
            ValidationError: If a link or media post has no URL
        """
        author_id = UserId(UUID(request.author_id))
        await self.user_service.get_by_id(author_id)
        community = await self.community_service.get_by_slug(request.community)

        post = await self.post_service.create_post(
            author_id=author_id,
            community_id=community.id,
            title=request.title,
            content=request.content,
            post_type=request.type,
            url=request.url,
            nsfw=request.nsfw,
            spoiler=request.spoiler,
        )
        return to_post_response(post)
