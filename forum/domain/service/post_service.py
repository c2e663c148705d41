"""Post domain service."""

from datetime import datetime
from typing import Optional
from uuid import uuid4

import logfire

from forum.domain.error import (
    ContentDeletedException,
    NotAuthorizedError,
    NotFoundError,
    TargetNotFound,
    ValidationError,
)
from forum.domain.model.common import utc_now
from forum.domain.model.post import Post
from forum.domain.repository import CommunityRepository, PostRepository, UnitOfWork
from forum.domain.value import CommunityId, PostId, PostSortOrder, PostType, UserId

from .aggregate_maintainer import AggregateMaintainer
from .base import Service

MAX_PAGE_SIZE = 100


class PostService(Service):
    """Domain service for post operations."""

    def __init__(
        self,
        post_repository: PostRepository,
        community_repository: CommunityRepository,
        aggregate_maintainer: AggregateMaintainer,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize post service.

        Args:
            post_repository: Post repository
            community_repository: Community repository
            aggregate_maintainer: Recomputes vote aggregates and hot scores
            unit_of_work: Atomic scope for post writes
        """
        self.post_repository = post_repository
        self.community_repository = community_repository
        self.aggregate_maintainer = aggregate_maintainer
        self.unit_of_work = unit_of_work

    async def create_post(
        self,
        author_id: UserId,
        community_id: CommunityId,
        title: str,
        content: Optional[str] = None,
        post_type: PostType = PostType.TEXT,
        url: Optional[str] = None,
        nsfw: bool = False,
        spoiler: bool = False,
    ) -> Post:
        """Create a post in a community.

        The community's post count and last activity are updated in the
        same unit of work.

        Raises:
            NotFoundError: If the community doesn't exist
            ValidationError: If a link or media post has no URL
        """
        if post_type.requires_url and not url:
            raise ValidationError(f"{post_type.value} posts require a url")

        with logfire.span(
            "post_service.create_post",
            author_id=str(author_id),
            community_id=str(community_id),
            title=title,
            type=post_type.value,
        ):
            async with self.unit_of_work.atomic():
                community = await self.community_repository.find_by_id(community_id)
                if not community:
                    logfire.warn(
                        "Post to non-existent community",
                        community_id=str(community_id),
                    )
                    raise NotFoundError("Community", str(community_id))

                now = utc_now()
                post = Post(
                    id=PostId(uuid4()),
                    author_id=author_id,
                    community_id=community_id,
                    title=title,
                    content=content,
                    type=post_type,
                    url=url,
                    nsfw=nsfw,
                    spoiler=spoiler,
                    hot_score=0.0,
                    created_at=now,
                    updated_at=now,
                )
                saved = await self.post_repository.create(post)
                await self.community_repository.record_post(community_id, now)

            logfire.info(
                "Post created", post_id=str(saved.id), community_id=str(community_id)
            )
            return saved

    async def get_post_by_id(self, post_id: PostId) -> Post:
        """Get a post by ID.

        Raises:
            TargetNotFound: If the post doesn't exist
        """
        with logfire.span("post_service.get_post_by_id", post_id=str(post_id)):
            post = await self.post_repository.find_by_id(post_id)

            if not post:
                logfire.warn("Post not found", post_id=str(post_id))
                raise TargetNotFound("Post", str(post_id))

            logfire.info("Post found", post_id=str(post_id), title=post.title)
            return post

    async def list_posts(
        self,
        community_id: Optional[CommunityId] = None,
        author_id: Optional[UserId] = None,
        sort: PostSortOrder = PostSortOrder.HOT,
        limit: int = 25,
        offset: int = 0,
    ) -> list[Post]:
        """List live posts ordered by one of the precomputed ranking columns.

        Raises:
            ValidationError: If limit or offset is out of range
        """
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("offset must not be negative")

        with logfire.span(
            "post_service.list_posts",
            community_id=str(community_id) if community_id else None,
            sort=sort.value,
            limit=limit,
            offset=offset,
        ):
            posts = await self.post_repository.find_all(
                community_id=community_id,
                author_id=author_id,
                sort=sort,
                limit=limit,
                offset=offset,
            )
            logfire.info("Posts listed", count=len(posts), sort=sort.value)
            return posts

    async def delete_post(self, post_id: PostId, user_id: UserId) -> Post:
        """Soft-delete a post. Only the author may delete.

        Raises:
            TargetNotFound: If the post doesn't exist
            NotAuthorizedError: If the user isn't the author
        """
        with logfire.span(
            "post_service.delete_post", post_id=str(post_id), user_id=str(user_id)
        ):
            async with self.unit_of_work.atomic():
                post = await self.post_repository.lock(post_id)
                if not post:
                    raise TargetNotFound("Post", str(post_id))
                if post.author_id != user_id:
                    logfire.warn(
                        "Unauthorized post delete attempt",
                        post_id=str(post_id),
                        user_id=str(user_id),
                    )
                    raise NotAuthorizedError("post", str(post_id), str(user_id))

                if await self.post_repository.mark_deleted(post_id, utc_now()):
                    logfire.info("Post deleted", post_id=str(post_id))
                deleted = await self.post_repository.find_by_id(post_id)

            return deleted or post

    async def update_post(
        self,
        post_id: PostId,
        user_id: UserId,
        title: Optional[str] = None,
        content: Optional[str] = None,
        nsfw: Optional[bool] = None,
        spoiler: Optional[bool] = None,
    ) -> Post:
        """Edit a post's title, content or content flags. Only the author may edit.

        Fields left as None keep their current value. The post is marked
        ``edited``; type, URL and community never change.

        Raises:
            TargetNotFound: If the post doesn't exist
            NotAuthorizedError: If the user isn't the author
            ContentDeletedException: If the post is deleted
            ValidationError: If the new title is out of range
        """
        if title is not None and not 3 <= len(title) <= 300:
            raise ValidationError("title must be between 3 and 300 characters")

        with logfire.span(
            "post_service.update_post", post_id=str(post_id), user_id=str(user_id)
        ):
            async with self.unit_of_work.atomic():
                post = await self.post_repository.lock(post_id)
                if not post:
                    raise TargetNotFound("Post", str(post_id))
                if post.author_id != user_id:
                    logfire.warn(
                        "Unauthorized post edit attempt",
                        post_id=str(post_id),
                        user_id=str(user_id),
                    )
                    raise NotAuthorizedError("post", str(post_id), str(user_id))
                if post.deleted:
                    raise ContentDeletedException("Post", str(post_id))

                updated = await self.post_repository.update_content(
                    post_id,
                    title=title if title is not None else post.title,
                    content=content if content is not None else post.content,
                    nsfw=nsfw if nsfw is not None else post.nsfw,
                    spoiler=spoiler if spoiler is not None else post.spoiler,
                    at=utc_now(),
                )
                if updated is None:
                    raise ContentDeletedException("Post", str(post_id))

            logfire.info("Post edited", post_id=str(post_id))
            return updated

    async def moderate_post(
        self,
        post_id: PostId,
        moderator_id: UserId,
        locked: Optional[bool] = None,
        pinned: Optional[bool] = None,
    ) -> Post:
        """Lock or pin a post. Only moderators of its community may do this.

        A locked post accepts no new comments. Pinned posts lead their
        community's listings.

        Raises:
            TargetNotFound: If the post doesn't exist
            NotAuthorizedError: If the user doesn't moderate the community
        """
        with logfire.span(
            "post_service.moderate_post",
            post_id=str(post_id),
            moderator_id=str(moderator_id),
            locked=locked,
            pinned=pinned,
        ):
            async with self.unit_of_work.atomic():
                post = await self.post_repository.lock(post_id)
                if not post:
                    raise TargetNotFound("Post", str(post_id))

                community = await self.community_repository.find_by_id(
                    post.community_id
                )
                if not community or moderator_id not in community.moderators:
                    logfire.warn(
                        "Moderation by non-moderator",
                        post_id=str(post_id),
                        user_id=str(moderator_id),
                    )
                    raise NotAuthorizedError("post", str(post_id), str(moderator_id))

                updated = await self.post_repository.set_moderation_flags(
                    post_id,
                    locked=locked if locked is not None else post.locked,
                    pinned=pinned if pinned is not None else post.pinned,
                    at=utc_now(),
                )

            logfire.info(
                "Post moderated",
                post_id=str(post_id),
                locked=updated.locked,
                pinned=updated.pinned,
            )
            return updated

    async def recompute_hot_score(
        self, post_id: PostId, now: Optional[datetime] = None
    ) -> Post:
        """Recompute one post's aggregates and hot score.

        Idempotent: running it again for the same ``now`` stores the same
        values.

        Raises:
            TargetNotFound: If the post doesn't exist
        """
        with logfire.span("post_service.recompute_hot_score", post_id=str(post_id)):
            async with self.unit_of_work.atomic():
                return await self.aggregate_maintainer.refresh_post(post_id, now=now)

    async def find_post_ids_created_since(self, since: datetime) -> list[PostId]:
        """IDs of live posts created at or after ``since``.

        Used by the scheduled re-rank job, which refreshes each post in a
        transaction of its own.
        """
        with logfire.span(
            "post_service.find_post_ids_created_since", since=since.isoformat()
        ):
            return await self.post_repository.find_ids_created_since(since)
