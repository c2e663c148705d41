"""Comment domain service."""

from collections import Counter
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

import logfire

from forum.domain.error import (
    ContentDeletedException,
    MaxDepthExceeded,
    NotAuthorizedError,
    ParentPostMismatch,
    PostLockedError,
    TargetNotFound,
    ValidationError,
)
from forum.domain.model.comment import MAX_DEPTH, PATH_SEPARATOR, Comment
from forum.domain.model.common import utc_now
from forum.domain.repository import (
    CommentRepository,
    CommunityRepository,
    PostRepository,
    UnitOfWork,
)
from forum.domain.value import CommentId, PostId, ThreadSortOrder, UserId

from .base import Service


@dataclass
class ThreadComment:
    """A comment as it appears in a thread listing.

    ``child_count`` is the number of direct replies visible in the thread,
    so callers can render "N replies" and expand lazily.
    """

    comment: Comment
    child_count: int


class CommentService(Service):
    """Domain service for the comment tree."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        community_repository: CommunityRepository,
        unit_of_work: UnitOfWork,
        max_depth: int = MAX_DEPTH,
        default_limit: int = 50,
        max_limit: int = 500,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            post_repository: Post repository
            community_repository: Community repository, for moderator checks
            unit_of_work: Atomic scope for comment writes
            max_depth: Deepest allowed reply depth (root comments are 0)
            default_limit: Thread page size when the caller gives none
            max_limit: Largest thread page a caller may request
        """
        self.comment_repository = comment_repository
        self.post_repository = post_repository
        self.community_repository = community_repository
        self.unit_of_work = unit_of_work
        self.max_depth = max_depth
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def create_comment(
        self,
        post_id: PostId,
        author_id: UserId,
        content: str,
        parent_id: Optional[CommentId] = None,
    ) -> Comment:
        """Create a top-level comment or a reply.

        The new comment's path extends its parent's committed path, so
        sibling replies created concurrently never affect each other.

        Args:
            post_id: Post being commented on
            author_id: Comment author
            content: Comment text
            parent_id: Parent comment for replies

        Returns:
            Created comment

        Raises:
            TargetNotFound: If the post or parent doesn't exist
            ContentDeletedException: If the post or parent is deleted
            PostLockedError: If the post is locked
            ParentPostMismatch: If the parent belongs to another post
            MaxDepthExceeded: If the reply would nest too deep
        """
        with logfire.span(
            "comment_service.create_comment",
            post_id=str(post_id),
            author_id=str(author_id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            async with self.unit_of_work.atomic():
                post = await self.post_repository.find_by_id(post_id)
                if not post:
                    logfire.warn("Comment on non-existent post", post_id=str(post_id))
                    raise TargetNotFound("Post", str(post_id))
                if post.deleted:
                    raise ContentDeletedException("Post", str(post_id))
                if post.locked:
                    logfire.warn("Comment on locked post", post_id=str(post_id))
                    raise PostLockedError(str(post_id))

                parent_path: Optional[str] = None
                depth = 0
                if parent_id is not None:
                    # Shared lock: delete_comment waits until this reply commits
                    parent = await self.comment_repository.lock(parent_id, shared=True)
                    if not parent:
                        logfire.warn("Parent comment not found", parent_id=str(parent_id))
                        raise TargetNotFound("Comment", str(parent_id))
                    if parent.post_id != post_id:
                        logfire.warn(
                            "Parent comment belongs to different post",
                            parent_id=str(parent_id),
                            parent_post_id=str(parent.post_id),
                            requested_post_id=str(post_id),
                        )
                        raise ParentPostMismatch(str(parent_id), str(post_id))
                    if parent.deleted:
                        raise ContentDeletedException("Comment", str(parent_id))

                    depth = parent.depth + 1
                    if depth > self.max_depth:
                        logfire.warn(
                            "Maximum comment depth reached",
                            parent_id=str(parent_id),
                            depth=depth,
                        )
                        raise MaxDepthExceeded(self.max_depth)
                    parent_path = parent.path

                comment_id = CommentId(uuid4())
                now = utc_now()
                comment = Comment(
                    id=comment_id,
                    post_id=post_id,
                    author_id=author_id,
                    content=content,
                    parent_id=parent_id,
                    depth=depth,
                    path=Comment.build_path(comment_id, parent_path),
                    created_at=now,
                    updated_at=now,
                )

                saved = await self.comment_repository.create(comment)
                await self.post_repository.increment_comment_count(post_id)

            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                post_id=str(post_id),
                depth=saved.depth,
            )
            return saved

    async def get_comment_by_id(self, comment_id: CommentId) -> Comment | None:
        """Get a comment by ID."""
        with logfire.span("comment_service.get_comment_by_id", comment_id=str(comment_id)):
            return await self.comment_repository.find_by_id(comment_id)

    async def get_thread(
        self,
        post_id: PostId,
        sort: ThreadSortOrder = ThreadSortOrder.BEST,
        limit: Optional[int] = None,
        root_comment_id: Optional[CommentId] = None,
    ) -> list[ThreadComment]:
        """Get a post's comment thread, or the subtree under one comment.

        All comments are fetched with a single query. Deleted comments stay
        in the thread as ``[deleted]`` tombstones while they have live
        replies, so those replies keep their place; deleted leaves are
        dropped.

        Ordering:
        - new: ``created_at`` descending, then ``path``
        - best: ``score`` descending, then ``path``

        Args:
            post_id: Post whose thread to read
            sort: Thread ordering
            limit: Maximum number of comments to return, defaults to
                ``default_limit``
            root_comment_id: Only return this comment and its descendants

        Returns:
            Comments with their visible direct-child counts

        Raises:
            ValidationError: If limit is out of range
            TargetNotFound: If the root comment isn't on this post
        """
        if limit is None:
            limit = self.default_limit
        if limit < 1 or limit > self.max_limit:
            raise ValidationError(f"limit must be between 1 and {self.max_limit}")

        with logfire.span(
            "comment_service.get_thread",
            post_id=str(post_id),
            sort=sort.value,
            limit=limit,
            root_comment_id=str(root_comment_id) if root_comment_id else None,
        ):
            path_prefix = None
            if root_comment_id is not None:
                root = await self.comment_repository.find_by_id(root_comment_id)
                if not root or root.post_id != post_id:
                    raise TargetNotFound("Comment", str(root_comment_id))
                path_prefix = root.path

            comments = await self.comment_repository.find_by_post(post_id, path_prefix)

            # Ancestors of live comments must stay visible
            live_ancestors: set[str] = set()
            for comment in comments:
                if not comment.deleted:
                    live_ancestors.update(comment.path.split(PATH_SEPARATOR)[:-1])

            visible = [
                c for c in comments if not c.deleted or str(c.id) in live_ancestors
            ]
            child_counts = Counter(c.parent_id for c in visible if c.parent_id)

            # Both sorts are stable, so ties keep path order
            visible.sort(key=lambda c: c.path)
            if sort == ThreadSortOrder.NEW:
                visible.sort(key=lambda c: c.created_at, reverse=True)
            else:
                visible.sort(key=lambda c: c.score, reverse=True)

            thread = [
                ThreadComment(comment=c, child_count=child_counts.get(c.id, 0))
                for c in visible[:limit]
            ]
            logfire.info(
                "Thread loaded",
                post_id=str(post_id),
                total=len(visible),
                returned=len(thread),
            )
            return thread

    async def edit_comment(
        self, comment_id: CommentId, user_id: UserId, content: str
    ) -> Comment:
        """Replace a comment's content. Only the author may edit.

        Raises:
            TargetNotFound: If the comment doesn't exist
            NotAuthorizedError: If the user isn't the author
            ContentDeletedException: If the comment is deleted
        """
        with logfire.span(
            "comment_service.edit_comment",
            comment_id=str(comment_id),
            user_id=str(user_id),
            content_length=len(content),
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                raise TargetNotFound("Comment", str(comment_id))
            if comment.author_id != user_id:
                logfire.warn(
                    "Unauthorized comment edit attempt",
                    comment_id=str(comment_id),
                    user_id=str(user_id),
                )
                raise NotAuthorizedError("comment", str(comment_id), str(user_id))
            if comment.deleted:
                raise ContentDeletedException("Comment", str(comment_id))

            updated = await self.comment_repository.update_content(
                comment_id, content, utc_now()
            )
            if updated is None:
                # Deleted between the read and the update
                raise ContentDeletedException("Comment", str(comment_id))

            logfire.info("Comment edited", comment_id=str(comment_id))
            return updated

    async def delete_comment(self, comment_id: CommentId, user_id: UserId) -> Comment:
        """Soft-delete a comment. Only the author may delete.

        The row, its path and its replies are kept; the content becomes
        ``[deleted]``. The post's comment count drops once, on the first
        deletion only.

        Raises:
            TargetNotFound: If the comment doesn't exist
            NotAuthorizedError: If the user isn't the author
        """
        with logfire.span(
            "comment_service.delete_comment",
            comment_id=str(comment_id),
            user_id=str(user_id),
        ):
            async with self.unit_of_work.atomic():
                comment = await self.comment_repository.lock(comment_id)
                if not comment:
                    raise TargetNotFound("Comment", str(comment_id))
                if comment.author_id != user_id:
                    logfire.warn(
                        "Unauthorized comment delete attempt",
                        comment_id=str(comment_id),
                        user_id=str(user_id),
                    )
                    raise NotAuthorizedError("comment", str(comment_id), str(user_id))

                if await self.comment_repository.mark_deleted(comment_id, utc_now()):
                    await self.post_repository.decrement_comment_count(comment.post_id)
                    logfire.info("Comment deleted", comment_id=str(comment_id))
                else:
                    logfire.info("Comment already deleted", comment_id=str(comment_id))

                deleted = await self.comment_repository.find_by_id(comment_id)

            return deleted or comment

    async def collapse_comment(
        self, comment_id: CommentId, moderator_id: UserId, collapsed: bool = True
    ) -> Comment:
        """Collapse or expand a comment. Only moderators of the community may.

        Collapsed comments stay in the thread with their replies; clients
        render them folded.

        Raises:
            TargetNotFound: If the comment doesn't exist
            NotAuthorizedError: If the user doesn't moderate the community
        """
        with logfire.span(
            "comment_service.collapse_comment",
            comment_id=str(comment_id),
            moderator_id=str(moderator_id),
            collapsed=collapsed,
        ):
            async with self.unit_of_work.atomic():
                comment = await self.comment_repository.lock(comment_id)
                if not comment:
                    raise TargetNotFound("Comment", str(comment_id))

                post = await self.post_repository.find_by_id(comment.post_id)
                community = (
                    await self.community_repository.find_by_id(post.community_id)
                    if post
                    else None
                )
                if not community or moderator_id not in community.moderators:
                    logfire.warn(
                        "Collapse by non-moderator",
                        comment_id=str(comment_id),
                        user_id=str(moderator_id),
                    )
                    raise NotAuthorizedError(
                        "comment", str(comment_id), str(moderator_id)
                    )

                updated = await self.comment_repository.set_collapsed(
                    comment_id, collapsed, utc_now()
                )
                if updated is None:
                    raise TargetNotFound("Comment", str(comment_id))

            logfire.info(
                "Comment collapse set", comment_id=str(comment_id), collapsed=collapsed
            )
            return updated
