"""List posts use case."""

from uuid import UUID

from pydantic import BaseModel

from forum.application.usecase.base import BaseUseCase
from forum.domain.service import CommunityService, PostService, VoteService
from forum.domain.value import PostSortOrder, Slug, UserId, VotableType

from .create_post import PostResponse, to_post_response


class ListPostsRequest(BaseModel):
    """List posts request."""

    community: Slug | None = None
    author_id: str | None = None
    sort: PostSortOrder = PostSortOrder.HOT
    limit: int = 25
    offset: int = 0
    viewer_id: str | None = None  # Optional, to include the viewer's votes


class ListPostsResponse(BaseModel):
    """List posts response."""

    posts: list[PostResponse]
    sort: PostSortOrder
    limit: int
    offset: int


class ListPostsUseCase(BaseUseCase):
    """Use case for listing posts in ranking order."""

    def __init__(
        self,
        post_service: PostService,
        community_service: CommunityService,
        vote_service: VoteService,
    ) -> None:
        """Initialize list posts use case.

        Args:
            post_service: Post domain service
            community_service: Community domain service (resolves slugs)
            vote_service: Vote service for the viewer's votes
        """
        self.post_service = post_service
        self.community_service = community_service
        self.vote_service = vote_service

    async def execute(self, request: ListPostsRequest) -> ListPostsResponse:
        """Execute list posts flow.

        Raises:
            NotFoundError: If the community doesn't exist
            ValidationError: If limit or offset is out of range
        """
        community_id = None
        if request.community is not None:
            community = await self.community_service.get_by_slug(request.community)
            community_id = community.id

        posts = await self.post_service.list_posts(
            community_id=community_id,
            author_id=UserId(UUID(request.author_id)) if request.author_id else None,
            sort=request.sort,
            limit=request.limit,
            offset=request.offset,
        )

        # Batch query for the viewer's votes
        user_votes = {}
        if request.viewer_id and posts:
            user_votes = await self.vote_service.get_user_votes(
                voter_id=UserId(UUID(request.viewer_id)),
                target_type=VotableType.POST,
                target_ids=[post.id for post in posts],
            )

        return ListPostsResponse(
            posts=[to_post_response(p, user_votes.get(p.id)) for p in posts],
            sort=request.sort,
            limit=request.limit,
            offset=request.offset,
        )
