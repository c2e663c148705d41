"""Post use cases."""

from .create_post import CreatePostRequest, CreatePostUseCase, PostResponse
from .delete_post import DeletePostRequest, DeletePostUseCase
from .get_post import GetPostRequest, GetPostUseCase
from .list_posts import ListPostsRequest, ListPostsResponse, ListPostsUseCase
from .moderate_post import ModeratePostRequest, ModeratePostUseCase
from .recompute_hot_score import (
    RecomputeHotScoreRequest,
    RecomputeHotScoreResponse,
    RecomputeHotScoreUseCase,
)
from .update_post import UpdatePostRequest, UpdatePostUseCase

__all__ = [
    "CreatePostRequest",
    "CreatePostUseCase",
    "PostResponse",
    "DeletePostRequest",
    "DeletePostUseCase",
    "GetPostRequest",
    "GetPostUseCase",
    "ListPostsRequest",
    "ListPostsResponse",
    "ListPostsUseCase",
    "ModeratePostRequest",
    "ModeratePostUseCase",
    "RecomputeHotScoreRequest",
    "RecomputeHotScoreResponse",
    "RecomputeHotScoreUseCase",
    "UpdatePostRequest",
    "UpdatePostUseCase",
]
