"""Comment use cases."""

from .collapse_comment import CollapseCommentRequest, CollapseCommentUseCase
from .create_comment import (
    CommentResponse,
    CreateCommentRequest,
    CreateCommentUseCase,
)
from .delete_comment import DeleteCommentRequest, DeleteCommentUseCase
from .edit_comment import EditCommentRequest, EditCommentUseCase
from .get_thread import (
    GetThreadRequest,
    GetThreadResponse,
    GetThreadUseCase,
    ThreadItem,
)

__all__ = [
    "CollapseCommentRequest",
    "CollapseCommentUseCase",
    "CommentResponse",
    "CreateCommentRequest",
    "CreateCommentUseCase",
    "DeleteCommentRequest",
    "DeleteCommentUseCase",
    "EditCommentRequest",
    "EditCommentUseCase",
    "GetThreadRequest",
    "GetThreadResponse",
    "GetThreadUseCase",
    "ThreadItem",
]
