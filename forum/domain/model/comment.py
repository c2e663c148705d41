"""Comment entity.

Comments form a tree under a post. Each row stores its ancestry as a
materialized path of ids (``root/child/.../self``) so a whole thread or
subtree can be read with one prefix query.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from forum.domain.model.common import DomainModel, utc_now
from forum.domain.value import CommentId, PostId, UserId, VoteTally

PATH_SEPARATOR = "/"
DELETED_CONTENT = "[deleted]"
MAX_DEPTH = 5


class Comment(DomainModel):
    """Comment entity.

    Threading:
    - parent_id: direct parent comment (None for top-level)
    - path: ids from the root comment down to this one, joined by "/"
    - depth: number of ancestors, always ``len(path segments) - 1``
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    content: str = Field(min_length=1, max_length=10000)
    parent_id: Optional[CommentId] = None
    depth: int = Field(default=0, ge=0, le=MAX_DEPTH)
    path: str
    score: int = 0
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    deleted: bool = False
    collapsed: bool = False
    edited: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    deleted_at: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_path(self) -> "Comment":
        """Path must end with the comment's own id and agree with depth."""
        segments = self.path.split(PATH_SEPARATOR)
        if segments[-1] != str(self.id):
            raise ValueError("Comment path must end with the comment id")
        if len(segments) - 1 != self.depth:
            raise ValueError("Comment depth must equal the number of ancestors")
        if (self.parent_id is None) != (self.depth == 0):
            raise ValueError("Only top-level comments may omit a parent")
        if self.parent_id is not None and segments[-2] != str(self.parent_id):
            raise ValueError("Comment path must pass through its parent")
        return self

    @staticmethod
    def build_path(comment_id: CommentId, parent_path: Optional[str] = None) -> str:
        """Materialized path for a new comment under ``parent_path``."""
        if parent_path is None:
            return str(comment_id)
        return f"{parent_path}{PATH_SEPARATOR}{comment_id}"

    @property
    def tally(self) -> VoteTally:
        return VoteTally(
            score=self.score, upvotes=self.upvotes, downvotes=self.downvotes
        )
