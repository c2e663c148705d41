"""User aggregate root.

Users are created on first sign-in (identity is established upstream)
and accumulate karma from votes on their posts and comments.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forum.domain.model.common import DomainModel, utc_now
from forum.domain.value import Karma, UserId, Username


class User(DomainModel):
    """User aggregate root.

    ``karma`` is derived state owned by the karma ledger. It is never
    written from client input.
    """

    id: UserId
    username: Username
    display_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    karma: Karma = Karma()
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
