"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from forum.domain.model import Comment, Community, Post, User, Vote
from forum.domain.value import (
    CommentId,
    CommunityId,
    Karma,
    PostId,
    PostType,
    Slug,
    UserId,
    Username,
    VotableType,
    VoteValue,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        username=Username(row["username"]),
        display_name=row.get("display_name"),
        bio=row.get("bio"),
        karma=Karma(
            post=row["post_karma"],
            comment=row["comment_karma"],
            total=row["total_karma"],
        ),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Karma columns are left to their server defaults; they are only written
    through atomic increments.
    """
    return {
        "id": user.id,
        "username": user.username.root,
        "display_name": user.display_name,
        "bio": user.bio,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def row_to_community(row: Dict[str, Any]) -> Community:
    """Convert database row to Community domain model."""
    return Community(
        id=CommunityId(_uuid(row["id"])),
        slug=Slug(row["slug"]),
        name=row["name"],
        description=row.get("description"),
        moderators=[UserId(_uuid(m)) for m in row.get("moderators") or []],
        member_count=row["member_count"],
        post_count=row["post_count"],
        last_activity=row.get("last_activity"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def community_to_dict(community: Community) -> Dict[str, Any]:
    """Convert Community domain model to database dict (counters excluded)."""
    return {
        "id": community.id,
        "slug": community.slug.root,
        "name": community.name,
        "description": community.description,
        "moderators": list(community.moderators),
        "last_activity": community.last_activity,
        "created_at": community.created_at,
        "updated_at": community.updated_at,
    }


def row_to_post(row: Dict[str, Any]) -> Post:
    """Convert database row to Post domain model."""
    return Post(
        id=PostId(_uuid(row["id"])),
        author_id=UserId(_uuid(row["author_id"])),
        community_id=CommunityId(_uuid(row["community_id"])),
        title=row["title"],
        content=row.get("content"),
        type=PostType(row["type"]),
        url=row.get("url"),
        score=row["score"],
        upvotes=row["upvotes"],
        downvotes=row["downvotes"],
        comment_count=row["comment_count"],
        hot_score=row["hot_score"],
        controversy_score=row["controversy_score"],
        deleted=row["deleted"],
        locked=row["locked"],
        pinned=row["pinned"],
        nsfw=row["nsfw"],
        spoiler=row["spoiler"],
        edited=row["edited"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def post_to_dict(post: Post) -> Dict[str, Any]:
    """Convert Post domain model to database dict."""
    post_dict = post.model_dump()
    post_dict["type"] = post.type.value
    return post_dict


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model."""
    parent_id = row.get("parent_id")
    return Comment(
        id=CommentId(_uuid(row["id"])),
        post_id=PostId(_uuid(row["post_id"])),
        author_id=UserId(_uuid(row["author_id"])),
        content=row["content"],
        parent_id=CommentId(_uuid(parent_id)) if parent_id else None,
        depth=row["depth"],
        path=row["path"],
        score=row["score"],
        upvotes=row["upvotes"],
        downvotes=row["downvotes"],
        deleted=row["deleted"],
        collapsed=row["collapsed"],
        edited=row["edited"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict."""
    return comment.model_dump()


def row_to_vote(row: Dict[str, Any]) -> Vote:
    """Convert database row to Vote domain model."""
    return Vote(
        voter_id=UserId(_uuid(row["voter_id"])),
        target_type=VotableType(row["target_type"]),
        target_id=_uuid(row["target_id"]),
        value=VoteValue(row["value"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def vote_to_dict(vote: Vote) -> Dict[str, Any]:
    """Convert Vote domain model to database dict."""
    return {
        "voter_id": vote.voter_id,
        "target_type": vote.target_type.value,
        "target_id": vote.target_id,
        "value": int(vote.value),
        "created_at": vote.created_at,
        "updated_at": vote.updated_at,
    }
