"""initial_schema

Create the forum schema:
- Users (identity issued upstream, karma buckets)
- Communities and memberships
- Posts (text, link, image, video) with precomputed ranking columns
- Comments (materialized path, depth 0-5, soft delete)
- Votes (one row per voter and target, +1 or -1)

Revision ID: 3f2b9c41d7e0
Revises:
Create Date: 2026-10-18 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f2b9c41d7e0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE votable_type AS ENUM ('post', 'comment');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE post_type AS ENUM ('text', 'link', 'image', 'video');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),  # Issued upstream
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("post_karma", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comment_karma", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_karma", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.CheckConstraint("char_length(username) >= 3", name="username_min_length"),
    )

    # ========================================================================
    # COMMUNITIES table
    # ========================================================================
    op.create_table(
        "communities",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "moderators",
            postgresql.ARRAY(sa.UUID()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("member_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("post_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_activity", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug", name="uq_communities_slug"),
        sa.UniqueConstraint("name", name="uq_communities_name"),
        sa.CheckConstraint("slug ~ '^[a-z0-9-]+$'", name="slug_format"),
        sa.CheckConstraint("char_length(name) >= 3", name="name_min_length"),
        sa.CheckConstraint("member_count >= 0", name="member_count_non_negative"),
        sa.CheckConstraint("post_count >= 0", name="post_count_non_negative"),
    )
    op.create_index(
        "idx_communities_member_count",
        "communities",
        [sa.text("member_count DESC")],
    )
    op.create_index(
        "idx_communities_last_activity",
        "communities",
        [sa.text("last_activity DESC")],
    )

    # ========================================================================
    # COMMUNITY_MEMBERS table
    # ========================================================================
    op.create_table(
        "community_members",
        sa.Column("community_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column(
            "joined_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(
            ["community_id"], ["communities.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint(
            "community_id", "user_id", name="pk_community_members"
        ),
    )
    op.create_index(
        "idx_community_members_user_id", "community_members", ["user_id"]
    )

    # ========================================================================
    # POSTS table
    # ========================================================================
    op.create_table(
        "posts",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("community_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column(
            "type",
            postgresql.ENUM(
                "text", "link", "image", "video", name="post_type", create_type=False
            ),
            nullable=False,
            server_default="text",
        ),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hot_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column(
            "controversy_score", sa.Float(), nullable=False, server_default="0"
        ),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("locked", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("pinned", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("nsfw", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("spoiler", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("edited", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(
            ["community_id"], ["communities.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("char_length(title) >= 3", name="title_min_length"),
        sa.CheckConstraint("score = upvotes - downvotes", name="score_matches_votes"),
        sa.CheckConstraint("comment_count >= 0", name="comment_count_non_negative"),
    )
    op.create_index("idx_posts_community_id", "posts", ["community_id"])
    op.create_index("idx_posts_author_id", "posts", ["author_id"])
    op.create_index("idx_posts_created_at", "posts", [sa.text("created_at DESC")])
    op.create_index("idx_posts_hot_score", "posts", [sa.text("hot_score DESC")])
    op.create_index("idx_posts_score", "posts", [sa.text("score DESC")])
    op.create_index(
        "idx_posts_controversy_score", "posts", [sa.text("controversy_score DESC")]
    )

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("parent_id", sa.UUID(), nullable=True),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("depth", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("path", sa.Text(), nullable=False),  # root-id/.../self-id
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("collapsed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("edited", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["comments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("depth >= 0 AND depth <= 5", name="depth_range"),
        sa.CheckConstraint("score = upvotes - downvotes", name="score_matches_votes"),
    )
    op.create_index("idx_comments_post_id", "comments", ["post_id"])
    op.create_index("idx_comments_parent_id", "comments", ["parent_id"])
    op.create_index("idx_comments_author_id", "comments", ["author_id"])
    # text_pattern_ops lets LIKE 'prefix%' use the btree index
    op.create_index(
        "idx_comments_path",
        "comments",
        ["path"],
        postgresql_ops={"path": "text_pattern_ops"},
    )

    # ========================================================================
    # VOTES table
    # ========================================================================
    op.create_table(
        "votes",
        sa.Column("voter_id", sa.UUID(), nullable=False),
        sa.Column(
            "target_type",
            postgresql.ENUM("post", "comment", name="votable_type", create_type=False),
            nullable=False,
        ),
        sa.Column("target_id", sa.UUID(), nullable=False),  # Polymorphic, no FK
        sa.Column("value", sa.SmallInteger(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["voter_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint(
            "voter_id", "target_type", "target_id", name="pk_votes"
        ),
        sa.CheckConstraint("value IN (-1, 1)", name="vote_value"),
    )
    op.create_index("idx_votes_target", "votes", ["target_type", "target_id"])


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("votes")
    op.drop_table("comments")
    op.drop_table("posts")
    op.drop_table("community_members")
    op.drop_table("communities")
    op.drop_table("users")

    # Drop ENUM types
    op.execute("DROP TYPE IF EXISTS post_type")
    op.execute("DROP TYPE IF EXISTS votable_type")
