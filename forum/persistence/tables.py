"""SQLAlchemy table definitions for the forum.

These Core tables are used by the PostgreSQL repositories and match the
schema created by the Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    SmallInteger,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True),  # Issued by the upstream identity layer
    Column("username", String(50), nullable=False, unique=True),
    Column("display_name", String(100), nullable=True),
    Column("bio", Text, nullable=True),
    Column("post_karma", Integer, nullable=False, server_default="0"),
    Column("comment_karma", Integer, nullable=False, server_default="0"),
    Column("total_karma", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("char_length(username) >= 3", name="username_min_length"),
)

# ============================================================================
# COMMUNITIES TABLE
# ============================================================================
communities_table = Table(
    "communities",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("slug", String(100), nullable=False, unique=True),
    Column("name", String(100), nullable=False, unique=True),
    Column("description", Text, nullable=True),
    Column(
        "moderators",
        postgresql.ARRAY(UUID),
        nullable=False,
        server_default="{}",
    ),
    Column("member_count", Integer, nullable=False, server_default="0"),
    Column("post_count", Integer, nullable=False, server_default="0"),
    Column("last_activity", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("slug ~ '^[a-z0-9-]+$'", name="slug_format"),
    CheckConstraint("char_length(name) >= 3", name="name_min_length"),
    CheckConstraint("member_count >= 0", name="member_count_non_negative"),
    CheckConstraint("post_count >= 0", name="post_count_non_negative"),
)

Index("idx_communities_member_count", communities_table.c.member_count.desc())
Index("idx_communities_last_activity", communities_table.c.last_activity.desc())

# ============================================================================
# COMMUNITY_MEMBERS TABLE
# ============================================================================
community_members_table = Table(
    "community_members",
    metadata,
    Column(
        "community_id",
        UUID,
        ForeignKey("communities.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "joined_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    PrimaryKeyConstraint("community_id", "user_id", name="pk_community_members"),
)

Index("idx_community_members_user_id", community_members_table.c.user_id)

# ============================================================================
# POSTS TABLE
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    Column("id", UUID, primary_key=True),
    Column(
        "author_id", UUID, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    ),
    Column(
        "community_id",
        UUID,
        ForeignKey("communities.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("title", String(300), nullable=False),
    Column("content", Text, nullable=True),
    Column(
        "type",
        postgresql.ENUM(
            "text", "link", "image", "video", name="post_type", create_type=False
        ),
        nullable=False,
        server_default="text",
    ),
    Column("url", Text, nullable=True),
    Column("score", Integer, nullable=False, server_default="0"),
    Column("upvotes", Integer, nullable=False, server_default="0"),
    Column("downvotes", Integer, nullable=False, server_default="0"),
    Column("comment_count", Integer, nullable=False, server_default="0"),
    Column("hot_score", Float, nullable=False, server_default="0"),
    Column("controversy_score", Float, nullable=False, server_default="0"),
    Column("deleted", Boolean, nullable=False, server_default="false"),
    Column("locked", Boolean, nullable=False, server_default="false"),
    Column("pinned", Boolean, nullable=False, server_default="false"),
    Column("nsfw", Boolean, nullable=False, server_default="false"),
    Column("spoiler", Boolean, nullable=False, server_default="false"),
    Column("edited", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("char_length(title) >= 3", name="title_min_length"),
    CheckConstraint("score = upvotes - downvotes", name="score_matches_votes"),
    CheckConstraint("comment_count >= 0", name="comment_count_non_negative"),
)

Index("idx_posts_community_id", posts_table.c.community_id)
Index("idx_posts_author_id", posts_table.c.author_id)
Index("idx_posts_created_at", posts_table.c.created_at.desc())
Index("idx_posts_hot_score", posts_table.c.hot_score.desc())
Index("idx_posts_score", posts_table.c.score.desc())
Index("idx_posts_controversy_score", posts_table.c.controversy_score.desc())

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("post_id", UUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column(
        "parent_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    ),
    Column(
        "author_id", UUID, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    ),
    Column("content", Text, nullable=False),
    Column("depth", SmallInteger, nullable=False, server_default="0"),
    Column("path", Text, nullable=False),  # root-id/.../self-id
    Column("score", Integer, nullable=False, server_default="0"),
    Column("upvotes", Integer, nullable=False, server_default="0"),
    Column("downvotes", Integer, nullable=False, server_default="0"),
    Column("deleted", Boolean, nullable=False, server_default="false"),
    Column("collapsed", Boolean, nullable=False, server_default="false"),
    Column("edited", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("depth >= 0 AND depth <= 5", name="depth_range"),
    CheckConstraint("score = upvotes - downvotes", name="score_matches_votes"),
)

Index("idx_comments_post_id", comments_table.c.post_id)
Index("idx_comments_parent_id", comments_table.c.parent_id)
Index("idx_comments_author_id", comments_table.c.author_id)
# text_pattern_ops lets LIKE 'prefix%' use the btree index
Index(
    "idx_comments_path",
    comments_table.c.path,
    postgresql_ops={"path": "text_pattern_ops"},
)

# ============================================================================
# VOTES TABLE
# ============================================================================
votes_table = Table(
    "votes",
    metadata,
    Column("voter_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "target_type",
        postgresql.ENUM("post", "comment", name="votable_type", create_type=False),
        nullable=False,
    ),
    Column("target_id", UUID, nullable=False),  # Polymorphic, no foreign key
    Column("value", SmallInteger, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    PrimaryKeyConstraint("voter_id", "target_type", "target_id", name="pk_votes"),
    CheckConstraint("value IN (-1, 1)", name="vote_value"),
)

Index("idx_votes_target", votes_table.c.target_type, votes_table.c.target_id)
