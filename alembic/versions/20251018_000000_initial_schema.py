"""
Initial schema: users, posts and the post/user child tables.

Revision ID: 20251018_000000_initial_schema
Revises:
Create Date: 2025-10-18 00:00:00
"""

import sqlalchemy as sa

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20251018_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    # users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column(
            "role", sa.String(length=50), nullable=False, server_default=sa.text("'USER'")
        ),
        sa.Column("password_reset_token", sa.Text()),
        sa.Column("password_reset_expires", sa.BigInteger()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )
    op.create_index("idx_users_password_reset_token", "users", ["password_reset_token"])

    # posts
    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("creator_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("post_status", sa.String(length=50), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(
            ["creator_id"], ["users.id"], ondelete="CASCADE", name="posts_creator_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="posts_pkey"),
    )
    op.create_index("idx_posts_creator", "posts", ["creator_id"])
    op.create_index("idx_posts_status", "posts", ["post_status"])

    # post_comments
    op.create_table(
        "post_comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["post_id"], ["posts.id"], ondelete="CASCADE", name="post_comments_post_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="post_comments_pkey"),
    )
    op.create_index("idx_post_comments_post", "post_comments", ["post_id"])

    # post_likes / post_unlikes
    for table in ("post_likes", "post_unlikes"):
        op.create_table(
            table,
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("post_id", sa.Uuid(), nullable=False),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            _timestamp("created_at"),
            sa.ForeignKeyConstraint(
                ["post_id"], ["posts.id"], ondelete="CASCADE", name=f"{table}_post_id_fkey"
            ),
            sa.PrimaryKeyConstraint("id", name=f"{table}_pkey"),
            sa.UniqueConstraint("post_id", "user_id", name=f"{table}_post_id_user_id_key"),
        )

    # user_favorites
    op.create_table(
        "user_favorites",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="user_favorites_user_id_fkey"
        ),
        sa.PrimaryKeyConstraint("user_id", "post_id", name="user_favorites_pkey"),
    )


def downgrade() -> None:
    op.drop_table("user_favorites")
    op.drop_table("post_unlikes")
    op.drop_table("post_likes")
    op.drop_index("idx_post_comments_post", table_name="post_comments")
    op.drop_table("post_comments")
    op.drop_index("idx_posts_status", table_name="posts")
    op.drop_index("idx_posts_creator", table_name="posts")
    op.drop_table("posts")
    op.drop_index("idx_users_password_reset_token", table_name="users")
    op.drop_table("users")
