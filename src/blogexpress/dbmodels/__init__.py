"""
Database models for BlogExpress (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKeyConstraint,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text as sa_text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("email", name="users_email_key"),
        Index("idx_users_password_reset_token", "password_reset_token"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(50), nullable=False, default="USER", server_default=sa_text("'USER'")
    )
    password_reset_token: Mapped[str | None] = mapped_column(Text)
    # Milliseconds value written by forgotPassword; compared against "now" in ms
    password_reset_expires: Mapped[int | None] = mapped_column(BigInteger)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=sa_text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True),
        default=utcnow,
        onupdate=utcnow,
        server_default=sa_text("CURRENT_TIMESTAMP"),
    )

    posts: Mapped[list["Posts"]] = relationship(
        "Posts",
        uselist=True,
        back_populates="creator",
        order_by="Posts.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    favorites: Mapped[list["UserFavorites"]] = relationship(
        "UserFavorites",
        uselist=True,
        back_populates="user",
        order_by="UserFavorites.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Posts(Base):
    __tablename__ = "posts"
    __table_args__ = (
        ForeignKeyConstraint(
            ["creator_id"], ["users.id"], ondelete="CASCADE", name="posts_creator_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="posts_pkey"),
        Index("idx_posts_creator", "creator_id"),
        Index("idx_posts_status", "post_status"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    creator_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    post_status: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=sa_text("CURRENT_TIMESTAMP")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True),
        default=utcnow,
        onupdate=utcnow,
        server_default=sa_text("CURRENT_TIMESTAMP"),
    )

    creator: Mapped["Users"] = relationship("Users", back_populates="posts")
    comments: Mapped[list["PostComments"]] = relationship(
        "PostComments",
        uselist=True,
        back_populates="post",
        order_by="PostComments.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    likes: Mapped[list["PostLikes"]] = relationship(
        "PostLikes",
        uselist=True,
        back_populates="post",
        order_by="PostLikes.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    unlikes: Mapped[list["PostUnlikes"]] = relationship(
        "PostUnlikes",
        uselist=True,
        back_populates="post",
        order_by="PostUnlikes.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PostComments(Base):
    __tablename__ = "post_comments"
    __table_args__ = (
        ForeignKeyConstraint(
            ["post_id"], ["posts.id"], ondelete="CASCADE", name="post_comments_post_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="post_comments_pkey"),
        Index("idx_post_comments_post", "post_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    post_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    # Author reference only; comments outlive a deleted author
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=sa_text("CURRENT_TIMESTAMP")
    )

    post: Mapped["Posts"] = relationship("Posts", back_populates="comments")


class PostLikes(Base):
    __tablename__ = "post_likes"
    __table_args__ = (
        ForeignKeyConstraint(
            ["post_id"], ["posts.id"], ondelete="CASCADE", name="post_likes_post_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="post_likes_pkey"),
        UniqueConstraint("post_id", "user_id", name="post_likes_post_id_user_id_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    post_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=sa_text("CURRENT_TIMESTAMP")
    )

    post: Mapped["Posts"] = relationship("Posts", back_populates="likes")


class PostUnlikes(Base):
    __tablename__ = "post_unlikes"
    __table_args__ = (
        ForeignKeyConstraint(
            ["post_id"], ["posts.id"], ondelete="CASCADE", name="post_unlikes_post_id_fkey"
        ),
        PrimaryKeyConstraint("id", name="post_unlikes_pkey"),
        UniqueConstraint("post_id", "user_id", name="post_unlikes_post_id_user_id_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    post_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=sa_text("CURRENT_TIMESTAMP")
    )

    post: Mapped["Posts"] = relationship("Posts", back_populates="unlikes")


class UserFavorites(Base):
    __tablename__ = "user_favorites"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="user_favorites_user_id_fkey"
        ),
        PrimaryKeyConstraint("user_id", "post_id", name="user_favorites_pkey"),
    )

    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    # Plain identifier, no foreign key: deleting a post leaves favorites untouched
    post_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=sa_text("CURRENT_TIMESTAMP")
    )

    user: Mapped["Users"] = relationship("Users", back_populates="favorites")


target_metadata = Base.metadata

__all__ = [
    "Base",
    "Users",
    "Posts",
    "PostComments",
    "PostLikes",
    "PostUnlikes",
    "UserFavorites",
    "target_metadata",
]
