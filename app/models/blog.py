"""Blog and blog post models."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Blog(Base, TimestampMixin):
    """A blog that posts are published in."""

    __tablename__ = "blogs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    owner: Mapped["User"] = relationship("User")
    # No delete cascade: a blog that still has posts cannot be deleted
    posts: Mapped[list["BlogPost"]] = relationship(
        "BlogPost",
        back_populates="blog",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, slug='{self.slug}')>"


class BlogPost(Base, TimestampMixin):
    """A post in a blog."""

    __tablename__ = "blog_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    blog_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("blogs.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    posted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    blog: Mapped["Blog"] = relationship("Blog", back_populates="posts")
    author: Mapped["User"] = relationship("User")

    __table_args__ = (
        UniqueConstraint("blog_id", "slug", name="unique_blog_post_slug"),
    )

    def __repr__(self) -> str:
        return f"<BlogPost(id={self.id}, blog_id={self.blog_id}, slug='{self.slug}')>"
