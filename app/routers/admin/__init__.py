"""Admin area routers."""

from fastapi import APIRouter

from . import blog_posts, blogs, feature_flags, users

router = APIRouter()
router.include_router(blogs.router, prefix="/blogs")
router.include_router(blog_posts.router, prefix="/blog/posts")
router.include_router(users.router, prefix="/users")
router.include_router(feature_flags.router, prefix="/feature-flags")

__all__ = ["router", "blogs", "blog_posts", "users", "feature_flags"]
