"""Admin area schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.utils.exceptions import ValidationError
from app.utils.validators import validate_password, validate_slug, validate_username

from .common import BaseResponse, TimestampMixin


def _reject_null(v):
    if v is None:
        raise ValueError("may be left out but not set to null")
    return v


def _check_slug(v):
    if v is None:
        return v
    try:
        validate_slug(v)
    except ValidationError as e:
        raise ValueError(e.message)
    return v


class BlogCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str | None = Field(None, description="Defaults to a slug of the name")
    description: str | None = None
    hidden: bool = False

    @field_validator("slug")
    @classmethod
    def validate_slug_format(cls, v):
        return _check_slug(v)


class BlogUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = None
    description: str | None = None
    hidden: bool | None = None

    @field_validator("slug")
    @classmethod
    def validate_slug_format(cls, v):
        return _check_slug(v)

    @field_validator("name", "slug", "hidden")
    @classmethod
    def validate_not_null(cls, v):
        return _reject_null(v)


class BlogResponse(TimestampMixin):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None
    hidden: bool
    user_id: int


class BlogListResponse(BaseResponse):
    blogs: list[BlogResponse]
    total: int


class BlogDetailResponse(BaseResponse):
    blog: BlogResponse


class BlogPostCreate(BaseModel):
    blog_id: int
    title: str = Field(..., min_length=1, max_length=200)
    slug: str | None = Field(None, description="Defaults to a slug of the title")
    body: str = Field(..., min_length=1)
    hidden: bool = False
    posted_at: datetime | None = None

    @field_validator("slug")
    @classmethod
    def validate_slug_format(cls, v):
        return _check_slug(v)


class BlogPostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = None
    body: str | None = Field(None, min_length=1)
    hidden: bool | None = None
    posted_at: datetime | None = None

    @field_validator("slug")
    @classmethod
    def validate_slug_format(cls, v):
        return _check_slug(v)

    @field_validator("title", "slug", "body", "hidden", "posted_at")
    @classmethod
    def validate_not_null(cls, v):
        return _reject_null(v)


class BlogPostResponse(TimestampMixin):
    model_config = ConfigDict(from_attributes=True)

    id: int
    blog_id: int
    user_id: int
    title: str
    slug: str
    body: str
    hidden: bool
    posted_at: datetime


class BlogPostListResponse(BaseResponse):
    posts: list[BlogPostResponse]
    total: int


class BlogPostDetailResponse(BaseResponse):
    post: BlogPostResponse


class AdminUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    display_name: str | None
    is_active: bool
    is_superuser: bool
    confirmed_at: datetime | None
    created_at: datetime


class AdminUserCreate(BaseModel):
    """Accounts created from the admin area are confirmed straight away."""

    username: str
    email: EmailStr
    password: str
    display_name: str | None = Field(None, max_length=100)
    is_superuser: bool = False

    @field_validator("username")
    @classmethod
    def validate_username_format(cls, v):
        try:
            validate_username(v)
        except ValidationError as e:
            raise ValueError(e.message)
        return v

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v):
        try:
            validate_password(v)
        except ValidationError as e:
            raise ValueError("; ".join(e.details.get("errors", [e.message])))
        return v


class AdminUserUpdate(BaseModel):
    display_name: str | None = Field(None, max_length=100)
    is_active: bool | None = None

    @field_validator("is_active")
    @classmethod
    def validate_not_null(cls, v):
        return _reject_null(v)


class AdminUserListResponse(BaseResponse):
    users: list[AdminUserResponse]
    total: int


class AdminUserDetailResponse(BaseResponse):
    user: AdminUserResponse


class FeatureFlagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str | None
    enabled: bool


class FeatureFlagUpdate(BaseModel):
    enabled: bool


class FeatureFlagListResponse(BaseResponse):
    feature_flags: list[FeatureFlagResponse]


class FeatureFlagDetailResponse(BaseResponse):
    feature_flag: FeatureFlagResponse
