"""Account schemas: registration, login, profile and account editing."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.services.account_gate import CaptchaVariant
from app.utils.exceptions import ValidationError
from app.utils.validators import validate_password, validate_username

from .common import BaseResponse


class RegistrationRequest(BaseModel):
    """Registration form submission."""

    username: str = Field(..., description="Username")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")
    display_name: str | None = Field(None, max_length=100, description="Name shown on the site")
    captcha_fallback: str | None = Field(
        None, description="Fallback marker from the form, if it was re-rendered"
    )
    captcha_token: str | None = Field(None, description="reCAPTCHA response token")

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


class CaptchaWidget(BaseModel):
    """What the form needs to render a reCAPTCHA challenge."""

    variant: CaptchaVariant
    site_key: str


class RegistrationForm(BaseResponse):
    """Registration form descriptor."""

    form: str = "registration"
    captcha: CaptchaWidget | None = None
    captcha_fallback: str | None = None
    alert: str | None = None


class LoginRequest(BaseModel):
    """Login form submission; ``login`` is an email address or a username."""

    login: str = Field(..., min_length=1, description="Email address or username")
    password: str = Field(..., min_length=1, description="Password")


class LoginForm(BaseResponse):
    form: str = "login"


class UserProfile(BaseModel):
    """Public profile of a user."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    name: str
    profile_text: str | None
    created_at: datetime


class ProfileResponse(BaseResponse):
    profile: UserProfile


class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration in seconds")


class AccountDetails(BaseModel):
    """The signed-in user's own account details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    display_name: str | None
    profile_text: str | None
    is_superuser: bool
    confirmed_at: datetime | None
    last_login_at: datetime | None
    created_at: datetime


class AccountResponse(BaseResponse):
    form: str = "edit_account"
    account: AccountDetails


class AccountUpdateRequest(BaseModel):
    """Account edit form; the current password is always required."""

    current_password: str = Field(..., min_length=1, description="Current password")
    display_name: str | None = Field(None, max_length=100)
    profile_text: str | None = Field(None, max_length=5000)
    email: EmailStr | None = None
    new_password: str | None = None

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        if v is None:
            return v
        try:
            validate_password(v)
        except ValidationError as e:
            raise ValueError("; ".join(e.details.get("errors", [e.message])))
        return v
