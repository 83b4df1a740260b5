"""Account routes: registration, login, profiles and account editing.

Each screen is switched on by a feature flag; when the flag is off the
request is redirected to the home page with an alert.
"""

import logging
from urllib.parse import urlencode, urlsplit

from fastapi import APIRouter, Depends, Query, Request

from app.constants.features import (
    ACCOUNT_CONFIRMED_NOTICE,
    ACCOUNT_UPDATED_NOTICE,
    REGISTRATION_NOTICE,
    FeatureFlagName,
    feature_off_alert,
)
from app.dependencies.auth import get_current_active_user
from app.dependencies.services import (
    get_captcha_config,
    get_captcha_verifier,
    get_feature_flags,
    get_jwt_service,
    get_user_service,
)
from app.models.user import User
from app.schemas.account import (
    AccountDetails,
    AccountResponse,
    AccountUpdateRequest,
    CaptchaWidget,
    LoginForm,
    LoginRequest,
    ProfileResponse,
    RegistrationForm,
    RegistrationRequest,
    TokenResponse,
    UserProfile,
)
from app.services.account_gate import (
    CaptchaConfig,
    CaptchaFallback,
    CaptchaVariant,
    CaptchaVerifier,
    CreateAccount,
    Denied,
    FeatureFlagSet,
    RegistrationFlow,
    check_access,
)
from app.services.jwt_service import JWTService
from app.services.user_service import UserService
from app.utils.exceptions import InvalidTokenError, TokenExpiredError, UserNotFoundError
from app.utils.response_builders import ResponseBuilder

logger = logging.getLogger(__name__)

router = APIRouter()

REGISTRATION_PATH = "/account/register"
LOGIN_PATH = "/login"


def feature_gate(flag: FeatureFlagName, flags: FeatureFlagSet):
    """Redirect response for a switched-off screen, or None to carry on."""
    decision = check_access(flag, flags)
    if isinstance(decision, Denied):
        logger.info(
            f"{decision.feature_name} disabled, redirecting",
            extra={"feature_flag": decision.feature},
        )
        return ResponseBuilder.feature_disabled(feature_off_alert(decision.feature))
    return None


def captcha_widget(config: CaptchaConfig, variant: CaptchaVariant | None) -> CaptchaWidget | None:
    if variant is None:
        return None
    return CaptchaWidget(variant=variant, site_key=config.for_variant(variant).site_key)


def read_captcha_fallback(marker: str | None, jwt_service: JWTService) -> CaptchaFallback | None:
    """The fallback state signed into a re-rendered form; None when absent or not genuine."""
    if not marker:
        return None

    try:
        variant = jwt_service.get_captcha_fallback_variant(marker)
        return CaptchaFallback(CaptchaVariant(variant) if variant is not None else None)
    except (InvalidTokenError, TokenExpiredError, ValueError) as e:
        logger.info(f"Ignoring reCAPTCHA fallback marker: {e}")
        return None


def profile_path(user: User) -> str:
    return f"/profile/{user.username}"


def is_local_path(path: str) -> bool:
    """A path on this site; ``//host`` and ``/\\host`` are read as other hosts by browsers."""
    return path.startswith("/") and path[1:2] not in ("/", "\\")


def after_login_path(request: Request, user: User) -> str:
    """Where to send the user after logging in: back where they came from, or their profile."""
    referer = request.headers.get("referer")
    if referer:
        parts = urlsplit(referer)
        # Only same-site paths, and never back to the login screen
        if (
            (not parts.netloc or parts.netloc == request.url.netloc)
            and is_local_path(parts.path)
            and parts.path != LOGIN_PATH
        ):
            return f"{parts.path}?{parts.query}" if parts.query else parts.path
    return profile_path(user)


@router.get(REGISTRATION_PATH, response_model=RegistrationForm)
async def registration_form(
    captcha_fallback: str | None = Query(None, description="Fallback marker from a rejected submission"),
    flags: FeatureFlagSet = Depends(get_feature_flags),
    captcha_config: CaptchaConfig = Depends(get_captcha_config),
    captcha_verifier: CaptchaVerifier = Depends(get_captcha_verifier),
    jwt_service: JWTService = Depends(get_jwt_service),
):
    """Registration form, with the reCAPTCHA variant to render."""

    denied = feature_gate(FeatureFlagName.USER_REGISTRATION, flags)
    if denied:
        return denied

    fallback = read_captcha_fallback(captcha_fallback, jwt_service)
    flow = RegistrationFlow(captcha_config, captcha_verifier)
    variant = flow.rendered_variant(fallback)

    return RegistrationForm(
        captcha=captcha_widget(captcha_config, variant),
        captcha_fallback=captcha_fallback if fallback else None,
    )


@router.post(REGISTRATION_PATH)
async def register(
    registration: RegistrationRequest,
    request: Request,
    flags: FeatureFlagSet = Depends(get_feature_flags),
    captcha_config: CaptchaConfig = Depends(get_captcha_config),
    captcha_verifier: CaptchaVerifier = Depends(get_captcha_verifier),
    user_service: UserService = Depends(get_user_service),
    jwt_service: JWTService = Depends(get_jwt_service),
):
    """Create an account once the submission passes its CAPTCHA check."""

    denied = feature_gate(FeatureFlagName.USER_REGISTRATION, flags)
    if denied:
        return denied

    flow = RegistrationFlow(captcha_config, captcha_verifier)
    step = await flow.submit(
        read_captcha_fallback(registration.captcha_fallback, jwt_service),
        registration.captcha_token,
        remote_ip=request.client.host if request.client else None,
    )

    if not isinstance(step, CreateAccount):
        marker = jwt_service.create_captcha_fallback_token(step.variant.value if step.variant else None)
        widget = captcha_widget(captcha_config, step.variant)
        return ResponseBuilder.redirect(
            f"{REGISTRATION_PATH}?{urlencode({'captcha_fallback': marker})}",
            alert=step.error,
            captcha=widget.model_dump(mode="json") if widget else None,
            captcha_fallback=marker,
        )

    await user_service.register_user(
        username=registration.username,
        email=registration.email,
        password=registration.password,
        display_name=registration.display_name,
    )

    return ResponseBuilder.redirect("/", notice=REGISTRATION_NOTICE)


@router.get("/account/confirm")
async def confirm_account(
    token: str = Query(..., min_length=1, description="Confirmation token from the email"),
    user_service: UserService = Depends(get_user_service),
):
    """Confirm an email address from the link sent after registration."""

    user = await user_service.confirm_user(token)
    logger.info(f"User {user.username} confirmed", extra={"user_id": user.id})

    return ResponseBuilder.redirect(LOGIN_PATH, notice=ACCOUNT_CONFIRMED_NOTICE)


@router.get(LOGIN_PATH, response_model=LoginForm)
async def login_form(flags: FeatureFlagSet = Depends(get_feature_flags)):
    """Login form."""

    denied = feature_gate(FeatureFlagName.USER_LOGIN, flags)
    if denied:
        return denied

    return LoginForm()


@router.post(LOGIN_PATH)
async def login(
    credentials: LoginRequest,
    request: Request,
    flags: FeatureFlagSet = Depends(get_feature_flags),
    user_service: UserService = Depends(get_user_service),
):
    """Log in with an email address or a username."""

    denied = feature_gate(FeatureFlagName.USER_LOGIN, flags)
    if denied:
        return denied

    user = await user_service.authenticate_user(credentials.login, credentials.password)

    token = TokenResponse(
        access_token=user_service.create_access_token(user),
        expires_in=user_service.jwt_service.access_token_expires_in,
    )

    logger.info(f"User {user.username} logged in", extra={"user_id": user.id, "event": "user_login"})

    return ResponseBuilder.redirect(
        after_login_path(request, user),
        notice="Signed in successfully",
        token=token.model_dump(),
    )


@router.get("/profile/{username}", response_model=ProfileResponse)
async def profile(
    username: str,
    flags: FeatureFlagSet = Depends(get_feature_flags),
    user_service: UserService = Depends(get_user_service),
):
    """Public profile page."""

    denied = feature_gate(FeatureFlagName.USER_PROFILES, flags)
    if denied:
        return denied

    user = await user_service.get_user_by_username(username)
    if not user or not user.is_active:
        raise UserNotFoundError()

    return ProfileResponse(profile=UserProfile.model_validate(user))


@router.get("/account/edit", response_model=AccountResponse)
async def edit_account(current_user: User = Depends(get_current_active_user)):
    """The signed-in user's editable account details."""

    return AccountResponse(account=AccountDetails.model_validate(current_user))


@router.put("/account/update")
async def update_account(
    account_update: AccountUpdateRequest,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
):
    """Update the signed-in user's account."""

    await user_service.update_account(
        current_user,
        current_password=account_update.current_password,
        display_name=account_update.display_name,
        profile_text=account_update.profile_text,
        email=account_update.email,
        new_password=account_update.new_password,
    )

    return ResponseBuilder.redirect("/account/edit", notice=ACCOUNT_UPDATED_NOTICE)
