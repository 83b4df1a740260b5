"""Feature gates for the account screens and CAPTCHA selection for registration.

Every account screen is gated by one feature flag, read once per request from
a ``FeatureFlagSet`` snapshot. A flag that is missing from the snapshot counts
as disabled.

Registration can be protected by one of three reCAPTCHA variants, tried in
order of user friction: v3 (score based), v2 invisible, then the checkbox.
The first variant with a site key is shown. If an invisible variant rejects a
submission, the form comes back with the next configured variant instead of
failing outright.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional, Protocol, Union

from app.constants.features import CAPTCHA_FAILED_ALERT, CAPTCHA_FALLBACK_ALERT, feature_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureFlagSet:
    """Read-only snapshot of flag states for one request."""

    flags: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))

    @classmethod
    def from_flags(cls, flags: Iterable[Any]) -> "FeatureFlagSet":
        """Build a snapshot from objects with ``name`` and ``enabled``."""
        return cls({flag.name: bool(flag.enabled) for flag in flags})

    def is_enabled(self, name: str) -> bool:
        return self.flags.get(name, False) is True


@dataclass(frozen=True)
class Allowed:
    """The gated screen may be shown."""


@dataclass(frozen=True)
class Denied:
    """The gated screen is switched off."""

    feature: str

    @property
    def feature_name(self) -> str:
        return feature_name(self.feature)


AccessDecision = Union[Allowed, Denied]


def check_access(flag: str, flags: FeatureFlagSet) -> AccessDecision:
    """Allow a gated screen only when its flag is present and enabled."""
    flag = flag.value if isinstance(flag, Enum) else flag
    if flags.is_enabled(flag):
        return Allowed()
    return Denied(flag)


class CaptchaVariant(str, Enum):
    """reCAPTCHA challenge variants."""

    V3 = "v3"
    V2_INVISIBLE = "v2-invisible"
    CHECKBOX = "checkbox"

    @property
    def is_invisible(self) -> bool:
        return self in (CaptchaVariant.V3, CaptchaVariant.V2_INVISIBLE)


CAPTCHA_PRIORITY = (CaptchaVariant.V3, CaptchaVariant.V2_INVISIBLE, CaptchaVariant.CHECKBOX)


@dataclass(frozen=True)
class CaptchaKeys:
    """Keys for one variant; the site key renders, the secret key verifies."""

    site_key: Optional[str] = None
    secret_key: Optional[str] = None

    @property
    def can_render(self) -> bool:
        return bool(self.site_key)

    @property
    def can_verify(self) -> bool:
        return bool(self.secret_key)


@dataclass(frozen=True)
class CaptchaConfig:
    """Configured keys per variant."""

    keys: Mapping[CaptchaVariant, CaptchaKeys] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "keys", MappingProxyType(dict(self.keys)))

    @classmethod
    def from_settings(cls, settings: Any) -> "CaptchaConfig":
        return cls(
            {
                CaptchaVariant.V3: CaptchaKeys(
                    settings.RECAPTCHA_V3_SITE_KEY, settings.RECAPTCHA_V3_SECRET_KEY
                ),
                CaptchaVariant.V2_INVISIBLE: CaptchaKeys(
                    settings.RECAPTCHA_V2_SITE_KEY, settings.RECAPTCHA_V2_SECRET_KEY
                ),
                CaptchaVariant.CHECKBOX: CaptchaKeys(
                    settings.RECAPTCHA_CHECKBOX_SITE_KEY, settings.RECAPTCHA_CHECKBOX_SECRET_KEY
                ),
            }
        )

    def for_variant(self, variant: CaptchaVariant) -> CaptchaKeys:
        return self.keys.get(variant, CaptchaKeys())


def select_captcha_variant(config: CaptchaConfig) -> Optional[CaptchaVariant]:
    """First variant in priority order that has a site key, if any."""
    for variant in CAPTCHA_PRIORITY:
        if config.for_variant(variant).can_render:
            return variant
    return None


def next_captcha_variant(config: CaptchaConfig, after: CaptchaVariant) -> Optional[CaptchaVariant]:
    """The next variant after ``after`` that has a site key, if any."""
    later = CAPTCHA_PRIORITY[CAPTCHA_PRIORITY.index(after) + 1:]
    for variant in later:
        if config.for_variant(variant).can_render:
            return variant
    return None


class CaptchaResult(str, Enum):
    VERIFIED = "verified"
    REJECTED = "rejected"


class CaptchaVerifier(Protocol):
    """Checks a user's CAPTCHA response token with the provider."""

    async def verify(
        self,
        variant: CaptchaVariant,
        secret_key: str,
        token: str,
        remote_ip: Optional[str] = None,
    ) -> bool:
        ...


async def verify_captcha(
    variant: CaptchaVariant,
    secret_key: Optional[str],
    token: Optional[str],
    verifier: CaptchaVerifier,
    remote_ip: Optional[str] = None,
) -> CaptchaResult:
    """Verify a response token; without a secret key the check cannot pass."""
    if not secret_key:
        logger.warning(
            f"No secret key for {variant.value} reCAPTCHA, rejecting submission",
            extra={"captcha_variant": variant.value},
        )
        return CaptchaResult.REJECTED

    if await verifier.verify(variant, secret_key, token or "", remote_ip):
        return CaptchaResult.VERIFIED

    return CaptchaResult.REJECTED


@dataclass(frozen=True)
class FormShown:
    """Show the registration form with this CAPTCHA variant (None: no CAPTCHA)."""

    variant: Optional[CaptchaVariant]
    error: Optional[str] = None


@dataclass(frozen=True)
class CreateAccount:
    """The submission passed its CAPTCHA check, or none was needed."""

    verified_variant: Optional[CaptchaVariant]


RegistrationStep = Union[FormShown, CreateAccount]


@dataclass(frozen=True)
class CaptchaFallback:
    """The variant a form was re-rendered with after a rejection (None: no widget).

    Only built from a marker the server signed.
    """

    variant: Optional[CaptchaVariant]


class RegistrationFlow:
    """CAPTCHA handling for one registration attempt.

    FormShown -> submit -> CreateAccount
                        -> FormShown(next variant) after a failed invisible check
                        -> FormShown(error) after a failed checkbox check
    """

    def __init__(self, config: CaptchaConfig, verifier: CaptchaVerifier):
        self.config = config
        self.verifier = verifier

    def start(self) -> FormShown:
        return FormShown(select_captcha_variant(self.config))

    def rendered_variant(self, fallback: Optional[CaptchaFallback]) -> Optional[CaptchaVariant]:
        """The variant the registration form shows."""
        if fallback is not None and fallback.variant is None:
            return None
        return self.shown_variant(fallback)

    def shown_variant(self, fallback: Optional[CaptchaFallback]) -> Optional[CaptchaVariant]:
        """The variant a submission is checked against.

        A fallback moves the form on to a later variant. Without one, or when
        it names no widget or a variant that is not configured, the submission
        is checked against the first variant.
        """
        initial = select_captcha_variant(self.config)
        if initial is None:
            return None

        if (
            fallback is not None
            and fallback.variant is not None
            and self.config.for_variant(fallback.variant).can_render
        ):
            return fallback.variant

        return initial

    async def submit(
        self,
        fallback: Optional[CaptchaFallback],
        token: Optional[str],
        remote_ip: Optional[str] = None,
    ) -> RegistrationStep:
        variant = self.shown_variant(fallback)
        if variant is None:
            return CreateAccount(None)

        keys = self.config.for_variant(variant)
        result = await verify_captcha(variant, keys.secret_key, token, self.verifier, remote_ip)
        if result is CaptchaResult.VERIFIED:
            return CreateAccount(variant)

        if variant.is_invisible:
            next_variant = next_captcha_variant(self.config, variant)
            logger.info(
                f"Invisible reCAPTCHA ({variant.value}) rejected, falling back",
                extra={"captcha_variant": variant.value, "fallback": next_variant.value if next_variant else None},
            )
            if next_variant is not None:
                return FormShown(next_variant, error=CAPTCHA_FALLBACK_ALERT)
            return FormShown(None, error=CAPTCHA_FAILED_ALERT)

        return FormShown(variant, error=CAPTCHA_FAILED_ALERT)
