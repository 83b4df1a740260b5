"""reCAPTCHA verification against Google's siteverify endpoint."""

import logging
from typing import Any, Dict, Optional

import httpx

from app.config.settings import settings

from .account_gate import CaptchaVariant

logger = logging.getLogger(__name__)


class RecaptchaVerifier:
    """Verifies reCAPTCHA response tokens over HTTP.

    Transport failures count as a failed check; retries are left to the
    user resubmitting the form.
    """

    def __init__(
        self,
        verify_url: Optional[str] = None,
        timeout: Optional[float] = None,
        minimum_score: Optional[float] = None,
        expected_action: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.verify_url = verify_url or settings.RECAPTCHA_VERIFY_URL
        self.timeout = timeout if timeout is not None else settings.RECAPTCHA_TIMEOUT_SECONDS
        self.minimum_score = (
            minimum_score if minimum_score is not None else settings.RECAPTCHA_V3_MINIMUM_SCORE
        )
        self.expected_action = expected_action or settings.RECAPTCHA_V3_ACTION
        self.transport = transport

    async def verify(
        self,
        variant: CaptchaVariant,
        secret_key: str,
        token: str,
        remote_ip: Optional[str] = None,
    ) -> bool:
        """Return True when the provider accepts the token."""
        if not token:
            logger.info("Empty reCAPTCHA response token", extra={"captcha_variant": variant.value})
            return False

        data = {"secret": secret_key, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.verify_url, data=data)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                f"reCAPTCHA verification request failed: {e}",
                extra={"captcha_variant": variant.value, "error_type": type(e).__name__},
            )
            return False

        return self._is_success(variant, payload)

    def _is_success(self, variant: CaptchaVariant, payload: Dict[str, Any]) -> bool:
        if not payload.get("success"):
            logger.info(
                "reCAPTCHA rejected response token",
                extra={
                    "captcha_variant": variant.value,
                    "error_codes": payload.get("error-codes", []),
                },
            )
            return False

        if variant is not CaptchaVariant.V3:
            return True

        score = payload.get("score", 0.0)
        action = payload.get("action")
        if action and action != self.expected_action:
            logger.info(
                f"reCAPTCHA v3 action mismatch: {action}",
                extra={"captcha_variant": variant.value, "expected_action": self.expected_action},
            )
            return False

        if score < self.minimum_score:
            logger.info(
                f"reCAPTCHA v3 score {score} below {self.minimum_score}",
                extra={"captcha_variant": variant.value, "score": score},
            )
            return False

        return True
