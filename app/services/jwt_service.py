"""JWT service for token generation and validation."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from jwt.exceptions import ExpiredSignatureError
from jwt.exceptions import InvalidTokenError as JWTInvalidTokenError

from app.config.settings import settings
from app.utils.exceptions import InvalidTokenError, TokenExpiredError


class JWTService:
    """Service for JWT token operations."""

    def __init__(self):
        self.algorithm = settings.JWT_ALGORITHM
        self.secret_key = settings.JWT_SECRET_KEY
        self.issuer = settings.JWT_ISSUER
        self.audience = settings.JWT_AUDIENCE
        self.access_token_expire_minutes = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        self.confirmation_token_expire_days = settings.CONFIRMATION_TOKEN_EXPIRE_DAYS
        self.captcha_fallback_expire_minutes = settings.CAPTCHA_FALLBACK_EXPIRE_MINUTES

    def _encode(self, payload: Dict[str, Any], expires_in: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **payload,
            "iat": now,
            "exp": now + expires_in,
            "iss": self.issuer,
            "aud": self.audience,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def create_access_token(self, user_id: int, username: str) -> str:
        """Create a JWT access token."""
        return self._encode(
            {"sub": str(user_id), "username": username, "type": "access"},
            timedelta(minutes=self.access_token_expire_minutes),
        )

    def create_confirmation_token(self, user_id: int, email: str) -> str:
        """Create an email confirmation token."""
        return self._encode(
            {"sub": str(user_id), "email": email, "type": "confirmation"},
            timedelta(days=self.confirmation_token_expire_days),
        )

    def create_captcha_fallback_token(self, variant: Optional[str]) -> str:
        """Sign the reCAPTCHA variant a registration form is re-rendered with; None for no widget."""
        return self._encode(
            {"variant": variant, "type": "captcha_fallback"},
            timedelta(minutes=self.captcha_fallback_expire_minutes),
        )

    @property
    def access_token_expires_in(self) -> int:
        return self.access_token_expire_minutes * 60

    def decode_token(self, token: str, expected_type: Optional[str] = None) -> Dict[str, Any]:
        """Decode and validate a JWT token."""
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JWTInvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        if expected_type and payload.get("type") != expected_type:
            raise InvalidTokenError("Invalid token type")

        return payload

    def get_user_id_from_token(self, token: str, expected_type: str = "access") -> int:
        """Extract user ID from token."""
        payload = self.decode_token(token, expected_type)
        user_id = payload.get("sub")

        if not user_id:
            raise InvalidTokenError("Token missing user ID")

        try:
            return int(user_id)
        except ValueError:
            raise InvalidTokenError("Invalid user ID in token")

    def get_captcha_fallback_variant(self, token: str) -> Optional[str]:
        """Extract the re-rendered reCAPTCHA variant from a fallback token."""
        payload = self.decode_token(token, "captcha_fallback")

        if "variant" not in payload:
            raise InvalidTokenError("Token missing variant")

        return payload["variant"]
