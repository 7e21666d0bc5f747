"""
Admin Authorization

The admin is whoever knows the pre-shared ADMIN_TOKEN. Two separate checks
use it:

- ``is_admin_view``: decides whether delete controls are rendered.
- ``authorize``: guards the delete action itself.

The view flag never substitutes for the guard. A valid token on the board
URL also earns a signed session cookie (itsdangerous) so later navigation
does not have to carry the token.
"""

import logging
import secrets
from datetime import timedelta

from fastapi import Request
from fastapi.responses import Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from iamsafe.core.config import settings
from iamsafe.core.errors import AuthorizationError
from iamsafe.core.infrastructure_config import Environment

logger = logging.getLogger(__name__)

SESSION_MAX_AGE_SECONDS = int(timedelta(hours=24).total_seconds())
SESSION_COOKIE_NAME = "admin_session"
SESSION_SALT = "iamsafe-admin-session"
CSRF_COOKIE_NAME = "csrf_token"
CSRF_FORM_FIELD = "csrf_token"


def _presence(value: str | None) -> str:
    return "provided" if value else "missing"


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


class AdminGuard:
    def __init__(self, admin_token: str | None, secret_key: str | None = None):
        self._admin_token = admin_token or None
        self._serializer = (
            URLSafeTimedSerializer(secret_key, salt=SESSION_SALT)
            if secret_key
            else None
        )

    def token_matches(self, candidate: str | None) -> bool:
        """Exact, constant-time comparison against the configured secret."""
        if not candidate or not self._admin_token:
            return False
        return secrets.compare_digest(
            candidate.encode("utf-8"), self._admin_token.encode("utf-8")
        )

    def create_session(self) -> str | None:
        """Create a signed admin session token, or None if sessions are off."""
        if self._serializer is None:
            return None
        return self._serializer.dumps({"role": "admin"})

    def validate_session(self, token: str | None) -> bool:
        """Validate a session token with expiration check."""
        if not token or self._serializer is None:
            return False
        try:
            data = self._serializer.loads(token, max_age=SESSION_MAX_AGE_SECONDS)
        except (BadSignature, SignatureExpired):
            return False
        return isinstance(data, dict) and data.get("role") == "admin"

    def is_admin_view(self, query_token: str | None, session_token: str | None) -> bool:
        """Whether the board should render admin controls."""
        return self.token_matches(query_token) or self.validate_session(session_token)

    def authorize(
        self,
        *,
        form_token: str | None,
        bearer: str | None = None,
        session_token: str | None = None,
        csrf_valid: bool = False,
    ) -> str:
        """
        Authorize a destructive action.

        Credentials are tried in order: form token, bearer header, session
        cookie (which also needs a valid CSRF token). An explicit token that
        does not match is rejected without falling through.

        Returns the credential kind that succeeded: "form", "bearer" or
        "session".

        Raises:
            AuthorizationError: No credential matched.
        """
        if form_token:
            if self.token_matches(form_token):
                return "form"
        elif bearer:
            if self.token_matches(bearer):
                return "bearer"
        elif self.validate_session(session_token) and csrf_valid:
            return "session"

        logger.error(
            f"AUTH FAIL: form token {_presence(form_token)}, "
            f"bearer token {_presence(bearer)}, "
            f"session {_presence(session_token)}, "
            f"expected token {'set' if self._admin_token else 'MISSING'}."
        )
        raise AuthorizationError()


def generate_csrf_token() -> str:
    return secrets.token_urlsafe(32)


def get_csrf_token(request: Request) -> str:
    token = request.cookies.get(CSRF_COOKIE_NAME)
    if not token:
        token = generate_csrf_token()
    return token


def validate_csrf_token(request: Request, form_token: str | None) -> bool:
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
    if not cookie_token or not form_token:
        return False
    return secrets.compare_digest(cookie_token.encode("utf-8"), form_token.encode("utf-8"))


def _secure_cookie_enabled() -> bool:
    return settings.ENVIRONMENT == Environment.PRODUCTION


def set_admin_cookie(
    response: Response,
    key: str,
    value: str,
    *,
    httponly: bool,
) -> Response:
    response.set_cookie(
        key,
        value,
        max_age=SESSION_MAX_AGE_SECONDS,
        httponly=httponly,
        secure=_secure_cookie_enabled(),
        samesite="strict",
    )
    return response


def add_csrf_cookie(response: Response, token: str) -> Response:
    return set_admin_cookie(response, CSRF_COOKIE_NAME, token, httponly=False)


def add_session_cookie(response: Response, token: str) -> Response:
    return set_admin_cookie(response, SESSION_COOKIE_NAME, token, httponly=True)


def clear_admin_cookies(response: Response) -> Response:
    response.delete_cookie(SESSION_COOKIE_NAME)
    response.delete_cookie(CSRF_COOKIE_NAME)
    return response
