"""
Session accessor over the external identity provider.

The provider keeps its session in a cookie (``sb-<ref>-auth-token`` style,
possibly split into ``.0``, ``.1``... chunks and possibly ``base64-``
encoded JSON) or the client sends a bearer token. Whatever goes wrong while
resolving it, callers just get ``None``.
"""

import base64
import binascii
import json
import logging
from typing import Protocol

from fastapi import Depends, Request
from jose import JWTError, jwt
from pydantic import ValidationError

from smartmed.core.config import get_settings
from smartmed.schemas.auth import AuthError, AuthUser, AuthUserResponse

logger = logging.getLogger(__name__)

BASE64_PREFIX = "base64-"
ALGORITHM = "HS256"


class AuthProvider(Protocol):
    def get_user(self, access_token: str | None) -> AuthUserResponse: ...


class JWTAuthProvider:
    """
    Verifies the provider's access tokens locally with the shared JWT secret.
    """

    def __init__(self, secret: str, audience: str | None = None):
        self.secret = secret
        self.audience = audience

    def get_user(self, access_token: str | None) -> AuthUserResponse:
        if not access_token:
            return AuthUserResponse(
                error=AuthError(message="Auth session missing!", status=400)
            )

        try:
            payload = jwt.decode(
                access_token,
                self.secret,
                algorithms=[ALGORITHM],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as exc:
            return AuthUserResponse(error=AuthError(message=str(exc), status=401))

        try:
            user = AuthUser(
                id=payload.get("sub"),
                email=payload.get("email"),
                role=payload.get("role"),
            )
        except ValidationError:
            return AuthUserResponse(
                error=AuthError(message="Invalid token payload", status=401)
            )

        return AuthUserResponse(user=user)


def get_auth_provider() -> AuthProvider:
    settings = get_settings()
    return JWTAuthProvider(
        secret=settings.auth_jwt_secret,
        audience=settings.auth_jwt_audience or None,
    )


def _collect_cookie(cookies: dict[str, str], name: str) -> str | None:
    if name in cookies:
        return cookies[name]

    chunks = []
    index = 0
    while f"{name}.{index}" in cookies:
        chunks.append(cookies[f"{name}.{index}"])
        index += 1
    return "".join(chunks) or None


def _find_session_cookie(cookies: dict[str, str], cookie_name: str) -> str | None:
    value = _collect_cookie(cookies, cookie_name)
    if value:
        return value

    for name in sorted(cookies):
        base = name.rsplit(".", 1)[0] if name[-1:].isdigit() else name
        if base.startswith("sb-") and base.endswith("-auth-token"):
            return _collect_cookie(cookies, base)
    return None


def extract_access_token(raw: str) -> str | None:
    """
    Pull the access token out of a session cookie value.

    Accepts a bare JWT, JSON (``{"access_token": ...}`` or the older
    ``[access_token, refresh_token, ...]`` array) and ``base64-`` wrapped JSON.
    """
    value = raw
    if value.startswith(BASE64_PREFIX):
        encoded = value[len(BASE64_PREFIX):]
        encoded += "=" * (-len(encoded) % 4)
        value = base64.urlsafe_b64decode(encoded).decode("utf-8")

    if value[:1] in ("{", "["):
        session = json.loads(value)
        token = None
        if isinstance(session, dict):
            token = session.get("access_token")
        elif isinstance(session, list) and session:
            token = session[0]
        return token if isinstance(token, str) else None

    return value


def read_session_token(request: Request) -> str | None:
    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            return token.strip()

    raw = _find_session_cookie(dict(request.cookies), get_settings().auth_cookie_name)
    if not raw:
        return None
    return extract_access_token(raw)


def get_user(request: Request, provider: AuthProvider) -> AuthUser | None:
    """
    Resolve the authenticated user for this request, or None.
    """
    try:
        token = read_session_token(request)
    except (ValueError, binascii.Error, UnicodeDecodeError) as exc:
        logger.info(f"Unreadable session cookie: {exc}")
        return None

    result = provider.get_user(token)
    if result.error is not None or result.user is None:
        if token:
            logger.info(f"Session rejected by identity provider: {result.error}")
        return None

    return result.user


def get_session_user(
    request: Request,
    provider: AuthProvider = Depends(get_auth_provider),
) -> AuthUser | None:
    """FastAPI dependency wrapper around ``get_user``."""
    return get_user(request, provider)
