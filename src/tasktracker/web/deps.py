from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from tasktracker.app import App
from tasktracker.config import Config
from tasktracker.core.modules.session.models import SessionToken
from tasktracker.errors import AuthenticationError
from tasktracker.web.cookies import SESSION_COOKIE
from tasktracker.web.ratelimit import LoginRateLimiter

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=SESSION_COOKIE, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_presented_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> SessionToken | None:
    """Session token from the Authorization Bearer header or the cookie, unverified."""
    if credentials and credentials.scheme.lower() == "bearer":
        return SessionToken(credentials.credentials)
    if token_cookie:
        return SessionToken(token_cookie)
    return None


async def get_session_token(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> SessionToken:
    """Get and validate session token from Authorization Bearer header or cookie."""

    # Check Bearer token first (preferred)
    if credentials and credentials.scheme.lower() == "bearer":
        token = SessionToken(credentials.credentials)
        if await app.is_session_valid(token):
            return token

    # Fallback to cookie
    if token_cookie:
        token = SessionToken(token_cookie)
        if await app.is_session_valid(token):
            return token

    raise AuthenticationError("No valid session")


async def limit_login_attempts(request: Request) -> None:
    """Count a login attempt for the client address, reject it if over the limit."""
    limiter = cast(LoginRateLimiter, request.app.state.login_limiter)
    limiter.hit(request.client.host if request.client else "unknown")


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
SessionTokenDep = Annotated[SessionToken, Depends(get_session_token)]
OptionalSessionTokenDep = Annotated[SessionToken | None, Depends(get_presented_token)]
