"""Session cookie settings shared by login and logout."""

from typing import Any

from fastapi import Response

from tasktracker.config import Config

SESSION_COOKIE = "token"


def session_cookie_params(config: Config) -> dict[str, Any]:
    """Attributes used both to set and to clear the session cookie.

    Clients ignore a clearing cookie whose attributes differ from the original.
    """
    return {
        "key": SESSION_COOKIE,
        "path": "/",
        "httponly": True,
        "secure": config.secure_cookies,
        "samesite": "strict",
    }


def set_session_cookie(response: Response, config: Config, token: str) -> None:
    response.set_cookie(value=token, max_age=config.session_ttl_seconds, **session_cookie_params(config))


def clear_session_cookie(response: Response, config: Config) -> None:
    response.delete_cookie(**session_cookie_params(config))
