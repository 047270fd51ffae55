from pydantic import BaseModel

from tasktracker.core.modules.token.models import IssuedToken
from tasktracker.core.modules.user.models import User


class LoginResult(BaseModel):
    """Authenticated user and the session token issued for them."""

    user: User
    session: IssuedToken
