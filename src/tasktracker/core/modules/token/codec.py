import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from tasktracker.core.modules.token.models import IssuedToken, TokenClaims, TokenPurpose
from tasktracker.errors import InvalidTokenError
from tasktracker.utils import now


class TokenCodec:
    """Issues and verifies signed, time-bounded JWTs.

    Tokens are self-contained: verification checks only the signature, the
    expiry and the purpose claim. Revocation is tracked elsewhere by token id.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, subject_id: UUID, ttl: timedelta, purpose: TokenPurpose) -> IssuedToken:
        issued_at = now().replace(microsecond=0)
        claims = TokenClaims(
            subject=subject_id,
            token_id=secrets.token_urlsafe(16),
            purpose=purpose,
            issued_at=issued_at,
            expires_at=issued_at + ttl,
        )
        payload: dict[str, Any] = {
            "sub": str(claims.subject),
            "jti": claims.token_id,
            "typ": claims.purpose.value,
            "iat": claims.issued_at,
            "exp": claims.expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(token=token, claims=claims)

    def verify(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        """Return the claims of a valid token, raise InvalidTokenError otherwise."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        if payload.get("typ") != purpose.value:
            raise InvalidTokenError(f"Token is not a {purpose.value} token")

        try:
            return TokenClaims(
                subject=UUID(payload["sub"]),
                token_id=payload["jti"],
                purpose=purpose,
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Token is missing required claims") from e
