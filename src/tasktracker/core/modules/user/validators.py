import re

from tasktracker.core.modules.password.hasher import BCRYPT_MAX_BYTES, fits_bcrypt
from tasktracker.errors import ValidationError

PASSWORD_SYMBOLS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"
PASSWORD_MIN_LENGTH = 8

_ALLOWED_CHARS_RE = re.compile(r"[A-Za-z0-9" + re.escape(PASSWORD_SYMBOLS) + r"]+")


def validate_password_confirmation(password: str, confirm_password: str) -> None:
    """Raise ValidationError if the two entries differ."""
    if password != confirm_password:
        raise ValidationError("Password and confirm password don't match")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Minimum length of 8 characters, at most 72 bytes (bcrypt limit)
    - At least one uppercase letter, one digit and one symbol
    - Only ASCII letters, digits and the allowed symbols

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")

    if not fits_bcrypt(password):
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")

    if not _ALLOWED_CHARS_RE.fullmatch(password):
        raise ValidationError("Password may only contain letters, digits and symbols")

    if not any(char.isupper() for char in password):
        raise ValidationError("Password must contain an uppercase letter")

    if not any(char.isdigit() for char in password):
        raise ValidationError("Password must contain a digit")

    if not any(char in PASSWORD_SYMBOLS for char in password):
        raise ValidationError("Password must contain a symbol")
