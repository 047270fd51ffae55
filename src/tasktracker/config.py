from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    jwt_secret: str  # Signing key for session and reset tokens
    jwt_algorithm: str = "HS256"
    session_ttl_seconds: int = 2 * 60 * 60
    reset_token_ttl_seconds: int = 60 * 60
    cookie_secure: bool | None = None  # None means secure unless debug
    password_hash_rounds: int = 12  # bcrypt cost factor
    login_rate_limit_attempts: int = 5
    login_rate_limit_window_seconds: int = 10 * 60
    cors_origins: list[str] = []
    frontend_url: str  # URL of the frontend application, used in reset links
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_start_tls: bool = True
    mail_from: str = "no-reply@tasktracker.local"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "TASKTRACKER_",
        "extra": "ignore",
    }

    @property
    def secure_cookies(self) -> bool:
        """Whether cookies carry the Secure flag."""
        if self.cookie_secure is None:
            return not self.debug
        return self.cookie_secure
