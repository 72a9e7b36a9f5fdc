"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; override them via
environment variables in a real deployment.
"""

import os
from dataclasses import dataclass
from typing import Optional


# Who may delete a comment.  ``author``: only the comment's author.
# ``post_author``: the comment's author or the author of the post it
# belongs to.  ``anyone``: every logged‑in user.
COMMENT_DELETE_POLICIES = ("author", "post_author", "anyone")


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Support Network API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Name of the cookie carrying the session token.  Browsers get the
    # token through this cookie on login; API clients may send it as a
    # bearer token instead.
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "session")

    # Path to the SQLite database.  Relative paths are resolved against
    # the ``support_network_api`` package directory by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "support_network.db")

    comment_delete_policy: str = os.getenv("COMMENT_DELETE_POLICY", "author")

    def __post_init__(self) -> None:
        if self.comment_delete_policy not in COMMENT_DELETE_POLICIES:
            raise ValueError(
                f"COMMENT_DELETE_POLICY must be one of {', '.join(COMMENT_DELETE_POLICIES)}, "
                f"got {self.comment_delete_policy!r}"
            )


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
