import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _parse_positive_int(env_var: str, default: int) -> int:
    raw_value = os.getenv(env_var)
    if raw_value is None or not raw_value.strip():
        return default

    try:
        value = int(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid integer (got %r); defaulting to %d",
            env_var,
            raw_value,
            default,
        )
        return default

    if value <= 0:
        logger.warning("%s must be positive; defaulting to %d", env_var, default)
        return default

    return value


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

APP_ENVIRONMENT = (os.getenv("APP_ENVIRONMENT") or "dev").strip().lower() or "dev"

# Aggregation window and size of the "most recent results" list
SCORE_WINDOW_MONTHS = _parse_positive_int("SCORE_WINDOW_MONTHS", 6)
RECENT_SCORES_LIMIT = _parse_positive_int("RECENT_SCORES_LIMIT", 5)

SESSION_COOKIE = "auth-session"
SESSION_MAX_AGE_SECONDS = 60 * 60 * 24 * 7
SESSION_COOKIE_SECURE = (
    os.getenv("SESSION_COOKIE_SECURE", "false" if APP_ENVIRONMENT == "dev" else "true")
    .strip()
    .lower()
    != "false"
)


def get_session_secret() -> str:
    secret = os.getenv("SESSION_SECRET")
    if not secret:
        raise RuntimeError("SESSION_SECRET environment variable is required")
    if len(secret) < 32 or secret.lower() in {"secret", "changeme", "default"}:
        raise RuntimeError(
            "SESSION_SECRET must be at least 32 characters and not a common default"
        )
    return secret


@dataclass(frozen=True)
class Auth0Settings:
    domain: str
    client_id: str
    client_secret: str
    callback_url: str


def get_auth0_settings() -> Auth0Settings:
    """Read the identity provider settings, failing on the first missing one."""

    values = {}
    for field, env_var in (
        ("domain", "AUTH0_DOMAIN"),
        ("client_id", "AUTH0_CLIENT_ID"),
        ("client_secret", "AUTH0_CLIENT_SECRET"),
        ("callback_url", "AUTH0_CALLBACK_URL"),
    ):
        value = (os.getenv(env_var) or "").strip()
        if not value:
            raise RuntimeError(f"{env_var} environment variable is required")
        values[field] = value
    return Auth0Settings(**values)
