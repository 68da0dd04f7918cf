import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from ..config import APP_ENVIRONMENT

logger = logging.getLogger(__name__)

# Uptime probes hit "HEAD /" constantly; keep them out of performance data.
IGNORED_TRANSACTIONS = ["HEAD /"]


def _parse_sample_rate(env_var: str, default: float = 0.0) -> float:
    raw_value = os.getenv(env_var)
    if raw_value is None:
        return default

    try:
        value = float(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid float (got %r); defaulting to %.2f",
            env_var,
            raw_value,
            default,
        )
        return default

    if value < 0:
        logger.warning("%s cannot be negative; defaulting to %.2f", env_var, default)
        return default

    return value


def get_sentry_dsn() -> str | None:
    return os.getenv("SENTRY_DSN") or os.getenv("TELEMETRY_SENTRY_DSN") or None


def init_sentry() -> bool:
    """Initialise Sentry when a DSN is configured; return whether it was."""

    dsn = get_sentry_dsn()
    if not dsn:
        logger.info("SENTRY_DSN not provided; skipping Sentry initialization.")
        return False

    traces_sample_rate = _parse_sample_rate("SENTRY_TRACES_SAMPLE_RATE", default=0.0)
    profiles_sample_rate = _parse_sample_rate(
        "SENTRY_PROFILES_SAMPLE_RATE", default=0.0
    )

    sentry_sdk.init(
        dsn=dsn,
        integrations=[FastApiIntegration()],
        environment=APP_ENVIRONMENT,
        traces_sample_rate=traces_sample_rate,
        profiles_sample_rate=profiles_sample_rate,
        ignore_transactions=IGNORED_TRANSACTIONS,
    )
    logger.info("Initialized Sentry (environment=%s)", APP_ENVIRONMENT)
    return True
