"""
Centralized configuration with environment variable overrides.

Business identity, the business timezone and slot-generation parameters are
configurable here. Weekly hours live in the DayRule store, not in config.
"""

import logging
import os
import re
from dataclasses import dataclass, field

import pytz
from dotenv import load_dotenv

from scheduler.logging_context import RequestIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Business identity and locale settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "J.Rod Studios")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "America/Chicago")
    phone: str = os.getenv("BUSINESS_PHONE", "+1 714-809-9692")
    email: str = os.getenv("BUSINESS_EMAIL", "info@jrodstudios.com")
    address: str = os.getenv("BUSINESS_ADDRESS", "1315 N College St, Auburn, AL 36830")


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot generation and seeding parameters."""

    slot_granularity_minutes: int = _safe_int("SLOT_GRANULARITY_MINUTES", "15")
    lunch_break_start: str = os.getenv("LUNCH_BREAK_START", "13:00")
    lunch_break_end: str = os.getenv("LUNCH_BREAK_END", "14:00")
    dashboard_upcoming_limit: int = _safe_int("DASHBOARD_UPCOMING_LIMIT", "5")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.business.timezone not in pytz.all_timezones_set:
        raise ValueError(
            f"BUSINESS_TIMEZONE is not a known timezone: {config.business.timezone!r}"
        )

    granularity = config.scheduling.slot_granularity_minutes
    if not 1 <= granularity <= 60:
        raise ValueError(
            f"SLOT_GRANULARITY_MINUTES must be between 1 and 60, got {granularity}"
        )

    for var_name, value in [
        ("LUNCH_BREAK_START", config.scheduling.lunch_break_start),
        ("LUNCH_BREAK_END", config.scheduling.lunch_break_end),
    ]:
        if not _HHMM.match(value):
            raise ValueError(f"{var_name} must be HH:MM, got {value!r}")

    # Zero-padded HH:MM strings compare in clock order.
    if config.scheduling.lunch_break_start >= config.scheduling.lunch_break_end:
        raise ValueError(
            "LUNCH_BREAK_START must be before LUNCH_BREAK_END, got "
            f"{config.scheduling.lunch_break_start}-{config.scheduling.lunch_break_end}"
        )

    if config.scheduling.dashboard_upcoming_limit < 1:
        raise ValueError(
            "DASHBOARD_UPCOMING_LIMIT must be >= 1, "
            f"got {config.scheduling.dashboard_upcoming_limit}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Handler filters also stamp records from loggers outside the package.
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
    logger.info(
        "Configuration loaded for '%s' (%s)", config.business.name, config.business.timezone
    )
    return config


# Singleton instance
settings = load_config()
