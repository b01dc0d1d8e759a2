"""
sync_config.py: Configuration loading and validation for the event sync.

Values come from the environment once, at startup, and are handed to the
reconciler and clients as a frozen SyncConfig.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from sync.errors import ConfigurationError
from utils.environ import (
    DEBUG,
    get_default_service_account_path,
    get_float_env,
    get_int_env,
    get_str_env,
)
from utils.logging import logger

# ╔════════════════════════════════════════════════════════════════════╗
# ║ 📋 Defaults                                                        ║
# ╚════════════════════════════════════════════════════════════════════╝

DEFAULT_WINDOW_DAYS = 30
DEFAULT_MAX_RESULTS = 100
DEFAULT_WRITE_DELAY_SECONDS = 1.0

REQUIRED_ENV_VARS = (
    "DISCORD_BOT_TOKEN",
    "DISCORD_GUILD_ID",
    "DISCORD_APPLICATION_ID",
    "GOOGLE_CALENDAR_ID",
)

# ╔════════════════════════════════════════════════════════════════════╗
# ║ ⚙️ SyncConfig                                                      ║
# ╚════════════════════════════════════════════════════════════════════╝

@dataclass(frozen=True)
class SyncConfig:
    bot_token: str
    guild_id: str
    application_id: str
    calendar_id: str
    credentials_path: str
    window_days: int = DEFAULT_WINDOW_DAYS
    max_results: int = DEFAULT_MAX_RESULTS
    write_delay_seconds: float = DEFAULT_WRITE_DELAY_SECONDS
    debug: bool = False

    def __post_init__(self):
        if self.window_days <= 0:
            raise ConfigurationError("SYNC_WINDOW_DAYS must be positive")
        if self.max_results <= 0:
            raise ConfigurationError("SYNC_MAX_RESULTS must be positive")
        if self.write_delay_seconds < 0:
            raise ConfigurationError("SYNC_WRITE_DELAY_SECONDS must not be negative")

    def sync_window(self, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        """Return (start, end) of the calendar window synced by one pass."""
        start = now or datetime.now(timezone.utc)
        return start, start + timedelta(days=self.window_days)

    def summary(self) -> Dict[str, Any]:
        return {
            "debug_mode": self.debug,
            "discord_token_set": bool(self.bot_token),
            "guild_id": self.guild_id,
            "application_id": self.application_id,
            "calendar_id": self.calendar_id,
            "google_credentials_exist": os.path.exists(self.credentials_path),
            "window_days": self.window_days,
            "max_results": self.max_results,
            "write_delay_seconds": self.write_delay_seconds,
        }

# ╔════════════════════════════════════════════════════════════════════╗
# ║ 🔧 Loading                                                         ║
# ╚════════════════════════════════════════════════════════════════════╝

def load_sync_config() -> SyncConfig:
    """
    Build a SyncConfig from environment variables.

    Raises:
        ConfigurationError: listing every required variable that is unset,
            or naming a tuning variable that does not parse.
    """
    values = {name: get_str_env(name, None) for name in REQUIRED_ENV_VARS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        logger.error(f"Missing required environment variables: {', '.join(missing)}")
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}", missing
        )

    try:
        window_days = get_int_env("SYNC_WINDOW_DAYS", DEFAULT_WINDOW_DAYS)
        max_results = get_int_env("SYNC_MAX_RESULTS", DEFAULT_MAX_RESULTS)
        write_delay_seconds = get_float_env("SYNC_WRITE_DELAY_SECONDS", DEFAULT_WRITE_DELAY_SECONDS)
    except ValueError as e:
        logger.error(f"Invalid environment variable: {e}")
        raise ConfigurationError(str(e)) from e

    return SyncConfig(
        bot_token=values["DISCORD_BOT_TOKEN"],
        guild_id=values["DISCORD_GUILD_ID"],
        application_id=values["DISCORD_APPLICATION_ID"],
        calendar_id=values["GOOGLE_CALENDAR_ID"],
        credentials_path=get_str_env(
            "GOOGLE_APPLICATION_CREDENTIALS", get_default_service_account_path()
        ),
        window_days=window_days,
        max_results=max_results,
        write_delay_seconds=write_delay_seconds,
        debug=DEBUG,
    )


def log_startup_config(config: SyncConfig):
    """Log configuration summary at startup. Secrets are never printed."""
    summary = config.summary()
    logger.info("=" * 50)
    logger.info("🔧 Configuration Summary")
    logger.info("=" * 50)
    logger.info(f"Debug Mode: {summary['debug_mode']}")
    logger.info(f"Discord Token: {'✅' if summary['discord_token_set'] else '❌'}")
    logger.info(f"Guild: {summary['guild_id']}")
    logger.info(f"Application: {summary['application_id']}")
    logger.info(f"Calendar: {summary['calendar_id']}")
    logger.info(f"Google Credentials: {'✅' if summary['google_credentials_exist'] else '❌'}")
    logger.info(f"Sync Window: {summary['window_days']} days, up to {summary['max_results']} events")
    logger.info(f"Write Delay: {summary['write_delay_seconds']}s")
    if not summary["google_credentials_exist"]:
        logger.warning(f"Google service account file not found: {config.credentials_path}")
    logger.info("=" * 50)
