#!/usr/bin/env python3
"""
Discord Event Sync - Main Entry Point

Runs one reconciliation pass that mirrors a Google Calendar into a Discord
server's scheduled events, then exits. Schedule it with cron or a timer.
"""

import asyncio
import signal
import sys

from clients import DiscordChannelsClient, DiscordEventsClient, GoogleCalendarClient
from config import SyncConfig, load_sync_config, log_startup_config
from sync import ConfigurationError, Reconciler, SyncPassError, TransportError
from utils.logging import configure_logging, logger
from utils.rate_limiter import FixedDelayPacer


def signal_handler(signum, frame):
    """Handle shutdown signals; the next scheduled pass will converge."""
    logger.info(f"Received signal {signum}, stopping sync pass...")
    sys.exit(1)


def build_reconciler(config: SyncConfig) -> Reconciler:
    """Construct the clients and pacer for one pass."""
    return Reconciler(
        config=config,
        channels=DiscordChannelsClient(config.bot_token, config.guild_id),
        calendar=GoogleCalendarClient.from_service_account_file(config.credentials_path, config.calendar_id),
        events=DiscordEventsClient(config.bot_token, config.guild_id),
        pacer=FixedDelayPacer(config.write_delay_seconds),
    )


def main() -> int:
    """Main application entry point. Returns the process exit code."""
    configure_logging()
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info("=" * 60)
    logger.info("📅 Discord Event Sync Starting")
    logger.info("=" * 60)

    try:
        config = load_sync_config()
        log_startup_config(config)
        reconciler = build_reconciler(config)
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 1

    try:
        report = asyncio.run(reconciler.run())
    except SyncPassError as e:
        logger.error(f"Sync pass failed after partial progress ({e.report.summary()}): {e}")
        return 1
    except TransportError as e:
        logger.error(f"Sync pass failed before any writes: {e}")
        return 1
    finally:
        logger.info("📅 Discord Event Sync Finished")

    logger.info(f"Sync pass complete: {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
