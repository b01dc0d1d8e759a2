# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                            RECONCILER MODULE                               ║
# ║    Runs one sync pass: fetch, map, match, then create / update / delete    ║
# ║    the bot-owned Discord scheduled events so they mirror the calendar.     ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
reconciler.py: One-shot reconciliation of Discord scheduled events.
"""
import asyncio
from enum import Enum
from typing import List, Optional, Set, Tuple

from utils.logging import logger

from .comparator import changed_fields
from .errors import SyncPassError, TransportError
from .event_mapper import try_map_calendar_event
from .interfaces import CalendarSource, ChannelSource, DiscordEventStore, Pacer
from .matcher import match_events
from .models import CalendarEvent, Channel, DiscordEventCandidate, ExistingDiscordEvent, SyncReport

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ PASS STATES                                                                ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class PassState(Enum):
    IDLE = "idle"
    FETCH_CHANNELS = "fetch_channels"
    FETCH_CALENDAR_EVENTS = "fetch_calendar_events"
    FETCH_OWNED_DISCORD_EVENTS = "fetch_owned_discord_events"
    MAP_AND_MATCH = "map_and_match"
    APPLY = "apply"
    DONE = "done"
    FAILED = "failed"

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ RECONCILER                                                                 ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class Reconciler:
    # --- Reconciler ---
    # Owns one pass at a time. All remote calls are awaited one after another;
    # the blocking clients run in a worker thread so the event loop stays free.
    #
    # Only Discord events whose creator is `config.application_id` are ever
    # updated or deleted. Every other scheduled event in the guild is ignored.

    # --- __init__ ---
    # Args:
    #     config: SyncConfig (application id, window length, fetch limit).
    #     channels: Source of guild channels.
    #     calendar: Source of calendar events.
    #     events: Discord scheduled event store.
    #     pacer: Awaited after every write.
    def __init__(self, config, channels: ChannelSource, calendar: CalendarSource,
                 events: DiscordEventStore, pacer: Pacer):
        self.config = config
        self.channels = channels
        self.calendar = calendar
        self.events = events
        self.pacer = pacer
        self.state = PassState.IDLE
        self.report: Optional[SyncReport] = None

    def _enter(self, state: PassState):
        logger.debug(f"Sync pass: {self.state.value} -> {state.value}")
        self.state = state

    # ╔════════════════════════════════════════════════════════════════════════╗
    # ║ FETCH PHASE                                                            ║
    # ╚════════════════════════════════════════════════════════════════════════╝

    async def _fetch_channels(self) -> List[Channel]:
        channels = await asyncio.to_thread(self.channels.list_channels)
        eligible = [c for c in channels if c.is_event_target]
        logger.debug(f"Fetched {len(channels)} channels, {len(eligible)} voice/stage")
        return eligible

    async def _fetch_calendar_events(self) -> List[CalendarEvent]:
        window_start, window_end = self.config.sync_window()
        calendar_events = await asyncio.to_thread(
            self.calendar.list_events,
            window_start,
            window_end,
            self.config.max_results,
            single_events=True,
            order_by="startTime",
        )
        logger.info(f"Received {len(calendar_events)} calendar events.")
        return calendar_events

    async def _fetch_owned_events(self) -> List[ExistingDiscordEvent]:
        discord_events = await asyncio.to_thread(self.events.list_events)
        owned = [e for e in discord_events if e.is_owned_by(self.config.application_id)]
        logger.debug(f"Fetched {len(discord_events)} Discord events, {len(owned)} owned by this application")
        return owned

    # ╔════════════════════════════════════════════════════════════════════════╗
    # ║ MAP AND MATCH PHASE                                                    ║
    # ╚════════════════════════════════════════════════════════════════════════╝

    def _map_events(self, calendar_events: List[CalendarEvent],
                    channels: List[Channel]) -> List[Tuple[CalendarEvent, DiscordEventCandidate]]:
        mapped = []
        for calendar_event in calendar_events:
            candidate = try_map_calendar_event(calendar_event, channels)
            if candidate is None:
                self.report.skipped.append(calendar_event.id or "")
                continue
            mapped.append((calendar_event, candidate))
        return mapped

    # ╔════════════════════════════════════════════════════════════════════════╗
    # ║ APPLY PHASE                                                            ║
    # ╚════════════════════════════════════════════════════════════════════════╝

    async def _apply(self, plan, owned: List[ExistingDiscordEvent]):
        processed: Set[str] = set()

        for calendar_event, candidate, existing in plan:
            if existing is not None:
                changes = changed_fields(candidate, existing)
                if not changes:
                    processed.add(existing.id)
                    self.report.unchanged.append(existing.id)
                    logger.info(f"{existing.id}: Event skipped; No update needed.")
                    continue
                logger.debug(f"{existing.id}: fields changed: {', '.join(changes)}")
                response = await asyncio.to_thread(self.events.update_event, existing.id, candidate.to_payload())
                processed.add(response.id)
                self.report.updated.append(response.id)
                logger.info(f"{response.id}: Event updated.")
            else:
                response = await asyncio.to_thread(self.events.create_event, candidate.to_payload())
                processed.add(response.id)
                self.report.created.append(response.id)
                logger.info(f"{response.id}: Event created.")
            await self.pacer.wait()

        # Anything owned that no calendar event claimed is stale
        for event in owned:
            if event.id in processed:
                continue
            await asyncio.to_thread(self.events.delete_event, event.id)
            self.report.deleted.append(event.id)
            logger.info(f"{event.id}: Event deleted.")
            await self.pacer.wait()

    # ╔════════════════════════════════════════════════════════════════════════╗
    # ║ PASS ENTRY POINT                                                       ║
    # ╚════════════════════════════════════════════════════════════════════════╝

    # --- run ---
    # Runs one full pass.
    # Returns: SyncReport of what was written.
    # Raises:
    #     TransportError: a fetch failed; nothing was written.
    #     SyncPassError: anything else failed. Its report is empty when the
    #         failure happened before the first write.
    #         Writes made before a failure stay applied.
    async def run(self) -> SyncReport:
        self.report = SyncReport()
        logger.info("Syncing events")

        try:
            self._enter(PassState.FETCH_CHANNELS)
            channels = await self._fetch_channels()
            self._enter(PassState.FETCH_CALENDAR_EVENTS)
            calendar_events = await self._fetch_calendar_events()
            self._enter(PassState.FETCH_OWNED_DISCORD_EVENTS)
            owned = await self._fetch_owned_events()
        except TransportError as e:
            self._enter(PassState.FAILED)
            logger.error(f"Error while fetching sync state: {e}")
            raise
        except Exception as e:
            self._enter(PassState.FAILED)
            logger.exception(f"Unexpected error while fetching sync state: {e}")
            raise SyncPassError(f"sync pass aborted before any write: {e}", report=self.report, cause=e) from e

        try:
            self._enter(PassState.MAP_AND_MATCH)
            plan = match_events(self._map_events(calendar_events, channels), owned)
            self._enter(PassState.APPLY)
            await self._apply(plan, owned)
        except Exception as e:
            self._enter(PassState.FAILED)
            logger.exception(f"Error while processing events: {e}")
            raise SyncPassError(f"sync pass aborted: {e}", report=self.report, cause=e) from e

        self._enter(PassState.DONE)
        logger.info(f"Done processing events. {self.report.summary()}")
        return self.report
