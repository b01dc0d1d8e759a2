# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                            EVENT MAPPER MODULE                             ║
# ║    Converts one Google Calendar event into the Discord scheduled event     ║
# ║    it should become. Pure: no network calls.                               ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
event_mapper.py: Calendar event to Discord scheduled event mapping.
"""
from typing import Optional, Sequence, Tuple

from utils.logging import logger

from .channel_resolver import resolve_location
from .correlation import embed_correlation_key
from .errors import MissingFieldError, MixedDateGranularityError, SkippableInputError
from .models import CalendarEvent, Channel, DiscordEventCandidate, EventTime
from .timeutils import to_discord_timestamp

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ VALIDATION                                                                 ║
# ╚════════════════════════════════════════════════════════════════════════════╝

REQUIRED_FIELDS = (
    ("id", "id"),
    ("summary", "summary"),
    ("start", "start"),
    ("end", "end"),
    ("html_link", "htmlLink"),
)

# --- require_fields ---
# Raises MissingFieldError naming the first absent field (API spelling).
def require_fields(event: CalendarEvent) -> None:
    for attr, api_name in REQUIRED_FIELDS:
        if not getattr(event, attr):
            raise MissingFieldError(api_name, event.id)

# --- convert_times ---
# Both ends must share a granularity: both all-day or both timed.
# Returns: (start, end) as Discord timestamps.
def convert_times(start: EventTime, end: EventTime, event_id: Optional[str] = None) -> Tuple[str, str]:
    if start.is_date_only != end.is_date_only:
        raise MixedDateGranularityError(
            "start and end mix all-day and timed values", event_id
        )
    try:
        return to_discord_timestamp(start.value), to_discord_timestamp(end.value)
    except (ValueError, OverflowError) as e:
        raise SkippableInputError(f"unparseable start/end: {e}", event_id) from e

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ MAPPING                                                                    ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- map_calendar_event ---
# Builds the DiscordEventCandidate for a calendar event.
# Args:
#     event: The calendar event.
#     channels: The guild's voice and stage channels.
# Returns: The candidate.
# Raises: SkippableInputError (or a subclass) when the event cannot be synced.
def map_calendar_event(event: CalendarEvent, channels: Sequence[Channel]) -> DiscordEventCandidate:
    require_fields(event)
    start, end = convert_times(event.start, event.end, event.id)

    try:
        resolved = resolve_location(event.location, channels)
    except SkippableInputError as e:
        e.event_id = event.id
        raise

    return DiscordEventCandidate(
        name=event.summary,
        description=embed_correlation_key(event.description, event.html_link),
        scheduled_start_time=start,
        scheduled_end_time=end,
        entity_type=resolved.entity_type,
        channel_id=resolved.channel_id,
        location=resolved.location,
    )

# --- try_map_calendar_event ---
# Same as map_calendar_event, but logs and returns None for skippable events.
def try_map_calendar_event(event: CalendarEvent, channels: Sequence[Channel]) -> Optional[DiscordEventCandidate]:
    try:
        return map_calendar_event(event, channels)
    except SkippableInputError as e:
        logger.warning(f"{event.id or '<no id>'}: Calendar event skipped; {e}")
        return None
