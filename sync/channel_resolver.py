# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                          CHANNEL RESOLVER MODULE                           ║
# ║    Turns a calendar location string into a Discord event location: a       ║
# ║    stage or voice channel of the guild, or free text.                      ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
channel_resolver.py: Location string parsing and channel lookup.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import ChannelNotFoundError, UnknownLocationError
from .models import Channel, EntityKind

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CONSTANTS                                                                  ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Any location starting with this word is meant to be a Discord channel
DISCORD_PREFIX = "Discord"

# Checked in order; new formats are added here
LOCATION_PREFIXES: List[Tuple[str, EntityKind]] = [
    ("Discord Stage:", EntityKind.STAGE_CHANNEL),
    ("Discord Voice:", EntityKind.VOICE_CHANNEL),
]

# Shown as the location of calendar events that have none
LOCATION_PLACEHOLDER = "🤷"

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ RESULT TYPE                                                                ║
# ╚════════════════════════════════════════════════════════════════════════════╝

@dataclass(frozen=True)
class ResolvedLocation:
    entity_type: EntityKind
    channel_id: Optional[str] = None
    location: Optional[str] = None

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ PARSING                                                                    ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# --- parse_location ---
# Classifies a location string without looking at any channels.
# Args:
#     location: The calendar event's free-text location, or None.
# Returns: (entity kind, channel query or trimmed free text).
# Raises: UnknownLocationError for "Discord..." strings with no known prefix
#     and for locations that are only whitespace.
def parse_location(location: Optional[str]) -> Tuple[EntityKind, str]:
    if not location:
        return EntityKind.EXTERNAL_LOCATION, LOCATION_PLACEHOLDER

    text = location.strip()
    if not text:
        raise UnknownLocationError("location is blank")
    folded = text.casefold()
    for prefix, kind in LOCATION_PREFIXES:
        if folded.startswith(prefix.casefold()):
            return kind, text[len(prefix):].strip()

    if folded.startswith(DISCORD_PREFIX.casefold()):
        raise UnknownLocationError(f"unrecognised Discord location '{text}'")
    return EntityKind.EXTERNAL_LOCATION, text

# --- find_channel ---
# Case-insensitive substring lookup of a channel by name. First match in
# the given order wins.
# Returns: The matching Channel, or None.
def find_channel(query: str, channels: Iterable[Channel]) -> Optional[Channel]:
    if not query:
        return None
    needle = query.casefold()
    for channel in channels:
        if needle in channel.name.casefold():
            return channel
    return None

# --- resolve_location ---
# Resolves a location string against the guild's voice and stage channels.
# Args:
#     location: The calendar event's free-text location, or None.
#     channels: Eligible channels, already filtered to voice and stage.
# Returns: A ResolvedLocation with exactly one of channel_id / location set.
# Raises: UnknownLocationError, ChannelNotFoundError.
def resolve_location(location: Optional[str], channels: Sequence[Channel]) -> ResolvedLocation:
    kind, target = parse_location(location)
    if kind is EntityKind.EXTERNAL_LOCATION:
        return ResolvedLocation(entity_type=kind, location=target)

    channel = find_channel(target, channels)
    if channel is None:
        raise ChannelNotFoundError(f"no voice or stage channel matches '{target}'")
    return ResolvedLocation(entity_type=kind, channel_id=channel.id)
