# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                          EVENT SYNC DATA MODEL                             ║
# ║    Calendar events, Discord scheduled events and guild channels as they    ║
# ║    flow through one reconciliation pass.                                   ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
models.py: Typed views over the Google Calendar and Discord API payloads.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

import discord

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ ENUMERATIONS                                                               ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class EntityKind(IntEnum):
    """Where a scheduled event takes place. Values are Discord's `entity_type`."""
    STAGE_CHANNEL = discord.EntityType.stage_instance.value
    VOICE_CHANNEL = discord.EntityType.voice.value
    EXTERNAL_LOCATION = discord.EntityType.external.value

    @property
    def uses_channel(self) -> bool:
        return self is not EntityKind.EXTERNAL_LOCATION


class EventStatus(IntEnum):
    SCHEDULED = discord.EventStatus.scheduled.value
    ACTIVE = discord.EventStatus.active.value
    COMPLETED = discord.EventStatus.completed.value
    CANCELLED = discord.EventStatus.cancelled.value


# Scheduled events created by the sync are only visible to guild members
GUILD_ONLY_PRIVACY = discord.PrivacyLevel.guild_only.value

# Only these channel types can host a channel-based scheduled event
EVENT_CHANNEL_TYPES = frozenset({
    discord.ChannelType.voice.value,
    discord.ChannelType.stage_voice.value,
})

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CALENDAR SIDE                                                              ║
# ╚════════════════════════════════════════════════════════════════════════════╝

@dataclass(frozen=True)
class EventTime:
    """A calendar start or end, either all-day (`date`) or timed (`date_time`)."""
    date: Optional[str] = None
    date_time: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Optional[Dict[str, Any]]) -> Optional["EventTime"]:
        if not isinstance(raw, dict):
            return None
        date = raw.get("date") or None
        date_time = raw.get("dateTime") or None
        if date is None and date_time is None:
            return None
        return cls(date=date, date_time=date_time)

    @property
    def is_date_only(self) -> bool:
        return self.date_time is None and self.date is not None

    @property
    def value(self) -> Optional[str]:
        return self.date_time or self.date


@dataclass(frozen=True)
class CalendarEvent:
    id: Optional[str]
    summary: Optional[str]
    start: Optional[EventTime]
    end: Optional[EventTime]
    html_link: Optional[str]
    description: Optional[str] = None
    location: Optional[str] = None

    # --- from_api ---
    # Builds a CalendarEvent from a Google Calendar `events.list` item.
    # Missing keys become None; validation happens in the mapper.
    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "CalendarEvent":
        return cls(
            id=item.get("id") or None,
            summary=item.get("summary") or None,
            start=EventTime.from_api(item.get("start")),
            end=EventTime.from_api(item.get("end")),
            html_link=item.get("htmlLink") or None,
            description=item.get("description"),
            location=item.get("location"),
        )

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ DISCORD SIDE                                                               ║
# ╚════════════════════════════════════════════════════════════════════════════╝

@dataclass(frozen=True)
class Channel:
    id: str
    type: int
    name: str

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Channel":
        return cls(id=str(payload["id"]), type=int(payload["type"]), name=payload.get("name") or "")

    @property
    def is_event_target(self) -> bool:
        return self.type in EVENT_CHANNEL_TYPES


@dataclass(frozen=True)
class DiscordEventCandidate:
    """
    The scheduled event a calendar event should become.

    Exactly one of `channel_id` and `location` is set: `location` for
    external events, `channel_id` for voice and stage events. External events
    always carry an end time.
    """
    name: str
    description: str
    scheduled_start_time: str
    scheduled_end_time: Optional[str]
    entity_type: EntityKind
    channel_id: Optional[str] = None
    location: Optional[str] = None
    privacy_level: int = GUILD_ONLY_PRIVACY

    def __post_init__(self):
        if (self.channel_id is None) == (self.location is None):
            raise ValueError("exactly one of channel_id and location must be set")
        if self.entity_type.uses_channel and self.channel_id is None:
            raise ValueError(f"{self.entity_type.name} events need a channel_id")
        if self.entity_type is EntityKind.EXTERNAL_LOCATION and not self.scheduled_end_time:
            raise ValueError("external events need a scheduled_end_time")

    # --- to_payload ---
    # Renders the JSON body for Discord's create/modify scheduled event routes.
    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "privacy_level": self.privacy_level,
            "scheduled_start_time": self.scheduled_start_time,
            "scheduled_end_time": self.scheduled_end_time,
            "entity_type": int(self.entity_type),
            "channel_id": self.channel_id,
            "entity_metadata": {"location": self.location} if self.location is not None else None,
        }


@dataclass(frozen=True)
class ExistingDiscordEvent:
    id: str
    name: str
    description: str
    scheduled_start_time: str
    scheduled_end_time: Optional[str]
    entity_type: int
    creator_id: Optional[str]
    status: Optional[int] = None
    channel_id: Optional[str] = None
    location: Optional[str] = None
    privacy_level: int = GUILD_ONLY_PRIVACY
    guild_id: Optional[str] = None

    # --- from_api ---
    # Builds an ExistingDiscordEvent from a guild scheduled event object.
    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ExistingDiscordEvent":
        metadata = payload.get("entity_metadata") or {}
        channel_id = payload.get("channel_id")
        creator_id = payload.get("creator_id")
        guild_id = payload.get("guild_id")
        return cls(
            id=str(payload["id"]),
            name=payload.get("name") or "",
            description=payload.get("description") or "",
            scheduled_start_time=payload.get("scheduled_start_time"),
            scheduled_end_time=payload.get("scheduled_end_time"),
            entity_type=int(payload.get("entity_type", 0)),
            creator_id=str(creator_id) if creator_id is not None else None,
            status=payload.get("status"),
            channel_id=str(channel_id) if channel_id is not None else None,
            location=metadata.get("location"),
            privacy_level=payload.get("privacy_level", GUILD_ONLY_PRIVACY),
            guild_id=str(guild_id) if guild_id is not None else None,
        )

    def is_owned_by(self, application_id: str) -> bool:
        return self.creator_id is not None and self.creator_id == str(application_id)

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ PASS RESULT                                                                ║
# ╚════════════════════════════════════════════════════════════════════════════╝

@dataclass
class SyncReport:
    """What one pass did, by Discord event id (calendar id for skips)."""
    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def write_count(self) -> int:
        return len(self.created) + len(self.updated) + len(self.deleted)

    def summary(self) -> str:
        return (f"{len(self.created)} created, {len(self.updated)} updated, "
                f"{len(self.deleted)} deleted, {len(self.unchanged)} unchanged, "
                f"{len(self.skipped)} skipped")
