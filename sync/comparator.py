"""
comparator.py: Decides whether an owned Discord event already matches its candidate.
"""
from typing import List, Union

from .models import DiscordEventCandidate, ExistingDiscordEvent
from .timeutils import to_epoch_millis

EventLike = Union[DiscordEventCandidate, ExistingDiscordEvent]

COMPARED_FIELDS = ("name", "description", "channel_id", "privacy_level", "entity_type")
COMPARED_INSTANTS = ("scheduled_start_time", "scheduled_end_time")


def changed_fields(candidate: EventLike, existing: EventLike) -> List[str]:
    """
    List the fields that differ between two events.

    Instants are compared as epoch milliseconds, so differently formatted
    timestamps for the same moment are equal. `location` only counts when
    both sides have one.
    """
    # EntityKind is an IntEnum, so it compares equal to the raw int on existing events
    changed = [name for name in COMPARED_FIELDS if getattr(candidate, name) != getattr(existing, name)]

    if candidate.location is not None and existing.location is not None:
        if candidate.location != existing.location:
            changed.append("location")

    for name in COMPARED_INSTANTS:
        if to_epoch_millis(getattr(candidate, name)) != to_epoch_millis(getattr(existing, name)):
            changed.append(name)
    return changed


def events_equal(candidate: EventLike, existing: EventLike) -> bool:
    return not changed_fields(candidate, existing)
