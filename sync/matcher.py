"""
matcher.py: Pairs calendar events with the Discord events created for them.
"""
from typing import List, Optional, Sequence, Tuple

from .correlation import has_correlation_key
from .models import CalendarEvent, DiscordEventCandidate, ExistingDiscordEvent


def find_match(permalink: Optional[str], existing: Sequence[ExistingDiscordEvent]) -> Optional[ExistingDiscordEvent]:
    """
    Find the owned Discord event created for a calendar permalink.

    Returns the first event, in fetch order, whose description ends with the
    permalink. Later duplicates are left unmatched and get deleted as stale.
    """
    for discord_event in existing:
        if has_correlation_key(discord_event.description, permalink):
            return discord_event
    return None


def match_events(
    candidates: Sequence[Tuple[CalendarEvent, DiscordEventCandidate]],
    existing: Sequence[ExistingDiscordEvent],
) -> List[Tuple[CalendarEvent, DiscordEventCandidate, Optional[ExistingDiscordEvent]]]:
    return [
        (calendar_event, candidate, find_match(calendar_event.html_link, existing))
        for calendar_event, candidate in candidates
    ]
