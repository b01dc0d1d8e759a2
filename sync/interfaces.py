"""
interfaces.py: What the reconciler needs from the Discord and Google clients.

Implementations are synchronous; every method raises TransportError when the
remote call fails after the client's own retries.
"""
from datetime import datetime
from typing import Any, Dict, List, Protocol

from .models import CalendarEvent, Channel, ExistingDiscordEvent


class ChannelSource(Protocol):
    def list_channels(self) -> List[Channel]: ...


class CalendarSource(Protocol):
    def list_events(
        self,
        window_start: datetime,
        window_end: datetime,
        max_results: int,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> List[CalendarEvent]: ...


class DiscordEventStore(Protocol):
    def list_events(self) -> List[ExistingDiscordEvent]: ...

    def create_event(self, payload: Dict[str, Any]) -> ExistingDiscordEvent: ...

    def update_event(self, event_id: str, payload: Dict[str, Any]) -> ExistingDiscordEvent: ...

    def delete_event(self, event_id: str) -> None: ...


class Pacer(Protocol):
    async def wait(self) -> None: ...
