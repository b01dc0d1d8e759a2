"""
Test suite for the reconciliation pass, using in-memory collaborators.
"""
import asyncio
from datetime import datetime, timezone
from itertools import count

import pytest

from config.sync_config import SyncConfig
from sync.errors import SyncPassError, TransportError
from sync.models import CalendarEvent, Channel, ExistingDiscordEvent
from sync.reconciler import PassState, Reconciler
from utils.rate_limiter import NoDelayPacer

APP_ID = "app-1"
CHANNELS = [
    Channel(id="1", type=0, name="general"),
    Channel(id="42", type=13, name="general-stage"),
    Channel(id="7", type=2, name="lounge"),
]


class FakeChannels:
    def __init__(self, channels=CHANNELS, fail=False):
        self.channels = list(channels)
        self.fail = fail

    def list_channels(self):
        if self.fail:
            raise TransportError("channels down", status=500)
        return list(self.channels)


class FakeCalendar:
    def __init__(self, items):
        self.items = list(items)
        self.calls = []

    def list_events(self, window_start, window_end, max_results, single_events=True, order_by="startTime"):
        self.calls.append((window_start, window_end, max_results, single_events, order_by))
        return [CalendarEvent.from_api(item) for item in self.items][:max_results]


class FakeDiscord:
    """Stores scheduled events the way the guild would, and records writes."""

    def __init__(self, events=(), fail_on=None):
        self.events = {e["id"]: dict(e) for e in events}
        self.writes = []
        self.fail_on = fail_on
        self._ids = count(1000)

    def _check(self, action):
        if self.fail_on == action:
            raise TransportError(f"{action} failed", status=500)

    def list_events(self):
        return [ExistingDiscordEvent.from_api(e) for e in self.events.values()]

    def create_event(self, payload):
        self._check("create")
        event_id = str(next(self._ids))
        self.events[event_id] = {**payload, "id": event_id, "creator_id": APP_ID, "status": 1}
        self.writes.append(("create", event_id))
        return ExistingDiscordEvent.from_api(self.events[event_id])

    def update_event(self, event_id, payload):
        self._check("update")
        self.events[event_id].update(payload)
        self.writes.append(("update", event_id))
        return ExistingDiscordEvent.from_api(self.events[event_id])

    def delete_event(self, event_id):
        self._check("delete")
        del self.events[event_id]
        self.writes.append(("delete", event_id))


def calendar_item(event_id, summary="Town Hall", location="Discord Stage: General", **overrides):
    item = {
        "id": event_id,
        "summary": summary,
        "location": location,
        "start": {"dateTime": "2024-01-01T10:00:00Z"},
        "end": {"dateTime": "2024-01-01T11:00:00Z"},
        "htmlLink": f"https://cal/{event_id}",
    }
    item.update(overrides)
    return item


def owned_event(event_id, permalink, creator_id=APP_ID, **overrides):
    event = {
        "id": event_id,
        "creator_id": creator_id,
        "name": "Old",
        "description": f"Calendar event link: {permalink}",
        "scheduled_start_time": "2024-01-01T10:00:00+00:00",
        "scheduled_end_time": "2024-01-01T11:00:00+00:00",
        "privacy_level": 2,
        "entity_type": 1,
        "channel_id": "42",
        "entity_metadata": None,
        "status": 1,
    }
    event.update(overrides)
    return event


def make_config():
    return SyncConfig(
        bot_token="token",
        guild_id="guild",
        application_id=APP_ID,
        calendar_id="cal@example.com",
        credentials_path="/nonexistent.json",
        max_results=50,
    )


def run_pass(calendar, discord, channels=None, pacer=None):
    reconciler = Reconciler(make_config(), channels or FakeChannels(), calendar, discord, pacer or NoDelayPacer())
    return reconciler, asyncio.run(reconciler.run())


def test_creates_events_for_new_calendar_entries():
    discord = FakeDiscord()
    reconciler, report = run_pass(FakeCalendar([calendar_item("c1")]), discord)
    assert reconciler.state is PassState.DONE
    assert len(report.created) == 1
    created = discord.events[report.created[0]]
    assert created["channel_id"] == "42"
    assert created["description"].endswith("Calendar event link: https://cal/c1")


def test_calendar_request_parameters():
    calendar = FakeCalendar([])
    run_pass(calendar, FakeDiscord())
    window_start, window_end, max_results, single_events, order_by = calendar.calls[0]
    assert (window_end - window_start).days == 30
    assert window_start.tzinfo is not None
    assert (max_results, single_events, order_by) == (50, True, "startTime")


def test_second_pass_is_idempotent():
    calendar = FakeCalendar([calendar_item("c1"), calendar_item("c2", location="Pub"),
                             calendar_item("c3", location=None)])
    discord = FakeDiscord()
    run_pass(calendar, discord)
    first_writes = list(discord.writes)

    _, report = run_pass(calendar, discord)
    assert discord.writes == first_writes, "second pass should not write anything"
    assert report.write_count == 0
    assert len(report.unchanged) == 3


def test_identical_existing_event_is_not_rewritten():
    discord = FakeDiscord([owned_event("d1", "https://cal/c1", name="Town Hall")])
    _, report = run_pass(FakeCalendar([calendar_item("c1")]), discord)
    assert discord.writes == []
    assert report.unchanged == ["d1"]


def test_changed_event_is_updated():
    discord = FakeDiscord([owned_event("d1", "https://cal/c1", name="Old name")])
    _, report = run_pass(FakeCalendar([calendar_item("c1")]), discord)
    assert discord.writes == [("update", "d1")]
    assert discord.events["d1"]["name"] == "Town Hall"
    assert report.updated == ["d1"]


def test_orphaned_owned_event_is_deleted():
    discord = FakeDiscord([owned_event("d1", "https://cal/gone")])
    _, report = run_pass(FakeCalendar([calendar_item("c1")]), discord)
    assert ("delete", "d1") in discord.writes
    assert report.deleted == ["d1"]


def test_events_owned_by_others_are_untouched():
    discord = FakeDiscord([owned_event("h1", "https://cal/c1", creator_id="human")])
    _, report = run_pass(FakeCalendar([]), discord)
    assert discord.writes == []
    assert "h1" in discord.events


def test_empty_calendar_deletes_all_owned_events():
    discord = FakeDiscord([owned_event("d1", "https://cal/c1"), owned_event("d2", "https://cal/c2")])
    _, report = run_pass(FakeCalendar([]), discord)
    assert discord.writes == [("delete", "d1"), ("delete", "d2")]


def test_skipped_calendar_event_loses_its_discord_event():
    discord = FakeDiscord([owned_event("d1", "https://cal/c1")])
    calendar = FakeCalendar([calendar_item("c1", location="Discord Voice: nowhere")])
    _, report = run_pass(calendar, discord)
    assert report.skipped == ["c1"]
    assert discord.writes == [("delete", "d1")]


def test_duplicate_stale_events_are_deleted():
    discord = FakeDiscord([
        owned_event("d1", "https://cal/c1", name="Town Hall"),
        owned_event("d2", "https://cal/c1", name="Town Hall"),
    ])
    _, report = run_pass(FakeCalendar([calendar_item("c1")]), discord)
    assert report.unchanged == ["d1"]
    assert discord.writes == [("delete", "d2")]


def test_text_channels_are_not_event_targets():
    """'general' is a text channel; only general-stage may match."""
    discord = FakeDiscord()
    _, report = run_pass(FakeCalendar([calendar_item("c1", location="Discord Stage: general")]), discord)
    assert discord.events[report.created[0]]["channel_id"] == "42"


def test_every_write_is_paced():
    pacer = NoDelayPacer()
    discord = FakeDiscord([owned_event("d1", "https://cal/gone")])
    run_pass(FakeCalendar([calendar_item("c1"), calendar_item("c2")]), discord, pacer=pacer)
    assert pacer.wait_count == 3


def test_write_failure_aborts_pass_with_partial_report():
    discord = FakeDiscord([owned_event("d1", "https://cal/gone")], fail_on="delete")
    reconciler = Reconciler(make_config(), FakeChannels(), FakeCalendar([calendar_item("c1")]),
                            discord, NoDelayPacer())
    with pytest.raises(SyncPassError) as excinfo:
        asyncio.run(reconciler.run())
    assert reconciler.state is PassState.FAILED
    assert len(excinfo.value.report.created) == 1, "earlier writes are not rolled back"
    assert isinstance(excinfo.value.cause, TransportError)


def test_create_failure_stops_remaining_writes():
    discord = FakeDiscord([owned_event("d1", "https://cal/gone")], fail_on="create")
    reconciler = Reconciler(make_config(), FakeChannels(), FakeCalendar([calendar_item("c1")]),
                            discord, NoDelayPacer())
    with pytest.raises(SyncPassError):
        asyncio.run(reconciler.run())
    assert "d1" in discord.events, "delete phase must not run after a failed write"


def test_fetch_failure_fails_before_writes():
    discord = FakeDiscord()
    reconciler = Reconciler(make_config(), FakeChannels(fail=True), FakeCalendar([calendar_item("c1")]),
                            discord, NoDelayPacer())
    with pytest.raises(TransportError):
        asyncio.run(reconciler.run())
    assert reconciler.state is PassState.FAILED
    assert discord.writes == []


class BrokenCalendar(FakeCalendar):
    def list_events(self, *args, **kwargs):
        raise RuntimeError("credentials could not be refreshed")


def test_unexpected_fetch_error_fails_the_pass():
    discord = FakeDiscord()
    reconciler = Reconciler(make_config(), FakeChannels(), BrokenCalendar([]), discord, NoDelayPacer())
    with pytest.raises(SyncPassError) as excinfo:
        asyncio.run(reconciler.run())
    assert reconciler.state is PassState.FAILED
    assert isinstance(excinfo.value.cause, RuntimeError)
    assert excinfo.value.report.write_count == 0
    assert discord.writes == []

def test_sync_window_uses_given_now():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    start, end = make_config().sync_window(now)
    assert start == now
    assert (end - start).days == 30
