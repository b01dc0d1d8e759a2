"""
Test suite for the Discord REST clients: routing, payload decoding and
rate-limit handling. HTTP is mocked at the requests.Session level.
"""
from unittest.mock import MagicMock

import pytest
import requests

from clients.discord_api import (
    DISCORD_API_BASE_URL,
    DiscordChannelsClient,
    DiscordEventsClient,
)
from sync.errors import TransportError


def make_response(status=200, json_body=None, headers=None, text=""):
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.ok = 200 <= status < 300
    response.headers = headers or {}
    response.content = b"" if json_body is None else b"{...}"
    response.text = text
    if json_body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_body
    return response


def make_client(cls, *responses):
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = list(responses)
    sleeps = []
    client = cls("secret", "g1", session=session, sleep=sleeps.append)
    return client, session, sleeps


def event_payload(event_id="e1", **overrides):
    payload = {
        "id": event_id,
        "guild_id": "g1",
        "creator_id": "app",
        "name": "Town Hall",
        "description": "Calendar event link: https://cal/c1",
        "scheduled_start_time": "2024-01-01T10:00:00+00:00",
        "scheduled_end_time": "2024-01-01T11:00:00+00:00",
        "privacy_level": 2,
        "status": 1,
        "entity_type": 3,
        "channel_id": None,
        "entity_metadata": {"location": "Pub"},
    }
    payload.update(overrides)
    return payload


def test_auth_headers_are_set():
    client, session, _ = make_client(DiscordChannelsClient)
    assert session.headers["Authorization"] == "Bot secret"
    assert session.headers["Content-Type"] == "application/json"


def test_list_channels_decodes_payload():
    client, session, _ = make_client(DiscordChannelsClient, make_response(json_body=[
        {"id": "42", "type": 13, "name": "general-stage", "position": 1},
        {"id": "1", "type": 0, "name": "general"},
    ]))
    channels = client.list_channels()
    assert [c.id for c in channels] == ["42", "1"]
    assert channels[0].is_event_target and not channels[1].is_event_target
    method, url = session.request.call_args.args
    assert (method, url) == ("GET", f"{DISCORD_API_BASE_URL}/guilds/g1/channels")


def test_list_events_decodes_location():
    client, session, _ = make_client(DiscordEventsClient, make_response(json_body=[event_payload()]))
    events = client.list_events()
    assert events[0].location == "Pub"
    assert events[0].is_owned_by("app")
    assert session.request.call_args.kwargs["params"] == {"with_user_count": "false"}


def test_create_update_delete_routes():
    client, session, _ = make_client(
        DiscordEventsClient,
        make_response(json_body=event_payload("new")),
        make_response(json_body=event_payload("e1", name="Renamed")),
        make_response(status=204),
    )
    assert client.create_event({"name": "Town Hall"}).id == "new"
    assert client.update_event("e1", {"name": "Renamed"}).name == "Renamed"
    assert client.delete_event("e1") is None

    calls = [(c.args[0], c.args[1]) for c in session.request.call_args_list]
    base = f"{DISCORD_API_BASE_URL}/guilds/g1/scheduled-events"
    assert calls == [("POST", base), ("PATCH", f"{base}/e1"), ("DELETE", f"{base}/e1")]


def test_rate_limited_request_is_retried_once():
    client, session, sleeps = make_client(
        DiscordEventsClient,
        make_response(status=429, headers={"X-RateLimit-Reset-After": "2.5"}),
        make_response(json_body=[]),
    )
    assert client.list_events() == []
    assert session.request.call_count == 2
    assert sleeps == [3.5]


def test_retry_after_falls_back_to_json_body():
    client, _, sleeps = make_client(
        DiscordEventsClient,
        make_response(status=429, json_body={"retry_after": 0.5, "global": False}),
        make_response(json_body=[]),
    )
    client.list_events()
    assert sleeps == [1.5]


def test_second_rate_limit_raises():
    client, session, _ = make_client(
        DiscordEventsClient,
        make_response(status=429, headers={"X-RateLimit-Reset-After": "1"}),
        make_response(status=429, headers={"X-RateLimit-Reset-After": "1"}, text="slow down"),
    )
    with pytest.raises(TransportError) as excinfo:
        client.list_events()
    assert excinfo.value.status == 429
    assert session.request.call_count == 2


def test_error_status_raises_transport_error():
    client, session, sleeps = make_client(
        DiscordEventsClient, make_response(status=403, text='{"message": "Missing Permissions"}')
    )
    with pytest.raises(TransportError) as excinfo:
        client.delete_event("e1")
    assert excinfo.value.status == 403
    assert "Missing Permissions" in excinfo.value.body
    assert sleeps == []


def test_network_error_raises_transport_error():
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = requests.exceptions.ConnectionError("reset")
    client = DiscordChannelsClient("secret", "g1", session=session)
    with pytest.raises(TransportError):
        client.list_channels()
