# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                        DISCORD REST API CLIENTS                            ║
# ║    Guild channel listing and guild scheduled event CRUD over HTTP, with    ║
# ║    a single retry on rate limiting.                                        ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
discord_api.py: Minimal Discord REST clients used by the sync pass.
"""
import time
from typing import Any, Dict, List, Optional

import requests

from sync.errors import TransportError
from sync.models import Channel, ExistingDiscordEvent
from utils.logging import logger

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CONSTANTS                                                                  ║
# ╚════════════════════════════════════════════════════════════════════════════╝

DISCORD_API_BASE_URL = "https://discord.com/api/v10"
USER_AGENT = "DiscordBot (discord-event-sync, 0.1.0)"
DEFAULT_TIMEOUT = 10
# Added on top of the server's retry-after to avoid landing on the boundary
RATE_LIMIT_PADDING_SECONDS = 1.0
# Used when a 429 carries no retry-after at all
DEFAULT_RETRY_AFTER_SECONDS = 1.0

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ BASE CLIENT                                                                ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class DiscordApiClient:
    # --- DiscordApiClient ---
    # Shared transport for the guild-scoped clients below. A 429 response is
    # retried exactly once after the server-provided delay; a second 429, any
    # other non-2xx status or a network failure raises TransportError.

    # --- __init__ ---
    # Args:
    #     bot_token: Discord bot token.
    #     guild_id: Guild / server id every request is scoped to.
    #     session: Optional requests.Session (injected by tests).
    #     timeout: Per-request timeout in seconds.
    #     sleep: Blocking sleep used while rate limited.
    def __init__(self, bot_token: str, guild_id: str, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT, sleep=time.sleep, name: Optional[str] = None):
        self.guild_id = guild_id
        self.timeout = timeout
        self.name = name or type(self).__name__
        self._sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bot {bot_token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        })

    # --- _retry_after ---
    # Seconds to wait before retrying a rate limited request. Prefers the
    # X-RateLimit-Reset-After header, then the JSON body's retry_after.
    @staticmethod
    def _retry_after(response: requests.Response) -> float:
        header = response.headers.get("X-RateLimit-Reset-After") or response.headers.get("Retry-After")
        if header:
            try:
                return float(header)
            except ValueError:
                pass
        try:
            body = response.json()
        except ValueError:
            return DEFAULT_RETRY_AFTER_SECONDS
        if isinstance(body, dict) and body.get("retry_after") is not None:
            return float(body["retry_after"])
        return DEFAULT_RETRY_AFTER_SECONDS

    # --- request ---
    # Sends one API request.
    # Returns: Decoded JSON body, or None for empty (204) responses.
    # Raises: TransportError.
    def request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None,
                params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{DISCORD_API_BASE_URL}{path}"
        for attempt in range(2):
            try:
                response = self.session.request(method, url, json=json, params=params, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                logger.error(f"[{self.name}] {method} {path} failed: {e}")
                raise TransportError(f"{method} {path} failed: {e}") from e

            if response.status_code == 429 and attempt == 0:
                delay = self._retry_after(response)
                logger.warning(f"[{self.name}] Request rate limited. Retrying after {delay} seconds.")
                self._sleep(delay + RATE_LIMIT_PADDING_SECONDS)
                continue
            break

        if not response.ok:
            logger.error(f"[{self.name}] {method} {path} returned {response.status_code}. Response: {response.text}")
            raise TransportError(f"{method} {path} failed", status=response.status_code, body=response.text)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ GUILD CLIENTS                                                              ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class DiscordChannelsClient(DiscordApiClient):
    """Guild channels. Required bot permission: VIEW_CHANNEL."""

    def list_channels(self) -> List[Channel]:
        payload = self.request("GET", f"/guilds/{self.guild_id}/channels")
        return [Channel.from_api(item) for item in payload or []]


class DiscordEventsClient(DiscordApiClient):
    """Guild scheduled events. Required bot permission: MANAGE_EVENTS."""

    def _events_path(self, event_id: Optional[str] = None) -> str:
        path = f"/guilds/{self.guild_id}/scheduled-events"
        return f"{path}/{event_id}" if event_id else path

    def list_events(self) -> List[ExistingDiscordEvent]:
        payload = self.request("GET", self._events_path(), params={"with_user_count": "false"})
        return [ExistingDiscordEvent.from_api(item) for item in payload or []]

    def create_event(self, payload: Dict[str, Any]) -> ExistingDiscordEvent:
        return ExistingDiscordEvent.from_api(self.request("POST", self._events_path(), json=payload))

    def update_event(self, event_id: str, payload: Dict[str, Any]) -> ExistingDiscordEvent:
        return ExistingDiscordEvent.from_api(self.request("PATCH", self._events_path(event_id), json=payload))

    def delete_event(self, event_id: str) -> None:
        self.request("DELETE", self._events_path(event_id))
