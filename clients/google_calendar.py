# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                      GOOGLE CALENDAR API CLIENT                            ║
# ║    Service-account authenticated, read-only access to one calendar's       ║
# ║    upcoming events.                                                        ║
# ╚════════════════════════════════════════════════════════════════════════════╝

"""
google_calendar.py: Google Calendar API setup and event listing.
"""
from datetime import datetime
from typing import List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from sync.errors import ConfigurationError, TransportError
from sync.models import CalendarEvent
from utils.logging import logger

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CONSTANTS                                                                  ║
# ╚════════════════════════════════════════════════════════════════════════════╝

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]
# Largest page the events.list endpoint returns
MAX_PAGE_SIZE = 2500

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ CLIENT                                                                     ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class GoogleCalendarClient:
    # --- __init__ ---
    # Args:
    #     service: A built Calendar v3 service object.
    #     calendar_id: The calendar to read.
    def __init__(self, service, calendar_id: str):
        self.service = service
        self.calendar_id = calendar_id

    # --- from_service_account_file ---
    # Loads service account credentials and builds the Calendar v3 service.
    # Raises: ConfigurationError if the credentials cannot be loaded.
    @classmethod
    def from_service_account_file(cls, path: str, calendar_id: str) -> "GoogleCalendarClient":
        try:
            credentials = service_account.Credentials.from_service_account_file(path, scopes=SCOPES)
        except (OSError, ValueError, GoogleAuthError) as e:
            logger.error(f"Error loading Google service account credentials from {path}: {e}")
            raise ConfigurationError(f"cannot load Google credentials from {path}: {e}") from e
        service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        logger.info("Google Calendar service initialized.")
        return cls(service, calendar_id)

    # --- list_events ---
    # Fetches events starting inside [window_start, window_end], following
    # nextPageToken until max_results items have been collected.
    # Returns: CalendarEvent list in the order Google returned them.
    # Raises: TransportError on API or network failure.
    def list_events(self, window_start: datetime, window_end: datetime, max_results: int,
                    single_events: bool = True, order_by: str = "startTime") -> List[CalendarEvent]:
        logger.debug(f"Fetching Google events for calendar {self.calendar_id} "
                     f"from {window_start.isoformat()} to {window_end.isoformat()}")
        items = []
        page_token: Optional[str] = None
        while len(items) < max_results:
            request = self.service.events().list(
                calendarId=self.calendar_id,
                timeMin=window_start.isoformat(),
                timeMax=window_end.isoformat(),
                singleEvents=single_events,
                orderBy=order_by,
                maxResults=min(max_results - len(items), MAX_PAGE_SIZE),
                pageToken=page_token,
            )
            try:
                result = request.execute()
            except HttpError as e:
                status = e.resp.status if e.resp is not None else None
                logger.error(f"Google API error listing events for {self.calendar_id}: {e}")
                raise TransportError(f"events.list failed for {self.calendar_id}", status=status) from e
            except (httplib2.HttpLib2Error, GoogleAuthError, OSError) as e:
                logger.error(f"Network or auth error listing events for {self.calendar_id}: {e}")
                raise TransportError(f"events.list failed for {self.calendar_id}: {e}") from e

            items.extend(result.get("items", []))
            page_token = result.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Fetched {len(items)} Google events for {self.calendar_id}")
        return [CalendarEvent.from_api(item) for item in items[:max_results]]
