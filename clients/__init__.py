"""
clients: HTTP collaborators of the sync pass (Discord REST and Google Calendar).
"""
from .discord_api import DiscordApiClient, DiscordChannelsClient, DiscordEventsClient
from .google_calendar import GoogleCalendarClient
