# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                        EVENT SYNC PACKAGE INITIALIZER                      ║
# ║                                                                            ║
# ║  Reconciliation core: mapping, channel resolution, matching, comparison    ║
# ║  and the pass orchestrator. No module here reads the environment.          ║
# ╚════════════════════════════════════════════════════════════════════════════╝

from .channel_resolver import LOCATION_PLACEHOLDER, ResolvedLocation, resolve_location
from .comparator import changed_fields, events_equal
from .correlation import embed_correlation_key, extract_correlation_key, has_correlation_key
from .errors import (
    ChannelNotFoundError,
    ConfigurationError,
    MissingFieldError,
    MixedDateGranularityError,
    SkippableInputError,
    SyncError,
    SyncPassError,
    TransportError,
    UnknownLocationError,
)
from .event_mapper import map_calendar_event, try_map_calendar_event
from .matcher import find_match, match_events
from .models import (
    CalendarEvent,
    Channel,
    DiscordEventCandidate,
    EntityKind,
    EventStatus,
    EventTime,
    ExistingDiscordEvent,
    SyncReport,
)
from .reconciler import PassState, Reconciler
