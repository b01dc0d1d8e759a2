"""
errors.py: Exception hierarchy for the event sync.

Skippable input errors exclude one calendar event from a pass. Transport
errors abort the remainder of a pass. Configuration errors stop the process
before a pass begins.
"""
from typing import Optional


class SyncError(Exception):
    """Base class for every error raised by the event sync."""


# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ PER-EVENT INPUT ERRORS                                                     ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class SkippableInputError(SyncError):
    """A single calendar event cannot be turned into a Discord event."""

    def __init__(self, message: str, event_id: Optional[str] = None):
        super().__init__(message)
        self.event_id = event_id


class MissingFieldError(SkippableInputError):
    def __init__(self, field: str, event_id: Optional[str] = None):
        super().__init__(f"calendar event is missing '{field}'", event_id)
        self.field = field


class MixedDateGranularityError(SkippableInputError):
    pass


class UnknownLocationError(SkippableInputError):
    pass


class ChannelNotFoundError(SkippableInputError):
    pass


# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ PASS-LEVEL ERRORS                                                          ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class TransportError(SyncError):
    """A collaborator call failed after its own retry policy was exhausted."""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self):
        base = super().__str__()
        if self.status is None:
            return base
        return f"{base} (HTTP {self.status})"


class ConfigurationError(SyncError):
    """Required identifiers or credentials are missing."""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class SyncPassError(SyncError):
    """A pass failed for a reason other than a fetch transport error. Carries the partial report."""

    def __init__(self, message: str, report=None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.report = report
        self.cause = cause
