"""
correlation.py: Embedding and recovering the calendar permalink in a Discord
event description.

The permalink at the end of the description is how a pass recognises the
Discord events it created on earlier passes. Nothing else in the package
should depend on the marker format.
"""
from typing import Optional

CORRELATION_MARKER = "Calendar event link: "


def embed_correlation_key(description: Optional[str], permalink: str) -> str:
    """Append the permalink line to a description, trimming surrounding whitespace."""
    return f"{description or ''}\n{CORRELATION_MARKER}{permalink}".strip()


def has_correlation_key(description: Optional[str], permalink: Optional[str]) -> bool:
    # Exact, case-sensitive suffix match
    if not description or not permalink:
        return False
    return description.endswith(permalink)


def extract_correlation_key(description: Optional[str]) -> Optional[str]:
    """Return the permalink after the last marker, or None when there is none."""
    if not description:
        return None
    _, marker, permalink = description.rpartition(CORRELATION_MARKER)
    if not marker:
        return None
    permalink = permalink.strip()
    if not permalink or "\n" in permalink:
        return None
    return permalink
