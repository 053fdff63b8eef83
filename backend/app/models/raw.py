"""
Raw FIT model (source-format, unnormalized).

The decoder produces DecodedMessage objects; the extractor turns the three
message kinds we care about into the typed records below before conversion.
All numeric fields hold the raw integer encoding from the file.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


# Global FIT message numbers
MESG_FILE_ID = 0
MESG_SESSION = 18
MESG_RECORD = 20


@dataclass(frozen=True)
class DecodedMessage:
    """A single decoded data message: message number plus raw field values."""

    mesg_num: int
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str) -> Any:
        return self.fields.get(name)


@dataclass(frozen=True)
class FileIdentity:
    """file_id message."""

    time_created: Optional[int]  # seconds since FIT epoch


@dataclass(frozen=True)
class SessionSummary:
    """session message totals as reported by the device."""

    sport: Optional[int]
    total_distance: Optional[int]  # centimetres
    total_ascent: Optional[int]    # metres


@dataclass(frozen=True)
class RawSample:
    """record message (one GPS sample)."""

    position_lat: Optional[int]   # semicircles
    position_long: Optional[int]  # semicircles
    altitude: Optional[int]       # (m + 500) * 5
    timestamp: Optional[int]      # seconds since FIT epoch
