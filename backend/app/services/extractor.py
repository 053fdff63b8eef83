"""
Message classifier.

Walks the decoded message stream once and routes each message by its global
message number into file identity, session summary, or sample accumulation.
Message numbers without a handler are skipped.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Optional

from app.models.raw import (
    MESG_FILE_ID,
    MESG_RECORD,
    MESG_SESSION,
    DecodedMessage,
    FileIdentity,
    RawSample,
    SessionSummary,
)
from app.services.errors import MissingMessageError


logger = logging.getLogger(__name__)


@dataclass
class ExtractedActivity:
    """Accumulated output of one pass over the message stream."""

    identity: Optional[FileIdentity] = None
    summary: Optional[SessionSummary] = None
    samples: list[RawSample] = field(default_factory=list)
    skipped: int = 0

    @property
    def has_identity(self) -> bool:
        return self.identity is not None and self.identity.time_created is not None

    @property
    def has_summary(self) -> bool:
        return self.summary is not None

    def require_complete(self) -> tuple[FileIdentity, SessionSummary]:
        """
        Return identity and summary, or raise if either is missing.

        Raises:
            MissingMessageError: naming the first missing message
        """
        if not self.has_identity:
            raise MissingMessageError("file_id")
        if not self.has_summary:
            raise MissingMessageError("session")
        return self.identity, self.summary


def _scalar(message: DecodedMessage, name: str) -> Optional[int]:
    # Array-valued fields come back as tuples; they carry no usable value here
    value = message.get(name)
    if value is None or isinstance(value, int):
        return value
    logger.debug(f"Ignoring non-scalar {name} value: {value!r}")
    return None


def _on_file_id(message: DecodedMessage, out: ExtractedActivity) -> None:
    if out.identity is not None:
        logger.debug("Ignoring duplicate file_id message")
        return
    out.identity = FileIdentity(time_created=_scalar(message, "time_created"))


def _on_session(message: DecodedMessage, out: ExtractedActivity) -> None:
    if out.summary is not None:
        logger.debug("Ignoring additional session message")
        return
    out.summary = SessionSummary(
        sport=_scalar(message, "sport"),
        total_distance=_scalar(message, "total_distance"),
        total_ascent=_scalar(message, "total_ascent"),
    )


def _on_record(message: DecodedMessage, out: ExtractedActivity) -> None:
    out.samples.append(RawSample(
        position_lat=_scalar(message, "position_lat"),
        position_long=_scalar(message, "position_long"),
        altitude=_scalar(message, "altitude"),
        timestamp=_scalar(message, "timestamp"),
    ))


def _skip(message: DecodedMessage, out: ExtractedActivity) -> None:
    out.skipped += 1


MESSAGE_HANDLERS: dict[int, Callable[[DecodedMessage, ExtractedActivity], None]] = {
    MESG_FILE_ID: _on_file_id,
    MESG_SESSION: _on_session,
    MESG_RECORD: _on_record,
}


def extract_messages(messages: Iterable[DecodedMessage]) -> ExtractedActivity:
    """Classify every message exactly once, preserving record order."""
    out = ExtractedActivity()
    for message in messages:
        handler = MESSAGE_HANDLERS.get(message.mesg_num, _skip)
        handler(message, out)

    logger.debug(
        f"Extracted {len(out.samples)} records "
        f"(file_id={out.has_identity}, session={out.has_summary}, skipped={out.skipped})"
    )
    return out
