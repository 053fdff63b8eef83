"""
Errors raised by the ingestion pipeline and the storage layer.

IngestError subclasses are the client's fault (HTTP 400); everything else
is a server-side failure (HTTP 500).
"""


class IngestError(Exception):
    """Base class for rejected uploads."""


class UploadRejectedError(IngestError):
    """Upload refused before decoding (bad extension, too large)."""


class DecodeError(IngestError):
    """The byte stream is not a readable FIT file."""


class MissingMessageError(IngestError):
    """A required message (file_id or session) is not present."""

    def __init__(self, message_name: str):
        self.message_name = message_name
        super().__init__(f"FIT file has no {message_name} message")


class StorageError(Exception):
    """The activity store failed to read or write."""


class StatsSerializationError(Exception):
    """Activity stats could not be encoded for storage."""
