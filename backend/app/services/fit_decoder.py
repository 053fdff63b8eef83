"""
FIT decoder.

Thin wrapper over fitparse that turns a byte string into DecodedMessage
objects carrying raw (unscaled) field values. Conversion to physical units
happens in app.services.canonicalizer.
"""

import io
import logging
import struct

from fitparse import FitFile
from fitparse.utils import FitParseError

from app.models.raw import DecodedMessage
from app.services.errors import DecodeError


logger = logging.getLogger(__name__)


FIT_SIGNATURE = b".FIT"
MIN_HEADER_SIZE = 12


def decode_fit(data: bytes) -> list[DecodedMessage]:
    """
    Decode a complete FIT file.

    Args:
        data: Raw file contents

    Returns:
        Data messages in stream order

    Raises:
        DecodeError: if the header, a record, or the CRC is invalid
    """
    if len(data) < MIN_HEADER_SIZE or data[8:12] != FIT_SIGNATURE:
        raise DecodeError("Not a FIT file (missing .FIT signature)")

    try:
        fitfile = FitFile(io.BytesIO(data))
        messages = [
            DecodedMessage(
                mesg_num=message.mesg_num,
                fields={f.name: f.raw_value for f in message.fields},
            )
            for message in fitfile.get_messages()
        ]
    except (FitParseError, TypeError, ValueError, KeyError, struct.error) as e:
        # fitparse field processors fail with plain Python errors on corrupt field data
        raise DecodeError(f"Failed to decode FIT file: {e}") from e

    logger.debug(f"Decoded {len(messages)} messages ({len(data)} bytes)")
    return messages
