"""Error taxonomy for record decoding.

Every error carries the sequence number of the record it concerns, when
one is known, so callers can report which record was skipped.
"""


class DecodeError(Exception):
    """Base class for all per-record decoding failures."""

    kind = "decode"
    halts = False

    def __init__(self, message: str, sequence: int | None = None) -> None:
        super().__init__(message)
        self.sequence = sequence


class StreamReadError(DecodeError):
    """The record framing itself is malformed.

    The reader cannot locate the start of the next record after this, so
    reading stops.
    """

    kind = "stream"
    halts = True


class RecordFormatError(DecodeError):
    """A framed value is valid JSON but does not have the record shape."""

    kind = "record"


class DecompressionError(DecodeError):
    """The payload is not valid snappy block data."""

    kind = "decompression"


class DeserializationError(DecodeError):
    """The decompressed bytes are not a valid WriteRequest message."""

    kind = "deserialization"


class EncodingError(DecodeError):
    """The decoded document cannot be rendered as output text."""

    kind = "encoding"
