"""Record reader for streams of concatenated JSON objects.

Records look like ``{"b": [10, 43, ...]}`` and follow each other with no
required delimiter. The reader scans the byte buffer, tracking bracket depth
and string state, to find where each top-level value ends.
"""

import base64
import binascii
import json
import logging
from decimal import Decimal
from typing import BinaryIO

from promdecode.core.errors import RecordFormatError, StreamReadError
from promdecode.core.models import Record

logger = logging.getLogger(__name__)

PAYLOAD_FIELD = "b"

_WHITESPACE = frozenset(b" \t\r\n")
_OPENERS = frozenset(b"{[")
_CLOSERS = frozenset(b"}]")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_SCALAR_END = _WHITESPACE | _OPENERS | _CLOSERS | {_QUOTE}


class RecordStreamReader:
    """Reads records one at a time from a binary stream.

    Implements RecordSourcePort. A framing error stops the reader for good;
    a value that is valid JSON but not a record is reported and skipped.

    Args:
        stream: Binary stream positioned at the first record.
        chunk_size: Number of bytes to read from the stream at a time.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = 64 * 1024) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._eof = False
        self._finished = False
        self.count = 0

    def __iter__(self) -> "RecordStreamReader":
        return self

    def __next__(self) -> Record:
        record = self.next()
        if record is None:
            raise StopIteration
        return record

    def next(self) -> Record | None:
        """Return the next record, or None at end of stream.

        Raises:
            StreamReadError: The stream is not well-formed JSON.
            RecordFormatError: A value was read but is not a record.
        """
        if self._finished:
            return None

        try:
            raw = self._next_value()
        except StreamReadError:
            self._finished = True
            raise
        if raw is None:
            self._finished = True
            return None

        try:
            value = json.loads(raw, parse_float=Decimal)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            self._finished = True
            raise StreamReadError(
                f"invalid JSON after record #{self.count}: {exc}"
            ) from exc

        self.count += 1
        return Record(sequence=self.count, payload=_payload_bytes(value, self.count))

    def _fill(self) -> bool:
        """Read one more chunk into the buffer; False once the stream is drained."""
        if self._eof:
            return False
        chunk = self._stream.read(self._chunk_size)
        if not chunk:
            self._eof = True
            return False
        self._buffer.extend(chunk)
        return True

    def _skip_whitespace(self) -> bool:
        """Drop leading whitespace; False if the stream ends first."""
        while True:
            pos = 0
            while pos < len(self._buffer) and self._buffer[pos] in _WHITESPACE:
                pos += 1
            del self._buffer[:pos]
            if self._buffer:
                return True
            if not self._fill():
                return False

    def _next_value(self) -> bytes | None:
        if not self._skip_whitespace():
            return None

        if self._buffer[0] not in _OPENERS:
            return self._next_scalar()

        depth = 0
        in_string = False
        escaped = False
        pos = 0
        while True:
            buffer = self._buffer
            while pos < len(buffer):
                byte = buffer[pos]
                if in_string:
                    if escaped:
                        escaped = False
                    elif byte == _BACKSLASH:
                        escaped = True
                    elif byte == _QUOTE:
                        in_string = False
                elif byte == _QUOTE:
                    in_string = True
                elif byte in _OPENERS:
                    depth += 1
                elif byte in _CLOSERS:
                    depth -= 1
                    if depth == 0:
                        value = bytes(buffer[: pos + 1])
                        del buffer[: pos + 1]
                        return value
                pos += 1

            if not self._fill():
                raise StreamReadError(
                    f"unexpected end of stream inside record #{self.count + 1}"
                )

    def _next_scalar(self) -> bytes:
        """Frame a top-level string, number or literal.

        A string ends at its closing quote; anything else ends at the next
        whitespace, bracket or quote, or at the end of the stream.
        """
        first = self._buffer[0]
        if first in _CLOSERS:
            raise StreamReadError(
                f"unexpected {bytes([first])!r} after record #{self.count}"
            )

        in_string = first == _QUOTE
        escaped = False
        pos = 1
        while True:
            buffer = self._buffer
            while pos < len(buffer):
                byte = buffer[pos]
                if in_string:
                    if escaped:
                        escaped = False
                    elif byte == _BACKSLASH:
                        escaped = True
                    elif byte == _QUOTE:
                        pos += 1
                        break
                elif byte in _SCALAR_END:
                    break
                pos += 1
            else:
                if self._fill():
                    continue
                if in_string:
                    raise StreamReadError(
                        f"unexpected end of stream inside record #{self.count + 1}"
                    )
            value = bytes(buffer[:pos])
            del buffer[:pos]
            return value


def _payload_bytes(value: object, sequence: int) -> bytes:
    """Extract the payload bytes from a parsed record object.

    The payload is either an array of integers in 0..255 or a base64 string.
    """
    if not isinstance(value, dict):
        raise RecordFormatError(
            f"expected a JSON object, got {type(value).__name__}", sequence
        )

    body = value.get(PAYLOAD_FIELD)
    if body is None:
        raise RecordFormatError(f'missing "{PAYLOAD_FIELD}" payload field', sequence)

    if isinstance(body, str):
        try:
            payload = base64.b64decode(body, validate=True)
        except binascii.Error as exc:
            raise RecordFormatError(f"invalid base64 payload: {exc}", sequence) from exc
    elif isinstance(body, list):
        for index, item in enumerate(body):
            if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= 255:
                raise RecordFormatError(
                    f"payload element {index} is not a byte: {item!r}", sequence
                )
        payload = bytes(body)
    else:
        raise RecordFormatError(
            f"payload must be a byte array, got {type(body).__name__}", sequence
        )

    if not payload:
        raise RecordFormatError("empty payload", sequence)

    logger.debug("Read record #%d (%d payload bytes)", sequence, len(payload))
    return payload
