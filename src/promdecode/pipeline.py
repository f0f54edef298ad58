"""Streaming decode pipeline: records in, display documents out."""

import logging
from dataclasses import dataclass
from typing import TextIO

from promdecode.config import DecodeOptions
from promdecode.core.compression import decompress
from promdecode.core.encoding.json_document import encode_annotations, encode_document
from promdecode.core.encoding.remote_write import deserialize_write_request
from promdecode.core.errors import DecodeError, StreamReadError
from promdecode.core.models import Record, WriteRequest
from promdecode.core.ports import RecordSourcePort
from promdecode.core.reshape import annotate, reshape

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of a decoding run.

    Attributes:
        processed: Records decoded and written successfully.
        failed: Records skipped because of a per-record error.
        records_read: Records framed by the source, successful or not.
        halted: True if a framing error stopped the run early.
    """

    processed: int = 0
    failed: int = 0
    records_read: int = 0
    halted: bool = False

    @property
    def message(self) -> str:
        """The closing line reported to the user."""
        return f"Successfully processed {self.processed} records"


def decode_record(record: Record) -> WriteRequest:
    """Decompress and deserialize one record's payload.

    Raises:
        DecompressionError: The payload is not valid snappy data.
        DeserializationError: The decompressed bytes are not a WriteRequest.
    """
    data = decompress(record.payload, record.sequence)
    return deserialize_write_request(data, record.sequence)


def render_record(record: Record, options: DecodeOptions) -> str:
    """Decode one record and render its full output block."""
    document = reshape(decode_record(record))

    parts = []
    if options.human_time:
        parts.append(
            encode_annotations(record.sequence, annotate(document, options.timezone))
        )
    parts.append(f"# Object {record.sequence}\n")
    parts.append(encode_document(document, options.pretty, record.sequence))
    parts.append("\n")
    return "".join(parts)


def run(
    source: RecordSourcePort,
    sink: TextIO,
    options: DecodeOptions | None = None,
) -> RunSummary:
    """Decode every record from source and write the results to sink.

    Per-record failures are logged and skipped. A framing error stops the
    run, since the position of the next record is unknown.

    Args:
        source: Where records come from.
        sink: Text stream that receives one block per decoded record.
        options: Formatting options; defaults to DecodeOptions().

    Returns:
        RunSummary with counts for the run.
    """
    options = options or DecodeOptions()
    summary = RunSummary()

    while True:
        try:
            record = source.next()
        except StreamReadError as exc:
            logger.error("Stopping: %s error: %s", exc.kind, exc)
            summary.halted = True
            break
        except DecodeError as exc:
            _report_skip(exc, exc.sequence or source.count)
            summary.failed += 1
            continue

        if record is None:
            break

        try:
            block = render_record(record, options)
        except DecodeError as exc:
            _report_skip(exc, record.sequence)
            summary.failed += 1
            continue

        sink.write(block)
        summary.processed += 1

    summary.records_read = source.count
    logger.debug(
        "Run finished: %d processed, %d failed, %d read",
        summary.processed,
        summary.failed,
        summary.records_read,
    )
    return summary


def _report_skip(exc: DecodeError, sequence: int) -> None:
    logger.warning("Skipping record #%d: %s error: %s", sequence, exc.kind, exc)
