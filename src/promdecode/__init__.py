"""promdecode - decode Prometheus remote-write records into readable JSON."""

from promdecode.adapters.stream_reader import RecordStreamReader
from promdecode.config import DecodeOptions
from promdecode.core.errors import (
    DecodeError,
    DecompressionError,
    DeserializationError,
    EncodingError,
    RecordFormatError,
    StreamReadError,
)
from promdecode.core.models import (
    DisplayDocument,
    DisplaySeries,
    Label,
    Record,
    Sample,
    Series,
    WriteRequest,
)
from promdecode.core.reshape import human_readable_time, reshape
from promdecode.pipeline import RunSummary, decode_record, render_record, run

__version__ = "0.1.0"

__all__ = [
    # Models
    "DisplayDocument",
    "DisplaySeries",
    "Label",
    "Record",
    "Sample",
    "Series",
    "WriteRequest",
    # Errors
    "DecodeError",
    "DecompressionError",
    "DeserializationError",
    "EncodingError",
    "RecordFormatError",
    "StreamReadError",
    # Pipeline
    "DecodeOptions",
    "RecordStreamReader",
    "RunSummary",
    "decode_record",
    "human_readable_time",
    "render_record",
    "reshape",
    "run",
]
