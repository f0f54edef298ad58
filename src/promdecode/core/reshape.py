"""Reshape decoded write requests into display documents."""

from datetime import datetime, timedelta, timezone, tzinfo

from promdecode.core.errors import EncodingError
from promdecode.core.models import DisplayDocument, DisplaySeries, WriteRequest

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

OUT_OF_RANGE = "<out of range>"


def reshape(request: WriteRequest) -> DisplayDocument:
    """Convert a WriteRequest into its display form.

    Labels are folded into a mapping in wire order, so a repeated name keeps
    its last value. Samples are split into index-aligned timestamp and value
    lists without sorting or deduplication.

    Args:
        request: The decoded write request.

    Returns:
        DisplayDocument with one DisplaySeries per input series, same order.
    """
    document = DisplayDocument()
    for series in request.series:
        labels: dict[str, str] = {}
        for label in series.labels:
            labels[label.name] = label.value

        document.timeseries.append(
            DisplaySeries(
                labels=labels,
                timestamps=[sample.timestamp for sample in series.samples],
                values=[sample.value for sample in series.samples],
            )
        )
    return document


def human_readable_time(timestamp_ms: int, tz: tzinfo | None = None) -> str:
    """Render a millisecond timestamp as RFC 3339 with nanosecond precision.

    Args:
        timestamp_ms: Unix timestamp in milliseconds.
        tz: Zone to render in. None means the local system zone.

    Returns:
        e.g. ``2023-11-14T22:13:20.123000000Z`` for 1700000000123 in UTC.

    Raises:
        EncodingError: If the timestamp is outside the representable range.
    """
    seconds, millis = divmod(timestamp_ms, 1000)
    nanos = millis * 1_000_000
    try:
        moment = (_EPOCH + timedelta(seconds=seconds)).astimezone(tz)
    except (OverflowError, ValueError) as exc:
        raise EncodingError(f"timestamp {timestamp_ms} out of range") from exc

    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
        f".{nanos:09d}{_format_offset(moment)}"
    )


def _format_offset(moment: datetime) -> str:
    offset = moment.utcoffset()
    if not offset:
        return "Z"
    total = int(offset.total_seconds())
    sign = "-" if total < 0 else "+"
    hours, remainder = divmod(abs(total), 3600)
    return f"{sign}{hours:02d}:{remainder // 60:02d}"


def annotate(document: DisplayDocument, tz: tzinfo | None = None) -> list[list[str]]:
    """Render every timestamp of a document, one list per series.

    Timestamps outside the calendar range render as OUT_OF_RANGE.
    """
    return [
        [_render_or_placeholder(ts, tz) for ts in series.timestamps]
        for series in document.timeseries
    ]


def _render_or_placeholder(timestamp_ms: int, tz: tzinfo | None) -> str:
    try:
        return human_readable_time(timestamp_ms, tz)
    except EncodingError:
        return OUT_OF_RANGE
