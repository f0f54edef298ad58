"""JSON and plain-text encoders for display documents."""

import json
from collections.abc import Sequence

from promdecode.core.errors import EncodingError
from promdecode.core.models import DisplayDocument


def encode_document(
    document: DisplayDocument, pretty: bool = True, sequence: int | None = None
) -> str:
    """Encode a display document as JSON text.

    Args:
        document: The document to encode.
        pretty: Indent with two spaces; otherwise emit compact JSON.
        sequence: Record sequence number, attached to any error raised.

    Returns:
        JSON text without a trailing newline. Object keys are sorted.

    Raises:
        EncodingError: If a value is NaN or infinite, which JSON cannot carry.
    """
    try:
        if pretty:
            return json.dumps(
                document.to_dict(), indent=2, sort_keys=True, allow_nan=False
            )
        return json.dumps(
            document.to_dict(),
            separators=(",", ":"),
            sort_keys=True,
            allow_nan=False,
        )
    except ValueError as exc:
        raise EncodingError(f"JSON encode error: {exc}", sequence) from exc


def encode_annotations(sequence: int, annotations: Sequence[Sequence[str]]) -> str:
    """Encode human-readable timestamps as comment lines.

    Args:
        sequence: Record sequence number shown in each header.
        annotations: One list of rendered timestamps per series.

    Returns:
        A block of ``#``-prefixed lines, newline-terminated.
        Empty string if there are no series.
    """
    lines = []
    for index, times in enumerate(annotations):
        lines.append(
            f"# Object {sequence}: Human-readable timestamps for series {index}:"
        )
        for sample_index, rendered in enumerate(times):
            lines.append(f"#   Sample {sample_index}: {rendered}")

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
