"""Snappy block-format compression for record payloads."""

import snappy

from promdecode.core.errors import DecompressionError


def decompress(payload: bytes, sequence: int | None = None) -> bytes:
    """Decompress a snappy block-format payload.

    Args:
        payload: Raw snappy block bytes (not the framed stream format).
        sequence: Record sequence number, attached to any error raised.

    Returns:
        The uncompressed bytes.

    Raises:
        DecompressionError: If the payload is not valid snappy block data.
    """
    try:
        return snappy.decompress(payload)
    except snappy.UncompressError as exc:
        detail = str(exc) or str(exc.__cause__ or "") or "corrupt input"
        raise DecompressionError(f"snappy decode error: {detail}", sequence) from exc


def compress(data: bytes) -> bytes:
    """Compress bytes into snappy block format."""
    return snappy.compress(data)
