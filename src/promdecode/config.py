"""Decoding options shared by the pipeline and the CLI."""

from dataclasses import dataclass
from datetime import tzinfo


@dataclass(frozen=True)
class DecodeOptions:
    """Output formatting options for a decoding run.

    Attributes:
        pretty: Indent JSON documents; compact output otherwise.
        human_time: Emit RFC 3339 timestamps before each document.
        timezone: Zone for human-readable timestamps. None means the local
            system zone.
    """

    pretty: bool = True
    human_time: bool = False
    timezone: tzinfo | None = None
