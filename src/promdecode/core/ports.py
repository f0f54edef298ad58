"""Port interfaces for record sources.

The pipeline depends only on this protocol, not on a concrete reader.
"""

from typing import Protocol, runtime_checkable

from promdecode.core.models import Record


@runtime_checkable
class RecordSourcePort(Protocol):
    """Port for reading framed records one at a time.

    Adapters implementing this protocol yield records from some byte source.
    Examples: RecordStreamReader.
    """

    count: int

    def next(self) -> Record | None:
        """Return the next record, or None once the source is exhausted.

        Raises:
            StreamReadError: The framing is malformed; no further records
                will be produced.
            RecordFormatError: The next value was framed but is not a record;
                the following call continues after it.
        """
        ...
