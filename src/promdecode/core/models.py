"""Core domain models for remote-write decoding."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Record:
    """One framed unit from the input stream.

    Attributes:
        sequence: 1-based position of the record in the stream.
        payload: Snappy-compressed, protobuf-encoded WriteRequest bytes.
    """

    sequence: int
    payload: bytes


@dataclass(frozen=True)
class Label:
    """A single name/value label pair."""

    name: str
    value: str


@dataclass(frozen=True)
class Sample:
    """A single metric measurement.

    Attributes:
        timestamp: Unix timestamp in milliseconds.
        value: The sample value.
    """

    timestamp: int
    value: float


@dataclass(frozen=True)
class Series:
    """A labeled stream of samples, in wire order.

    Labels are kept as pairs rather than a mapping, so duplicate names
    survive deserialization untouched.
    """

    labels: tuple[Label, ...] = ()
    samples: tuple[Sample, ...] = ()


@dataclass(frozen=True)
class WriteRequest:
    """A decoded remote-write request."""

    series: tuple[Series, ...] = ()


@dataclass
class DisplaySeries:
    """Display form of a series.

    Attributes:
        labels: Label name to value.
        timestamps: Sample timestamps in milliseconds, index-aligned with values.
        values: Sample values.
    """

    labels: dict[str, str] = field(default_factory=dict)
    timestamps: list[int] = field(default_factory=list)
    values: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "labels": self.labels,
            "timestamps": self.timestamps,
            "values": self.values,
        }


@dataclass
class DisplayDocument:
    """Display form of a WriteRequest, one per input record."""

    timeseries: list[DisplaySeries] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"timeseries": [series.to_dict() for series in self.timeseries]}
