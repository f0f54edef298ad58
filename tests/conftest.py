"""Shared test fixtures for all test modules."""

import base64
import json
import time
from collections.abc import Callable, Iterator

import pytest

from promdecode.core.compression import compress
from promdecode.core.encoding.remote_write import serialize_write_request
from promdecode.core.models import Label, Sample, Series, WriteRequest


@pytest.fixture
def sample_request() -> WriteRequest:
    """A two-series write request with labels and samples."""
    return WriteRequest(
        series=(
            Series(
                labels=(
                    Label("__name__", "http_requests_total"),
                    Label("method", "GET"),
                ),
                samples=(
                    Sample(timestamp=1700000000123, value=1.0),
                    Sample(timestamp=1700000015123, value=3.5),
                ),
            ),
            Series(
                labels=(Label("__name__", "up"),),
                samples=(Sample(timestamp=1700000000000, value=1.0),),
            ),
        )
    )


@pytest.fixture
def make_payload() -> Callable[[WriteRequest], bytes]:
    """Factory fixture: serialize and snappy-compress a write request."""

    def _payload(request: WriteRequest) -> bytes:
        return compress(serialize_write_request(request))

    return _payload


@pytest.fixture
def make_record_json() -> Callable[..., bytes]:
    """Factory fixture: wrap payload bytes in a JSON record.

    The payload is written as an array of byte values by default, or as a
    base64 string with as_base64=True.
    """

    def _record(payload: bytes, as_base64: bool = False) -> bytes:
        body: object
        if as_base64:
            body = base64.b64encode(payload).decode("ascii")
        else:
            body = list(payload)
        return json.dumps({"b": body}).encode("utf-8")

    return _record


@pytest.fixture
def corrupt_payload() -> bytes:
    """Bytes that are not valid snappy block data."""
    return b"\xff\xff\xff\xff\xff\xff\xff\xff\xff\xff"


@pytest.fixture
def utc_local_time(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Make the local system zone UTC for the duration of a test."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
