"""Write a sample input file of remote-write records.

Run with:
    python examples/make_records.py records.json
    promdecode --input records.json --human-time

The file holds three records back to back with no delimiter: two valid
write requests and one whose payload is not snappy data, so the decoder
skips record #2.
"""

import json
import sys
import time

from promdecode.core.compression import compress
from promdecode.core.encoding.remote_write import serialize_write_request
from promdecode.core.models import Label, Sample, Series, WriteRequest


def build_request(now_ms: int, instance: str) -> WriteRequest:
    """Build a small request with a counter and a gauge."""
    return WriteRequest(
        series=(
            Series(
                labels=(
                    Label("__name__", "http_requests_total"),
                    Label("instance", instance),
                    Label("method", "GET"),
                ),
                samples=tuple(
                    Sample(timestamp=now_ms + i * 15_000, value=float(10 + i))
                    for i in range(3)
                ),
            ),
            Series(
                labels=(Label("__name__", "up"), Label("instance", instance)),
                samples=(Sample(timestamp=now_ms, value=1.0),),
            ),
        )
    )


def record_bytes(payload: bytes) -> bytes:
    """Wrap a payload as a JSON record with a byte-array body."""
    return json.dumps({"b": list(payload)}).encode("utf-8")


def main(path: str) -> None:
    now_ms = int(time.time() * 1000)
    records = [
        record_bytes(compress(serialize_write_request(build_request(now_ms, "a:9090")))),
        record_bytes(b"not snappy at all"),
        record_bytes(compress(serialize_write_request(build_request(now_ms, "b:9090")))),
    ]
    with open(path, "wb") as f:
        f.write(b"".join(records))
    print(f"Wrote {len(records)} records to {path}")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "records.json")
