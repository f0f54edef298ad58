"""Protobuf codec for Prometheus remote-write requests.

The message classes are built at import time from descriptors that mirror
the subset of ``prompb/types.proto`` the decoder reads. Fields outside that
subset (metadata, exemplars, native histograms) are parsed as unknown
fields and ignored.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

from promdecode.core.errors import DeserializationError
from promdecode.core.models import Label, Sample, Series, WriteRequest

_PACKAGE = "prometheus"

_FieldProto = descriptor_pb2.FieldDescriptorProto


def _add_field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    repeated: bool = False,
    type_name: str | None = None,
) -> None:
    field = message.field.add(
        name=name,
        number=number,
        type=field_type,
        label=_FieldProto.LABEL_REPEATED if repeated else _FieldProto.LABEL_OPTIONAL,
    )
    if type_name is not None:
        field.type_name = f".{_PACKAGE}.{type_name}"


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="promdecode/remote_write.proto",
        package=_PACKAGE,
        syntax="proto3",
    )

    label = file_proto.message_type.add(name="Label")
    _add_field(label, "name", 1, _FieldProto.TYPE_STRING)
    _add_field(label, "value", 2, _FieldProto.TYPE_STRING)

    sample = file_proto.message_type.add(name="Sample")
    _add_field(sample, "value", 1, _FieldProto.TYPE_DOUBLE)
    _add_field(sample, "timestamp", 2, _FieldProto.TYPE_INT64)

    series = file_proto.message_type.add(name="TimeSeries")
    _add_field(series, "labels", 1, _FieldProto.TYPE_MESSAGE, True, "Label")
    _add_field(series, "samples", 2, _FieldProto.TYPE_MESSAGE, True, "Sample")

    request = file_proto.message_type.add(name="WriteRequest")
    _add_field(request, "timeseries", 1, _FieldProto.TYPE_MESSAGE, True, "TimeSeries")

    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())

WriteRequestMessage = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{_PACKAGE}.WriteRequest")
)


def deserialize_write_request(
    data: bytes, sequence: int | None = None
) -> WriteRequest:
    """Parse protobuf bytes into a WriteRequest.

    Args:
        data: Serialized ``prometheus.WriteRequest`` bytes.
        sequence: Record sequence number, attached to any error raised.

    Returns:
        WriteRequest with series, labels and samples in wire order.

    Raises:
        DeserializationError: If the bytes are not a valid encoding of the
            message (truncated field, invalid wire type, bad varint).
    """
    message = WriteRequestMessage()
    try:
        message.ParseFromString(data)
    except DecodeError as exc:
        raise DeserializationError(
            f"protobuf unmarshal error: {exc}", sequence
        ) from exc

    return WriteRequest(
        series=tuple(
            Series(
                labels=tuple(Label(name=lb.name, value=lb.value) for lb in ts.labels),
                samples=tuple(
                    Sample(timestamp=s.timestamp, value=s.value) for s in ts.samples
                ),
            )
            for ts in message.timeseries
        )
    )


def serialize_write_request(request: WriteRequest) -> bytes:
    """Encode a WriteRequest as protobuf bytes."""
    message = WriteRequestMessage()
    for series in request.series:
        ts = message.timeseries.add()
        for label in series.labels:
            ts.labels.add(name=label.name, value=label.value)
        for sample in series.samples:
            ts.samples.add(value=sample.value, timestamp=sample.timestamp)
    return message.SerializeToString()
