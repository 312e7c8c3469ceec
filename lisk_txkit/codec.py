"""Deterministic binary codec for schema-typed records.

The wire format is a strict subset of protobuf: every field is prefixed by a
key ``field_number << 3 | wire_type``.  Integers and booleans use wire type 0
(varint, zig-zag for signed kinds); bytes, strings and nested objects use wire
type 2 (length-delimited).  Arrays of varint kinds are packed into a single
length-delimited block while arrays of bytes, strings or objects repeat the
key once per element.  Empty arrays are omitted; scalars are always written,
so one logical value has exactly one encoding.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .model import TransactionRecord
from .schema import FieldKind, FieldSpec, SchemaDescriptor

logger = logging.getLogger(__name__)

WIRE_VARINT = 0
WIRE_LENGTH_DELIMITED = 2
_MAX_VARINT_BYTES = 10


class CodecError(ValueError):
    """Raised when a value cannot be encoded or bytes cannot be decoded."""


# Primitive helpers ------------------------------------------------------


def write_varint(value: int) -> bytes:
    if value < 0:
        raise CodecError(f"varint cannot encode negative value {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def zigzag_encode(value: int) -> int:
    return value * 2 if value >= 0 else -value * 2 - 1


def zigzag_decode(value: int) -> int:
    return (value >> 1) ^ -(value & 1)


def _key(field_number: int, wire_type: int) -> bytes:
    return write_varint((field_number << 3) | wire_type)


def _length_prefixed(payload: bytes) -> bytes:
    return write_varint(len(payload)) + payload


def _integer_bounds(kind: FieldKind) -> tuple[int, int]:
    if kind.is_signed:
        half = 1 << (kind.bits - 1)
        return -half, half - 1
    return 0, (1 << kind.bits) - 1


# Encoding ---------------------------------------------------------------


def encode(schema: SchemaDescriptor, value: Mapping[str, Any]) -> bytes:
    """Encode ``value`` following the field order declared by ``schema``."""

    if not isinstance(value, Mapping):
        raise CodecError(f"{schema.schema_id} expects a mapping, got {type(value).__name__}")
    out = bytearray()
    for spec in schema.fields:
        if spec.name not in value:
            raise CodecError(f"{schema.schema_id} is missing field '{spec.name}'")
        out += _encode_field(spec, value[spec.name])
    return bytes(out)


def _encode_field(spec: FieldSpec, value: Any) -> bytes:
    if spec.kind is FieldKind.ARRAY:
        return _encode_array(spec, value)
    if spec.kind.is_varint:
        return _key(spec.field_number, WIRE_VARINT) + _encode_varint_value(spec, value)
    return _key(spec.field_number, WIRE_LENGTH_DELIMITED) + _length_prefixed(
        _encode_delimited_value(spec, value)
    )


def _encode_array(spec: FieldSpec, value: Any) -> bytes:
    if not isinstance(value, (list, tuple)):
        raise CodecError(f"Field '{spec.name}' expects a list, got {type(value).__name__}")
    if not value:
        return b""
    items = spec.items
    assert items is not None
    if items.kind.is_varint:
        packed = b"".join(_encode_varint_value(items, item) for item in value)
        return _key(spec.field_number, WIRE_LENGTH_DELIMITED) + _length_prefixed(packed)
    key = _key(spec.field_number, WIRE_LENGTH_DELIMITED)
    return b"".join(key + _length_prefixed(_encode_delimited_value(items, item)) for item in value)


def _encode_varint_value(spec: FieldSpec, value: Any) -> bytes:
    if spec.kind is FieldKind.BOOLEAN:
        if not isinstance(value, bool):
            raise CodecError(f"Field '{spec.name}' expects a boolean")
        return b"\x01" if value else b"\x00"
    if isinstance(value, bool) or not isinstance(value, int):
        raise CodecError(f"Field '{spec.name}' expects an integer, got {value!r}")
    low, high = _integer_bounds(spec.kind)
    if not low <= value <= high:
        raise CodecError(f"Field '{spec.name}' value {value} is outside {spec.kind.value} range")
    if spec.kind.is_signed:
        return write_varint(zigzag_encode(value))
    return write_varint(value)


def _encode_delimited_value(spec: FieldSpec, value: Any) -> bytes:
    if spec.kind is FieldKind.BYTES:
        if not isinstance(value, (bytes, bytearray)):
            raise CodecError(f"Field '{spec.name}' expects bytes")
        return bytes(value)
    if spec.kind is FieldKind.STRING:
        if not isinstance(value, str):
            raise CodecError(f"Field '{spec.name}' expects a string")
        return value.encode("utf-8")
    if spec.kind is FieldKind.OBJECT:
        assert spec.schema is not None
        return encode(spec.schema, value)
    raise CodecError(f"Field '{spec.name}' of kind {spec.kind.value} is not length-delimited")


# Decoding ---------------------------------------------------------------


class _Reader:
    def __init__(self, data: bytes, start: int = 0, end: int | None = None) -> None:
        self.data = data
        self.offset = start
        self.end = len(data) if end is None else end

    @property
    def exhausted(self) -> bool:
        return self.offset >= self.end

    def read_varint(self) -> int:
        result = 0
        for index in range(_MAX_VARINT_BYTES):
            if self.offset >= self.end:
                raise CodecError("Unexpected end of data while reading varint")
            byte = self.data[self.offset]
            self.offset += 1
            result |= (byte & 0x7F) << (7 * index)
            if not byte & 0x80:
                if index > 0 and byte == 0:
                    raise CodecError("Non-minimal varint encoding")
                return result
        raise CodecError("Varint exceeds maximum length")

    def read_delimited(self) -> bytes:
        length = self.read_varint()
        if self.offset + length > self.end:
            raise CodecError("Length-delimited value runs past end of data")
        chunk = self.data[self.offset : self.offset + length]
        self.offset += length
        return chunk

    def peek_key(self) -> tuple[int, int] | None:
        if self.exhausted:
            return None
        saved = self.offset
        key = self.read_varint()
        self.offset = saved
        return key >> 3, key & 0x7


def decode(schema: SchemaDescriptor, data: bytes) -> dict[str, Any]:
    """Decode ``data`` into a mapping shaped by ``schema``.

    Fields must appear in ascending field-number order and every byte must be
    consumed.  Missing scalar fields decode to their zero value.
    """

    reader = _Reader(bytes(data))
    result = _decode_object(schema, reader)
    if not reader.exhausted:
        raise CodecError(f"Unexpected trailing data after decoding {schema.schema_id}")
    return result


def _decode_object(schema: SchemaDescriptor, reader: _Reader) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for spec in schema.fields:
        if spec.kind is FieldKind.ARRAY:
            result[spec.name] = _decode_array(spec, reader)
            continue
        key = reader.peek_key()
        if key is None or key[0] != spec.field_number:
            result[spec.name] = _zero_value(spec)
            continue
        reader.read_varint()
        result[spec.name] = _decode_single(spec, key[1], reader)
    key = reader.peek_key()
    if key is not None:
        raise CodecError(
            f"Unexpected field number {key[0]} in {schema.schema_id}; fields out of order or unknown"
        )
    return result


def _decode_single(spec: FieldSpec, wire_type: int, reader: _Reader) -> Any:
    if spec.kind.is_varint:
        if wire_type != WIRE_VARINT:
            raise CodecError(f"Field '{spec.name}' expected varint wire type")
        return _decode_varint_value(spec, reader.read_varint())
    if wire_type != WIRE_LENGTH_DELIMITED:
        raise CodecError(f"Field '{spec.name}' expected length-delimited wire type")
    return _decode_delimited_value(spec, reader.read_delimited())


def _decode_array(spec: FieldSpec, reader: _Reader) -> list[Any]:
    items = spec.items
    assert items is not None
    values: list[Any] = []
    while True:
        key = reader.peek_key()
        if key is None or key[0] != spec.field_number:
            return values
        reader.read_varint()
        if key[1] != WIRE_LENGTH_DELIMITED:
            raise CodecError(f"Array field '{spec.name}' expected length-delimited wire type")
        chunk = reader.read_delimited()
        if items.kind.is_varint:
            packed = _Reader(chunk)
            while not packed.exhausted:
                values.append(_decode_varint_value(items, packed.read_varint()))
        else:
            values.append(_decode_delimited_value(items, chunk))


def _decode_varint_value(spec: FieldSpec, raw: int) -> Any:
    if spec.kind is FieldKind.BOOLEAN:
        if raw not in (0, 1):
            raise CodecError(f"Field '{spec.name}' has invalid boolean value {raw}")
        return bool(raw)
    value = zigzag_decode(raw) if spec.kind.is_signed else raw
    low, high = _integer_bounds(spec.kind)
    if not low <= value <= high:
        raise CodecError(f"Field '{spec.name}' value {value} is outside {spec.kind.value} range")
    return value


def _decode_delimited_value(spec: FieldSpec, chunk: bytes) -> Any:
    if spec.kind is FieldKind.BYTES:
        return chunk
    if spec.kind is FieldKind.STRING:
        try:
            return chunk.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CodecError(f"Field '{spec.name}' is not valid UTF-8") from exc
    if spec.kind is FieldKind.OBJECT:
        assert spec.schema is not None
        return decode(spec.schema, chunk)
    raise CodecError(f"Field '{spec.name}' of kind {spec.kind.value} is not length-delimited")


def _zero_value(spec: FieldSpec) -> Any:
    if spec.kind.is_integer:
        return 0
    if spec.kind is FieldKind.BOOLEAN:
        return False
    if spec.kind is FieldKind.BYTES:
        return b""
    if spec.kind is FieldKind.STRING:
        return ""
    if spec.kind is FieldKind.ARRAY:
        return []
    assert spec.schema is not None
    return {nested.name: _zero_value(nested) for nested in spec.schema.fields}


# Transactions -----------------------------------------------------------


def encode_transaction(
    transaction_schema: SchemaDescriptor,
    asset_schema: SchemaDescriptor,
    record: TransactionRecord,
    *,
    include_signatures: bool = True,
) -> bytes:
    """Encode ``record`` with its asset serialized as a nested bytes field.

    With ``include_signatures=False`` the result is the signing payload: the
    same encoding with an empty signature list.
    """

    asset_bytes = encode(asset_schema, record.asset)
    envelope = {
        "moduleID": record.module_id,
        "assetID": record.asset_id,
        "nonce": record.nonce,
        "fee": record.fee,
        "senderPublicKey": record.sender_public_key,
        "asset": asset_bytes,
        "signatures": list(record.signatures) if include_signatures else [],
    }
    encoded = encode(transaction_schema, envelope)
    logger.debug(
        "Encoded transaction module=%s asset=%s (%d bytes, %d signatures)",
        record.module_id,
        record.asset_id,
        len(encoded),
        len(envelope["signatures"]),
    )
    return encoded


def decode_transaction_envelope(
    transaction_schema: SchemaDescriptor, data: bytes
) -> dict[str, Any]:
    """Decode the outer envelope, leaving ``asset`` as raw bytes."""

    return decode(transaction_schema, data)


def decode_transaction(
    transaction_schema: SchemaDescriptor,
    asset_schema: SchemaDescriptor,
    data: bytes,
) -> TransactionRecord:
    envelope = decode_transaction_envelope(transaction_schema, data)
    return TransactionRecord(
        module_id=envelope["moduleID"],
        asset_id=envelope["assetID"],
        nonce=envelope["nonce"],
        fee=envelope["fee"],
        sender_public_key=envelope["senderPublicKey"],
        asset=decode(asset_schema, envelope["asset"]),
        signatures=list(envelope["signatures"]),
    )
