"""Conversion of loosely-typed user input into schema-typed values.

Two layers live here.  ``transform_asset`` and ``transform_nested_asset``
turn prompt answers (always strings) into JSON-shaped values, splitting comma
lists and repeated groups and converting integers.  ``asset_from_json`` then
validates JSON-shaped values, whether they came from prompts or from an
``--asset`` flag, and produces the typed mapping the codec accepts:
integers checked against their width and hex strings decoded to bytes.
"""

from __future__ import annotations

import string
from typing import Any, Mapping, Sequence

from .schema import FieldKind, FieldSpec, SchemaDescriptor

_HEX_DIGITS = frozenset(string.hexdigits)
_MAX_SAFE_FLOAT_INT = 2**53


class AssetInputError(ValueError):
    """Base class for malformed field input."""


class InvalidNumberError(AssetInputError):
    """Raised when a value cannot be read as an integer of the expected width."""


class InvalidHexError(AssetInputError):
    """Raised when a bytes field is not an even-length hex string."""


class InvalidFieldError(AssetInputError):
    """Raised when a value has the wrong shape or violates a length limit."""


class MissingFieldError(AssetInputError):
    """Raised when a required field is absent."""


# Scalar helpers ---------------------------------------------------------


def parse_integer(raw: Any, name: str, kind: FieldKind = FieldKind.UINT64) -> int:
    """Return ``raw`` as an int within the range of ``kind``.

    Accepts ints, decimal strings and integral floats small enough to be exact.
    """

    if isinstance(raw, bool):
        raise InvalidNumberError(f"Cannot convert {raw} to an integer for '{name}'")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer() or abs(raw) >= _MAX_SAFE_FLOAT_INT:
            raise InvalidNumberError(f"Cannot convert {raw} to an integer for '{name}'")
        value = int(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        digits = text[1:] if text[:1] in {"-", "+"} else text
        if not digits.isdigit() or not digits.isascii():
            raise InvalidNumberError(f"Cannot convert {raw} to an integer for '{name}'")
        value = int(text)
    else:
        raise InvalidNumberError(f"Cannot convert {raw!r} to an integer for '{name}'")

    if kind.is_signed:
        half = 1 << (kind.bits - 1)
        low, high = -half, half - 1
    else:
        low, high = 0, (1 << kind.bits) - 1
    if not low <= value <= high:
        raise InvalidNumberError(f"'{name}' value {value} is outside the {kind.value} range")
    return value


def hex_to_bytes(raw: Any, name: str, *, length: int | None = None) -> bytes:
    """Decode a hex string, optionally enforcing an exact byte length."""

    if isinstance(raw, (bytes, bytearray)):
        value = bytes(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if len(text) % 2 or not _HEX_DIGITS.issuperset(text):
            raise InvalidHexError(f"'{name}' must be an even-length hex string, got {raw!r}")
        value = bytes.fromhex(text)
    else:
        raise InvalidHexError(f"'{name}' must be a hex string, got {type(raw).__name__}")
    if length is not None and len(value) != length:
        raise InvalidHexError(f"'{name}' must be {length} bytes, got {len(value)}")
    return value


def _coerce_bool(raw: Any, name: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "y"}:
            return True
        if normalized in {"0", "false", "no", "n"}:
            return False
    raise InvalidFieldError(f"'{name}' expects a boolean, got {raw!r}")


def _check_length(spec: FieldSpec, size: int, name: str, unit: str) -> None:
    if spec.min_length is not None and size < spec.min_length:
        raise InvalidFieldError(f"'{name}' must have at least {spec.min_length} {unit}, got {size}")
    if spec.max_length is not None and size > spec.max_length:
        raise InvalidFieldError(f"'{name}' must have at most {spec.max_length} {unit}, got {size}")


# Prompt answers -> JSON-shaped values -----------------------------------


def _prompt_scalar(spec: FieldSpec, raw: str, name: str) -> Any:
    if spec.kind.is_integer:
        return parse_integer(raw, name, spec.kind)
    if spec.kind is FieldKind.BOOLEAN:
        return _coerce_bool(raw, name)
    return raw


def _split_group(spec: FieldSpec, raw: str) -> dict[str, Any]:
    assert spec.items is not None and spec.items.schema is not None
    group = spec.items.schema
    parts = [piece.strip() for piece in raw.split(",")]
    if len(parts) != len(group.fields):
        expected = ", ".join(group.field_names)
        raise InvalidFieldError(
            f"'{spec.name}' expects {len(group.fields)} comma separated values ({expected}), got {raw!r}"
        )
    item: dict[str, Any] = {}
    for sub_spec, part in zip(group.fields, parts):
        if not sub_spec.kind.is_scalar:
            raise InvalidFieldError(f"'{spec.name}.{sub_spec.name}' cannot be entered at a prompt")
        item[sub_spec.name] = _prompt_scalar(sub_spec, part, f"{spec.name}.{sub_spec.name}")
    return item


def _prompt_value(spec: FieldSpec, raw: Any) -> Any:
    if spec.is_repeated_group:
        entries = [raw] if isinstance(raw, str) else list(raw)
        return [_split_group(spec, entry) for entry in entries]
    if spec.kind is FieldKind.ARRAY:
        assert spec.items is not None
        if raw.strip() == "":
            return []
        return [_prompt_scalar(spec.items, piece.strip(), spec.name) for piece in raw.split(",")]
    if spec.kind is FieldKind.OBJECT:
        assert spec.schema is not None
        wrapper = FieldSpec(
            name=spec.name,
            field_number=spec.field_number,
            kind=FieldKind.ARRAY,
            items=FieldSpec(
                name=spec.name,
                field_number=spec.field_number,
                kind=FieldKind.OBJECT,
                schema=spec.schema,
            ),
        )
        return _split_group(wrapper, raw)
    return _prompt_scalar(spec, raw, spec.name)


def transform_asset(schema: SchemaDescriptor, answers: Mapping[str, Any]) -> dict[str, Any]:
    """Convert prompt answers for ``schema`` into JSON-shaped values.

    Integer fields become ints, comma lists become lists (an empty answer is
    an empty list) and bytes stay as the hex text that was typed.
    """

    result: dict[str, Any] = {}
    for spec in schema.fields:
        if spec.name not in answers:
            raise MissingFieldError(f"Missing answer for '{spec.name}'")
        result[spec.name] = _prompt_value(spec, answers[spec.name])
    return result


def transform_nested_asset(
    schema: SchemaDescriptor, entries: Sequence[Mapping[str, Any]]
) -> dict[str, Any]:
    """Fold per-iteration prompt answers into one asset value.

    Each entry holds the answers of one pass through a repeated group, e.g.
    ``[{"votes": "a,100"}, {"votes": "b,300"}]``; items keep input order.
    """

    result: dict[str, Any] = {}
    for entry in entries:
        for name, raw in entry.items():
            try:
                spec = schema.field(name)
            except KeyError:
                raise InvalidFieldError(f"Unknown field '{name}' for {schema.schema_id}") from None
            if spec.is_repeated_group:
                result.setdefault(name, []).extend(_prompt_value(spec, raw))
            else:
                result[name] = _prompt_value(spec, raw)
    return result


# JSON-shaped values -> typed values -------------------------------------


def asset_from_json(
    schema: SchemaDescriptor, value: Any, *, path: str = ""
) -> dict[str, Any]:
    """Validate ``value`` against ``schema`` and return codec-ready values."""

    if not isinstance(value, Mapping):
        raise InvalidFieldError(f"'{path or schema.schema_id}' must be an object")
    unknown = set(value) - set(schema.field_names)
    if unknown:
        raise InvalidFieldError(f"Unknown field(s) {sorted(unknown)} for {schema.schema_id}")

    typed: dict[str, Any] = {}
    for spec in schema.fields:
        name = f"{path}{spec.name}"
        if spec.name not in value:
            raise MissingFieldError(f"Missing required field '{name}'")
        typed[spec.name] = _from_json(spec, value[spec.name], name)
    return typed


def _from_json(spec: FieldSpec, raw: Any, name: str) -> Any:
    if spec.kind.is_integer:
        return parse_integer(raw, name, spec.kind)
    if spec.kind is FieldKind.BOOLEAN:
        return _coerce_bool(raw, name)
    if spec.kind is FieldKind.BYTES:
        value = hex_to_bytes(raw, name)
        _check_length(spec, len(value), name, "bytes")
        return value
    if spec.kind is FieldKind.STRING:
        if not isinstance(raw, str):
            raise InvalidFieldError(f"'{name}' expects a string, got {raw!r}")
        _check_length(spec, len(raw), name, "characters")
        return raw
    if spec.kind is FieldKind.ARRAY:
        assert spec.items is not None
        if not isinstance(raw, (list, tuple)):
            raise InvalidFieldError(f"'{name}' expects a list, got {raw!r}")
        _check_length(spec, len(raw), name, "items")
        return [_from_json(spec.items, item, f"{name}[{index}]") for index, item in enumerate(raw)]
    assert spec.schema is not None
    return asset_from_json(spec.schema, raw, path=f"{name}.")


def asset_to_json(schema: SchemaDescriptor, value: Mapping[str, Any]) -> dict[str, Any]:
    """Render typed values for output: 64-bit integers as strings, bytes as hex."""

    return {spec.name: _to_json(spec, value[spec.name]) for spec in schema.fields}


def _to_json(spec: FieldSpec, value: Any) -> Any:
    if spec.kind.is_integer:
        return str(value) if spec.kind.bits == 64 else value
    if spec.kind is FieldKind.BYTES:
        return bytes(value).hex()
    if spec.kind is FieldKind.ARRAY:
        assert spec.items is not None
        return [_to_json(spec.items, item) for item in value]
    if spec.kind is FieldKind.OBJECT:
        assert spec.schema is not None
        return asset_to_json(spec.schema, value)
    return value
