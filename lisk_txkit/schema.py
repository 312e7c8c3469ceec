"""Schema descriptors shared by prompting, transformation and the codec.

Node schemas arrive as JSON-schema style mappings where every property carries
a ``fieldNumber`` and either a ``dataType`` (scalars), ``type: array`` with an
``items`` block, or ``type: object`` with nested ``properties``.  They are
parsed once into immutable :class:`SchemaDescriptor` values so the rest of the
package never inspects raw dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class SchemaError(ValueError):
    """Raised when a schema mapping cannot be understood."""


class FieldKind(Enum):
    """Tagged union of the field types a schema may declare."""

    UINT32 = "uint32"
    UINT64 = "uint64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    BYTES = "bytes"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_KINDS

    @property
    def is_signed(self) -> bool:
        return self in (FieldKind.SINT32, FieldKind.SINT64)

    @property
    def is_varint(self) -> bool:
        return self.is_integer or self is FieldKind.BOOLEAN

    @property
    def bits(self) -> int:
        if self in (FieldKind.UINT64, FieldKind.SINT64):
            return 64
        return 32

    @property
    def is_scalar(self) -> bool:
        return self not in (FieldKind.ARRAY, FieldKind.OBJECT)


_INTEGER_KINDS = frozenset(
    {FieldKind.UINT32, FieldKind.UINT64, FieldKind.SINT32, FieldKind.SINT64}
)
_SCALAR_TYPES = {kind.value: kind for kind in FieldKind if kind.is_scalar}


@dataclass(frozen=True)
class FieldSpec:
    """One property of a schema, in declaration order."""

    name: str
    field_number: int
    kind: FieldKind
    items: "FieldSpec | None" = None
    schema: "SchemaDescriptor | None" = None
    min_length: int | None = None
    max_length: int | None = None

    @property
    def is_repeated_group(self) -> bool:
        return (
            self.kind is FieldKind.ARRAY
            and self.items is not None
            and self.items.kind is FieldKind.OBJECT
        )

    @property
    def format_hint(self) -> str | None:
        if self.kind is FieldKind.BYTES:
            return "hex"
        if self.kind is FieldKind.ARRAY and not self.is_repeated_group:
            return "comma-separated"
        return None


@dataclass(frozen=True)
class SchemaDescriptor:
    """Ordered collection of :class:`FieldSpec` entries."""

    schema_id: str
    fields: tuple[FieldSpec, ...]

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)

    @property
    def field_names(self) -> list[str]:
        return [spec.name for spec in self.fields]


def parse_schema(raw: Mapping[str, Any], *, schema_id: str | None = None) -> SchemaDescriptor:
    """Build a :class:`SchemaDescriptor` from a JSON schema mapping.

    Properties are ordered by ``fieldNumber``; duplicate numbers are rejected.
    """

    if not isinstance(raw, Mapping):
        raise SchemaError("Schema must be a mapping")
    resolved_id = schema_id or str(raw.get("$id", "anonymous"))
    properties = raw.get("properties")
    if not isinstance(properties, Mapping):
        raise SchemaError(f"Schema {resolved_id} must define properties")

    fields = [
        _parse_field(name, prop, context=f"{resolved_id}.{name}")
        for name, prop in properties.items()
    ]
    fields.sort(key=lambda spec: spec.field_number)
    numbers = [spec.field_number for spec in fields]
    if len(numbers) != len(set(numbers)):
        raise SchemaError(f"Schema {resolved_id} declares duplicate fieldNumber values")
    return SchemaDescriptor(schema_id=resolved_id, fields=tuple(fields))


def _parse_field(
    name: str, prop: Any, *, context: str, field_number: int | None = None
) -> FieldSpec:
    if not isinstance(prop, Mapping):
        raise SchemaError(f"Property {context} must be a mapping")

    if field_number is None:
        field_number = prop.get("fieldNumber")
        if not isinstance(field_number, int) or field_number < 1:
            raise SchemaError(f"Property {context} must declare a positive fieldNumber")

    data_type = prop.get("dataType")
    type_name = prop.get("type")
    min_length = prop.get("minLength")
    max_length = prop.get("maxLength")

    if data_type is not None:
        kind = _SCALAR_TYPES.get(data_type)
        if kind is None:
            raise SchemaError(f"Property {context} has unsupported dataType {data_type!r}")
        return FieldSpec(
            name=name,
            field_number=field_number,
            kind=kind,
            min_length=min_length,
            max_length=max_length,
        )

    if type_name == "array":
        items = _parse_field(
            name, prop.get("items"), context=f"{context}[]", field_number=field_number
        )
        if items.kind is FieldKind.ARRAY:
            raise SchemaError(f"Property {context} nests arrays, which is not encodable")
        return FieldSpec(
            name=name,
            field_number=field_number,
            kind=FieldKind.ARRAY,
            items=items,
            min_length=prop.get("minItems"),
            max_length=prop.get("maxItems"),
        )

    if type_name == "object":
        nested = parse_schema(prop, schema_id=context)
        return FieldSpec(
            name=name, field_number=field_number, kind=FieldKind.OBJECT, schema=nested
        )

    raise SchemaError(f"Property {context} must declare dataType or type")
