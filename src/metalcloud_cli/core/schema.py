"""Declarative table schemas shared by every command's output.

A schema is an ordered sequence of :class:`SchemaField`; every row
rendered against it must have exactly one value per field, in the same
order.  :class:`SchemaBuilder` keeps the two in lockstep when field
groups are appended conditionally.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


class FieldType(enum.Enum):
    """Semantic type of a column; drives stringification and JSON typing."""

    INT = "int"
    STRING = "string"
    FLOAT = "float"
    BOOL = "bool"


@dataclass(frozen=True, slots=True)
class SchemaField:
    """One output column (or row label, when transposed)."""

    name: str
    type: FieldType
    size: int = 10
    """Minimum display width in the human-readable table."""


class SchemaBuilder:
    """Accumulate ``(field, value)`` pairs for a single-record table.

    Usage::

        builder = SchemaBuilder()
        builder.add(SchemaField("ID", FieldType.INT, 6), 42)
        if ssh is not None:
            builder.add(SchemaField("SSH_PORT", FieldType.INT), ssh.port)
        schema, row = builder.schema, builder.row
    """

    def __init__(self) -> None:
        self._fields: list[SchemaField] = []
        self._values: list[Any] = []

    def add(self, schema_field: SchemaField, value: Any) -> SchemaBuilder:
        self._fields.append(schema_field)
        self._values.append(value)
        return self

    def extend(
        self,
        fields: Sequence[SchemaField],
        values: Sequence[Any],
    ) -> SchemaBuilder:
        """Append a group of fields; *values* must match *fields* in length."""
        if len(fields) != len(values):
            raise ValueError(
                f"field group has {len(fields)} fields but {len(values)} values",
            )
        for schema_field, value in zip(fields, values):
            self.add(schema_field, value)
        return self

    @property
    def schema(self) -> list[SchemaField]:
        return list(self._fields)

    @property
    def row(self) -> list[Any]:
        return list(self._values)

    def __len__(self) -> int:
        return len(self._fields)


def check_arity(rows: Sequence[Sequence[Any]], schema: Sequence[SchemaField]) -> None:
    """Raise :class:`ValueError` when any row does not match the schema width.

    A mismatch is a programming error in the calling command, not a user
    error, and is therefore not a ``MetalCloudError``.
    """
    for index, row in enumerate(rows):
        if len(row) != len(schema):
            raise ValueError(
                f"row {index} has {len(row)} values but schema has "
                f"{len(schema)} fields",
            )
