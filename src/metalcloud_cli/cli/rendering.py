"""Schema-driven output rendering shared by every command.

Rows are rendered against an ordered list of
:class:`~metalcloud_cli.core.schema.SchemaField` into one of three
encodings:

* ``""`` — a fixed-width ASCII table drawn with Rich.  A field's size is
  the column's minimum width; longer values widen the column and are
  never truncated.
* ``"csv"`` — a header line of field names, then one line per row.
* ``"json"`` — an array of objects keyed by field name, in schema order.

The transposed variant lays a single record out as name/value rows in
the human-readable encoding; CSV and JSON are identical either way.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from metalcloud_cli.core.schema import FieldType, SchemaField, check_arity
from metalcloud_cli.exceptions import EnvironmentError, UnsupportedFormatError

FORMAT_TEXT = ""
FORMAT_CSV = "csv"
FORMAT_JSON = "json"

SUPPORTED_FORMATS: tuple[str, ...] = (FORMAT_TEXT, FORMAT_CSV, FORMAT_JSON)

# Cell padding plus one border character per column.
_COLUMN_OVERHEAD = 3

# Widths are measured in terminal cells; wide characters take two.
# Extra console width so Rich never has to shrink a column.
_WIDTH_SLACK = 8


def _import_rich() -> tuple[Any, Any, Any, Any, Any]:
    """Import the Rich pieces needed for text tables lazily."""
    try:
        from rich import box
        from rich.cells import cell_len
        from rich.console import Console
        from rich.table import Table
        from rich.text import Text
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return box, Console, Table, Text, cell_len


# ---------------------------------------------------------------------------
# Value conversion (pure)
# ---------------------------------------------------------------------------

def stringify(value: Any, field_type: FieldType) -> str:
    """Render *value* as text according to *field_type*."""
    if value is None:
        return ""
    if field_type is FieldType.INT:
        return str(int(value))
    if field_type is FieldType.FLOAT:
        return f"{float(value):.2f}"
    if field_type is FieldType.BOOL:
        return "true" if value else "false"
    return str(value)


def jsonify(value: Any, field_type: FieldType) -> Any:
    """Convert *value* to the JSON type matching *field_type*."""
    if value is None:
        return None
    if field_type is FieldType.INT:
        return int(value)
    if field_type is FieldType.FLOAT:
        return float(value)
    if field_type is FieldType.BOOL:
        return bool(value)
    return str(value)


def normalize_format(fmt: str | None) -> str:
    """Return the canonical format name or raise :class:`UnsupportedFormatError`."""
    normalized = (fmt or "").strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported format: {fmt}",
            hint="Supported values are 'json' and 'csv'; omit -format for a table.",
        )
    return normalized


# ---------------------------------------------------------------------------
# Encoders
# ---------------------------------------------------------------------------

def _encode_csv(rows: Sequence[Sequence[Any]], schema: Sequence[SchemaField]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([field.name for field in schema])
    for row in rows:
        writer.writerow(
            [stringify(value, field.type) for field, value in zip(schema, row)],
        )
    return buffer.getvalue()


def _encode_json(rows: Sequence[Sequence[Any]], schema: Sequence[SchemaField]) -> str:
    records = [
        {field.name: jsonify(value, field.type) for field, value in zip(schema, row)}
        for row in rows
    ]
    return json.dumps(records, indent=4)


def _print_to_string(renderable: Any, width: int) -> str:
    """Render a Rich object into plain text of the given width."""
    _, console_class, _, _, _ = _import_rich()
    buffer = io.StringIO()
    console_class(
        file=buffer,
        width=width,
        color_system=None,
        highlight=False,
        emoji=False,
        legacy_windows=False,
    ).print(renderable)
    return buffer.getvalue()


def _encode_text(
    title: str,
    caption: str,
    rows: Sequence[Sequence[Any]],
    schema: Sequence[SchemaField],
) -> str:
    box, _, table_class, text_class, cell_len = _import_rich()

    cells = [
        [stringify(value, field.type) for field, value in zip(schema, row)]
        for row in rows
    ]
    widths = [
        max([field.size, cell_len(field.name)] + [cell_len(line[i]) for line in cells])
        for i, field in enumerate(schema)
    ]

    table = table_class(
        title=text_class(title) if title else None,
        caption=text_class(caption) if caption else None,
        box=box.ASCII,
        show_header=True,
    )
    for field, width in zip(schema, widths):
        table.add_column(
            text_class(field.name),
            min_width=width,
            no_wrap=True,
            justify="right" if field.type in (FieldType.INT, FieldType.FLOAT) else "left",
        )
    for line in cells:
        table.add_row(*(text_class(cell) for cell in line))

    total = sum(widths) + _COLUMN_OVERHEAD * len(widths) + 1
    return _print_to_string(
        table, max(total, cell_len(title), cell_len(caption)) + _WIDTH_SLACK,
    )


def _encode_transposed_text(
    title: str,
    caption: str,
    rows: Sequence[Sequence[Any]],
    schema: Sequence[SchemaField],
) -> str:
    box, _, table_class, text_class, cell_len = _import_rich()

    heading = "\n".join(part for part in (title, caption) if part)
    name_width = max((cell_len(field.name) for field in schema), default=0)
    parts: list[str] = []
    for row in rows:
        values = [stringify(value, field.type) for field, value in zip(schema, row)]
        value_width = max(
            [field.size for field in schema] + [cell_len(value) for value in values],
            default=0,
        )
        table = table_class(
            title=text_class(heading) if heading else None,
            box=box.ASCII,
            show_header=False,
        )
        table.add_column(min_width=name_width, no_wrap=True)
        table.add_column(min_width=value_width, no_wrap=True)
        for field, value in zip(schema, values):
            table.add_row(text_class(field.name), text_class(value))

        total = name_width + value_width + 2 * _COLUMN_OVERHEAD + 1
        longest_heading = max((cell_len(line) for line in heading.splitlines()), default=0)
        parts.append(
            _print_to_string(table, max(total, longest_heading) + _WIDTH_SLACK),
        )
    return "".join(parts)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_table(
    title: str,
    caption: str,
    fmt: str | None,
    rows: Sequence[Sequence[Any]],
    schema: Sequence[SchemaField],
) -> str:
    """Render *rows* as one record per line/object.

    Raises
    ------
    UnsupportedFormatError
        If *fmt* is not ``""``, ``"csv"`` or ``"json"``.
    ValueError
        If a row's length differs from the schema's.
    """
    normalized = normalize_format(fmt)
    check_arity(rows, schema)
    if normalized == FORMAT_CSV:
        return _encode_csv(rows, schema)
    if normalized == FORMAT_JSON:
        return _encode_json(rows, schema)
    return _encode_text(title, caption, rows, schema)


def render_transposed_table(
    title: str,
    caption: str,
    fmt: str | None,
    rows: Sequence[Sequence[Any]],
    schema: Sequence[SchemaField],
) -> str:
    """Render *rows* with field names down the side (single-entity views).

    Same errors as :func:`render_table`.
    """
    normalized = normalize_format(fmt)
    check_arity(rows, schema)
    if normalized == FORMAT_CSV:
        return _encode_csv(rows, schema)
    if normalized == FORMAT_JSON:
        return _encode_json(rows, schema)
    return _encode_transposed_text(title, caption, rows, schema)
