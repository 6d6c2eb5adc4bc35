"""``variable`` commands."""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from metalcloud_cli.cli.registry import Command, add_format_flag
from metalcloud_cli.cli.rendering import render_table
from metalcloud_cli.core.protocols import MetalCloudClient
from metalcloud_cli.core.schema import FieldType, SchemaField

VARIABLE_SCHEMA: list[SchemaField] = [
    SchemaField("ID", FieldType.INT, 2),
    SchemaField("NAME", FieldType.STRING, 20),
    SchemaField("USAGE", FieldType.STRING, 5),
    SchemaField("JSON", FieldType.STRING, 5),
    SchemaField("CREATED", FieldType.STRING, 5),
    SchemaField("UPDATED", FieldType.STRING, 5),
]


@dataclass(frozen=True, slots=True)
class VariablesListArgs:
    usage: str = ""
    format: str = ""


def _init_list(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-usage",
        "--usage",
        dest="usage",
        default="",
        help="Variable's usage",
    )
    add_format_flag(parser)


def _bind_list(namespace: argparse.Namespace) -> VariablesListArgs:
    return VariablesListArgs(usage=namespace.usage or "", format=namespace.format or "")


def variables_list(args: VariablesListArgs, client: MetalCloudClient) -> str:
    variables = client.variables(args.usage)
    rows = [
        [
            variable.variable_id,
            variable.variable_name,
            variable.variable_usage,
            variable.variable_json,
            variable.variable_created_timestamp,
            variable.variable_updated_timestamp,
        ]
        for variable in sorted(variables.values(), key=lambda v: v.variable_name)
    ]
    return render_table("Variables", "", args.format, rows, VARIABLE_SCHEMA)


VARIABLE_COMMANDS: list[Command] = [
    Command(
        description="Lists available variables",
        subject="variable",
        alt_subject="var",
        predicate="list",
        alt_predicate="ls",
        init=_init_list,
        bind=_bind_list,
        execute=variables_list,
    ),
]
