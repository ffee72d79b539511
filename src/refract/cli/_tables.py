"""Rich table builders used by the CLI.

Kept separate to reduce duplication and keep the command module smaller.
"""

from __future__ import annotations

from rich.table import Table


def _visibility(method) -> str:
    return method.visibility.value


def build_methods_table(methods, title: str | None = None) -> Table:
    """Build a standard (#, Declaring Type, Signature, Visibility) table."""
    table = Table(show_header=True, title=title)
    table.add_column("#", style="dim")
    table.add_column("Declaring Type", style="cyan")
    table.add_column("Signature")
    table.add_column("Visibility")
    for index, method in enumerate(methods, start=1):
        table.add_row(
            str(index),
            method.declaring_type.name,
            method.signature_text,
            _visibility(method),
        )
    return table


def build_annotated_table(methods, marker: str) -> Table:
    """Build the method listing for `annotated`, with the marker's attributes."""
    table = Table(show_header=True, title=f"Methods annotated with {marker}")
    table.add_column("Declaring Type", style="cyan")
    table.add_column("Signature")
    table.add_column("Attributes")
    for method in methods:
        annotation = method.get_annotation(marker)
        attributes = ""
        if annotation is not None and annotation.attributes:
            attributes = ", ".join(f"{k}={v}" for k, v in annotation.attributes.items())
        table.add_row(method.declaring_type.name, method.signature_text, attributes)
    return table


def build_validation_table(errors) -> Table:
    """Build the error listing for `validate`."""
    table = Table(show_header=True, title="Validation Errors")
    table.add_column("Type", style="cyan")
    table.add_column("Field")
    table.add_column("Error")
    table.add_column("Message")
    for error in errors:
        table.add_row(
            error.entity_id,
            error.field_name,
            f"[red]{error.error_type.value}[/red]",
            error.message,
        )
    return table
