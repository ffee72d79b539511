"""refract CLI - Method resolution over type universes.

This module provides the command-line interface for refract, enabling
universe validation, overload resolution, override chains and annotation
queries against a universe JSON file.
"""

from __future__ import annotations

import json
import logging
import traceback
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from refract.core.config import get_config

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="refract",
    help="Reflective method resolution over declarative type universes",
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

# Exit code for ambiguous resolution
EXIT_AMBIGUOUS = 2

# Global verbose flag
_verbose: bool = False


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode."""
    global _verbose
    _verbose = verbose


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{traceback.format_exc()}[/dim]")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with full tracebacks"),
    ] = False,
) -> None:
    """refract CLI - Reflective method resolution."""
    set_verbose(verbose)
    level = "DEBUG" if verbose else get_config().log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


UniversePath = Annotated[
    Path,
    typer.Argument(
        help="Path to a universe JSON file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output machine-readable JSON"),
]


def open_registry(universe_path: Path):
    """Load a universe file into a new registry, exiting on failure."""
    from refract.core.errors import RegistryError
    from refract.core.serializer import SerializationError, load_universe
    from refract.types.registry import TypeRegistry

    try:
        return TypeRegistry.from_universe(load_universe(universe_path))
    except SerializationError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        print_exception(e)
        raise typer.Exit(1)
    except RegistryError as e:
        err_console.print(f"[red]Error:[/red] {e.message}")
        err_console.print("[yellow]Hint:[/yellow] Run 'refract validate' for details")
        print_exception(e)
        raise typer.Exit(1)


def lookup_types(registry, names: list[str], allow_null: bool = False) -> list:
    """Resolve type names, exiting on unknown names. ``null`` maps to None when allowed."""
    from refract.core.errors import RegistryError

    types = []
    for name in names:
        if allow_null and name == "null":
            types.append(None)
            continue
        try:
            types.append(registry.get(name))
        except RegistryError as e:
            err_console.print(f"[red]Error:[/red] {e.message}")
            print_exception(e)
            raise typer.Exit(1)
    return types


def method_to_dict(method) -> dict:
    """JSON view of a method descriptor."""
    return {
        "declaring_type": method.declaring_type.name,
        "name": method.name,
        "parameter_types": [p.name for p in method.parameter_types],
        "signature": method.signature_text,
        "visibility": method.visibility.value,
        "static": method.is_static,
        "varargs": method.is_varargs,
    }


@app.command()
def validate(universe_path: UniversePath) -> None:
    """Check a universe file for reference integrity.

    Example:
        refract validate types.json
    """
    from refract.cli._tables import build_validation_table
    from refract.core.serializer import SerializationError, load_universe
    from refract.types.registry import TypeRegistry

    try:
        universe = load_universe(universe_path)
    except SerializationError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        print_exception(e)
        raise typer.Exit(1)

    result = TypeRegistry().validate(universe)
    if result.is_valid:
        console.print(f"[green]✓[/green] Universe is valid")
        console.print(f"  Types: {len(universe.types)}")
        return

    err_console.print(build_validation_table(result.errors))
    err_console.print(f"[red]Error:[/red] {len(result.errors)} validation error(s)")
    raise typer.Exit(1)


@app.command()
def resolve(
    universe_path: UniversePath,
    type_name: Annotated[str, typer.Argument(help="Type to search")],
    method_name: Annotated[str, typer.Argument(help="Method name")],
    arg_types: Annotated[
        Optional[list[str]],
        typer.Argument(help="Argument types; 'null' matches any reference type"),
    ] = None,
    exact: Annotated[
        bool,
        typer.Option("--exact", help="Require exactly these parameter types"),
    ] = False,
    ignore_access: Annotated[
        bool,
        typer.Option("--ignore-access", help="Search declared methods of any visibility"),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """Resolve the method a call would dispatch to.

    Example:
        refract resolve types.json pkg.Sample f java.lang.String
        refract resolve types.json pkg.Sample f null --ignore-access
    """
    from refract.core.errors import AmbiguousMethodError
    from refract.reflect.matching import (
        find_matching_accessible_method,
        get_accessible_method,
        get_matching_method,
    )

    if exact and ignore_access:
        err_console.print("[red]Error:[/red] --exact and --ignore-access are mutually exclusive")
        raise typer.Exit(1)

    registry = open_registry(universe_path)
    owner = lookup_types(registry, [type_name])[0]
    types = lookup_types(registry, arg_types or [], allow_null=not exact)

    overridden = False
    try:
        if exact:
            method = get_accessible_method(owner, method_name, *types)
        elif ignore_access:
            method = get_matching_method(owner, method_name, *types)
        else:
            found = find_matching_accessible_method(owner, method_name, *types)
            method = None if found is None else found.method
            overridden = found is not None and found.overridden
    except AmbiguousMethodError as e:
        if json_output:
            typer.echo(
                json.dumps(
                    {"ambiguous": [method_to_dict(c) for c in e.candidates]},
                    ensure_ascii=False,
                    indent=2,
                )
            )
        else:
            err_console.print(f"[red]Ambiguous:[/red] {e}")
        print_exception(e)
        raise typer.Exit(EXIT_AMBIGUOUS)

    if method is None:
        params = ",".join("null" if t is None else t.name for t in types)
        if json_output:
            typer.echo(json.dumps({"method": None}, indent=2))
        else:
            err_console.print(
                f"[yellow]No matching method:[/yellow] {method_name}({params}) on {owner.name}"
            )
        raise typer.Exit(1)

    if json_output:
        typer.echo(
            json.dumps(
                {"method": method_to_dict(method), "access_override": overridden},
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    console.print(f"[green]✓[/green] {method.signature_text}")
    console.print(f"  Declared on: [cyan]{method.declaring_type.name}[/cyan]")
    if overridden:
        console.print("  [yellow]Requires access override[/yellow]")


@app.command()
def overrides(
    universe_path: UniversePath,
    type_name: Annotated[str, typer.Argument(help="Declaring type of the method")],
    method_name: Annotated[str, typer.Argument(help="Method name")],
    param_types: Annotated[
        Optional[list[str]],
        typer.Argument(help="Declared parameter types of the method"),
    ] = None,
    interfaces: Annotated[
        Optional[bool],
        typer.Option(
            "--interfaces/--no-interfaces",
            help="Include interfaces (defaults to REFRACT_OVERRIDE_INCLUDE_INTERFACES)",
        ),
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """List the override chain of a declared method, most derived first.

    Example:
        refract overrides types.json pkg.StringBox get java.lang.String --interfaces
    """
    from refract.cli._tables import build_methods_table
    from refract.core.errors import RegistryError
    from refract.reflect.overrides import get_override_hierarchy

    registry = open_registry(universe_path)
    try:
        method = registry.method(type_name, method_name, *(param_types or []))
    except RegistryError as e:
        err_console.print(f"[red]Error:[/red] {e.message}")
        print_exception(e)
        raise typer.Exit(1)

    chain = get_override_hierarchy(method, include_interfaces=interfaces)

    if json_output:
        typer.echo(json.dumps([method_to_dict(m) for m in chain], ensure_ascii=False, indent=2))
        return

    console.print(f"[blue]Override chain for:[/blue] {method.signature_text}")
    console.print(build_methods_table(chain))


@app.command()
def annotated(
    universe_path: UniversePath,
    type_name: Annotated[str, typer.Argument(help="Type to search")],
    marker: Annotated[str, typer.Argument(help="Annotation name")],
    supers: Annotated[
        bool,
        typer.Option("--supers", help="Also search superclasses and interfaces"),
    ] = False,
    ignore_access: Annotated[
        bool,
        typer.Option("--ignore-access", help="Include non-public declared methods"),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """List methods carrying an annotation.

    Example:
        refract annotated types.json pkg.Service Deprecated --supers
    """
    from refract.cli._tables import build_annotated_table
    from refract.reflect.annotations import get_methods_with_annotation

    registry = open_registry(universe_path)
    owner = lookup_types(registry, [type_name])[0]
    methods = get_methods_with_annotation(
        owner, marker, search_supers=supers, ignore_access=ignore_access
    )

    if json_output:
        payload = []
        for method in methods:
            entry = method_to_dict(method)
            annotation = method.get_annotation(marker)
            entry["attributes"] = annotation.attributes if annotation else {}
            payload.append(entry)
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
        return

    if not methods:
        console.print(f"[yellow]No methods annotated with {marker}[/yellow]")
        return
    console.print(build_annotated_table(methods, marker))


if __name__ == "__main__":
    app()
