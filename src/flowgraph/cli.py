"""Command-line interface for compiling workflow definitions."""

from __future__ import annotations

import logging
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from flowgraph.errors import ConfigError, DefinitionError, SchemaValidationError
from flowgraph.io import render_workflow, write_workflow
from flowgraph.schema import load_schema
from flowgraph.workflow import Workflow, compile_file

app = typer.Typer(
    name="flowgraph",
    help="Compile workflow definitions into task graphs.",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _compile_or_exit(workflow_file: str, name: str | None) -> Workflow:
    try:
        return compile_file(workflow_file, name=name)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None
    except DefinitionError as e:
        console.print(f"[red]Definition Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None
    except ConfigError as e:
        console.print(f"[red]Config Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None


def _load_schema_or_exit(schema_path: str) -> dict[str, Any]:
    try:
        return load_schema(schema_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None
    except DefinitionError as e:
        console.print(f"[red]Schema Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None


@app.command("compile")
def compile_cmd(
    workflow_file: str = typer.Argument(..., help="Path to workflow YAML file"),
    name: str | None = typer.Option(
        None,
        "--name",
        "-n",
        help="Workflow name (default: file name without extension)",
    ),
    output_path: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Path to write the compiled workflow JSON (default: stdout)",
    ),
    schema_path: str | None = typer.Option(
        None,
        "--schema",
        "-s",
        help="JSON schema to check the compiled workflow against (default: built-in)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Compile a workflow definition and emit the task graph as JSON.

    Example:
        flowgraph compile workflows/daily.yaml -o build/daily.json
        flowgraph compile workflows/daily.yaml --schema schemas/workflow.json
    """
    _configure_logging(verbose)
    schema = _load_schema_or_exit(schema_path) if schema_path else None
    workflow = _compile_or_exit(workflow_file, name)

    try:
        if output_path:
            written = write_workflow(output_path, workflow, schema=schema)
            console.print(
                f"[green]✓ Wrote {len(workflow.tasks)} tasks to {written}[/green]"
            )
        else:
            console.print_json(render_workflow(workflow, schema=schema))
    except SchemaValidationError as e:
        console.print(f"[red]Schema Error:[/red] {escape(str(e))}")
        for error in e.errors:
            console.print(f"  • {escape(error)}")
        raise typer.Exit(code=1) from None


@app.command("validate")
def validate_cmd(
    workflow_file: str = typer.Argument(..., help="Path to workflow YAML file"),
    name: str | None = typer.Option(
        None,
        "--name",
        "-n",
        help="Workflow name (default: file name without extension)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Validate a workflow definition without emitting it.

    Checks:
    - YAML syntax
    - Tasks have no subtasks
    - 'after' is only used under parallel groups
    - Every 'after' names an earlier sibling
    """
    _configure_logging(verbose)
    workflow = _compile_or_exit(workflow_file, name)
    console.print(
        f"[green]✓ Workflow '{workflow.name}' is valid ({len(workflow.tasks)} tasks)[/green]"
    )


@app.command("show")
def show_cmd(
    workflow_file: str = typer.Argument(..., help="Path to workflow YAML file"),
    name: str | None = typer.Option(
        None,
        "--name",
        "-n",
        help="Workflow name (default: file name without extension)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Print the compiled task graph as a table."""
    _configure_logging(verbose)
    workflow = _compile_or_exit(workflow_file, name)

    table = Table(title=f"Workflow {workflow.name}")
    table.add_column("Index", style="cyan", justify="right")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Parent", style="dim", justify="right")
    table.add_column("Upstreams", style="dim")

    for task in workflow.tasks:
        table.add_row(
            str(task.index),
            task.name,
            task.kind.value,
            "" if task.parent_index is None else str(task.parent_index),
            ", ".join(str(i) for i in task.upstream_indexes),
        )

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
