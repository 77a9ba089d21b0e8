"""
browserscript CLI - console helpers shared by the click commands.
"""
from typing import Dict
import json

import click
from rich.console import Console
from rich.table import Table

from ..core.models import Script
from ..automation.types import RunResult

# Create console for rich output
console = Console()


def load_script_file(path: str) -> Script:
    """Load a JSON script, turning read/parse problems into usage errors."""
    try:
        return Script.load(path)
    except OSError as e:
        raise click.ClickException(f"Cannot read script {path}: {e}")
    except (ValueError, TypeError, AttributeError) as e:
        raise click.ClickException(f"Malformed script {path}: {e}")


def print_text_results(texts: Dict[str, str]) -> None:
    """Print extracted text results in a table."""
    if not texts:
        console.print("[yellow]No text results.[/]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Result", style="cyan", no_wrap=True)
    table.add_column("Text", style="green")
    for name, value in texts.items():
        table.add_row(name, value)
    console.print(table)


def print_run_summary(result: RunResult) -> None:
    print_text_results(result.texts)

    for name, path in result.artifacts.items():
        console.print(f"[green]✓[/] {name}: {path}")
    for err in result.persistence_errors:
        console.print(f"[red]✗[/] {err}")

    steps = f"{result.steps_completed}/{result.steps_total} steps"
    if result.ok:
        console.print(f"[green]✓[/] Script '{result.script_name}' completed ({steps}, {result.elapsed:.1f}s)")
    else:
        console.print(f"[red]✗[/] Script '{result.script_name}' failed after {steps}: {result.error}")


def result_to_json(result: RunResult) -> str:
    payload = {
        "script": result.script_name,
        "state": result.state.value,
        "texts": result.texts,
        "artifacts": {name: str(path) for name, path in result.artifacts.items()},
        "error": str(result.error) if result.error else None,
        "error_type": type(result.error).__name__ if result.error else None,
        "persistence_errors": [str(e) for e in result.persistence_errors],
        "steps_total": result.steps_total,
        "steps_completed": result.steps_completed,
        "elapsed": round(result.elapsed, 3),
    }
    return json.dumps(payload, indent=2)
