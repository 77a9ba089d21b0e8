"""
browserscript CLI - run declarative browser scripts from JSON files.
"""
import sys
import logging
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import console, load_script_file, print_run_summary, result_to_json
from ..core.config import DEFAULT_OUTPUT_DIR, DEFAULT_TIMEOUT, ENGINES, RunConfig
from ..core.errors import BrowserScriptError
from ..core.validation import validate_script
from ..automation.runner import ScriptRunner, create_engine

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, console=Console(stderr=True))]
)
logger = logging.getLogger("browserscript")

# Parameters accepted by each action kind, for `browserscript actions`
ACTION_HELP = [
    ("navigate", "url", "Load a URL in the session"),
    ("waitVisible", "selector", "Wait until the element is visible"),
    ("waitReady", "selector", "Wait until the element is in the DOM"),
    ("waitForNavigation", "", "Wait until the page body is ready"),
    ("wait", "timeout (seconds)", "Sleep for the given duration"),
    ("getText", "selector, result", "Store the element's visible text"),
    ("click", "selector", "Click the element"),
    ("setValue", "selector, value", "Set the element's value"),
    ("evaluate", "js", "Run JavaScript in the page"),
    ("screenshot", "result [, path, format, quality]", "Capture the full page"),
    ("takeElementScreenshot", "selector, result [, path, format, quality]", "Capture one element"),
]


@click.group(invoke_without_command=True)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug output",
    show_default=True
)
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """browserscript - run declarative browser scripts."""
    # Set debug logging if enabled
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")

    ctx.obj = {"debug": debug}

    # If no command is provided, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("script_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT, show_default=True,
              envvar="BROWSERSCRIPT_TIMEOUT", help="Per-step timeout in seconds")
@click.option("--output-dir", type=click.Path(file_okay=False), default=DEFAULT_OUTPUT_DIR, show_default=True,
              envvar="BROWSERSCRIPT_OUTPUT_DIR", help="Directory for screenshots")
@click.option("--engine", type=click.Choice(list(ENGINES)), default="playwright", show_default=True,
              envvar="BROWSERSCRIPT_ENGINE")
@click.option("--headless/--headed", default=True, show_default=True, envvar="BROWSERSCRIPT_HEADLESS")
@click.option("--user-data-dir", default=None, envvar="BROWSERSCRIPT_USER_DATA_DIR",
              help="Reuse a persistent browser profile")
@click.option("--hide-overlays", is_flag=True, default=False, help="Hide common modals and cookie banners")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the run result as JSON")
@click.pass_obj
def run(
    obj: dict,
    script_path: str,
    timeout: float,
    output_dir: str,
    engine: str,
    headless: bool,
    user_data_dir: Optional[str],
    hide_overlays: bool,
    as_json: bool,
) -> None:
    """Run SCRIPT_PATH against a fresh browser session."""
    script = load_script_file(script_path)
    try:
        config = RunConfig(
            timeout=timeout,
            output_dir=output_dir,
            engine=engine,
            headless=headless,
            user_data_dir=user_data_dir,
            hide_overlays=hide_overlays,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    try:
        browser = create_engine(config.engine)
    except RuntimeError as e:
        raise click.ClickException(str(e))

    result = ScriptRunner(browser, config).run(script)

    if as_json:
        click.echo(result_to_json(result))
    else:
        print_run_summary(result)
        if result.error is not None and obj.get("debug"):
            import traceback
            console.print("".join(traceback.format_exception(type(result.error), result.error, result.error.__traceback__)))

    if not result.ok or result.persistence_errors:
        sys.exit(1)


@cli.command()
@click.argument("script_path", type=click.Path(exists=True, dir_okay=False))
def validate(script_path: str) -> None:
    """Check SCRIPT_PATH without launching a browser."""
    script = load_script_file(script_path)
    try:
        steps = validate_script(script)
    except BrowserScriptError as e:
        console.print(f"[red]✗[/] {e}")
        sys.exit(1)
    console.print(f"[green]✓[/] Script '{script.name}' is valid ({len(steps)} steps)")


@cli.command()
def actions() -> None:
    """List the supported action kinds."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Parameters")
    table.add_column("Description", style="green")
    for kind, params, description in ACTION_HELP:
        table.add_row(kind, params, description)
    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
