import functools
import importlib.metadata
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer
from pydantic import TypeAdapter
from rich.console import Console
from rich.table import Table
from rich.traceback import Traceback

from .engine.browser.providers.launch_options import LaunchOptions
from .engine.browser.service import optimize_url
from .engine.cues.config import load_config
from .engine.cues.cue_sets import build_cue_sets
from .engine.cues.models import Cue, CueGroup
from .state import APP_STATE

app = typer.Typer(
    name="cue-optimizer",
    help="Builds the most robust selector for an element from its recorded cues.",
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

console = Console()
logger = structlog.get_logger(__name__)

_CUE_LIST = TypeAdapter(list[Cue])


def setup_logging(verbose: bool):
    """Routes structlog and standard library logs to stderr."""
    log_level = logging.DEBUG if verbose else logging.INFO
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processor=structlog.dev.ConsoleRenderer(),
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def version_callback(value: bool):
    """Prints the application version and exits."""
    if value:
        try:
            version = importlib.metadata.version("cue-optimizer")
            console.print(f"cue-optimizer version: {version}")
        except importlib.metadata.PackageNotFoundError:
            console.print("cue-optimizer version: unknown (package not installed)")
        raise typer.Exit()


def handle_exceptions(func):
    """A decorator to catch and format exceptions for all CLI commands."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        error_console = Console(stderr=True)
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            error_console.print(f"[bold red]Error:[/bold red] {e}")
            if APP_STATE.verbose_mode:
                error_console.print(
                    Traceback.from_exception(type(e), e, e.__traceback__)
                )
            raise typer.Exit(code=1)

    return wrapper


def load_cues(cues_path: Path) -> list[Cue]:
    """Reads a JSON list of cues, as produced by the recorder."""
    return _CUE_LIST.validate_json(cues_path.read_text(encoding="utf-8"))


def cue_group_to_dict(cue_group: CueGroup) -> dict:
    return {
        "selector": cue_group.to_selector(),
        "penalty": cue_group.penalty,
        "value_length": cue_group.value_length,
        "cues": [cue.model_dump() for cue in cue_group.cues],
    }


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose DEBUG logging."
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file overriding the optimizer search bounds.",
        exists=True,
        dir_okay=False,
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """Process global options before any command runs."""
    APP_STATE.verbose_mode = verbose
    APP_STATE.config_path = config
    setup_logging(verbose)


@app.command()
@handle_exceptions
def optimize(
    cues_path: Path = typer.Option(
        ..., "--cues", help="JSON file with the recorded cues.", exists=True
    ),
    url: str = typer.Option(..., "--url", help="Page to open."),
    target: str = typer.Option(
        ..., "--target", help="Selector of the element the cues describe."
    ),
    browser: Optional[str] = typer.Option(
        None, "--browser", help="chromium, firefox or webkit."
    ),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window."),
    device: Optional[str] = typer.Option(
        None, "--device", help="Playwright device to emulate, e.g. 'iPhone 11'."
    ),
    display: Optional[str] = typer.Option(
        None, "--display", help="X display for the browser, e.g. ':99'."
    ),
    navigation_timeout: Optional[int] = typer.Option(
        None, "--navigation-timeout", help="Page load timeout in milliseconds."
    ),
):
    """Opens the page and prints the best selector for the target as JSON."""
    cues = load_cues(cues_path)
    config = load_config(APP_STATE.config_path)
    launch_options = LaunchOptions.from_env(
        browser=browser,
        headless=False if headed else None,
        device=device,
        display=display,
        navigation_timeout_ms=navigation_timeout,
    )

    cue_group = optimize_url(url, cues, target, config, launch_options)
    if cue_group is None:
        Console(stderr=True).print(
            "[bold red]No selector found:[/bold red] no cue set matched the target."
        )
        raise typer.Exit(code=1)

    print(json.dumps(cue_group_to_dict(cue_group)))


@app.command("cue-sets")
@handle_exceptions
def cue_sets(
    cues_path: Path = typer.Option(
        ..., "--cues", help="JSON file with the recorded cues.", exists=True
    ),
):
    """Shows the cue sets derived from the cues, without opening a browser."""
    cues = load_cues(cues_path)
    config = load_config(APP_STATE.config_path)
    all_sets = build_cue_sets(cues)

    table = Table(title=f"Cue sets ({len(all_sets)})")
    table.add_column("#", justify="right")
    table.add_column("Cues", justify="right")
    table.add_column("Penalty", justify="right")
    table.add_column("Values")
    for index, cue_set in enumerate(all_sets):
        skipped = index >= config.max_cue_sets
        table.add_row(
            str(index),
            str(len(cue_set)),
            f"{sum(cue.penalty for cue in cue_set):g}",
            " ".join(cue.value for cue in cue_set),
            style="dim" if skipped else None,
        )
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
