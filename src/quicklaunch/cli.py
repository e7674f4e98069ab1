"""CLI entry point for quicklaunch.

Provides commands:
  - run: Start the hotkey overlay
  - search: Rank a query once and print the results (no side effects)
  - shortcuts: List discovered shortcut candidates
  - config: Show the config location or the merged config
  - logs: Browse overlay log files
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from quicklaunch.config import ConfigError, LauncherConfig, get_config_dir, load_config
from quicklaunch.models import CopyText, OpenPath, RunCallback, SearchResult
from quicklaunch.scanner import ShortcutScanner
from quicklaunch.search import RankingEngine
from quicklaunch.tui import DEFAULT_LOG_DIR

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="quicklaunch - hotkey-summoned launcher, calculator and script runner",
    rich_markup_mode="rich",
)
console = Console()

config_app = typer.Typer(help="Inspect configuration")
app.add_typer(config_app, name="config")

ConfigDirOption = Annotated[
    Path | None,
    typer.Option("--config-dir", "-c", help="Config directory (default: platform app dir)"),
]


def _load(config_dir: Path | None) -> LauncherConfig:
    try:
        return load_config(config_dir)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(code=1)


def _describe(result: SearchResult) -> str:
    action = result.action
    if isinstance(action, OpenPath):
        return f"open {action.path}"
    if isinstance(action, CopyText):
        return f"copy {action.text!r}"
    if isinstance(action, RunCallback):
        return f"run {action.name}"
    return "-"


@app.command()
def run(
    config_dir: ConfigDirOption = None,
    global_hotkey: Annotated[
        bool,
        typer.Option(
            "--global-hotkey/--no-global-hotkey",
            help="Poll the OS-wide hotkey (needs root on Linux)",
        ),
    ] = True,
    log_dir: Annotated[
        str,
        typer.Option("--log-dir", help="Directory for JSON-lines logs"),
    ] = DEFAULT_LOG_DIR,
) -> None:
    """Start the overlay and wait for the hotkey."""
    from quicklaunch.tui import run_tui

    try:
        run_tui(config_dir=config_dir, global_hotkey=global_hotkey, log_dir=log_dir)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Query, or '=expr' for the calculator")],
    config_dir: ConfigDirOption = None,
    scripts: Annotated[
        bool,
        typer.Option("--scripts/--no-scripts", help="Load user scripts to include their shortcuts"),
    ] = False,
) -> None:
    """Rank QUERY exactly as the overlay would and print the results."""
    config = _load(config_dir)
    engine = RankingEngine(ShortcutScanner(config.search).scan(), config.search.aliases)

    if scripts:
        from quicklaunch.config import list_scripts
        from quicklaunch.scripting import ScriptWorker

        worker = ScriptWorker(list_scripts(config_dir))
        worker.start()
        for name in worker.drain_registrations():
            engine.register_callback_shortcut(name)
        worker.stop()

    results = engine.search(query)
    if not results:
        console.print("[dim]No results[/dim]")
        return

    table = Table(title=f"Results for {query!r}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Result", style="bold")
    table.add_column("Action")
    for i, result in enumerate(results, start=1):
        table.add_row(str(i), Text(result.text), Text(_describe(result)))
    console.print(table)


@app.command()
def shortcuts(config_dir: ConfigDirOption = None) -> None:
    """List every shortcut found in the configured directories."""
    config = _load(config_dir)
    candidates = ShortcutScanner(config.search).scan()
    if not candidates:
        console.print("[yellow]No shortcuts found.[/yellow] Check search.shortcut_paths.")
        return

    table = Table(title=f"{len(candidates)} shortcuts")
    table.add_column("Name", style="bold")
    table.add_column("Path", style="dim")
    for candidate in candidates:
        table.add_row(Text(candidate.name), Text(candidate.path or ""))
    console.print(table)


@config_app.command("path")
def config_path(config_dir: ConfigDirOption = None) -> None:
    """Print the config directory."""
    console.print(str(config_dir or get_config_dir()))


@config_app.command("show")
def config_show(config_dir: ConfigDirOption = None) -> None:
    """Print the merged config (file values over defaults)."""
    config = _load(config_dir)
    console.print_json(json.dumps(config.to_dict()))


@app.command(name="logs")
def logs_cmd(
    log_dir: Annotated[
        Path,
        typer.Option("--log-dir", help="Directory holding launcher-*.log files"),
    ] = Path(DEFAULT_LOG_DIR),
    level: Annotated[
        str | None,
        typer.Option("--level", "-l", help="Minimum level (DEBUG, INFO, WARNING, ERROR)"),
    ] = None,
    tail: Annotated[
        int,
        typer.Option("--tail", "-n", help="Show only the last N entries (0 = all)"),
    ] = 0,
) -> None:
    """Browse overlay logs as a table."""
    order = {"DEBUG": 0, "INFO": 1, "WARNING": 2, "ERROR": 3, "CRITICAL": 4}
    min_level = 0
    if level:
        if level.upper() not in order:
            console.print(f"[red]Unknown level '{level}'.[/red]")
            raise typer.Exit(1)
        min_level = order[level.upper()]

    log_files = sorted(log_dir.glob("launcher-*.log")) if log_dir.exists() else []
    if not log_files:
        console.print(f"[dim]No log files found in {log_dir}/[/dim]")
        return

    rows: list[dict] = []
    for log_file in log_files:
        with log_file.open(encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if order.get(entry.get("level", "INFO"), 0) >= min_level:
                    rows.append(entry)

    if tail > 0:
        rows = rows[-tail:]

    table = Table(title=f"{len(rows)} log entries")
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Level")
    table.add_column("Logger", style="cyan")
    table.add_column("Message")
    styles = {"ERROR": "red", "WARNING": "yellow", "DEBUG": "dim"}
    for entry in rows:
        lvl = entry.get("level", "")
        style = styles.get(lvl, "")
        table.add_row(
            entry.get("ts", ""),
            f"[{style}]{lvl}[/{style}]" if style else lvl,
            entry.get("logger", ""),
            Text(entry.get("msg", "")),
        )
    console.print(table)
