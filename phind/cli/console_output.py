"""
Handles traversal diagnostics and the optional run summary on stderr.
"""
import click
import structlog
from rich.console import Console as RichConsole
from rich.table import Table

from phind.core.discovery.walker import TraversalStats

log = structlog.get_logger(__name__)

def report_traversal_error(message: str):
    # error channel for unreadable directories; never mixed into stdout.
    click.secho(message, fg="red", err=True)

def print_cli_summary_output(stats: TraversalStats, elapsed_seconds: float):
    """
    Prints walk counters as a small table on stderr.
    """
    log.debug("console_summary_output_requested")
    table = Table(title="phind summary", title_justify="left", show_header=False, box=None)
    table.add_column("metric", style="cyan")
    table.add_column("value", justify="right")
    table.add_row("paths emitted", f"{stats.emitted:,}")
    table.add_row("directories read", f"{stats.directories_read:,}")
    table.add_row("directories pruned", f"{stats.pruned:,}")
    table.add_row("unreadable directories", f"{stats.errors:,}", style="red" if stats.errors else None)
    table.add_row("elapsed", f"{elapsed_seconds:.3f}s")
    # resolve stderr at call time so test runners that swap streams see the output.
    RichConsole(stderr=True).print(table)
