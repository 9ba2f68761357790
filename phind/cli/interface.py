# phind/cli/interface.py
import sys
import time
from typing import Any, Dict

import click
from click.core import ParameterSource
from click_option_group import optgroup
import structlog

from phind import __version__ as app_version
from phind.config.loader import (
    CONFIG_KEY_TO_CLI_PARAM_MAP,
    build_filter_config,
    get_global_ignore_path,
    load_and_merge_configs,
    load_global_ignore_patterns,
)
from phind.config.settings import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    UNLIMITED_DEPTH,
    EntryType,
)
from phind.cli.console_output import print_cli_summary_output, report_traversal_error
from phind.core.discovery import DirectoryTraverser, validate_start_path
from phind.core.output import StdoutSink
from phind.exceptions import PhindError
from phind.logging_setup import configure_logging

log = structlog.get_logger(__name__)

_DEFAULT_EXCLUDES_DESCRIPTION = ", ".join(f'"{p}"' for p in DEFAULT_EXCLUDE_PATTERNS)


def _resolve_effective_options(ctx: click.Context, cli_params: Dict[str, Any]) -> Dict[str, Any]:
    # toml option files fill in anything not given on the command line.
    effective = dict(cli_params)
    file_options = load_and_merge_configs()
    for param_name in CONFIG_KEY_TO_CLI_PARAM_MAP.values():
        if param_name in file_options and ctx.get_parameter_source(param_name) != ParameterSource.COMMANDLINE:
            effective[param_name] = file_options[param_name]
            log.debug("option_from_config_file", option=param_name, value=file_options[param_name])
    return effective


def _run_traversal_flow(start_arg: str, options: Dict[str, Any]) -> None:
    global_ignores = [] if options["skip_global_ignore"] else load_global_ignore_patterns()
    start_path = validate_start_path(start_arg)

    max_depth = options["max_depth"]
    config = build_filter_config(
        include_patterns=options["include_patterns"] or DEFAULT_INCLUDE_PATTERNS,
        cli_exclude_patterns=options["exclude_patterns"],
        global_ignore_patterns=global_ignores,
        entry_type=EntryType.from_string(options["entry_type"]),
        max_depth=UNLIMITED_DEPTH if max_depth is None else max_depth,
        case_fold=options["ignore_case"],
        display_relative=options["relative"],
    )

    sink = StdoutSink(terminator="\0" if options["print0"] else "\n")
    started = time.perf_counter()
    stats = DirectoryTraverser(config, start_path).traverse(sink, on_error=report_traversal_error)

    if options["show_summary"]:
        print_cli_summary_output(stats, time.perf_counter() - started)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("start_path", metavar="[PATH]", default=".", required=False)
@optgroup.group("Filtering Options", help="Control which files and directories are printed.")
@optgroup.option("-n", "--name", "include_patterns", multiple=True, metavar="PATTERN", help='Glob pattern(s) for names/paths to include. Default: "*" (all files/dirs).')
@optgroup.option("-e", "--exclude", "exclude_patterns", multiple=True, metavar="PATTERN", help=f"Glob pattern(s) to exclude, added to the defaults ({_DEFAULT_EXCLUDES_DESCRIPTION}). Also reads {get_global_ignore_path()} unless --skip-global-ignore is used.")
@optgroup.option("--skip-global-ignore", "skip_global_ignore", is_flag=True, default=False, help="Do not load patterns from the global ignore file.")
@optgroup.option("-t", "--type", "entry_type", type=click.Choice(["f", "d"]), default=None, help="Match only files (f) or directories (d).")
@optgroup.option("-d", "--maxdepth", "max_depth", type=click.IntRange(min=0), default=None, help="Maximum directory levels to descend (0 means starting path only). Default: unlimited.")
@optgroup.option("-i", "--ignore-case", "ignore_case", is_flag=True, default=False, help="Perform case-insensitive matching.")
@optgroup.group("Output Options", help="Control how matched paths are printed.")
@optgroup.option("-r", "--relative", "relative", is_flag=True, default=False, help="Print paths relative to the starting directory.")
@optgroup.option("-0", "--print0", "print0", is_flag=True, default=False, help="Terminate each path with NUL instead of newline.")
@optgroup.option("--summary", "show_summary", is_flag=True, default=False, help="Print a summary of the walk on stderr when done.")
@optgroup.group("Application Behavior", help="Logging and version information.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.version_option(version=app_version, prog_name="phind", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, start_path: str, **cli_params: Any):
    """phind: find files and directories recursively, with glob include and
    exclude patterns that skip node_modules and .git unless asked for."""

    configure_logging(verbosity=cli_params.get("verbosity_level", 0))

    log.debug("cli_command_invoked", start_path=start_path, params=cli_params)

    try:
        options = _resolve_effective_options(ctx, cli_params)
        _run_traversal_flow(start_path, options)
    except PhindError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except BrokenPipeError:
        # click's standalone handler exits quietly on a closed stdout.
        raise
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
