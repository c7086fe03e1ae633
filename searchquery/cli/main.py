from __future__ import annotations

from pathlib import Path

import searchquery

from .click_compat import RichGroup, click
from .context import OUTPUT_FORMATS, CLIContext, resolve_log_file, resolve_output
from .errors import CLIError
from .logging import configure_logging, restore_logging
from .paths import get_paths


@click.group(
    name="searchquery",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(list(OUTPUT_FORMATS)),
    default=None,
    help="Output format (default: $SEARCHQUERY_OUTPUT or table).",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Log file path (default: $SEARCHQUERY_LOG_FILE or the user log directory).",
)
@click.option("--no-log-file", is_flag=True, help="Disable file logging explicitly.")
@click.version_option(version=searchquery.__version__, prog_name="searchquery")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str | None,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    log_file: str | None,
    no_log_file: bool,
) -> None:
    """Parse search queries and match them against JSON records."""
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    try:
        out = "json" if json_flag else resolve_output(output)
    except CLIError as exc:
        raise click.UsageError(exc.message) from exc

    paths = get_paths()
    effective_log_file: Path = resolve_log_file(log_file, paths)
    enable_log_file = not no_log_file

    click_ctx.obj = CLIContext(
        output=out,
        quiet=quiet,
        verbosity=verbose,
        log_file=effective_log_file,
        enable_log_file=enable_log_file,
        _paths=paths,
    )

    previous_logging = configure_logging(
        verbosity=verbose,
        log_file=effective_log_file,
        enable_file=enable_log_file,
    )
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.match_cmd import match_cmd as _match_cmd  # noqa: E402
from .commands.parse_cmd import parse_cmd as _parse_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_parse_cmd)
cli.add_command(_match_cmd)
