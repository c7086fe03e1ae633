from __future__ import annotations

import platform

import searchquery
from searchquery.filters import Operator
from searchquery.parser import CLOSE, EXCLUDE_PREFIX, MAX_DEPTH, OPEN, OR_SEPARATOR

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


def _syntax() -> dict[str, str]:
    return {
        "and": "space",
        "or": OR_SEPARATOR,
        "exclude": EXCLUDE_PREFIX,
        "group": f"{OPEN}...{CLOSE}",
        **{op.name.lower(): op.value for op in Operator},
    }


@click.command(name="version", cls=RichCommand)
@output_options
@click.pass_obj
def version_cmd(ctx: CLIContext) -> None:
    """Show version and query syntax information."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        data = {
            "version": searchquery.__version__,
            "syntax": _syntax(),
            "maxDepth": MAX_DEPTH,
            "pythonVersion": platform.python_version(),
        }
        return CommandOutput(data=data)

    run_command(ctx, command="version", fn=fn)
