from __future__ import annotations

import logging

from searchquery.query import parse

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..errors import CLIError
from ..options import output_options
from ..records import load_records
from ..runner import CommandOutput, run_command

logger = logging.getLogger(__name__)


@click.command(name="match", cls=RichCommand)
@click.argument("query")
@click.option(
    "--file",
    "-f",
    "source",
    type=str,
    default="-",
    show_default=True,
    help="Records file (JSON array, JSON object or JSON Lines), or '-' for stdin.",
)
@click.option("--limit", type=int, default=None, help="Maximum number of matching records to show.")
@click.option("--count", "count_only", is_flag=True, help="Only report how many records matched.")
@output_options
@click.pass_obj
def match_cmd(
    ctx: CLIContext,
    query: str,
    *,
    source: str,
    limit: int | None,
    count_only: bool,
) -> None:
    """Print the records matching QUERY.

    Examples:

    - `searchquery match 'status=open -label:wontfix' --file issues.json`
    - `cat people.jsonl | searchquery match 'name:bob~name:alice' --count`
    """

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        if limit is not None and limit < 0:
            raise CLIError("--limit must be >= 0.", exit_code=2, error_type="usage_error")

        parsed = parse(query)
        if parsed.is_empty():
            warnings.append("Empty query matches every record.")

        records = load_records(source)
        matched = parsed.filter_records(records)
        logger.info(f"{len(matched)} of {len(records)} record(s) matched {parsed.to_string()!r}")

        data: dict[str, object] = {
            "query": parsed.to_string(),
            "total": len(records),
            "matched": len(matched),
        }
        if not count_only:
            shown = matched if limit is None else matched[:limit]
            if len(shown) < len(matched):
                warnings.append(f"Showing {len(shown)} of {len(matched)} matching records.")
            data["records"] = shown
        return CommandOutput(data=data, query=parsed.to_string())

    run_command(ctx, command="match", fn=fn)
