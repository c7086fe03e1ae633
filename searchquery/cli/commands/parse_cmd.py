from __future__ import annotations

from searchquery.parser import tokenize
from searchquery.query import parse

from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


@click.command(name="parse", cls=RichCommand)
@click.argument("query")
@output_options
@click.pass_obj
def parse_cmd(ctx: CLIContext, query: str) -> None:
    """Parse QUERY and show the resulting filter tree.

    Examples:

    - `searchquery parse 'hello (world~user) -draft'`
    - `searchquery parse 'name="Bob Jones"' --json`
    """

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        tokens = tokenize(query)
        parsed = parse(query)
        if query.count('"') % 2:
            warnings.append("Unbalanced double quote; the rest of the query was read literally.")
        data = {
            "query": query,
            "normalized": parsed.to_string(),
            "isEmpty": parsed.is_empty(),
            "tokens": tokens,
            "tree": parsed.to_dict(),
        }
        return CommandOutput(data=data, query=parsed.to_string())

    run_command(ctx, command="parse", fn=fn)
