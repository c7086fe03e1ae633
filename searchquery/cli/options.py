from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from .click_compat import click
from .context import OUTPUT_FORMATS, CLIContext

F = TypeVar("F", bound=Callable[..., object])


def _override_output(ctx: click.Context, value: str) -> None:
    if isinstance(ctx.obj, CLIContext):
        ctx.obj.output = value  # type: ignore[assignment]


def _set_output(ctx: click.Context, _param: click.Parameter, value: str | None) -> str | None:
    if value is not None:
        _override_output(ctx, value)
    return value


def _set_json(ctx: click.Context, _param: click.Parameter, value: bool) -> bool:
    if value:
        _override_output(ctx, "json")
    return value


def output_options(fn: F) -> F:
    """Per-command `--output`/`--json`, overriding the group-level choice."""
    fn = click.option(
        "--output",
        type=click.Choice(list(OUTPUT_FORMATS)),
        default=None,
        help="Override output format for this command.",
        callback=_set_output,
        expose_value=False,
    )(fn)
    fn = click.option(
        "--json",
        is_flag=True,
        help="Alias for --output json.",
        callback=_set_json,
        expose_value=False,
    )(fn)
    return fn
