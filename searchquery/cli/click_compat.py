"""Click classes used by every command, rendered through rich-click."""

from __future__ import annotations

from typing import cast

import click
import rich_click

RichGroup = cast(type[click.Group], rich_click.RichGroup)
RichCommand = cast(type[click.Command], rich_click.RichCommand)

__all__ = ["RichCommand", "RichGroup", "click"]
