"""Command: list published posts with their validation status."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pubgate.commands._base import PubgateCommand

if TYPE_CHECKING:
    from pubgate.commands._context import AppContext


@click.command(
    "list",
    cls=PubgateCommand,
    examples="""\
  pubgate list
  pubgate -q list
  pubgate --json list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List published posts with status, result and score."""
    from pubgate.services.validate import ValidationService

    app.emit(ValidationService(app.site).list_posts())
