"""Command: validate a single post."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pubgate.commands._base import PubgateCommand

if TYPE_CHECKING:
    from pubgate.commands._context import AppContext


@click.command(
    cls=PubgateCommand,
    examples="""\
  pubgate validate how-this-blog-is-built
  pubgate --json validate how-this-blog-is-built
  pubgate -v validate how-this-blog-is-built""",
)
@click.argument("slug")
@click.pass_obj
def validate(app: AppContext, slug: str) -> None:
    """Full validation report for one post. Exits 1 when it fails."""
    from pubgate.services.validate import ValidationService

    result = ValidationService(app.site).validate_post(slug)
    app.emit(result, exit_code=0 if result.data.get("passed") else 1)
