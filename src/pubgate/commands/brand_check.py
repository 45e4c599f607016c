"""Command: check free text against the brand voice rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pubgate.commands._base import PubgateCommand

if TYPE_CHECKING:
    from pubgate.commands._context import AppContext


@click.command(
    "brand-check",
    cls=PubgateCommand,
    examples="""\
  pubgate brand-check "I think this might be useful"
  pubgate brand-check We shipped the release today.""",
)
@click.argument("text", nargs=-1, required=True)
@click.pass_obj
def brand_check(app: AppContext, text: tuple[str, ...]) -> None:
    """Score TEXT with the voice validator. Exits 1 below 80."""
    from pubgate.services.validate import ValidationService

    result = ValidationService(app.site).brand_check(" ".join(text))
    app.emit(result, exit_code=0 if result.data.get("passed") else 1)
