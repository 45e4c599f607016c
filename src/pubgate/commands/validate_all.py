"""Command: validate every published post (or every post) and write the report."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pubgate.commands._base import PubgateCommand

if TYPE_CHECKING:
    from pubgate.commands._context import AppContext


@click.command(
    "validate-all",
    cls=PubgateCommand,
    examples="""\
  pubgate validate-all
  pubgate validate-all --drafts
  pubgate validate-all --ci
  pubgate -q validate-all""",
)
@click.option("--drafts", is_flag=True, help="Include unpublished posts.")
@click.option("--ci", is_flag=True, help="Exit 1 when any post fails.")
@click.pass_obj
def validate_all(app: AppContext, drafts: bool, ci: bool) -> None:
    """Validate posts in bulk. Exits 0 even with failures unless --ci is set."""
    from pubgate.services.pipeline import PipelineService

    result = PipelineService(app.site).validate_all(include_drafts=drafts)
    failed = result.data.get("summary", {}).get("failed", 0) if result.ok else 0
    app.emit(result, exit_code=1 if ci and failed else 0)
