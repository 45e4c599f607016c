"""Command: the publish preparation pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pubgate.commands._base import PubgateCommand

if TYPE_CHECKING:
    from pubgate.commands._context import AppContext


@click.command(
    "publish-prepare",
    cls=PubgateCommand,
    examples="""\
  pubgate publish-prepare
  pubgate publish-prepare --slug my-post
  pubgate publish-prepare --all --fix
  pubgate publish-prepare --ci""",
)
@click.option("--slug", default=None, help="Run for a single post.")
@click.option("--all", "all_posts", is_flag=True, help="Include unpublished posts.")
@click.option("--fix", is_flag=True, help="Inject blur placeholders and sync the calendar.")
@click.option("--ci", is_flag=True, help="Exit 1 when any post fails.")
@click.pass_obj
def publish_prepare(
    app: AppContext,
    slug: str | None,
    all_posts: bool,
    fix: bool,
    ci: bool,
) -> None:
    """Validate posts before publishing, optionally fixing what can be fixed."""
    if slug and all_posts:
        raise click.UsageError("--slug and --all are mutually exclusive.")

    from pubgate.services.pipeline import PipelineService

    result = PipelineService(app.site).publish_prepare(slug=slug, all_posts=all_posts, fix=fix)
    failed = result.data.get("summary", {}).get("failed", 0) if result.ok else 0
    app.emit(result, exit_code=1 if ci and failed else 0)
