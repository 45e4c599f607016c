"""Root CLI group for pubgate with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from pubgate import __version__
from pubgate.commands import register_commands
from pubgate.commands._base import PubgateGroup
from pubgate.commands._context import AppContext
from pubgate.config.settings import PubgateSettings


@click.group(
    cls=PubgateGroup,
    invoke_without_command=True,
    examples="""\
  pubgate validate my-post
  pubgate validate-all --drafts
  pubgate --json publish-prepare --all --fix --ci
  pubgate --root ../site list""",
)
@click.version_option(version=__version__, prog_name="pubgate")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with timing info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--root",
    "site_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Site root directory (default: location of pubgate.toml, else CWD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    site_root: Path | None,
) -> None:
    """pubgate — content validation and publishing gate for an MDX blog."""
    ctx.ensure_object(dict)
    settings = PubgateSettings.from_cli(
        config_path=config_path,
        site_root=site_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
