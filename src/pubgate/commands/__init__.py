"""Subcommand modules for pubgate.

Provides register_commands() which uses deferred imports to keep
``pubgate --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pubgate.commands.brand_check import brand_check
    from pubgate.commands.list_cmd import list_cmd
    from pubgate.commands.publish import publish_prepare
    from pubgate.commands.validate import validate
    from pubgate.commands.validate_all import validate_all

    cli.add_command(validate)
    cli.add_command(validate_all)
    cli.add_command(list_cmd)
    cli.add_command(brand_check)
    cli.add_command(publish_prepare)
