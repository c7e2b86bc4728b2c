"""Main CLI entry point."""

import logging

import click
from timebill.database.factories import create_sqlite_database

# Import and register all commands at module level
from timebill.cli.commands import (
    company,
    project,
    task,
    entry,
    schedule,
    invoice,
    period,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TIMEBILL_DB_PATH environment variable)",
    envvar="TIMEBILL_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Timebill - Time and billing tracker for freelancers.

    Log hours against task estimates, lay tasks out on a business-day
    schedule, and bill companies per billing period with recurring invoices.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
company.register_commands(cli)
project.register_commands(cli)
task.register_commands(cli)
entry.register_commands(cli)
schedule.register_commands(cli)
invoice.register_commands(cli)
period.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
