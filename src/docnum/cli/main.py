"""Main CLI entry point."""

import logging

import click
from docnum.database.factories import create_sqlite_database
from docnum.domain.numbering import DEFAULT_MAX_RETRIES

# Import and register all commands at module level
from docnum.cli.commands import (
    numbering,
    document,
    calc,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides DOCNUM_DB_PATH environment variable)",
    envvar="DOCNUM_DB_PATH",
)
@click.option(
    "--max-retries",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_RETRIES,
    show_default=True,
    envvar="DOCNUM_MAX_RETRIES",
    help="Attempts at committing a document number before giving up",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, max_retries: int, verbose: bool):
    """Docnum - Document numbering and totals.

    Issue sequential document numbers (quotations, invoices, receipts and
    more) from configurable patterns and calculate line and document totals.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["max_retries"] = max_retries

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and ctx.invoked_subcommand != "calc":
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
numbering.register_commands(cli)
document.register_commands(cli)
calc.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
