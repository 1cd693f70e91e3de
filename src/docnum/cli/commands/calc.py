"""Calculate command."""

import click
from docnum.cli.formatting import echo_items, echo_summary, load_items_file
from docnum.domain.summary import compute_summary


@click.command("calc")
@click.argument("items_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def calc(ctx, items_file: str):
    """Calculate line amounts and totals without storing anything.

    Uses the same calculation as 'document create', so the preview always
    matches the stored document.

    Examples:
        docnum calc items.json
    """
    items = load_items_file(ctx, items_file)
    calculated, summary = compute_summary(items)
    echo_items(calculated)
    click.echo("")
    echo_summary(summary)


def register_commands(cli):
    """Register calc command with main CLI."""
    cli.add_command(calc)
