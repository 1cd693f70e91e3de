"""Numbering rule commands."""

import click
from docnum.cli.error_handling import handle_domain_error
from docnum.cli.formatting import parse_date_or_exit
from docnum.domain.numbering import NumberingService


def _service(ctx) -> NumberingService:
    return NumberingService(ctx.obj["db"], max_retries=ctx.obj["max_retries"])


@click.group()
def numbering_group():
    """Manage document numbering patterns."""
    pass


@numbering_group.command("init")
@click.pass_context
def init_numbering(ctx):
    """Create default numbering rules for every document type.

    Existing rules are left untouched.
    """
    created = _service(ctx).seed_defaults()
    if not created:
        click.echo("All document types already have numbering rules.")
        return
    for document_type in created:
        click.echo(f"Created numbering rule for {document_type.value}")


@numbering_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List numbering rules."""
    rules = _service(ctx).list_rules()
    if not rules:
        click.echo("No numbering rules found. Run 'docnum numbering init' to create defaults.")
        return

    click.echo("\nNumbering rules:")
    click.echo("-" * 70)
    for rule in rules:
        period = rule.current_period or "-"
        click.echo(
            f"{rule.document_type.value:15s} | {rule.pattern:20s} | Current: {rule.current_number:6d} | Period: {period}"
        )


@numbering_group.command("set")
@click.argument("document_type", metavar="DOCUMENT_TYPE")
@click.option("--pattern", required=True, help="Number pattern, e.g. 'INV-YYYYMM-XXXX'")
@click.option(
    "--current",
    type=int,
    help="Last number issued in the current period (can only be raised)",
)
@click.pass_context
def set_rule(ctx, document_type: str, pattern: str, current: int | None):
    """Set the numbering pattern of a document type.

    DOCUMENT_TYPE is one of: quotation, invoice, receipt, tax_invoice,
    credit_note, purchase_order, billing_note.

    Pattern tokens: YYYY (year), YY (2-digit year), MM (month), DD (day) and
    one run of X for the zero-padded running number.

    Examples:
        docnum numbering set invoice --pattern "INV-YYYY-XXXX"
        docnum numbering set receipt --pattern "RC-YYMM-XXX" --current 41
    """
    try:
        rule = _service(ctx).configure(document_type, pattern, current_number=current)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Numbering for {rule.document_type.value} set to '{rule.pattern}'")
    click.echo(f"  Current number: {rule.current_number}")


@numbering_group.command("preview")
@click.argument("document_type", metavar="DOCUMENT_TYPE")
@click.option("--as-of", help="Issue date (YYYY-MM-DD or relative like 'today', 'next year')")
@click.pass_context
def preview_number(ctx, document_type: str, as_of: str | None):
    """Show the next number without taking it."""
    as_of_date = parse_date_or_exit(ctx, as_of)
    try:
        number = _service(ctx).preview(document_type, as_of=as_of_date)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Next number: {number}")


@numbering_group.command("next")
@click.argument("document_type", metavar="DOCUMENT_TYPE")
@click.option("--as-of", help="Issue date (YYYY-MM-DD or relative like 'today', 'next year')")
@click.pass_context
def allocate_number(ctx, document_type: str, as_of: str | None):
    """Allocate the next number for a document type.

    The number is consumed even if no document is stored with it.
    """
    as_of_date = parse_date_or_exit(ctx, as_of)
    try:
        number = _service(ctx).allocate(document_type, as_of=as_of_date)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(number)


def register_commands(cli):
    """Register numbering commands with main CLI."""
    cli.add_command(numbering_group, name="numbering")
