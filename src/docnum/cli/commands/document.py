"""Document commands."""

import click
from docnum.cli.error_handling import handle_domain_error
from docnum.cli.formatting import (
    echo_document_line,
    echo_items,
    echo_summary,
    load_items_file,
    parse_date_or_exit,
)
from docnum.domain.documents import DocumentService
from docnum.domain.entities import DocumentStatus
from docnum.domain.numbering import NumberingService


def _service(ctx) -> DocumentService:
    db = ctx.obj["db"]
    return DocumentService(db, NumberingService(db, max_retries=ctx.obj["max_retries"]))


@click.group()
def document_group():
    """Create, view and cancel documents."""
    pass


@document_group.command("create")
@click.argument("document_type", metavar="DOCUMENT_TYPE")
@click.argument("items_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--date", "document_date", help="Document date (YYYY-MM-DD or relative like 'today')")
@click.option("--parent", "parent_id", type=int, help="ID of the document this one derives from")
@click.option("--customer", help="Customer name")
@click.option("--reference", help="Reference text")
@click.option("--notes", help="Notes")
@click.option("--issue", is_flag=True, help="Issue immediately instead of saving a draft")
@click.pass_context
def create_document(
    ctx,
    document_type: str,
    items_file: str,
    document_date: str | None,
    parent_id: int | None,
    customer: str | None,
    reference: str | None,
    notes: str | None,
    issue: bool,
):
    """Create a numbered document from a JSON file of line items.

    Each item accepts quantity, unit_price, price_type (inclusive, exclusive,
    none), discount, discount_type (thb, percentage), tax_rate,
    withholding_rate and description.

    Examples:
        docnum document create quotation items.json --customer "ACME"
        docnum document create receipt items.json --parent 3 --issue
    """
    items = load_items_file(ctx, items_file)
    doc_date = parse_date_or_exit(ctx, document_date)
    service = _service(ctx)

    try:
        document = service.create_document(
            document_type,
            items,
            document_date=doc_date,
            parent_document_id=parent_id,
            customer_name=customer,
            reference=reference,
            notes=notes,
        )
        if issue:
            document = service.issue_document(document.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {document.document_type.value} {document.document_number} (ID: {document.id})")
    click.echo(f"  Status: {document.status.value}")
    click.echo(f"  Total: {document.summary.total:,.2f}")


@document_group.command("show")
@click.argument("document_id", type=int)
@click.pass_context
def show_document(ctx, document_id: int):
    """Show a document with its lines and totals."""
    service = _service(ctx)
    try:
        document = service.require_document(document_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{document.document_number} ({document.document_type.value})")
    click.echo(f"  Status: {document.status.value}")
    click.echo(f"  Date: {document.document_date}")
    if document.customer_name:
        click.echo(f"  Customer: {document.customer_name}")
    if document.parent_document_id:
        click.echo(f"  Parent document: {document.parent_document_id}")
    if document.reference:
        click.echo(f"  Reference: {document.reference}")
    if document.notes:
        click.echo(f"  Notes: {document.notes}")
    click.echo("")
    echo_items(document.items)
    click.echo("")
    echo_summary(document.summary)

    children = service.list_child_documents(document.id)
    if children:
        click.echo("")
        click.echo("Derived documents:")
        for child in children:
            echo_document_line(child)


@document_group.command("list")
@click.option("--type", "document_type", help="Only this document type")
@click.option(
    "--status",
    type=click.Choice([status.value for status in DocumentStatus]),
    help="Only this status",
)
@click.pass_context
def list_documents(ctx, document_type: str | None, status: str | None):
    """List documents."""
    try:
        documents = _service(ctx).list_documents(document_type=document_type, status=status)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not documents:
        click.echo("No documents found.")
        return
    for document in documents:
        echo_document_line(document)


@document_group.command("issue")
@click.argument("document_id", type=int)
@click.pass_context
def issue_document(ctx, document_id: int):
    """Issue a draft document (receipts become paid)."""
    try:
        document = _service(ctx).issue_document(document_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Document {document.document_number} is now {document.status.value}")


@document_group.command("pay")
@click.argument("document_id", type=int)
@click.pass_context
def pay_document(ctx, document_id: int):
    """Mark an issued document as paid."""
    try:
        document = _service(ctx).mark_paid(document_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Document {document.document_number} is now {document.status.value}")


@document_group.command("cancel")
@click.argument("document_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def cancel_document(ctx, document_id: int, yes: bool):
    """Cancel a document and every document derived from it.

    Examples:
        docnum document cancel 3
        docnum document cancel 3 --yes
    """
    service = _service(ctx)
    try:
        document = service.require_document(document_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Cancel {document.document_number} and all documents derived from it?"
    ):
        click.echo("Cancellation aborted.")
        return

    try:
        result = service.cancel_document(document_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.cancelled:
        click.echo(f"Document {document.document_number} was already cancelled")
        return
    click.echo(f"Cancelled {document.document_number}")
    if result.cancelled_count > 0:
        click.echo(f"Related documents cancelled: {result.cancelled_count}")
        for related in result.cancelled[1:]:
            click.echo(f"  {related.document_number}")


def register_commands(cli):
    """Register document commands with main CLI."""
    cli.add_command(document_group, name="document")
