"""Document lifecycle domain service."""

import logging
from collections.abc import Iterable
from datetime import date
from typing import Optional

from docnum.database.base import Database
from docnum.domain.entities import (
    CancellationResult,
    Document,
    DocumentStatus,
    DocumentType,
)
from docnum.domain.errors import (
    CascadeCancellationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    document_not_found,
    invalid_transition,
)
from docnum.domain.numbering import NumberingService
from docnum.domain.summary import RawLineItem, compute_summary

logger = logging.getLogger(__name__)

# Receipts acknowledge a payment, so issuing one makes it paid directly
ISSUED_STATUS: dict[DocumentType, DocumentStatus] = {DocumentType.RECEIPT: DocumentStatus.PAID}


class DocumentService:
    """Service for creating documents and moving them through their lifecycle."""

    def __init__(self, db: Database, numbering: Optional[NumberingService] = None):
        """Initialize document service.

        Args:
            db: Database instance
            numbering: Numbering service (defaults to one on the same database)
        """
        self.db = db
        self.numbering = numbering or NumberingService(db)

    def get_document(self, document_id: int) -> Optional[Document]:
        """Get document by ID, or None."""
        return self.db.get_document(document_id)

    def require_document(self, document_id: int) -> Document:
        """Get document by ID.

        Raises:
            NotFoundError: If the document does not exist
        """
        document = self.db.get_document(document_id)
        if document is None:
            raise NotFoundError(document_not_found(document_id))
        return document

    def list_documents(
        self,
        document_type: Optional[DocumentType | str] = None,
        status: Optional[DocumentStatus | str] = None,
    ) -> list[Document]:
        """List documents, optionally filtered by type and status."""
        return self.db.list_documents(
            document_type=DocumentType.parse(document_type) if document_type is not None else None,
            status=DocumentStatus(status) if status is not None else None,
        )

    def create_document(
        self,
        document_type: DocumentType | str,
        items: Iterable[RawLineItem],
        document_date: Optional[date] = None,
        parent_document_id: Optional[int] = None,
        customer_name: Optional[str] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        status: DocumentStatus | str = DocumentStatus.DRAFT,
    ) -> Document:
        """Create a numbered document.

        Allocates the number, calculates the lines and summary, then stores
        document, lines and summary together. A number whose document fails
        to store is not reused.

        Args:
            document_type: Document type
            items: LineItem instances or form/JSON mappings
            document_date: Document date, also dates the number (defaults to today)
            parent_document_id: Document this one is derived from
            customer_name: Optional customer name
            reference: Optional reference text
            notes: Optional notes
            status: Initial status, draft or the type's issued status

        Returns:
            Created document

        Raises:
            ValidationError: If the status or parent is not acceptable
            NotFoundError: If the parent does not exist
            AllocationConflictError: If no number could be allocated
        """
        document_type = DocumentType.parse(document_type)
        status = DocumentStatus(status)
        allowed = {DocumentStatus.DRAFT, ISSUED_STATUS.get(document_type, DocumentStatus.ISSUED)}
        if document_type != DocumentType.RECEIPT:
            allowed.add(DocumentStatus.PAID)
        if status not in allowed:
            raise ValidationError(
                f"A new {document_type.value} cannot start as '{status.value}'"
            )

        if parent_document_id is not None:
            parent = self.require_document(parent_document_id)
            if parent.status == DocumentStatus.CANCELLED:
                raise ValidationError(
                    f"Parent document {parent.document_number} is cancelled"
                )

        document_date = document_date or date.today()
        document_number = self.numbering.allocate(document_type, as_of=document_date)
        calculated, summary = compute_summary(items)

        try:
            document_id = self.db.insert_document(
                document_type=document_type,
                document_number=document_number,
                status=status,
                document_date=document_date,
                items=calculated,
                summary=summary,
                parent_document_id=parent_document_id,
                customer_name=customer_name,
                reference=reference,
                notes=notes,
            )
        except Exception:
            logger.error("Storing %s failed; number stays consumed", document_number)
            raise

        logger.info("Created %s %s (id %d)", document_type.value, document_number, document_id)
        return self.require_document(document_id)

    def update_draft_items(self, document_id: int, items: Iterable[RawLineItem]) -> Document:
        """Replace the items of a draft and recompute its summary from scratch.

        Raises:
            NotFoundError: If the document does not exist
            InvalidTransitionError: If the document is no longer a draft
        """
        document = self.require_document(document_id)
        if document.status != DocumentStatus.DRAFT:
            raise InvalidTransitionError(
                f"Document {document.document_number} is {document.status.value}; only drafts can be edited"
            )
        calculated, summary = compute_summary(items)
        self.db.replace_document_items(document_id, calculated, summary)
        return self.require_document(document_id)

    def _transition(self, document: Document, allowed_from: DocumentStatus, target: DocumentStatus) -> Document:
        if document.status != allowed_from:
            raise InvalidTransitionError(
                invalid_transition(document.document_number, document.status.value, target.value)
            )
        self.db.update_document_status(document.id, target)
        logger.info("Document %s is now %s", document.document_number, target.value)
        return self.require_document(document.id)

    def issue_document(self, document_id: int) -> Document:
        """Issue a draft (receipts become paid directly).

        Raises:
            InvalidTransitionError: If the document is not a draft
        """
        document = self.require_document(document_id)
        target = ISSUED_STATUS.get(document.document_type, DocumentStatus.ISSUED)
        return self._transition(document, DocumentStatus.DRAFT, target)

    def mark_paid(self, document_id: int) -> Document:
        """Mark an issued document as paid.

        Raises:
            InvalidTransitionError: If the document is not issued, or is a receipt
        """
        document = self.require_document(document_id)
        if document.document_type in ISSUED_STATUS:
            raise InvalidTransitionError(
                f"{document.document_type.value} {document.document_number} is paid when issued"
            )
        return self._transition(document, DocumentStatus.ISSUED, DocumentStatus.PAID)

    def list_child_documents(self, document_id: int) -> list[Document]:
        """List documents derived directly from a document."""
        return self.db.find_child_documents(document_id)

    def cancel_document(self, document_id: int) -> CancellationResult:
        """Cancel an issued document and every document derived from it.

        The cascade follows parent_document_id recursively and runs as one
        transaction. An already cancelled document is a no-op.

        Returns:
            CancellationResult; cancelled_count counts cascaded children only

        Raises:
            NotFoundError: If the document does not exist
            InvalidTransitionError: If the document is a draft, or a paid
                document other than a receipt
            CascadeCancellationError: If storing the cascade failed; nothing
                was cancelled
        """
        root = self.require_document(document_id)
        if root.status == DocumentStatus.CANCELLED:
            logger.info("Document %s is already cancelled", root.document_number)
            return CancellationResult(root=root)

        # Only the issued state can be cancelled; receipts are issued as paid
        issued = ISSUED_STATUS.get(root.document_type, DocumentStatus.ISSUED)
        if root.status != issued:
            raise InvalidTransitionError(
                invalid_transition(root.document_number, root.status.value, DocumentStatus.CANCELLED.value)
            )

        try:
            cancelled_ids = self.db.cancel_document_tree(root.id)
        except Exception as e:
            raise CascadeCancellationError(root.id, str(e)) from e
        if not cancelled_ids:
            # Cancelled by another caller in the meantime
            return CancellationResult(root=self.require_document(root.id))

        cancelled = tuple(self.require_document(cancelled_id) for cancelled_id in cancelled_ids)
        logger.info(
            "Cancelled %s and %d related document(s)", root.document_number, len(cancelled) - 1
        )
        return CancellationResult(root=cancelled[0], cancelled=cancelled)
