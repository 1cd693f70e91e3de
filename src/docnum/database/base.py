"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from docnum.domain.entities import (
    CalculatedLineItem,
    Document,
    DocumentStatus,
    DocumentSummary,
    DocumentType,
    NumberingRule,
)


class Database(ABC):
    """Abstract database interface for docnum.

    Writes commit before returning; multi-row writes are all-or-nothing.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Numbering rule operations
    @abstractmethod
    def get_numbering_rule(self, document_type: DocumentType) -> Optional[NumberingRule]:
        """Get the numbering rule for a document type (fresh, unlocked read)."""
        pass

    @abstractmethod
    def list_numbering_rules(self) -> list[NumberingRule]:
        """List all numbering rules."""
        pass

    @abstractmethod
    def create_numbering_rule(
        self, document_type: DocumentType, pattern: str, current_number: int = 0
    ) -> bool:
        """Create a numbering rule. Returns False if one already exists."""
        pass

    @abstractmethod
    def update_numbering_rule(
        self,
        document_type: DocumentType,
        pattern: str,
        current_number: Optional[int] = None,
        current_period: Optional[str] = None,
    ) -> None:
        """Overwrite the pattern and, when given, raise the counter of ``current_period``.

        A counter is never lowered. Bumps the version so in-flight allocations
        retry against the new values.
        """
        pass

    @abstractmethod
    def get_period_counter(self, document_type: DocumentType, period: str) -> int:
        """Get the last number issued for a type in a period (0 if none)."""
        pass

    @abstractmethod
    def atomic_advance(
        self,
        document_type: DocumentType,
        expected_version: int,
        new_current: int,
        new_period: str,
        new_pattern: Optional[str] = None,
    ) -> bool:
        """Advance the counter of ``new_period`` if the rule is still at ``expected_version``.

        Counters of other periods are left as they are.

        Returns:
            True if the update committed, False on a stale version
        """
        pass

    # Document operations
    @abstractmethod
    def list_document_numbers(self, document_type: DocumentType) -> list[str]:
        """List every document number issued for a type."""
        pass

    @abstractmethod
    def document_number_exists(self, document_number: str) -> bool:
        """Check if a document number is already taken."""
        pass

    @abstractmethod
    def insert_document(
        self,
        document_type: DocumentType,
        document_number: str,
        status: DocumentStatus,
        document_date: date,
        items: Sequence[CalculatedLineItem],
        summary: DocumentSummary,
        parent_document_id: Optional[int] = None,
        customer_name: Optional[str] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Insert a document with its items and summary in one transaction.

        The parent, if any, is checked inside the same transaction.

        Returns document ID.

        Raises:
            NotFoundError: If the parent does not exist
            ValidationError: If the parent is cancelled
            ConflictError: If the document number is taken
        """
        pass

    @abstractmethod
    def replace_document_items(
        self, document_id: int, items: Sequence[CalculatedLineItem], summary: DocumentSummary
    ) -> None:
        """Replace all items and the summary of a document in one transaction."""
        pass

    @abstractmethod
    def get_document(self, document_id: int) -> Optional[Document]:
        """Get document by ID."""
        pass

    @abstractmethod
    def list_documents(
        self,
        document_type: Optional[DocumentType] = None,
        status: Optional[DocumentStatus] = None,
    ) -> list[Document]:
        """List documents with optional filters."""
        pass

    @abstractmethod
    def find_child_documents(self, parent_id: int) -> list[Document]:
        """List documents whose parent_document_id is ``parent_id``."""
        pass

    @abstractmethod
    def update_document_status(self, document_id: int, status: DocumentStatus) -> None:
        """Set a document's status."""
        pass

    @abstractmethod
    def cancel_document_tree(self, root_id: int) -> list[int]:
        """Cancel a document and its descendants in one transaction.

        Descendants are found inside the same transaction, so a child stored
        concurrently is either cancelled too or rejected. Documents already
        cancelled are left as they are.

        Returns:
            IDs whose status changed, root first

        Raises and leaves every document unchanged if any of them fails.
        """
        pass
