"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidPatternError(ValidationError):
    """Document number pattern rejected at configuration time."""


class InvalidTransitionError(ValidationError):
    """Document status change not allowed from its current status."""


class AllocationConflictError(ConflictError):
    """Next number could not be committed within the retry budget.

    Retryable: the caller may repeat the whole request.
    """

    def __init__(self, document_type: str, attempts: int):
        self.document_type = document_type
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a {document_type} number after {attempts} attempts, please retry"
        )


class CascadeCancellationError(DomainError):
    """Cascade cancellation failed and was rolled back."""

    def __init__(self, document_id: int, reason: str):
        self.document_id = document_id
        super().__init__(f"Cancelling document {document_id} failed and was rolled back: {reason}")


def document_not_found(document_id: int) -> str:
    """Return message for missing document."""
    return f"Document {document_id} not found"


def numbering_rule_not_found(document_type: str) -> str:
    """Return message for a document type without a numbering rule."""
    return f"No numbering rule configured for '{document_type}'"


def unknown_document_type(value: str) -> str:
    """Return message for an unrecognised document type."""
    return f"Unknown document type '{value}'"


def invalid_transition(document_number: str, current: str, target: str) -> str:
    """Return message for a disallowed status change."""
    return f"Cannot change document {document_number} from '{current}' to '{target}'"
