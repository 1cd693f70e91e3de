"""Document numbering domain service."""

import logging
from datetime import date
from typing import Optional

from docnum.database.base import Database
from docnum.domain.entities import DEFAULT_PATTERNS, DocumentType, NumberingRule
from docnum.domain.errors import (
    AllocationConflictError,
    NotFoundError,
    ValidationError,
    numbering_rule_not_found,
)
from docnum.domain.patterns import CompiledPattern, compile_pattern, validate_pattern

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 10


class NumberingService:
    """Service for configuring numbering rules and allocating numbers.

    The counter stored on the rule is authoritative. Existing document
    numbers are scanned as a reconciliation fallback so manual edits that push
    numbers past the counter never cause a duplicate.
    """

    def __init__(self, db: Database, max_retries: int = DEFAULT_MAX_RETRIES):
        """Initialize numbering service.

        Args:
            db: Database instance
            max_retries: Attempts at committing the counter before giving up
        """
        if max_retries < 1:
            raise ValidationError("max_retries must be at least 1")
        self.db = db
        self.max_retries = max_retries

    def seed_defaults(self) -> list[DocumentType]:
        """Create default rules for document types that have none.

        Returns:
            Document types a rule was created for
        """
        created = []
        for document_type, pattern in DEFAULT_PATTERNS.items():
            if self.db.get_numbering_rule(document_type) is None:
                if self.db.create_numbering_rule(document_type, pattern, 0):
                    created.append(document_type)
        return created

    def get_rule(self, document_type: DocumentType | str) -> Optional[NumberingRule]:
        """Get the numbering rule for a document type, or None."""
        return self.db.get_numbering_rule(DocumentType.parse(document_type))

    def list_rules(self) -> list[NumberingRule]:
        """List all configured numbering rules."""
        return self.db.list_numbering_rules()

    def _get_or_create_rule(self, document_type: DocumentType) -> NumberingRule:
        rule = self.db.get_numbering_rule(document_type)
        if rule is None:
            self.db.create_numbering_rule(document_type, DEFAULT_PATTERNS[document_type], 0)
            rule = self.db.get_numbering_rule(document_type)
        if rule is None:
            raise NotFoundError(numbering_rule_not_found(document_type.value))
        return rule

    def configure(
        self,
        document_type: DocumentType | str,
        pattern: str,
        current_number: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> NumberingRule:
        """Set the pattern and optionally the counter for a document type.

        A given counter is taken as the last number issued in the period of
        ``as_of`` (today by default).

        Raises:
            InvalidPatternError: If the pattern is invalid
            ValidationError: If the counter is negative or lower than the
                counter already in effect for the period
        """
        document_type = DocumentType.parse(document_type)
        pattern = validate_pattern(pattern)
        compiled = compile_pattern(pattern)
        as_of = as_of or date.today()
        rule = self._get_or_create_rule(document_type)

        period = compiled.period_key(as_of)
        if current_number is None:
            # Pattern only; every period keeps its counter
            period = None
        else:
            if current_number < 0:
                raise ValidationError("Current number must not be negative")
            in_effect = self.db.get_period_counter(document_type, period)
            if current_number < in_effect:
                raise ValidationError(
                    f"Current number for '{document_type.value}' is {in_effect}; "
                    f"it can only be raised, not set to {current_number}"
                )

        self.db.update_numbering_rule(document_type, pattern, current_number, period)
        logger.info(
            "Configured numbering for %s: pattern=%s current=%s period=%r",
            document_type.value,
            pattern,
            current_number,
            period,
        )
        return self._get_or_create_rule(document_type)

    def _next_number(
        self, document_type: DocumentType, rule: NumberingRule, compiled: CompiledPattern, as_of: date
    ) -> tuple[int, str]:
        # Each period has its own counter; a new year or month starts again at 0
        counter = self.db.get_period_counter(document_type, compiled.period_key(as_of))

        # Only numbers rendered for this period match, so older periods drop out
        matcher = compiled.period_matcher(as_of)
        scanned = 0
        for document_number in self.db.list_document_numbers(document_type):
            match = matcher.match(document_number)
            if match is not None:
                scanned = max(scanned, int(match.group(1)))
        if scanned > counter:
            logger.warning(
                "Numbering counter for %s is behind existing documents (%d < %d), catching up",
                document_type.value,
                counter,
                scanned,
            )

        candidate = max(counter, scanned) + 1
        document_number = compiled.render(candidate, as_of)
        while self.db.document_number_exists(document_number):
            candidate += 1
            document_number = compiled.render(candidate, as_of)
        return candidate, document_number

    def preview(self, document_type: DocumentType | str, as_of: Optional[date] = None) -> str:
        """Return the number the next allocation would produce, without taking it."""
        document_type = DocumentType.parse(document_type)
        as_of = as_of or date.today()
        rule = self._get_or_create_rule(document_type)
        _, document_number = self._next_number(
            document_type, rule, compile_pattern(rule.pattern), as_of
        )
        return document_number

    def allocate(
        self,
        document_type: DocumentType | str,
        as_of: Optional[date] = None,
        pattern: Optional[str] = None,
    ) -> str:
        """Allocate the next document number for a type.

        Args:
            document_type: Document type
            as_of: Date the number is issued for (defaults to today)
            pattern: Optional pattern to use and store instead of the rule's

        Returns:
            Rendered document number

        Raises:
            InvalidPatternError: If the pattern is invalid
            AllocationConflictError: If the counter could not be committed
                within max_retries attempts
        """
        document_type = DocumentType.parse(document_type)
        as_of = as_of or date.today()
        if pattern is not None:
            pattern = validate_pattern(pattern)

        for attempt in range(1, self.max_retries + 1):
            rule = self._get_or_create_rule(document_type)
            compiled = compile_pattern(pattern or rule.pattern)
            number, document_number = self._next_number(document_type, rule, compiled, as_of)
            new_pattern = compiled.pattern if compiled.pattern != rule.pattern else None
            if self.db.atomic_advance(
                document_type, rule.version, number, compiled.period_key(as_of), new_pattern
            ):
                logger.info("Allocated %s number %s", document_type.value, document_number)
                return document_number
            logger.warning(
                "Numbering rule for %s changed concurrently (attempt %d of %d), retrying",
                document_type.value,
                attempt,
                self.max_retries,
            )

        raise AllocationConflictError(document_type.value, self.max_retries)
