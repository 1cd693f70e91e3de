"""Shared pytest fixtures for docnum tests."""

import json
import tempfile
import os
from datetime import date
import pytest

from docnum.database.factories import create_sqlite_database
from docnum.domain.documents import DocumentService
from docnum.domain.entities import DocumentType
from docnum.domain.numbering import NumberingService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def numbering_service(temp_db):
    """Create a NumberingService with a temporary database."""
    return NumberingService(temp_db)


@pytest.fixture
def document_service(temp_db, numbering_service):
    """Create a DocumentService with a temporary database."""
    return DocumentService(temp_db, numbering_service)


@pytest.fixture
def issue_date():
    """A fixed document date."""
    return date(2025, 3, 14)


@pytest.fixture
def exclusive_item():
    """Two units at 100 excluding 7% tax with a 10 per unit discount."""
    return {
        "description": "Widget",
        "quantity": 2,
        "unit_price": 100,
        "price_type": "exclusive",
        "discount": 10,
        "discount_type": "thb",
        "tax_rate": 7,
    }


@pytest.fixture
def inclusive_item():
    """One unit at 107 including 7% tax."""
    return {
        "description": "Service",
        "quantity": 1,
        "unit_price": 107,
        "price_type": "inclusive",
        "discount": 0,
        "discount_type": "thb",
        "tax_rate": 7,
    }


@pytest.fixture
def sample_invoice(document_service, exclusive_item, issue_date):
    """Create an issued invoice."""
    invoice = document_service.create_document(
        DocumentType.INVOICE, [exclusive_item], document_date=issue_date, customer_name="ACME"
    )
    return document_service.issue_document(invoice.id)


@pytest.fixture
def items_file(tmp_path, exclusive_item, inclusive_item):
    """Write line items to a JSON file and return its path."""
    path = tmp_path / "items.json"
    path.write_text(json.dumps({"items": [exclusive_item, inclusive_item]}))
    return str(path)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
