"""Tests for numbering, document and calc commands."""

import json

from docnum.cli.main import cli


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_numbering_init_and_list(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "numbering", "init")
    assert result.exit_code == 0
    assert "Created numbering rule for invoice" in result.output

    result = _invoke(cli_runner, temp_db, "numbering", "list")
    assert result.exit_code == 0
    assert "INV-YYYY-XXX" in result.output
    assert "billing_note" in result.output

    result = _invoke(cli_runner, temp_db, "numbering", "init")
    assert "already have numbering rules" in result.output


def test_numbering_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "numbering", "list")
    assert result.exit_code == 0
    assert "No numbering rules found" in result.output


def test_numbering_set_and_next(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "numbering", "set", "invoice", "--pattern", "IV-YYMM-XXXX", "--current", "41"
    )
    assert result.exit_code == 0
    assert "set to 'IV-YYMM-XXXX'" in result.output

    result = _invoke(cli_runner, temp_db, "numbering", "next", "invoice", "--as-of", "today")
    assert result.exit_code == 0
    assert result.output.strip().endswith("-0042")


def test_numbering_set_invalid_pattern(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "numbering", "set", "invoice", "--pattern", "INV-YYYY")
    assert result.exit_code == 1
    assert "no running number" in result.output


def test_numbering_unknown_type(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "numbering", "next", "memo")
    assert result.exit_code == 1
    assert "Unknown document type 'memo'" in result.output


def test_numbering_preview_and_year_change(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "numbering", "next", "receipt", "--as-of", "2024-12-31")
    assert result.output.strip() == "RC-2024-001"

    result = _invoke(cli_runner, temp_db, "numbering", "preview", "receipt", "--as-of", "2024-12-31")
    assert "RC-2024-002" in result.output

    result = _invoke(cli_runner, temp_db, "numbering", "next", "receipt", "--as-of", "2025-01-01")
    assert result.output.strip() == "RC-2025-001"


def test_numbering_invalid_date(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "numbering", "next", "receipt", "--as-of", "someday")
    assert result.exit_code == 1
    assert "Invalid date format" in result.output


def test_calc(cli_runner, items_file):
    result = cli_runner.invoke(cli, ["calc", items_file])
    assert result.exit_code == 0
    assert "Widget" in result.output
    assert "192.60" in result.output
    assert "299.60" in result.output


def test_calc_bad_file(cli_runner, tmp_path):
    path = tmp_path / "items.json"
    path.write_text("{not json")
    result = cli_runner.invoke(cli, ["calc", str(path)])
    assert result.exit_code == 1
    assert "Could not read items" in result.output


def test_calc_rejects_non_list(cli_runner, tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps({"items": "nope"}))
    result = cli_runner.invoke(cli, ["calc", str(path)])
    assert result.exit_code == 1
    assert "list of item objects" in result.output


def test_document_create_and_show(cli_runner, temp_db, items_file):
    result = _invoke(
        cli_runner,
        temp_db,
        "document",
        "create",
        "quotation",
        items_file,
        "--date",
        "2025-03-14",
        "--customer",
        "ACME",
    )
    assert result.exit_code == 0
    assert "Created quotation QT-2025-001 (ID: 1)" in result.output
    assert "Status: draft" in result.output
    assert "Total: 299.60" in result.output

    result = _invoke(cli_runner, temp_db, "document", "show", "1")
    assert result.exit_code == 0
    assert "QT-2025-001" in result.output
    assert "Customer: ACME" in result.output
    assert "Net payable" in result.output
    assert "Derived documents" not in result.output


def test_document_show_lists_derived_documents(cli_runner, temp_db, items_file):
    _invoke(cli_runner, temp_db, "document", "create", "invoice", items_file, "--date", "2025-03-14", "--issue")
    _invoke(
        cli_runner, temp_db, "document", "create", "receipt", items_file,
        "--date", "2025-03-20", "--parent", "1", "--issue",
    )

    result = _invoke(cli_runner, temp_db, "document", "show", "1")
    assert result.exit_code == 0
    assert "Derived documents:" in result.output
    assert "RC-2025-001" in result.output


def test_document_cancel_draft_is_rejected(cli_runner, temp_db, items_file):
    _invoke(cli_runner, temp_db, "document", "create", "invoice", items_file)

    result = _invoke(cli_runner, temp_db, "document", "cancel", "1", "--yes")
    assert result.exit_code == 1
    assert "Cannot change document" in result.output


def test_document_show_missing(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "document", "show", "42")
    assert result.exit_code == 1
    assert "Document 42 not found" in result.output


def test_document_lifecycle(cli_runner, temp_db, items_file):
    _invoke(cli_runner, temp_db, "document", "create", "invoice", items_file, "--issue")

    result = _invoke(cli_runner, temp_db, "document", "pay", "1")
    assert result.exit_code == 0
    assert "is now paid" in result.output

    result = _invoke(cli_runner, temp_db, "document", "issue", "1")
    assert result.exit_code == 1
    assert "Cannot change document" in result.output


def test_document_list(cli_runner, temp_db, items_file):
    result = _invoke(cli_runner, temp_db, "document", "list")
    assert "No documents found" in result.output

    _invoke(cli_runner, temp_db, "document", "create", "invoice", items_file, "--date", "2025-03-14")
    _invoke(cli_runner, temp_db, "document", "create", "quotation", items_file, "--date", "2025-03-14")

    result = _invoke(cli_runner, temp_db, "document", "list", "--type", "invoice")
    assert result.exit_code == 0
    assert "INV-2025-001" in result.output
    assert "QT-2025-001" not in result.output


def test_document_cancel_cascade(cli_runner, temp_db, items_file):
    _invoke(cli_runner, temp_db, "document", "create", "invoice", items_file, "--date", "2025-03-14", "--issue")
    for _ in range(2):
        result = _invoke(
            cli_runner, temp_db, "document", "create", "receipt", items_file,
            "--date", "2025-03-20", "--parent", "1", "--issue",
        )
        assert result.exit_code == 0
        assert "Status: paid" in result.output

    result = _invoke(cli_runner, temp_db, "document", "cancel", "1", input="y\n")
    assert result.exit_code == 0
    assert "Cancelled INV-2025-001" in result.output
    assert "Related documents cancelled: 2" in result.output
    assert "RC-2025-002" in result.output

    result = _invoke(cli_runner, temp_db, "document", "cancel", "2", "--yes")
    assert result.exit_code == 0
    assert "already cancelled" in result.output


def test_document_cancel_aborted(cli_runner, temp_db, items_file):
    _invoke(cli_runner, temp_db, "document", "create", "invoice", items_file)

    result = _invoke(cli_runner, temp_db, "document", "cancel", "1", input="n\n")
    assert "Cancellation aborted" in result.output

    result = _invoke(cli_runner, temp_db, "document", "list", "--status", "draft")
    assert "INV-" in result.output


def test_db_path_from_environment(cli_runner, temp_db, monkeypatch):
    monkeypatch.setenv("DOCNUM_DB_PATH", temp_db.database_path)
    result = cli_runner.invoke(cli, ["numbering", "next", "purchase_order", "--as-of", "2025-06-01"])
    assert result.exit_code == 0
    assert result.output.strip() == "PO-2025-001"
    assert temp_db.get_numbering_rule("purchase_order").current_number == 1
