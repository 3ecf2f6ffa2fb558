import csv
import io
from datetime import date, datetime
from decimal import Decimal

import openpyxl
import pytest

from packages.statement_engine import (
    AmountFormat,
    ColumnMapping,
    DateFormatError,
    ImportConfig,
    SourceFormat,
    SourceFormatError,
    analyze,
    import_statement,
)
from packages.statement_engine.frame import FRAME_COLUMNS, transactions_to_frame

BANK_CSV = b'''ACME Bank - Current Account
Statement period,01/03/2024 to 31/03/2024

Posting Date,Description,Debit,Credit,Balance
07/03/2024,"COFFEE HOUSE, HIGH ST",4.50,,995.50
08/03/2024,SALARY MARCH,,2500.00,3495.50
09/03/2024,Balance carried forward,,,3495.50
2024-03-10 09:15:00,"Rent ""March""",1200.00,,2295.50
'''


def test_analyze_bank_csv():
    analysis = analyze(BANK_CSV, SourceFormat.DELIMITED_TEXT)

    assert analysis.header_row_index == 2
    assert analysis.header_cells == ["Posting Date", "Description", "Debit", "Credit", "Balance"]
    assert analysis.suggested_mapping == ColumnMapping(date=0, description=1, debit=2, credit=3)
    assert analysis.suggested_amount_format is AmountFormat.SEPARATE
    assert analysis.total_rows == 4
    assert analysis.preview_rows[0] == ["ACME Bank - Current Account"]
    assert len(analysis.preview_rows) == 7


def test_preview_is_capped_at_ten_rows():
    content = "Date,Amount\n" + "".join(f"2024-01-{d:02d},{d}\n" for d in range(1, 20))
    analysis = analyze(content.encode(), filename="export.csv")
    assert len(analysis.preview_rows) == 10
    assert analysis.total_rows == 19


def test_import_with_suggested_config():
    analysis = analyze(BANK_CSV, SourceFormat.DELIMITED_TEXT)

    transactions = import_statement(
        BANK_CSV, analysis.suggested_config(), SourceFormat.DELIMITED_TEXT
    )

    assert [(t.transaction_date, t.amount, t.description) for t in transactions] == [
        (date(2024, 3, 7), Decimal("-4.50"), "COFFEE HOUSE, HIGH ST"),
        (date(2024, 3, 8), Decimal("2500.00"), "SALARY MARCH"),
        (date(2024, 3, 10), Decimal("-1200.00"), 'Rent "March"'),
    ]


def test_import_fails_without_partial_result():
    content = b"Date,Amount\n2024-01-01,5\n2024-01-02,6\nnot a date,7\n"
    config = ImportConfig(header_row_index=0, column_mapping=ColumnMapping(date=0, amount=1))

    with pytest.raises(DateFormatError) as exc_info:
        import_statement(content, config, "delimited-text")

    assert exc_info.value.row_number == 4
    assert exc_info.value.value == "not a date"


def test_format_detected_from_filename_and_tsv_delimiter():
    content = b"Date\tMemo\tAmount\n2024-01-05\tTea\t-3\n"
    config = ImportConfig(
        header_row_index=0, column_mapping=ColumnMapping(date=0, description=1, amount=2)
    )
    [transaction] = import_statement(content, config, filename="export.tsv")
    assert transaction.description == "Tea"
    assert transaction.amount == Decimal("-3")


@pytest.mark.parametrize("content", [b"", b"   \n\n"])
def test_analyze_rejects_empty_input(content):
    with pytest.raises(SourceFormatError):
        analyze(content, SourceFormat.DELIMITED_TEXT)


def test_spreadsheet_end_to_end():
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.append(["Card Statement"])
    sheet.append(["Transaction Date", "Merchant", "Category", "Amount"])
    sheet.append([datetime(2024, 2, 13), "Grocer", "Food", 75.0])
    sheet.append([datetime(2024, 2, 14), "Refund Co", "Returns", -20.25])
    buffer = io.BytesIO()
    workbook.save(buffer)
    content = buffer.getvalue()

    analysis = analyze(content, filename="card.xlsx")
    assert analysis.header_row_index == 1
    assert analysis.suggested_mapping == ColumnMapping(date=0, merchant=1, category=2, amount=3)

    config = ImportConfig(
        header_row_index=analysis.header_row_index,
        column_mapping=analysis.suggested_mapping,
        amount_format=AmountFormat.UNIFIED_REVERSE,
    )
    transactions = import_statement(content, config)

    assert [(t.transaction_date, t.amount, t.merchant, t.category) for t in transactions] == [
        (date(2024, 2, 13), Decimal("-75"), "Grocer", "Food"),
        (date(2024, 2, 14), Decimal("20.25"), "Refund Co", "Returns"),
    ]


def test_reimporting_own_output_is_idempotent():
    config = ImportConfig(
        header_row_index=0,
        column_mapping=ColumnMapping(date=0, description=1, merchant=2, category=3, amount=4),
        amount_format=AmountFormat.UNIFIED,
    )
    source = b"""Date,Description,Merchant,Category,Amount
13/02/2024,"Lunch, team",Cafe,Food,-42.10
2024-02-14 08:00,Refund,,Returns,15
02/15/24,Transfer in,Bank,,1000.00
"""
    first = import_statement(source, config, SourceFormat.DELIMITED_TEXT)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["Date", "Description", "Merchant", "Category", "Amount"])
    for txn in first:
        record = txn.to_dict()
        writer.writerow(
            [
                record["transactionDate"],
                record["description"] or "",
                record["merchant"] or "",
                record["category"] or "",
                record["amount"],
            ]
        )
    reserialized = buffer.getvalue().encode("utf-8")

    analysis = analyze(reserialized, SourceFormat.DELIMITED_TEXT)
    assert analysis.suggested_config() == config

    second = import_statement(reserialized, analysis.suggested_config(), SourceFormat.DELIMITED_TEXT)
    assert second == first


def test_transactions_to_frame():
    content = b"Date,Description,Amount\n2024-01-02,Coffee,-4.50\n2024-01-03,Pay,100\n"
    config = ImportConfig(
        header_row_index=0, column_mapping=ColumnMapping(date=0, description=1, amount=2)
    )
    frame = transactions_to_frame(import_statement(content, config, "delimited-text"))

    assert list(frame.columns) == FRAME_COLUMNS
    assert len(frame) == 2
    assert frame.iloc[0]["amount"] == Decimal("-4.50")
    assert frame.iloc[1]["transaction_date"] == date(2024, 1, 3)


def test_transactions_to_frame_empty():
    frame = transactions_to_frame([])
    assert frame.empty
    assert list(frame.columns) == FRAME_COLUMNS


def test_stray_inch_marks_do_not_merge_rows():
    content = (
        b"Date,Memo,Amount\n"
        b'2024-01-02,TV 55" screen,-500\n'
        b"2024-01-03,Coffee,-4\n"
        b'2024-01-04,Monitor 27" wide,-300\n'
    )
    config = ImportConfig(
        header_row_index=0, column_mapping=ColumnMapping(date=0, description=1, amount=2)
    )

    transactions = import_statement(content, config, SourceFormat.DELIMITED_TEXT)

    # Rows with an unbalanced quote lose their amount cell and are skipped on
    # their own; the rows around them are untouched.
    assert [(t.transaction_date, t.amount, t.description) for t in transactions] == [
        (date(2024, 1, 3), Decimal("-4"), "Coffee"),
    ]


def test_blank_sheet_rows_keep_row_numbers():
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet["A1"] = "Statement"
    sheet.append(["Date", "Amount"])
    sheet["A4"] = "2024-01-05"
    sheet["B4"] = 10.0
    sheet["A5"] = "someday"
    sheet["B5"] = 3.0
    buffer = io.BytesIO()
    workbook.save(buffer)

    config = ImportConfig(header_row_index=1, column_mapping=ColumnMapping(date=0, amount=1))
    with pytest.raises(DateFormatError) as exc_info:
        import_statement(buffer.getvalue(), config, filename="sheet.xlsx")

    # Same number the operator sees in the spreadsheet row gutter
    assert exc_info.value.row_number == 5
