from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from bank_import.errors import CsvParseError
from bank_import.ingest import BankFormatDetector, ColumnMapping, ManualMappingParser
from bank_import.ingest.manual_mapping import MANUAL_IMPORT_BANK_NAME


def test_default_mapping_is_date_description_amount():
    mapping = ColumnMapping()

    assert (mapping.date_column, mapping.description_column, mapping.amount_column) == (0, 1, 2)
    assert not mapping.uses_separate_columns
    assert mapping.effective_bank_name == MANUAL_IMPORT_BANK_NAME


@pytest.mark.parametrize(
    "payload",
    [
        {"amount_column": None},
        {"date_column": -1},
        {"date_column": "0"},
        {"currency_column": 3},
    ],
)
def test_invalid_mappings_are_rejected(payload: dict):
    with pytest.raises(ValidationError):
        ColumnMapping(**payload)


def test_mapping_loads_from_json():
    mapping = ColumnMapping.model_validate_json(
        '{"bank_name": " Co-op ", "date_column": 0, "description_column": 2,'
        ' "amount_column": null, "debit_column": 3, "credit_column": 4, "balance_column": 5}'
    )

    assert mapping.bank_name == "Co-op"
    assert mapping.uses_separate_columns
    assert ManualMappingParser(mapping).get_bank_name() == "Co-op"


def test_signed_amount_with_explicit_date_format(write_csv):
    path = write_csv(
        """
        Posted,Narrative,Value,Ref
        20250615,CARD PAYMENT TESCO,-12.40,R1
        20250616,CLIENT INVOICE 7,300.00,
        """
    )
    parser = ManualMappingParser(
        ColumnMapping(date_format="%Y%m%d", amount_column=2, reference_column=3)
    )
    tesco, invoice = parser.parse(path)

    assert tesco.date == date(2025, 6, 15)
    assert tesco.amount == Decimal("-12.40")
    assert tesco.reference == "R1"
    assert invoice.amount == Decimal("300.00")
    assert invoice.reference is None


def test_fallback_date_formats_include_us_order(write_csv):
    path = write_csv("06/25/2025,COFFEE,-3.00\n")
    parser = ManualMappingParser(ColumnMapping(has_header_row=False))

    [tx] = parser.parse(path)
    assert tx.date == date(2025, 6, 25)


def test_separate_debit_and_credit_columns(write_csv):
    path = write_csv(
        """
        Date,Details,Out,In,Balance
        15/06/2025,RENT,"1,000.00",,500.00
        16/06/2025,CLIENT,,250.00
        """
    )
    mapping = ColumnMapping(
        amount_column=None, debit_column=2, credit_column=3, balance_column=4
    )
    rent, client = ManualMappingParser(mapping).parse(path)

    assert rent.amount == Decimal("-1000.00")
    assert rent.balance == Decimal("500.00")
    # trailing balance column may be missing entirely
    assert client.amount == Decimal("250.00")
    assert client.balance is None


def test_polarity_flags_flip_signs(write_csv):
    path = write_csv(
        """
        15/06/2025,REFUND,10.00,
        16/06/2025,CHARGEBACK,,4.00
        """
    )
    mapping = ColumnMapping(
        has_header_row=False,
        amount_column=None,
        debit_column=2,
        credit_column=3,
        debit_is_negative=False,
        credit_is_positive=False,
    )
    refund, chargeback = ManualMappingParser(mapping).parse(path)

    assert refund.amount == Decimal("10.00")
    assert chargeback.amount == Decimal("-4.00")


def test_required_columns_and_missing_amount(write_csv):
    mapping = ColumnMapping(amount_column=None, debit_column=3, credit_column=4)
    parser = ManualMappingParser(mapping)
    assert parser.required_columns == 5

    path = write_csv("Date,Desc,Type,Out,In\n15/06/2025,NOTHING,X,,\n")
    with pytest.raises(CsvParseError) as excinfo:
        parser.parse(path)
    assert excinfo.value.field == "amount"
    assert excinfo.value.line_number == 2


def test_manual_parser_is_never_auto_detected(write_csv):
    parser = ManualMappingParser(ColumnMapping())
    path = write_csv("Date,Description,Amount\n")

    assert parser.can_parse(["Date", "Description", "Amount"]) is False
    assert BankFormatDetector([parser]).detect_format(path) is None
