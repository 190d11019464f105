from __future__ import annotations

import pytest

from bank_import.errors import CsvParseError
from bank_import.ingest import BankFormatDetector, detect_format, get_available_bank_names
from bank_import.ingest.adapters import BarclaysCsvParser, SantanderCsvParser

MONZO_CORE = "Transaction ID,Date,Time,Type,Name,Emoji,Category,Amount"


@pytest.mark.parametrize(
    "header, bank",
    [
        ("Date,Description,Money Out,Money In,Balance", "Barclays"),
        ("Date,Type,Description,Paid Out,Paid In,Balance", "HSBC"),
        ("Transaction Date,Transaction Type,Description,Debit,Credit,Balance", "Lloyds"),
        (
            "Transaction Date,Transaction Type,Sort Code,Account Number,"
            "Transaction Description,Debit Amount,Credit Amount,Balance",
            "Lloyds",
        ),
        ("Date,Transaction type,Description,Paid out,Paid in,Balance", "Nationwide"),
        ("Date,Counter Party,Reference,Type,Amount (GBP),Balance (GBP)", "Starling"),
        (MONZO_CORE, "Monzo"),
        (f"{MONZO_CORE},Currency,Local amount,Local currency,Notes and #tags", "Monzo"),
        (
            "Type,Product,Started Date,Completed Date,Description,Amount,Fee,Currency,State,Balance",
            "Revolut",
        ),
        ("Date,Description,Amount,Balance", "Santander"),
        ("Date,Transaction type,Description,Money out,Money in,Balance", "Metro Bank"),
    ],
)
def test_detects_each_supported_bank(write_csv, header: str, bank: str):
    path = write_csv(f"{header}\n")
    parser = detect_format(path)

    assert parser is not None
    assert parser.get_bank_name() == bank


def test_header_matching_ignores_case_quotes_whitespace_and_bom(write_csv):
    path = write_csv('\ufeff"date", " DESCRIPTION ",money out,Money In ,"Balance"\n15/06/2025,X,1.00,,2.00\n')
    parser = detect_format(path)

    assert parser is not None
    assert parser.get_bank_name() == "Barclays"


def test_monzo_needs_all_eight_core_columns(write_csv):
    seven = ",".join(MONZO_CORE.split(",")[:7])
    assert detect_format(write_csv(f"{seven}\n")) is None


@pytest.mark.parametrize(
    "content",
    [
        "",
        "\n",
        "Posted,Narrative,Value\n01/06/2025,SOMETHING,1.00\n",
        "Date,Description,Money Out,Money In,Balance,Extra\n",
    ],
)
def test_unrecognized_or_empty_files_detect_nothing(write_csv, content: str):
    assert detect_format(write_csv(content)) is None


def test_extract_headers_trims_cells(write_csv):
    path = write_csv(' "Date" , Description ,Amount,Balance\r\n')
    assert BankFormatDetector.extract_headers(path) == ["Date", "Description", "Amount", "Balance"]


def test_registry_order_decides_and_custom_registries_are_honoured(write_csv):
    path = write_csv("Date,Description,Amount,Balance\n")

    only_barclays = BankFormatDetector([BarclaysCsvParser()])
    assert only_barclays.detect_format(path) is None

    santander = SantanderCsvParser()
    custom = BankFormatDetector([BarclaysCsvParser(), santander])
    assert custom.detect_format(path) is santander
    assert custom.available_bank_names() == ["Barclays", "Santander"]


def test_available_bank_names_in_registry_order():
    assert get_available_bank_names() == [
        "Barclays",
        "HSBC",
        "Lloyds",
        "Nationwide",
        "Starling",
        "Monzo",
        "Revolut",
        "Santander",
        "Metro Bank",
    ]


def test_undecodable_header_read_raises_a_file_error(write_csv):
    # cp1252 bytes for "É" and "£" are not valid UTF-8
    path = write_csv(
        "Date,Description,Money Out,Money In,Balance\n15/06/2025,CAFÉ £,3.00,,1.00\n",
        encoding="cp1252",
    )
    with pytest.raises(CsvParseError) as excinfo:
        detect_format(path)
    assert excinfo.value.field == "file"
    assert excinfo.value.file_name == path.name

    parser = detect_format(path, "cp1252")
    assert parser is not None
    assert parser.get_bank_name() == "Barclays"
