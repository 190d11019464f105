from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from bank_import.errors import CsvParseError
from bank_import.ingest.adapters import (
    BarclaysCsvParser,
    HsbcCsvParser,
    LloydsCsvParser,
    LloydsFullCsvParser,
    MetroBankCsvParser,
    MonzoCsvParser,
    NationwideCsvParser,
    RevolutCsvParser,
    SantanderCsvParser,
    StarlingCsvParser,
)
from bank_import.ingest.error_tolerant import ErrorTolerantCsvParser

BARCLAYS_HEADER = "Date,Description,Money Out,Money In,Balance"


# ---- Barclays ---------------------------------------------------------------


def test_barclays_money_out_becomes_negative_expense(write_csv):
    path = write_csv(
        f"""
        {BARCLAYS_HEADER}
        15/06/2025,AMAZON PURCHASE,49.99,,1234.56
        """
    )
    [tx] = BarclaysCsvParser().parse(path)

    assert tx.date == date(2025, 6, 15)
    assert tx.amount == Decimal("-49.99")
    assert tx.description == "AMAZON PURCHASE"
    assert tx.balance == Decimal("1234.56")
    assert tx.reference is None
    assert tx.is_expense


def test_barclays_strips_currency_and_thousands_separators(write_csv):
    path = write_csv(
        f"""
        {BARCLAYS_HEADER}
        16/06/2025,CLIENT PAYMENT,,"£1,500.00","2,734.56"
        17-Jun-2025,COFFEE,GBP 3.50,,2731.06
        """
    )
    income, coffee = BarclaysCsvParser().parse(path)

    assert income.amount == Decimal("1500.00")
    assert income.balance == Decimal("2734.56")
    assert income.is_income
    assert coffee.date == date(2025, 6, 17)
    assert coffee.amount == Decimal("-3.50")


def test_barclays_skips_blank_lines_and_reports_true_line_numbers(write_csv):
    path = write_csv(
        f"""
        {BARCLAYS_HEADER}
        15/06/2025,AMAZON PURCHASE,49.99,,1234.56

        16/06/2025,NO AMOUNT,,,1234.56
        """
    )
    with pytest.raises(CsvParseError) as excinfo:
        BarclaysCsvParser().parse(path)

    err = excinfo.value
    assert err.field == "amount"
    assert err.line_number == 4
    assert "No amount specified" in str(err)
    assert "line 4" in str(err)


@pytest.mark.parametrize(
    "row, field",
    [
        ("15/06/2025,SHORT,49.99", "columns"),
        ("2025/13/45,BAD DATE,49.99,,1.00", "date"),
        (",NO DATE,49.99,,1.00", "date"),
        ("15/06/2025,,49.99,,1.00", "description"),
        ("15/06/2025,BAD AMOUNT,abc,,1.00", "amount"),
    ],
)
def test_barclays_row_errors_name_the_field(write_csv, row: str, field: str):
    path = write_csv(f"{BARCLAYS_HEADER}\n{row}\n")
    with pytest.raises(CsvParseError) as excinfo:
        BarclaysCsvParser().parse(path)

    assert excinfo.value.field == field
    assert excinfo.value.line_number == 2
    assert field in str(excinfo.value).lower()


@pytest.mark.parametrize("content", ["", f"{BARCLAYS_HEADER}\n"])
def test_empty_or_header_only_file_yields_nothing(write_csv, content: str):
    assert BarclaysCsvParser().parse(write_csv(content)) == []


# ---- HSBC / Nationwide / Metro Bank ------------------------------------------


def test_hsbc_combines_type_and_description(write_csv):
    path = write_csv(
        """
        Date,Type,Description,Paid Out,Paid In,Balance
        15/06/2025,DD,BRITISH GAS,45.00,,955.00
        16/06/2025,,CLIENT ABC,,100.00,1055.00
        17/06/2025,ATM,,20.00,,1035.00
        """
    )
    gas, client, atm = HsbcCsvParser().parse(path)

    assert gas.description == "DD - BRITISH GAS"
    assert gas.amount == Decimal("-45.00")
    assert client.description == "CLIENT ABC"
    assert client.amount == Decimal("100.00")
    assert atm.description == "ATM"


def test_hsbc_blank_type_and_description_is_an_error(write_csv):
    path = write_csv(
        """
        Date,Type,Description,Paid Out,Paid In,Balance
        15/06/2025,,,45.00,,955.00
        """
    )
    with pytest.raises(CsvParseError) as excinfo:
        HsbcCsvParser().parse(path)
    assert excinfo.value.field == "description"


def test_nationwide_accepts_month_name_dates(write_csv):
    path = write_csv(
        """
        Date,Transaction type,Description,Paid out,Paid in,Balance
        15 Jun 2025,Visa purchase,TESCO STORES,£12.00,,£100.00
        16/06/2025,Transfer from,SAVINGS,,£50.00,£150.00
        """
    )
    tesco, savings = NationwideCsvParser().parse(path)

    assert tesco.date == date(2025, 6, 15)
    assert tesco.description == "Visa purchase - TESCO STORES"
    assert tesco.amount == Decimal("-12.00")
    assert savings.amount == Decimal("50.00")
    assert savings.balance == Decimal("150.00")


def test_metro_bank_falls_back_to_transaction_type(write_csv):
    path = write_csv(
        """
        Date,Transaction type,Description,Money out,Money in,Balance
        15/06/2025,Standing Order,,100.00,,500.00
        16/06/2025,Faster Payment,CLIENT XYZ,,250.00,750.00
        """
    )
    standing_order, payment = MetroBankCsvParser().parse(path)

    assert standing_order.description == "Standing Order"
    assert standing_order.amount == Decimal("-100.00")
    assert payment.description == "Faster Payment - CLIENT XYZ"
    assert MetroBankCsvParser().get_bank_name() == "Metro Bank"


# ---- Lloyds ------------------------------------------------------------------


def test_lloyds_simplified_layout(write_csv):
    path = write_csv(
        """
        Transaction Date,Transaction Type,Description,Debit,Credit,Balance
        15/06/2025,DEB,TESCO STORES,25.50,,974.50
        """
    )
    [tx] = LloydsCsvParser().parse(path)

    assert tx.description == "DEB - TESCO STORES"
    assert tx.amount == Decimal("-25.50")
    assert tx.balance == Decimal("974.50")


def test_lloyds_full_layout_with_sort_code_and_account(write_csv):
    path = write_csv(
        """
        Transaction Date,Transaction Type,Sort Code,Account Number,Transaction Description,Debit Amount,Credit Amount,Balance
        15/06/2025,FPI,30-00-00,12345678,CLIENT ABC,,1500.00,2500.00
        """
    )
    [tx] = LloydsCsvParser().parse(path)

    assert tx.description == "FPI - CLIENT ABC"
    assert tx.amount == Decimal("1500.00")
    assert tx.balance == Decimal("2500.00")


def test_lloyds_recognizes_both_header_layouts():
    parser = LloydsCsvParser()
    assert parser.can_parse(
        ["Transaction Date", "Transaction Type", "Description", "Debit", "Credit", "Balance"]
    )
    assert parser.can_parse(
        [
            "transaction date",
            "transaction type",
            "sort code",
            "account number",
            "transaction description",
            "debit amount",
            "credit amount",
            "balance",
        ]
    )
    assert parser.get_expected_headers()[2] == "Description"


LLOYDS_FULL_HEADER = (
    "Transaction Date,Transaction Type,Sort Code,Account Number,"
    "Transaction Description,Debit Amount,Credit Amount,Balance"
)


def test_lloyds_layout_comes_from_the_header_row(write_csv):
    parser = LloydsCsvParser()
    full = write_csv(f"{LLOYDS_FULL_HEADER}\n", name="full.csv")
    simplified = write_csv(
        "Transaction Date,Transaction Type,Description,Debit,Credit,Balance\n",
        name="simplified.csv",
    )

    assert isinstance(parser.for_file(full), LloydsFullCsvParser)
    assert parser.for_file(full).required_columns == 8
    assert parser.for_file(simplified) is parser


def test_lloyds_full_layout_rejects_truncated_rows(write_csv):
    path = write_csv(
        f"""
        {LLOYDS_FULL_HEADER}
        15/06/2025,FPI,30-00-00,12345678,CLIENT ABC,,1500.00,2500.00
        01/06/2025,DEB,12-34-56,12345678,TESCO,10.00,
        """
    )
    with pytest.raises(CsvParseError) as excinfo:
        LloydsCsvParser().parse(path)
    assert excinfo.value.field == "columns"
    assert excinfo.value.line_number == 3
    assert "expected at least 8, got 7" in excinfo.value.message

    result = ErrorTolerantCsvParser(LloydsCsvParser()).parse(path)
    assert [tx.amount for tx in result.transactions] == [Decimal("1500.00")]
    assert [err.line_number for err in result.errors] == [3]


# ---- Signed-amount dialects --------------------------------------------------


def test_santander_signed_amount_with_currency_symbol(write_csv):
    path = write_csv(
        """
        Date,Description,Amount,Balance
        15/06/2025,CARD PAYMENT TO TESCO,£-49.99,£950.01
        16-Jun-2025,CLIENT PAYMENT,"£1,000.00","£1,950.01"
        """
    )
    tesco, client = SantanderCsvParser().parse(path)

    assert tesco.amount == Decimal("-49.99")
    assert tesco.balance == Decimal("950.01")
    assert client.date == date(2025, 6, 16)
    assert client.amount == Decimal("1000.00")


def test_starling_description_and_reference_rules(write_csv):
    path = write_csv(
        """
        Date,Counter Party,Reference,Type,Amount (GBP),Balance (GBP)
        15/06/2025,Acme Ltd,INV-001,FASTER PAYMENT,1500.00,2500.00
        16/06/2025,Tesco,Tesco,CARD,-12.50,2487.50
        17/06/2025,,,INTEREST,0.12,2487.62
        """
    )
    acme, tesco, interest = StarlingCsvParser().parse(path)

    assert acme.description == "Acme Ltd - INV-001"
    assert acme.reference == "INV-001"
    assert tesco.description == "Tesco"
    assert tesco.amount == Decimal("-12.50")
    assert interest.description == "INTEREST"
    assert interest.reference is None


MONZO_CORE = "Transaction ID,Date,Time,Type,Name,Emoji,Category,Amount"


def test_monzo_parses_core_columns_and_ignores_trailing_ones(write_csv):
    path = write_csv(
        f"""
        {MONZO_CORE},Currency,Local amount,Local currency,Notes and #tags
        tx_0001,15/06/2025,10:30:00,Card payment,Pret A Manger,,Eating out,-4.50,GBP,-4.50,GBP,
        tx_0002,2025-06-16,09:00:00,Faster payment,,,Income,250.00,GBP,250.00,GBP,invoice 7
        """
    )
    pret, payment = MonzoCsvParser().parse(path)

    assert pret.date == date(2025, 6, 15)
    assert pret.description == "Pret A Manger"
    assert pret.amount == Decimal("-4.50")
    assert pret.reference == "tx_0001"
    assert pret.balance is None
    assert payment.date == date(2025, 6, 16)
    assert payment.description == "Faster payment"


def test_monzo_can_parse_requires_the_eight_core_columns():
    parser = MonzoCsvParser()
    core = MONZO_CORE.split(",")

    assert parser.can_parse(core)
    assert parser.can_parse([*core, "Currency", "Notes"])
    assert not parser.can_parse(core[:7])
    assert not parser.can_parse(["Transaction ID", "Date", "Time", "Type", "Name", "Emoji", "Notes", "Amount"])


def test_monzo_short_row_is_a_column_error(write_csv):
    path = write_csv(
        f"""
        {MONZO_CORE}
        tx_0001,15/06/2025,10:30:00,Card payment,Pret,,Eating out
        """
    )
    with pytest.raises(CsvParseError) as excinfo:
        MonzoCsvParser().parse(path)
    assert excinfo.value.field == "columns"


REVOLUT_HEADER = "Type,Product,Started Date,Completed Date,Description,Amount,Fee,Currency,State,Balance"


def test_revolut_keeps_only_completed_sterling_rows(write_csv):
    path = write_csv(
        f"""
        {REVOLUT_HEADER}
        CARD_PAYMENT,Current,2025-06-15 10:00:00,2025-06-16 09:00:00,Amazon,-20.00,0.00,GBP,COMPLETED,980.00
        TOPUP,Current,2025-06-17 10:00:00,2025-06-17 10:00:05,,100.00,0.00,GBP,COMPLETED,1080.00
        CARD_PAYMENT,Current,2025-06-18 10:00:00,,Pending Shop,-5.00,0.00,GBP,PENDING,
        CARD_PAYMENT,Current,2025-06-18 10:00:00,2025-06-18 11:00:00,Paris Cafe,-7.00,0.00,EUR,COMPLETED,50.00
        """
    )
    amazon, topup = RevolutCsvParser().parse(path)

    assert amazon.date == date(2025, 6, 16)  # completed, not started
    assert amazon.amount == Decimal("-20.00")
    assert topup.description == "TOPUP"
    assert topup.balance == Decimal("1080.00")


@pytest.mark.parametrize(
    "row, field",
    [
        ("CARD_PAYMENT,Current,2025-06-15 10:00:00,2025-06-16 09:00:00,Shop,,0.00,GBP,COMPLETED,1.00", "amount"),
        ("CARD_PAYMENT,Current,2025-06-15 10:00:00,16/06/2025 09:00,Shop,-1.00,0.00,GBP,COMPLETED,1.00", "date"),
    ],
)
def test_revolut_row_errors(write_csv, row: str, field: str):
    path = write_csv(f"{REVOLUT_HEADER}\n{row}\n")
    with pytest.raises(CsvParseError) as excinfo:
        RevolutCsvParser().parse(path)
    assert excinfo.value.field == field
