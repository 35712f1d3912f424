from decimal import Decimal

import pytest

from harakapay.services.validation import (
    PaymentValidationError,
    is_valid_phone,
    normalize_phone,
    parse_amount,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0812345678", "243812345678"),
        ("812345678", "243812345678"),
        ("243812345678", "243812345678"),
        ("+243 81 234 5678", "243812345678"),
        ("081-234-5678", "243812345678"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_normalized_numbers_are_valid():
    assert is_valid_phone(normalize_phone("0812345678"))
    assert is_valid_phone("24381234567890")


def test_short_or_empty_numbers_are_invalid():
    assert not is_valid_phone(normalize_phone("24381"))
    assert not is_valid_phone(normalize_phone(""))
    assert not is_valid_phone(normalize_phone(None))
    assert not is_valid_phone("243123456789012")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("250", Decimal("250.00")),
        ("100.5", Decimal("100.50")),
        ("1 234,5", Decimal("1234.50")),
        ("1,234.50", Decimal("1234.50")),
        ("1\u202f234,50", Decimal("1234.50")),
        ("10.005", Decimal("10.01")),
        ("12,5", Decimal("12.50")),
        ("1,000", Decimal("1000.00")),
        ("1.234,50", Decimal("1234.50")),
        ("2,500,000", Decimal("2500000.00")),
        (Decimal("99.99"), Decimal("99.99")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "0", "-5", "0.001", "NaN", "Infinity", "1e3", "\uff11\uff10\uff10"])
def test_parse_amount_rejects_invalid_input(raw):
    with pytest.raises(PaymentValidationError) as excinfo:
        parse_amount(raw)
    assert excinfo.value.code == "invalid_amount"


@pytest.mark.parametrize(
    "raw",
    [
        # Full-width 0812345678
        "\uff10\uff18\uff11\uff12\uff13\uff14\uff15\uff16\uff17\uff18",
        # Arabic-Indic 0812345678
        "\u0660\u0668\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668",
    ],
)
def test_non_ascii_digits_are_dropped(raw):
    phone = normalize_phone(raw)
    assert phone == "243"
    assert not is_valid_phone(phone)


def test_non_ascii_digits_never_validate():
    assert not is_valid_phone("243\uff18\uff11\uff12\uff13\uff14\uff15\uff16\uff17\uff18")
