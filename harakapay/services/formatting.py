"""Locale-aware display formatting for amounts and dates.

Every function takes the display language explicitly. Currency is always USD;
times are rendered 24-hour and datetimes given as strings are shown in UTC.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from harakapay.core.i18n import normalize_language
from harakapay.core.time import parse_datetime

NBSP = "\u00a0"
NARROW_NBSP = "\u202f"

MONTHS_SHORT = {
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    "fr": ("janv.", "févr.", "mars", "avr.", "mai", "juin", "juil.", "août", "sept.", "oct.", "nov.", "déc."),
}


def _to_decimal(value) -> Decimal:
    try:
        return Decimal(str(value if value is not None else 0))
    except InvalidOperation:
        return Decimal("0")


def _group(integer_digits: str, separator: str) -> str:
    groups = []
    while len(integer_digits) > 3:
        groups.insert(0, integer_digits[-3:])
        integer_digits = integer_digits[:-3]
    groups.insert(0, integer_digits)
    return separator.join(groups)


def _number(value: Decimal, language: str, decimals: int | None) -> str:
    if decimals is None:
        value = value.quantize(Decimal("0.001"), rounding=ROUND_HALF_UP).normalize()
        text = f"{abs(value):f}"
    else:
        value = value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
        text = f"{abs(value):.{decimals}f}"
    integer, _, fraction = text.partition(".")
    if language == "fr":
        body = _group(integer, NARROW_NBSP) + ("," + fraction if fraction else "")
    else:
        body = _group(integer, ",") + ("." + fraction if fraction else "")
    return ("-" if value < 0 else "") + body


def format_number(value, language: str, decimals: int | None = None) -> str:
    return _number(_to_decimal(value), normalize_language(language), decimals)


def format_currency(amount, language: str) -> str:
    """``$1,234.50`` in English, ``1 234,50 $`` in French."""
    language = normalize_language(language)
    value = _to_decimal(amount)
    body = _number(abs(value), language, 2)
    sign = "-" if value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) < 0 else ""
    if language == "fr":
        return f"{sign}{body}{NBSP}$"
    return f"{sign}${body}"


def _as_datetime_or_date(value):
    if isinstance(value, (datetime, date)):
        return value
    return parse_datetime(value)


def format_date(value, language: str) -> str:
    language = normalize_language(language)
    value = _as_datetime_or_date(value)
    month = MONTHS_SHORT[language][value.month - 1]
    if language == "fr":
        return f"{value.day} {month} {value.year}"
    return f"{month} {value.day}, {value.year}"


def format_time(value, language: str) -> str:
    value = _as_datetime_or_date(value)
    if not isinstance(value, datetime):
        return "00:00"
    return f"{value.hour:02d}:{value.minute:02d}"


def format_datetime(value, language: str) -> str:
    language = normalize_language(language)
    joiner = " à " if language == "fr" else ", "
    return f"{format_date(value, language)}{joiner}{format_time(value, language)}"
