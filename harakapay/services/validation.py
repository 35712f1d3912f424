"""Payment form validation: mobile-money phone numbers and amounts."""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

COUNTRY_PREFIX = "243"
PHONE_PATTERN = re.compile(r"^243[0-9]{9,11}$")
NON_DIGITS = re.compile(r"[^0-9]")
AMOUNT_PATTERN = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)$")


class PaymentValidationError(Exception):
    """Local validation failure; the request never leaves the gateway."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def normalize_phone(raw: str | None) -> str:
    """Normalize a DRC mobile number to ``243XXXXXXXXX``.

    Anything but ASCII digits is dropped, a leading trunk ``0`` becomes the
    country prefix, numbers already carrying ``243`` are kept, anything else
    gets the prefix.
    """
    digits = NON_DIGITS.sub("", raw or "")
    if digits.startswith("0"):
        return COUNTRY_PREFIX + digits[1:]
    if digits.startswith(COUNTRY_PREFIX):
        return digits
    return COUNTRY_PREFIX + digits


def is_valid_phone(phone: str | None) -> bool:
    return bool(phone) and PHONE_PATTERN.match(phone) is not None


def parse_amount(raw: str | int | float | Decimal | None) -> Decimal:
    """Parse a user-entered amount into a positive two-decimal Decimal."""
    if raw is None:
        raise PaymentValidationError("invalid_amount", "Amount is required")
    text = str(raw).strip().replace(" ", "").replace("\u00a0", "").replace("\u202f", "")
    # A trailing comma with one or two digits after it is a decimal comma
    # ("12,5", "1.234,50"); any other comma groups thousands ("1,000").
    last_comma = text.rfind(",")
    if last_comma > text.rfind(".") and 1 <= len(text) - last_comma - 1 <= 2:
        text = text[:last_comma].replace(".", "").replace(",", "") + "." + text[last_comma + 1 :]
    else:
        text = text.replace(",", "")
    if not AMOUNT_PATTERN.match(text):
        raise PaymentValidationError("invalid_amount", f"Invalid amount: {raw!r}")
    try:
        amount = Decimal(text).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise PaymentValidationError("invalid_amount", f"Invalid amount: {raw!r}")
    if amount <= 0:
        raise PaymentValidationError("invalid_amount", "Amount must be greater than 0")
    return amount
