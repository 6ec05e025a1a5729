"""German number formatting and parsing (``1.234,56``)."""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

TWO_PLACES = Decimal("0.01")

_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_PRICE_INPUT_PATTERN = re.compile(r"[^0-9.,]")
# Swaps English separators for German ones in a single pass.
_SEPARATOR_SWAP = str.maketrans({",": ".", ".": ","})


class ReadingKind(str, Enum):
    EMPTY = "empty"
    INVALID = "invalid"
    VALUE = "value"


@dataclass(frozen=True)
class NumberReading:
    kind: ReadingKind
    value: Decimal | None = None

    @property
    def is_value(self) -> bool:
        return self.kind is ReadingKind.VALUE


def format_number(value: object) -> str:
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    rounded = amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{rounded:,.2f}".translate(_SEPARATOR_SWAP)


def _normalize(text: str) -> str:
    return text.strip().replace(".", "").replace(",", ".", 1)


def read_number(text: str | None) -> NumberReading:
    """Parse German-formatted text, telling empty input apart from garbage."""
    if text is None or not text.strip():
        return NumberReading(ReadingKind.EMPTY)
    normalized = _normalize(text)
    if not _NUMBER_PATTERN.match(normalized):
        return NumberReading(ReadingKind.INVALID)
    try:
        return NumberReading(ReadingKind.VALUE, Decimal(normalized))
    except InvalidOperation:
        return NumberReading(ReadingKind.INVALID)


def parse_number(text: str | None) -> Decimal:
    reading = read_number(text)
    if reading.is_value:
        return reading.value
    return Decimal("0")


def sanitize_price_input(text: str | None) -> str:
    """Keep only the characters a price field accepts: digits, dots and commas."""
    if not text:
        return ""
    return _PRICE_INPUT_PATTERN.sub("", text)
