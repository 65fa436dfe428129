from __future__ import annotations

from decimal import Decimal, InvalidOperation

from .logger import get_logger
from .models_cost_code import (
    DEFAULT_DIGIT_TO_LETTER,
    DEFAULT_DOUBLE_ZERO_CODE,
    DEFAULT_TRIPLE_ZERO_CODE,
    CostCodeMapping,
)

UNMAPPED_DIGIT_PLACEHOLDER = "?"

_logger = get_logger()


def default_cost_code_mapping() -> CostCodeMapping:
    return CostCodeMapping(
        digit_to_letter=dict(DEFAULT_DIGIT_TO_LETTER),
        double_zero_code=DEFAULT_DOUBLE_ZERO_CODE,
        triple_zero_code=DEFAULT_TRIPLE_ZERO_CODE,
    )


def encode_cost(mapping: CostCodeMapping, amount: Decimal | int | float | str) -> str:
    """Encode a cost as letters, e.g. 125 -> "NBF", 1000 -> "NSCS" with the default mapping.

    Fractions are truncated. Digits missing from the mapping come out as "?"
    so a broken mapping shows up on screen instead of raising.
    """
    whole = _whole_units(amount)
    if whole <= 0:
        return mapping.digit_to_letter.get("0", UNMAPPED_DIGIT_PLACEHOLDER)

    digits = str(whole)
    parts: list[str] = []
    i = 0
    while i < len(digits):
        if digits.startswith("000", i):
            parts.append(mapping.triple_zero_code)
            i += 3
            continue
        if digits.startswith("00", i):
            parts.append(mapping.double_zero_code)
            i += 2
            continue
        parts.append(mapping.digit_to_letter.get(digits[i], UNMAPPED_DIGIT_PLACEHOLDER))
        i += 1
    return "".join(parts)


def decode_cost(mapping: CostCodeMapping, code: str) -> Decimal | None:
    """Decode a letter code back to its amount, or None if any position is unknown."""
    if not code:
        return None

    reverse = mapping.letter_to_digit
    triple = mapping.triple_zero_code
    double = mapping.double_zero_code
    digits: list[str] = []
    i = 0
    while i < len(code):
        # Longest token first.
        if triple and code.startswith(triple, i):
            digits.append("000")
            i += len(triple)
            continue
        if double and code.startswith(double, i):
            digits.append("00")
            i += len(double)
            continue
        digit = reverse.get(code[i])
        if digit is None:
            _logger.debug("cost code %r rejected at position %d", code, i)
            return None
        digits.append(digit)
        i += 1
    return Decimal("".join(digits))


def is_valid_code(mapping: CostCodeMapping, code: str) -> bool:
    return decode_cost(mapping, code) is not None


def _whole_units(amount: Decimal | int | float | str) -> int:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation:
        return 0
    if not value.is_finite():
        return 0
    return int(value)
