from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict

DEFAULT_DOUBLE_ZERO_CODE = "SC"
DEFAULT_TRIPLE_ZERO_CODE = "SCS"
DEFAULT_DIGIT_TO_LETTER = (
    ("1", "N"),
    ("2", "B"),
    ("3", "Q"),
    ("4", "M"),
    ("5", "F"),
    ("6", "Z"),
    ("7", "V"),
    ("8", "L"),
    ("9", "J"),
    ("0", "S"),
)


class CostCodeMapping(BaseModel):
    """Digit to letter table used to hide product costs.

    Values are frozen; build a new mapping to change it.
    """

    model_config = ConfigDict(frozen=True)

    digit_to_letter: dict[str, str]
    double_zero_code: str = DEFAULT_DOUBLE_ZERO_CODE
    triple_zero_code: str = DEFAULT_TRIPLE_ZERO_CODE
    updated_at: datetime | None = None
    updated_by: str | None = None

    @property
    def letter_to_digit(self) -> dict[str, str]:
        reverse = {letter: digit for digit, letter in self.digit_to_letter.items()}
        reverse[self.double_zero_code] = "00"
        reverse[self.triple_zero_code] = "000"
        return reverse

    @property
    def zero_letter(self) -> str | None:
        return self.digit_to_letter.get("0")

    def same_codes_as(self, other: CostCodeMapping) -> bool:
        return (
            self.digit_to_letter == other.digit_to_letter
            and self.double_zero_code == other.double_zero_code
            and self.triple_zero_code == other.triple_zero_code
        )

    @classmethod
    def from_document(cls, document: Mapping[str, Any] | None) -> CostCodeMapping:
        data = document or {}
        raw = data.get("digitToLetter") or {}
        digit_to_letter = {str(key): str(value) for key, value in raw.items()}
        if not digit_to_letter:
            return cls(digit_to_letter=dict(DEFAULT_DIGIT_TO_LETTER))
        return cls(
            digit_to_letter=digit_to_letter,
            double_zero_code=data.get("doubleZeroCode") or DEFAULT_DOUBLE_ZERO_CODE,
            triple_zero_code=data.get("tripleZeroCode") or DEFAULT_TRIPLE_ZERO_CODE,
            updated_at=_parse_timestamp(data.get("updatedAt")),
            updated_by=data.get("updatedBy"),
        )

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "digitToLetter": dict(self.digit_to_letter),
            "doubleZeroCode": self.double_zero_code,
            "tripleZeroCode": self.triple_zero_code,
            "updatedBy": self.updated_by,
        }
        if self.updated_at is not None:
            document["updatedAt"] = self.updated_at.isoformat()
        return document


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None
