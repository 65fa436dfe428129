from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping

from .logger import get_logger, log_action
from .models_cost_code import CostCodeMapping

DIGITS = tuple("0123456789")

_logger = get_logger()


@dataclass(frozen=True)
class CostCodeIssue:
    field: str
    reason: str


@dataclass(frozen=True)
class CostCodeValidationResult:
    ok: bool
    issues: list[CostCodeIssue]


class CostCodeMappingError(ValueError):
    def __init__(self, issues: list[CostCodeIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Invalid cost code mapping"
        issue = self.issues[0]
        extra = f" (+{len(self.issues) - 1} more)" if len(self.issues) > 1 else ""
        return f"{issue.field}: {issue.reason}{extra}"


def validate_cost_code_mapping(mapping: CostCodeMapping) -> CostCodeValidationResult:
    """Check that every code the mapping can produce decodes back unambiguously.

    The encoder only emits the zero letter right before a non-zero letter,
    and only emits the double-zero code before a non-zero letter or the end
    of the code. The prefix rules below reject exactly the overlaps that
    greedy decoding could then misread.
    """
    issues: list[CostCodeIssue] = []
    letters = mapping.digit_to_letter

    missing = [digit for digit in DIGITS if digit not in letters]
    if missing:
        issues.append(CostCodeIssue(field="digit_to_letter", reason=f"missing digits: {', '.join(missing)}"))
    unknown = sorted(key for key in letters if key not in DIGITS)
    if unknown:
        issues.append(CostCodeIssue(field="digit_to_letter", reason=f"unexpected keys: {', '.join(unknown)}"))

    for digit in DIGITS:
        letter = letters.get(digit)
        if letter is None:
            continue
        if len(letter) != 1:
            issues.append(
                CostCodeIssue(field=f"digit_to_letter.{digit}", reason="letter must be a single character")
            )
    values = [letters[digit] for digit in DIGITS if digit in letters]
    if len(set(values)) != len(values):
        issues.append(CostCodeIssue(field="digit_to_letter", reason="each digit must have a unique letter"))

    double = mapping.double_zero_code
    triple = mapping.triple_zero_code
    if not double:
        issues.append(CostCodeIssue(field="double_zero_code", reason="is required"))
    if not triple:
        issues.append(CostCodeIssue(field="triple_zero_code", reason="is required"))
    if not double or not triple:
        return CostCodeValidationResult(ok=False, issues=issues)

    if double == triple:
        issues.append(CostCodeIssue(field="triple_zero_code", reason="must differ from double_zero_code"))

    zero_letter = letters.get("0")
    nonzero_letters = {letters[digit] for digit in DIGITS[1:] if digit in letters}
    all_letters = set(values)

    for field, token in (("double_zero_code", double), ("triple_zero_code", triple)):
        if token in all_letters:
            issues.append(CostCodeIssue(field=field, reason="must not equal a digit letter"))
            continue
        if token[0] in nonzero_letters:
            issues.append(
                CostCodeIssue(field=field, reason=f"must not start with non-zero digit letter {token[0]!r}")
            )
        elif token[0] == zero_letter and len(token) > 1 and token[1] in nonzero_letters:
            issues.append(
                CostCodeIssue(
                    field=field,
                    reason=f"zero letter followed by {token[1]!r} collides with a single zero before a digit",
                )
            )

    if double != triple:
        if double.startswith(triple):
            issues.append(CostCodeIssue(field="triple_zero_code", reason="must not be a prefix of double_zero_code"))
        elif triple.startswith(double) and triple[len(double)] in nonzero_letters:
            issues.append(
                CostCodeIssue(
                    field="triple_zero_code",
                    reason="double_zero_code followed by a digit letter would decode as triple_zero_code",
                )
            )

    return CostCodeValidationResult(ok=not issues, issues=issues)


def ensure_valid_mapping(mapping: CostCodeMapping) -> CostCodeMapping:
    result = validate_cost_code_mapping(mapping)
    if not result.ok:
        raise CostCodeMappingError(result.issues)
    return mapping


def apply_mapping_update(
    current: CostCodeMapping,
    *,
    updated_by: str,
    digit_to_letter: Mapping[str, str] | None = None,
    double_zero_code: str | None = None,
    triple_zero_code: str | None = None,
    actor_role: str | None = None,
    now: datetime | None = None,
) -> CostCodeMapping:
    candidate = CostCodeMapping(
        digit_to_letter=dict(digit_to_letter) if digit_to_letter is not None else dict(current.digit_to_letter),
        double_zero_code=double_zero_code if double_zero_code is not None else current.double_zero_code,
        triple_zero_code=triple_zero_code if triple_zero_code is not None else current.triple_zero_code,
        updated_at=now or datetime.now(timezone.utc),
        updated_by=updated_by,
    )
    result = validate_cost_code_mapping(candidate)
    if not result.ok:
        log_action(
            _logger,
            "cost_code",
            "update_mapping",
            actor_role,
            "rejected",
            updated_by=updated_by,
            issues=[issue.field for issue in result.issues],
        )
        raise CostCodeMappingError(result.issues)
    log_action(
        _logger,
        "cost_code",
        "update_mapping",
        actor_role,
        "success",
        updated_by=updated_by,
        unchanged=candidate.same_codes_as(current),
    )
    return candidate
