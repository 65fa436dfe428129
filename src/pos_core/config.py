from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .cost_code_validation import validate_cost_code_mapping
from .logger import set_log_level
from .models_cost_code import (
    DEFAULT_DIGIT_TO_LETTER,
    DEFAULT_DOUBLE_ZERO_CODE,
    DEFAULT_TRIPLE_ZERO_CODE,
    CostCodeMapping,
)

# Digits in the order POS_COST_CODE_LETTERS lists them.
LETTER_ORDER = "1234567890"
DEFAULT_COST_CODE_LETTERS = "".join(letter for _, letter in DEFAULT_DIGIT_TO_LETTER)
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class CoreConfig:
    env_name: str
    cost_code_letters: str = DEFAULT_COST_CODE_LETTERS
    double_zero_code: str = DEFAULT_DOUBLE_ZERO_CODE
    triple_zero_code: str = DEFAULT_TRIPLE_ZERO_CODE
    void_reason_min_length: int = 5
    log_level: str = "INFO"

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()

    def cost_code_mapping(self) -> CostCodeMapping:
        mapping = CostCodeMapping(
            digit_to_letter=dict(zip(LETTER_ORDER, self.cost_code_letters)),
            double_zero_code=self.double_zero_code,
            triple_zero_code=self.triple_zero_code,
        )
        result = validate_cost_code_mapping(mapping)
        if not result.ok:
            details = "; ".join(f"{issue.field}: {issue.reason}" for issue in result.issues)
            raise ConfigError(f"Invalid cost code mapping: {details}")
        return mapping


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> CoreConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("POS_ENV") or "dev").strip()

    letters = (os.getenv("POS_COST_CODE_LETTERS") or DEFAULT_COST_CODE_LETTERS).strip().upper()
    _validate(
        len(letters) == len(LETTER_ORDER),
        f"Invalid POS_COST_CODE_LETTERS: expected {len(LETTER_ORDER)} letters, got {len(letters)}",
    )

    double_zero = (os.getenv("POS_COST_CODE_DOUBLE_ZERO") or DEFAULT_DOUBLE_ZERO_CODE).strip().upper()
    triple_zero = (os.getenv("POS_COST_CODE_TRIPLE_ZERO") or DEFAULT_TRIPLE_ZERO_CODE).strip().upper()

    void_reason_min_length = _read_int("POS_VOID_REASON_MIN_LENGTH", "5")
    _validate(
        void_reason_min_length >= 1,
        f"Invalid POS_VOID_REASON_MIN_LENGTH: expected >= 1, got {void_reason_min_length}",
    )

    log_level = (os.getenv("POS_LOG_LEVEL") or "INFO").strip().upper()
    _validate(log_level in _LOG_LEVELS, f"Invalid POS_LOG_LEVEL: {log_level!r}")
    set_log_level(log_level)

    return CoreConfig(
        env_name=env_name,
        cost_code_letters=letters,
        double_zero_code=double_zero,
        triple_zero_code=triple_zero,
        void_reason_min_length=void_reason_min_length,
        log_level=log_level,
    )
