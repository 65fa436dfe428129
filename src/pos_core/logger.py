from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

ROOT_LOGGER_NAME = "pos_core"


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def set_log_level(level: str) -> None:
    get_logger().setLevel(level.upper())


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    actor_role: str | None,
    outcome: str,
    **context: object,
) -> None:
    payload: dict[str, object] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": "INFO",
        "module": module,
        "action": action,
        "actor_role": actor_role,
        "outcome": outcome,
    }
    payload.update(context)
    logger.info(json.dumps(payload, ensure_ascii=False, default=str))
