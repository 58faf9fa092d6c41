"""Storage helpers for economic parameters (CDI, IPCA, SELIC, ...)."""
from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping

from portfolio_metrics.config import DEFAULT_ECONOMIC_PARAMETERS, PARAMETERS_FILE
from portfolio_metrics.infrastructure.parsing.utils import parse_decimal

logger = logging.getLogger(__name__)

DEFAULT_PATH = PARAMETERS_FILE


def _normalize_parameters(raw: Mapping[str, Any] | None) -> dict[str, Decimal]:
    normalized: dict[str, Decimal] = {}
    if not isinstance(raw, Mapping):
        return normalized
    for key, value in raw.items():
        if key is None:
            continue
        name = str(key).strip().upper()
        if not name:
            continue
        parsed = parse_decimal(value)
        if parsed is None:
            logger.warning("Ignoring parameter %s: %r is not a number", name, value)
            continue
        normalized[name] = parsed
    return normalized


def load_parameters(path: Path | None = None) -> dict[str, Decimal]:
    override_path = path or DEFAULT_PATH
    parameters = dict(DEFAULT_ECONOMIC_PARAMETERS)
    if not override_path.exists():
        return parameters
    try:
        data = json.loads(override_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning("Parameter file %s is not valid JSON; using defaults", override_path)
        return parameters
    parameters.update(_normalize_parameters(data))
    return parameters


def save_parameters(parameters: Mapping[str, Any], path: Path | None = None) -> dict[str, Decimal]:
    override_path = path or DEFAULT_PATH
    normalized = _normalize_parameters(parameters)
    override_path.parent.mkdir(parents=True, exist_ok=True)
    override_path.write_text(
        json.dumps({name: str(value) for name, value in normalized.items()}, indent=2, sort_keys=True),
        encoding="utf-8",
    )
    merged = dict(DEFAULT_ECONOMIC_PARAMETERS)
    merged.update(normalized)
    return merged
