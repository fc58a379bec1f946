from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

ENV_DEFAULT_LEVELS = "PWN_DEFAULT_LEVELS"
ENV_SWATCH_HEIGHT = "PWN_SWATCH_HEIGHT"
ENV_LUT_SIZE = "PWN_LUT_SIZE"
ENV_DEFAULT_LOGINESS = "PWN_DEFAULT_LOGINESS"


def _int_from_env(env_name: str, fallback: int, *, min_value: int) -> int:
    raw = os.getenv(env_name, "").strip()
    if not raw:
        return fallback
    try:
        parsed = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using fallback=%d", env_name, raw, fallback)
        return fallback
    return parsed if parsed >= min_value else fallback


def _float_from_env(env_name: str, fallback: float, *, nonzero: bool = False) -> float:
    raw = os.getenv(env_name, "").strip()
    if not raw:
        return fallback
    try:
        parsed = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using fallback=%s", env_name, raw, fallback)
        return fallback
    if nonzero and parsed == 0.0:
        logger.warning("Invalid %s=%r (must be nonzero); using fallback=%s", env_name, raw, fallback)
        return fallback
    return parsed


def default_levels() -> int:
    return _int_from_env(ENV_DEFAULT_LEVELS, 128, min_value=1)


def default_loginess() -> float:
    return _float_from_env(ENV_DEFAULT_LOGINESS, 1.0, nonzero=True)


def swatch_height() -> int:
    return _int_from_env(ENV_SWATCH_HEIGHT, 32, min_value=1)


def lut_size() -> int:
    return _int_from_env(ENV_LUT_SIZE, 256, min_value=2)


# Default extremes; "rev" swaps positive and negative.
DEFAULT_POSITIVE = (0.8500, 0.2250, 0.0)
DEFAULT_NEGATIVE = (0.0000, 0.4470, 0.8210)
DEFAULT_WHITE = (1.0, 1.0, 1.0)

# Option keyword -> value arity ("required", "optional", "none").
OPTION_KEYWORDS: dict[str, str] = {
    "level": "required",
    "label": "required",
    "colorP": "required",
    "colorN": "required",
    "colorW": "required",
    "log": "optional",
    "full": "optional",
    "rev": "none",
    "off": "none",
}
