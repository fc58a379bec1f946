from __future__ import annotations

import logging
import math
import numbers
import sys
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

import numpy as np

from ..config.defaults import (
    DEFAULT_NEGATIVE,
    DEFAULT_POSITIVE,
    DEFAULT_WHITE,
    default_levels,
    default_loginess,
)
from .errors import (
    ColorSpecError,
    LabelError,
    LevelError,
    LoginessError,
    OutputRequestError,
    RangeError,
)

logger = logging.getLogger(__name__)

# Largest |loginess| for which 10 ** loginess stays a finite float.
MAX_LOGINESS = math.log10(sys.float_info.max)

ColorTriple = tuple[float, float, float]
ColorInput = Union[ColorTriple, Sequence[float], np.ndarray]


def is_real_scalar(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, np.ndarray):
        return value.ndim == 0 and np.isrealobj(value) and value.dtype.kind in "iuf"
    return isinstance(value, numbers.Real)


def is_numeric_token(value: Any) -> bool:
    """Scalars and numeric rows (colors) count as numeric; strings never do."""
    if isinstance(value, (str, bytes)) or value is None:
        return False
    if is_real_scalar(value):
        return True
    if isinstance(value, np.ndarray):
        return value.dtype.kind in "iuf"
    if isinstance(value, (list, tuple)):
        return len(value) > 0 and all(is_real_scalar(item) for item in value)
    return False


def normalize_color(value: Any, *, name: str) -> ColorTriple:
    if value is None or isinstance(value, (str, bytes)):
        raise ColorSpecError(f"{name} must be a 3-element [R, G, B] row, got {value!r}")
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ColorSpecError(f"{name} must be a 3-element [R, G, B] row, got {value!r}") from exc
    if arr.shape == (1, 3):
        arr = arr[0]
    if arr.shape != (3,):
        raise ColorSpecError(f"{name} must be a 3-element [R, G, B] row, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)) or arr.min() < 0.0 or arr.max() > 1.0:
        raise ColorSpecError(f"{name} channels must lie within [0, 1], got {arr.tolist()}")
    r, g, b = (float(channel) for channel in arr)
    return r, g, b


@dataclass(frozen=True)
class ColorRange:
    """Value range of the colorbar and the value drawn in the white color.

    Without full spectrum the white point is zero and a range that does not
    straddle zero produces a one-sided ramp. Full spectrum always produces both
    sides; its white point defaults to the middle of the range.
    """

    low: float
    high: float
    white_point: Optional[float] = None
    full: bool = False

    def __post_init__(self) -> None:
        if not is_real_scalar(self.low) or not is_real_scalar(self.high):
            raise RangeError(
                f"cmin and cmax must be real scalars, got cmin={self.low!r} cmax={self.high!r}"
            )
        low, high = float(self.low), float(self.high)
        if not (math.isfinite(low) and math.isfinite(high)):
            raise RangeError(f"cmin and cmax must be finite, got cmin={low} cmax={high}")
        if low >= high:
            raise RangeError(f"cmin must be less than cmax, got cmin={low} cmax={high}")
        object.__setattr__(self, "low", low)
        object.__setattr__(self, "high", high)

        full = bool(self.full) or self.white_point is not None
        object.__setattr__(self, "full", full)
        if not full:
            object.__setattr__(self, "white_point", 0.0)
            return
        if self.white_point is None:
            object.__setattr__(self, "white_point", (low + high) / 2)
            return
        if not is_real_scalar(self.white_point):
            raise RangeError(f"white point must be a scalar when specified, got {self.white_point!r}")
        white = float(self.white_point)
        if not (low < white < high):
            raise RangeError(
                f"white point must be within cmin < white < cmax, got {white} for [{low}, {high}]"
            )
        object.__setattr__(self, "white_point", white)

    @property
    def kind(self) -> str:
        if not self.full and self.low >= 0:
            return "positive"
        if not self.full and self.high <= 0:
            return "negative"
        return "diverging"


@dataclass(frozen=True)
class PwnOptions:
    """Colormap and colorbar settings.

    levels
        Colors on the longer side of the white point (default 128, or
        ``PWN_DEFAULT_LEVELS``). Fractional values are floored when sampling.
    color_p, color_n
        Positive and negative extremes. Unset means red/blue, swapped by
        ``reverse``; an explicit color wins over ``reverse``.
    color_w
        Neutral color drawn at the white point.
    full, white_point
        Force both sides of the ramp; ``white_point`` implies ``full``.
    log, loginess
        Log-warped spacing. Positive loginess shrinks the white region,
        negative loginess enlarges it.
    label
        Colorbar label, mathtext/LaTeX strings allowed.
    off
        Build the ramp only, never touch a figure.
    target
        Axes or mappable the colorbar is attached to (current axes if unset).
    """

    levels: float = field(default_factory=default_levels)
    color_p: Optional[ColorInput] = None
    color_n: Optional[ColorInput] = None
    color_w: ColorInput = DEFAULT_WHITE
    reverse: bool = False
    full: bool = False
    white_point: Optional[float] = None
    log: bool = False
    loginess: float = field(default_factory=default_loginess)
    label: Optional[str] = None
    off: bool = False
    target: Any = None
    positive: ColorTriple = field(init=False)
    negative: ColorTriple = field(init=False)

    def __post_init__(self) -> None:
        if not is_real_scalar(self.levels) or not math.isfinite(float(self.levels)) or self.levels <= 0:
            raise LevelError(f"level must be a real positive number, got {self.levels!r}")
        if math.floor(self.levels) < 1:
            raise LevelError(f"level must allow at least one color, got {self.levels!r}")

        if not is_real_scalar(self.loginess):
            raise LoginessError(f"loginess must be a scalar when specified, got {self.loginess!r}")
        if self.loginess == 0 or not math.isfinite(float(self.loginess)):
            raise LoginessError(f"loginess must be nonzero and finite, got {self.loginess!r}")
        if abs(self.loginess) >= MAX_LOGINESS:
            raise LoginessError(
                f"loginess must lie strictly within +/-{MAX_LOGINESS:.2f}, got {self.loginess!r}"
            )
        object.__setattr__(self, "loginess", float(self.loginess))

        if self.label is not None and not isinstance(self.label, str):
            raise LabelError(f"label must be a string, got {self.label!r}")

        if self.white_point is not None:
            if not is_real_scalar(self.white_point):
                raise RangeError(f"white point must be a scalar when specified, got {self.white_point!r}")
            object.__setattr__(self, "full", True)

        object.__setattr__(self, "color_w", normalize_color(self.color_w, name="colorW"))
        if self.reverse:
            default_p, default_n = DEFAULT_NEGATIVE, DEFAULT_POSITIVE
        else:
            default_p, default_n = DEFAULT_POSITIVE, DEFAULT_NEGATIVE

        positive = default_p
        if self.color_p is not None:
            positive = normalize_color(self.color_p, name="colorP")
            object.__setattr__(self, "color_p", positive)
            if self.reverse:
                logger.warning("'rev' is overwritten since 'colorP' is specified")
        negative = default_n
        if self.color_n is not None:
            negative = normalize_color(self.color_n, name="colorN")
            object.__setattr__(self, "color_n", negative)
            if self.reverse:
                logger.warning("'rev' is overwritten since 'colorN' is specified")
        object.__setattr__(self, "positive", positive)
        object.__setattr__(self, "negative", negative)

    @property
    def level_count(self) -> int:
        return int(math.floor(self.levels))

    def color_range(self, low: Any, high: Any) -> ColorRange:
        return ColorRange(low, high, white_point=self.white_point, full=self.full)


@dataclass(frozen=True, eq=False)
class RampResult:
    cmap: np.ndarray
    color_range: ColorRange
    white_index: Optional[int]
    label: Optional[str] = None
    suppressed: bool = False
    handle: Any = field(default=None, repr=False)

    @property
    def colorbar(self) -> Any:
        if self.suppressed:
            raise OutputRequestError("cannot return a colorbar handle when 'off' is requested")
        return self.handle

    @property
    def white(self) -> Optional[np.ndarray]:
        if self.white_index is None:
            return None
        return self.cmap[self.white_index]

    def __len__(self) -> int:
        return int(self.cmap.shape[0])
