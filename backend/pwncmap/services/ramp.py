"""Positive-white-negative ramp construction.

The ramp runs from low to high value. Each side is an independent per-channel
interpolation from the white color to its extreme color. In the diverging case
the side farther from the white point gets the full level count and the other
side is scaled down by the distance ratio, so a color step spans about the same
value interval on both sides.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Sequence

import numpy as np

from ..models.base import ColorRange, ColorTriple, PwnOptions, RampResult
from ..models.errors import InvalidArgumentError
from .options import keyword_tokens, resolve_options

logger = logging.getLogger(__name__)

LOG_DECIMALS = 4


def nonlinspace(start: float, stop: float, num: int, loginess: float) -> np.ndarray:
    """Log-spaced samples from ``start`` to ``stop``.

    ``loginess > 0`` makes the steps coarse near ``start`` and fine near
    ``stop``; ``loginess < 0`` does the opposite. Values are rounded to 4
    decimals.
    """
    if num <= 0:
        return np.empty(0, dtype=np.float64)
    if num == 1:
        return np.round(np.array([float(stop)], dtype=np.float64), LOG_DECIMALS)
    positions = np.linspace(0.0, 10.0 ** loginess - 1.0, num=num, dtype=np.float64)
    values = (stop - start) / loginess * np.log10(positions + 1.0) + start
    return np.round(values, LOG_DECIMALS)


def channel_ramp(
    white: Sequence[float],
    extreme: Sequence[float],
    num: int,
    loginess: Optional[float] = None,
) -> np.ndarray:
    """(num, 3) ramp from ``white`` to ``extreme``; linear unless ``loginess`` is set."""
    white_rgb = np.asarray(white, dtype=np.float64)
    extreme_rgb = np.asarray(extreme, dtype=np.float64)
    if num <= 0:
        return np.empty((0, 3), dtype=np.float64)
    if num == 1:
        return extreme_rgb[np.newaxis, :].copy()
    if loginess is None:
        return np.linspace(white_rgb, extreme_rgb, num=num, dtype=np.float64)
    return np.stack(
        [nonlinspace(w, e, num, loginess) for w, e in zip(white_rgb, extreme_rgb)],
        axis=1,
    )


def side_levels(color_range: ColorRange, levels: float) -> tuple[int, int]:
    """Return ``(negative, positive)`` level counts.

    The shorter side gets ``round(ratio * levels)``. ``round`` is Python's
    round-half-to-even.
    """
    count = int(math.floor(levels))
    kind = color_range.kind
    if kind == "positive":
        return 0, count
    if kind == "negative":
        return count, 0

    white = color_range.white_point
    dist_pos = abs(color_range.high - white)
    dist_neg = abs(color_range.low - white)
    if dist_pos >= dist_neg:
        return int(round(dist_neg / dist_pos * levels)), count
    return count, int(round(dist_pos / dist_neg * levels))


def white_index(color_range: ColorRange, n_neg: int, length: int) -> Optional[int]:
    """Index of the white entry, or ``None`` for a one-sided ramp of a single color."""
    kind = color_range.kind
    if kind != "diverging" and length < 2:
        return None
    if kind == "positive":
        return 0
    if kind == "negative":
        return length - 1
    return max(n_neg, 1) - 1


def build_ramp(color_range: ColorRange, options: PwnOptions) -> np.ndarray:
    loginess = options.loginess if options.log else None
    white: ColorTriple = options.color_w
    n_neg, n_pos = side_levels(color_range, options.levels)
    kind = color_range.kind

    if kind == "positive":
        cmap = channel_ramp(white, options.positive, n_pos, loginess)
    elif kind == "negative":
        cmap = channel_ramp(white, options.negative, n_neg, loginess)[::-1]
    else:
        neg = channel_ramp(white, options.negative, n_neg, loginess)
        pos = channel_ramp(white, options.positive, n_pos, loginess)
        cmap = np.vstack(
            [
                neg[1:][::-1],
                np.asarray(white, dtype=np.float64)[np.newaxis, :],
                pos[1:],
            ]
        )

    logger.debug(
        "Built %s ramp range=[%g, %g] white_point=%g levels neg=%d pos=%d length=%d loginess=%s",
        kind,
        color_range.low,
        color_range.high,
        color_range.white_point,
        n_neg,
        n_pos,
        cmap.shape[0],
        loginess,
    )
    return np.ascontiguousarray(cmap)


def build_result(color_range: ColorRange, options: PwnOptions) -> RampResult:
    cmap = build_ramp(color_range, options)
    n_neg, _ = side_levels(color_range, options.levels)
    return RampResult(
        cmap=cmap,
        color_range=color_range,
        white_index=white_index(color_range, n_neg, cmap.shape[0]),
        label=options.label,
        suppressed=options.off,
    )


def resolve(
    low: Any,
    high: Any,
    tokens: Sequence[Any] = (),
    *,
    options: Optional[PwnOptions] = None,
    target: Any = None,
    keywords: Optional[dict[str, Any]] = None,
) -> tuple[ColorRange, PwnOptions]:
    """Validate the range and options of one call.

    Either pass ready ``options`` or option ``tokens``/``keywords``, not both.
    """
    extra = list(tokens) + keyword_tokens(keywords or {})
    if options is not None:
        if extra:
            raise InvalidArgumentError("pass either options or option tokens, not both")
    else:
        options = resolve_options(extra, target=target)
    return options.color_range(low, high), options


def build(low: Any, high: Any, *tokens: Any, options: Optional[PwnOptions] = None, **keywords: Any) -> np.ndarray:
    """Build the colormap array for ``[low, high]``.

    ``build(-1, 2, "level", 20, "colorP", [0.6, 0.4, 0.3])`` and
    ``build(-1, 2, level=20, colorP=[0.6, 0.4, 0.3])`` are equivalent.
    """
    color_range, resolved = resolve(low, high, tokens, options=options, keywords=keywords)
    return build_ramp(color_range, resolved)
