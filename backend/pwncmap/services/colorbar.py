"""Apply a positive-white-negative ramp to a matplotlib target.

The ramp itself never depends on matplotlib; this module only binds an already
built ramp to an axes or mappable and draws the colorbar.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional

import numpy as np
from matplotlib import cm
from matplotlib.axes import Axes
from matplotlib.colorbar import Colorbar
from matplotlib.colors import ListedColormap, Normalize

from ..models.base import PwnOptions, RampResult
from .options import parse_call
from .ramp import build_result, resolve

logger = logging.getLogger(__name__)

DEFAULT_CMAP_NAME = "pwn"


def to_listed_colormap(cmap: np.ndarray, name: str = DEFAULT_CMAP_NAME) -> ListedColormap:
    colors = np.asarray(cmap, dtype=np.float64)
    if colors.ndim != 2 or colors.shape[1] != 3 or colors.shape[0] == 0:
        raise ValueError(f"cmap must be a non-empty (n, 3) array, got shape {colors.shape}")
    return ListedColormap(colors, name=name)


def _mappables(ax: Axes) -> list[cm.ScalarMappable]:
    found: list[cm.ScalarMappable] = []
    for artist in [*ax.images, *ax.collections]:
        if isinstance(artist, cm.ScalarMappable):
            found.append(artist)
    return found


def apply_colorbar(
    cmap: np.ndarray,
    low: float,
    high: float,
    *,
    target: Any = None,
    label: Optional[str] = None,
) -> Colorbar:
    """Make ``cmap`` the active color scale of ``target`` and add a colorbar.

    ``target`` may be a mappable (image, mesh, scatter), an ``Axes`` whose
    mappables are all updated, or ``None`` for the current axes. An axes
    without mappables still gets a standalone colorbar for ``[low, high]``.
    """
    listed = to_listed_colormap(cmap)

    if isinstance(target, cm.ScalarMappable):
        target.set_cmap(listed)
        target.set_clim(low, high)
        ax = getattr(target, "axes", None)
        if ax is None:
            raise ValueError("target mappable is not attached to an axes")
        colorbar = ax.figure.colorbar(target, ax=ax)
    else:
        if target is None:
            import matplotlib.pyplot as plt

            ax = plt.gca()
        elif isinstance(target, Axes):
            ax = target
        else:
            raise TypeError(f"Unsupported colorbar target: {type(target)!r}")

        mappables = _mappables(ax)
        for mappable in mappables:
            mappable.set_cmap(listed)
            mappable.set_clim(low, high)
        if mappables:
            source = mappables[-1]
        else:
            source = cm.ScalarMappable(norm=Normalize(vmin=low, vmax=high), cmap=listed)
            source.set_array([])
        colorbar = ax.figure.colorbar(source, ax=ax)
        logger.debug("Applied pwn colormap to %d mappable(s)", len(mappables))

    if label is not None:
        colorbar.set_label(label)
    return colorbar


def attach(result: RampResult, target: Any = None) -> RampResult:
    """Draw ``result`` on ``target`` and return it with the colorbar handle set."""
    color_range = result.color_range
    handle = apply_colorbar(
        result.cmap,
        color_range.low,
        color_range.high,
        target=target,
        label=result.label,
    )
    return dataclasses.replace(result, handle=handle, suppressed=False)


def colorbarpwn(*args: Any, options: Optional[PwnOptions] = None, **keywords: Any) -> RampResult:
    """Build a positive-white-negative colormap and, unless ``off``, a colorbar.

    Call shapes::

        colorbarpwn(cmin, cmax)
        colorbarpwn(cmin, cmax, "level", 20, "colorP", [0.6, 0.4, 0.3])
        colorbarpwn(ax, cmin, cmax, "log", 1.2, "label", r"$\\alpha$")
        colorbarpwn(cmin, cmax, "rev", "off").cmap

    The returned result always carries the ramp; its ``colorbar`` is only
    available when the colorbar was drawn.
    """
    target, low, high, tokens = parse_call(args)
    color_range, resolved = resolve(
        low,
        high,
        tokens,
        options=options,
        target=target,
        keywords=keywords,
    )
    result = build_result(color_range, resolved)
    if resolved.off:
        return result
    return attach(result, target if target is not None else resolved.target)
