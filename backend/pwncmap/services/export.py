"""Ramp export: hex palettes, RGBA LUTs, sidecar metadata and PNG swatches."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import numpy as np
from PIL import Image

from ..config.defaults import lut_size, swatch_height
from ..models.base import RampResult


def _as_ramp(cmap: np.ndarray) -> np.ndarray:
    colors = np.asarray(cmap, dtype=np.float64)
    if colors.ndim != 2 or colors.shape[1] != 3 or colors.shape[0] == 0:
        raise ValueError(f"cmap must be a non-empty (n, 3) array, got shape {colors.shape}")
    return colors


def _rgb_to_hex(rgb: np.ndarray) -> str:
    r, g, b = np.clip(np.rint(rgb * 255.0), 0, 255).astype(np.uint8).tolist()
    return f"#{r:02x}{g:02x}{b:02x}"


def ramp_to_hex(cmap: np.ndarray) -> list[str]:
    return [_rgb_to_hex(row) for row in _as_ramp(cmap)]


def ramp_to_u8(cmap: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(_as_ramp(cmap) * 255.0), 0, 255).astype(np.uint8)


def ramp_to_lut(cmap: np.ndarray, n: Optional[int] = None) -> np.ndarray:
    """Resample the ramp to an ``(n, 4)`` RGBA uint8 lookup table."""
    colors = _as_ramp(cmap)
    size = lut_size() if n is None else int(n)
    if size < 2:
        raise ValueError(f"LUT size must be at least 2, got {size}")
    stops = colors * 255.0
    if colors.shape[0] == 1:
        stops = np.vstack([stops, stops])
    stop_positions = np.linspace(0.0, 1.0, num=stops.shape[0])
    target_positions = np.linspace(0.0, 1.0, num=size)
    r = np.interp(target_positions, stop_positions, stops[:, 0])
    g = np.interp(target_positions, stop_positions, stops[:, 1])
    b = np.interp(target_positions, stop_positions, stops[:, 2])
    a = np.full(size, 255.0)
    return np.clip(np.rint(np.stack([r, g, b, a], axis=1)), 0, 255).astype(np.uint8)


def ramp_meta(result: RampResult) -> dict[str, Any]:
    """Sidecar JSON metadata for a built ramp."""
    color_range = result.color_range
    return {
        "kind": color_range.kind,
        "range": [color_range.low, color_range.high],
        "white_point": color_range.white_point,
        "full": color_range.full,
        "length": len(result),
        "white_index": result.white_index,
        "label": result.label,
        "colors": ramp_to_hex(result.cmap),
        "rgb": [[float(channel) for channel in row] for row in result.cmap],
    }


def write_swatch_png(
    cmap: np.ndarray,
    path: Path,
    *,
    height: Optional[int] = None,
    vertical: bool = False,
) -> Path:
    """Write the ramp as a PNG strip, one pixel per color.

    Vertical strips put the high end at the top, like a colorbar.
    """
    pixels = ramp_to_u8(cmap)
    thickness = swatch_height() if height is None else int(height)
    if thickness < 1:
        raise ValueError(f"swatch height must be at least 1, got {thickness}")
    if vertical:
        strip = np.repeat(pixels[::-1, np.newaxis, :], thickness, axis=1)
    else:
        strip = np.repeat(pixels[np.newaxis, :, :], thickness, axis=0)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image = Image.fromarray(np.ascontiguousarray(strip))
    image.save(path, format="PNG")
    return path
