from __future__ import annotations

import json
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from pwncmap.services import export
from pwncmap.services.colorbar import colorbarpwn
from pwncmap.services.ramp import build


def test_ramp_to_hex() -> None:
    cmap = np.array([[1.0, 1.0, 1.0], [0.85, 0.225, 0.0]])
    assert export.ramp_to_hex(cmap) == ["#ffffff", "#d93900"]


def test_ramp_to_lut_resamples_to_rgba() -> None:
    lut = export.ramp_to_lut(build(0, 1))

    assert lut.shape == (256, 4)
    assert lut.dtype == np.uint8
    assert lut[0].tolist() == [255, 255, 255, 255]
    assert lut[-1].tolist() == [217, 57, 0, 255]
    assert np.all(lut[:, 3] == 255)

    assert export.ramp_to_lut(build(0, 1), n=16).shape == (16, 4)


def test_lut_size_follows_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PWN_LUT_SIZE", "64")
    assert export.ramp_to_lut(build(-1, 1)).shape == (64, 4)


def test_lut_from_single_color_is_flat() -> None:
    lut = export.ramp_to_lut(np.array([[0.0, 0.0, 1.0]]), n=4)
    assert lut.tolist() == [[0, 0, 255, 255]] * 4


def test_ramp_meta_is_json_ready() -> None:
    result = colorbarpwn(-1, 2, level=20, label="dT", off=True)
    meta = export.ramp_meta(result)

    assert meta["kind"] == "diverging"
    assert meta["range"] == [-1.0, 2.0]
    assert meta["white_point"] == 0.0
    assert meta["length"] == 29
    assert meta["white_index"] == 9
    assert meta["colors"][9] == "#ffffff"
    assert meta["label"] == "dT"
    assert json.loads(json.dumps(meta)) == meta


def test_ramp_meta_single_color_has_null_white_index() -> None:
    meta = export.ramp_meta(colorbarpwn(1, 2, level=1, off=True))

    assert meta["length"] == 1
    assert meta["white_index"] is None
    assert json.loads(json.dumps(meta))["white_index"] is None


def test_write_swatch_png_horizontal(tmp_path: Path) -> None:
    cmap = build(-1, 2, level=20)
    out = export.write_swatch_png(cmap, tmp_path / "swatch" / "pwn.png", height=5)

    with Image.open(out) as image:
        assert image.size == (29, 5)
        assert image.getpixel((0, 0)) == tuple(export.ramp_to_u8(cmap)[0].tolist())
        assert image.getpixel((9, 4)) == (255, 255, 255)


def test_write_swatch_png_vertical_puts_high_end_on_top(tmp_path: Path) -> None:
    cmap = build(0, 1, level=10)
    out = export.write_swatch_png(cmap, tmp_path / "pwn.png", height=3, vertical=True)

    with Image.open(out) as image:
        assert image.size == (3, 10)
        assert image.getpixel((0, 0)) == (217, 57, 0)
        assert image.getpixel((2, 9)) == (255, 255, 255)


def test_write_swatch_png_rejects_empty_height(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        export.write_swatch_png(build(0, 1), tmp_path / "pwn.png", height=0)
