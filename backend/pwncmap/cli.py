"""Build a positive-white-negative colormap from the command line.

Usage:
    pwncmap -1 2 --level 20 --color-p 0.6 0.4 0.3
    pwncmap -2 2 --log -1 --rev --format hex
    pwncmap 1 2 --log 1.2 --label '$\\alpha$' --colorbar-png alpha.png
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .models.base import RampResult
from .models.errors import PwnError
from .services.colorbar import colorbarpwn
from .services.export import ramp_meta, ramp_to_hex, write_swatch_png

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pwncmap",
        description="Generate a positive-white-negative colormap for [cmin, cmax]",
    )
    parser.add_argument("cmin", type=float, help="Lower end of the color scale")
    parser.add_argument("cmax", type=float, help="Upper end of the color scale")
    parser.add_argument("--level", type=float, default=None, help="Levels on the longer side (default: 128)")
    parser.add_argument("--color-p", type=float, nargs=3, metavar=("R", "G", "B"), default=None, help="Positive color")
    parser.add_argument("--color-n", type=float, nargs=3, metavar=("R", "G", "B"), default=None, help="Negative color")
    parser.add_argument("--color-w", type=float, nargs=3, metavar=("R", "G", "B"), default=None, help="White color")
    parser.add_argument(
        "--log",
        type=float,
        nargs="?",
        const=True,
        default=None,
        metavar="LOGINESS",
        help="Log-spaced colormap, optional loginess (default: 1)",
    )
    parser.add_argument(
        "--full",
        type=float,
        nargs="?",
        const=True,
        default=None,
        metavar="WVALUE",
        help="Force both sides, optionally with the white point value",
    )
    parser.add_argument("--rev", action="store_true", help="Swap the default positive and negative colors")
    parser.add_argument("--label", default=None, help="Colorbar label (mathtext allowed)")
    parser.add_argument("--format", choices=("json", "hex", "csv"), default="json", help="Stdout format")
    parser.add_argument("--png", type=Path, default=None, help="Write the ramp as a PNG swatch")
    parser.add_argument("--vertical", action="store_true", help="Write a vertical swatch, high end on top")
    parser.add_argument("--colorbar-png", type=Path, default=None, help="Render a matplotlib colorbar figure")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _keywords(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "level": args.level,
        "colorP": args.color_p,
        "colorN": args.color_n,
        "colorW": args.color_w,
        "log": args.log,
        "full": args.full,
        "rev": args.rev,
        "label": args.label,
    }


def _render_colorbar(args: argparse.Namespace, keywords: dict[str, Any]) -> RampResult:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(2.0, 4.0))
    try:
        ax.set_axis_off()
        result = colorbarpwn(ax, args.cmin, args.cmax, **keywords)
        args.colorbar_png.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(args.colorbar_png, bbox_inches="tight")
    finally:
        plt.close(fig)
    logger.info("Wrote colorbar figure %s", args.colorbar_png)
    return result


def _emit(result: RampResult, fmt: str) -> None:
    if fmt == "json":
        sys.stdout.write(json.dumps(ramp_meta(result), indent=2) + "\n")
    elif fmt == "hex":
        sys.stdout.write("\n".join(ramp_to_hex(result.cmap)) + "\n")
    else:
        writer = csv.writer(sys.stdout, lineterminator="\n")
        for row in result.cmap:
            writer.writerow([f"{channel:.4f}" for channel in row])


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    keywords = _keywords(args)

    try:
        if args.colorbar_png is not None:
            result = _render_colorbar(args, keywords)
        else:
            result = colorbarpwn(args.cmin, args.cmax, off=True, **keywords)
    except PwnError as exc:
        logger.error("Invalid colormap configuration: %s", exc)
        return 2

    if args.png is not None:
        write_swatch_png(result.cmap, args.png, vertical=args.vertical)
        logger.info("Wrote swatch %s (%d colors)", args.png, len(result))

    _emit(result, args.format)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
