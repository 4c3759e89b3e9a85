from __future__ import annotations

import argparse
import logging
import sys
from collections import OrderedDict
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .document import read
from .scene import build_scene

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _package_version() -> str:
    try:
        return version("dxfscene")
    except PackageNotFoundError:
        return "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dxfscene",
        description="Tessellate DXF drawings and fit a viewport around them.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default="ERROR",
        help="Logging level for diagnostics emitted while building the scene.",
    )
    subparsers = parser.add_subparsers(dest="command")

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show entity counts, bounds, viewport and diagnostics.",
    )
    inspect_parser.add_argument("path", help="Path to DXF file.")
    _add_scene_arguments(inspect_parser)
    inspect_parser.add_argument(
        "--verbose",
        action="store_true",
        help="List every diagnostic instead of per-kind counts.",
    )

    plot_parser = subparsers.add_parser("plot", help="Render a DXF file to an image with matplotlib.")
    plot_parser.add_argument("input_path", help="Path to DXF file.")
    plot_parser.add_argument("output_path", help="Path to output image (png, svg, pdf, ...).")
    _add_scene_arguments(plot_parser)
    plot_parser.add_argument("--dpi", type=int, default=100, help="Output resolution.")
    plot_parser.add_argument("--title", default=None, help="Optional plot title.")
    return parser


def _add_scene_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--width", type=int, default=800, help="Target width in pixels.")
    parser.add_argument("--height", type=int, default=600, help="Target height in pixels.")
    parser.add_argument(
        "--types",
        default=None,
        help='Entity filter passed to query(), e.g. "LINE ARC LWPOLYLINE".',
    )


def _run_inspect(
    path: str,
    *,
    width: int = 800,
    height: int = 600,
    types: str | None = None,
    verbose: bool = False,
) -> int:
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return 2

    try:
        drawing = read(str(file_path))
        scene = build_scene(drawing, width, height, types=types)
    except Exception as exc:
        print(f"error: failed to read DXF: {exc}", file=sys.stderr)
        return 2

    counts: OrderedDict[str, int] = OrderedDict()
    for entity in drawing.modelspace().query(types):
        counts[entity.dxftype] = counts.get(entity.dxftype, 0) + 1

    print(f"file: {file_path}")
    print(f"total_entities: {sum(counts.values())}")
    for dxftype, count in counts.items():
        print(f"{dxftype}: {count}")
    print(f"blocks: {len(drawing.blocks)}")
    print(f"items: {len(scene.items)}")

    if scene.bounds.is_defined:
        print(f"bounds_min: ({scene.bounds.min[0]:.6g}, {scene.bounds.min[1]:.6g})")
        print(f"bounds_max: ({scene.bounds.max[0]:.6g}, {scene.bounds.max[1]:.6g})")
    else:
        print("bounds: undefined")
    viewport = scene.viewport
    if viewport is not None:
        print(
            f"viewport: left={viewport.left:.6g} right={viewport.right:.6g} "
            f"bottom={viewport.bottom:.6g} top={viewport.top:.6g}"
        )
        print(f"viewport_center: ({viewport.center[0]:.6g}, {viewport.center[1]:.6g})")

    if verbose:
        for diagnostic in scene.diagnostics:
            print(f"diagnostic: {diagnostic}")
    else:
        for kind, count in scene.diagnostics_by_kind().items():
            print(f"diagnostics[{kind}]: {count}")
    return 0


def _run_plot(
    input_path: str,
    output_path: str,
    *,
    width: int = 800,
    height: int = 600,
    types: str | None = None,
    dpi: int = 100,
    title: str | None = None,
) -> int:
    from .render import plot_scene

    dxf_path = Path(input_path)
    if not dxf_path.exists():
        print(f"error: file not found: {dxf_path}", file=sys.stderr)
        return 2

    try:
        scene = build_scene(read(str(dxf_path)), width, height, types=types)
        ax = plot_scene(scene, show=False, title=title, dpi=dpi)
        out_path = Path(output_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        ax.figure.savefig(str(out_path), dpi=dpi)
    except Exception as exc:
        print(f"error: failed to plot DXF: {exc}", file=sys.stderr)
        return 2

    print(f"input: {dxf_path}")
    print(f"output: {out_path}")
    print(f"items: {len(scene.items)}")
    print(f"diagnostics: {len(scene.diagnostics)}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "inspect":
        return _run_inspect(
            args.path,
            width=args.width,
            height=args.height,
            types=args.types,
            verbose=bool(args.verbose),
        )
    if args.command == "plot":
        return _run_plot(
            args.input_path,
            args.output_path,
            width=args.width,
            height=args.height,
            types=args.types,
            dpi=args.dpi,
            title=args.title,
        )

    parser.print_help()
    return 0
