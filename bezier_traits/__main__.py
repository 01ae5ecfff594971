import argparse
import json
import logging
from typing import List, Optional, Sequence

from bezier_traits import BezierCurve, BezierPoint, BezierTraits, IntersectionPoint, XMonotoneArc
from bezier_traits.logging_utils import _safe_repr

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _load_curves(path: str) -> List[BezierCurve]:
    with open(path, encoding="utf-8") as fin:
        data = json.load(fin)
    if not isinstance(data, list) or not data:
        raise ValueError("expected a non-empty JSON list of curves")
    curves = []
    for idx, points in enumerate(data):
        if not isinstance(points, list):
            raise ValueError(f"curve {idx} must be a list of [x, y] control points")
        try:
            curves.append(BezierCurve(points))
        except ValueError as exc:
            raise ValueError(f"curve {idx}: {exc}") from exc
    return curves


def _format_point(point: BezierPoint) -> str:
    x, y = point.approximate()
    return f"({x:.6g}, {y:.6g})"


def _format_arc(arc: XMonotoneArc) -> str:
    text = f"{_format_point(arc.source())} -> {_format_point(arc.target())}"
    if arc.is_vertical():
        text += " vertical"
    return text


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Split Bezier curves into x-monotone arcs")
    parser.add_argument("path", help="JSON file holding a list of curves, each a list of [x, y] points")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--no-intersections",
        action="store_true",
        help="Only decompose the curves",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        curves = _load_curves(args.path)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read curves from %s: %s", args.path, exc)
        raise SystemExit(1)
    logger.info("Loaded %d curve(s) from %s", len(curves), args.path)

    traits = BezierTraits()
    arcs_per_curve = []
    for idx, curve in enumerate(curves):
        arcs = traits.make_x_monotone(curve)
        arcs_per_curve.append(arcs)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("curve %d polyline: %s", idx, _safe_repr(curve.sample(16)))
        print(f"curve {idx}: {len(arcs)} x-monotone arc(s)")
        for arc_idx, arc in enumerate(arcs):
            print(f"  arc {arc_idx}: {_format_arc(arc)}")

    if args.no_intersections:
        return

    print("intersections:")
    for i in range(len(curves)):
        for j in range(i + 1, len(curves)):
            seen = []
            for arc_a in arcs_per_curve[i]:
                for arc_b in arcs_per_curve[j]:
                    for item in traits.intersect(arc_a, arc_b):
                        if isinstance(item, IntersectionPoint):
                            if any(item.point is p or item.point.equals(p) for p in seen):
                                continue
                            seen.append(item.point)
                            print(f"  curves {i}/{j}: point {_format_point(item.point)}")
                        else:
                            print(f"  curves {i}/{j}: overlap {_format_arc(item)}")
    logger.info("Cache stats: %s", dict(traits.cache.stats))


if __name__ == "__main__":
    main()
