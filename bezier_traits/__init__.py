from .types import (
    Comparison,
    SMALLER,
    EQUAL,
    LARGER,
    ComparisonTraits,
    IntersectionTraits,
    SplitMergeTraits,
    DirectedCurveTraits,
)
from .config import TraitsConfig, get_traits_config, set_traits_config
from .numbers import AlgebraicReal, real_roots_in
from .bounding import BoundingBox, BoundingTraits, BoundType, PointBound
from .curve import BezierCurve
from .point import BezierPoint, PointKind
from .cache import BezierCache, IntersectionInfo, IntersectionMap, IntersectionParams
from .x_monotone import IntersectionPoint, XMonotoneArc
from .traits import BezierTraits, SharedCaches
from .validate import CheckedBezierTraits, ValidationError

__all__ = [
    'Comparison',
    'SMALLER',
    'EQUAL',
    'LARGER',
    'ComparisonTraits',
    'IntersectionTraits',
    'SplitMergeTraits',
    'DirectedCurveTraits',
    'TraitsConfig',
    'get_traits_config',
    'set_traits_config',
    'AlgebraicReal',
    'real_roots_in',
    'BoundingBox',
    'BoundingTraits',
    'BoundType',
    'PointBound',
    'BezierCurve',
    'BezierPoint',
    'PointKind',
    'BezierCache',
    'IntersectionInfo',
    'IntersectionMap',
    'IntersectionParams',
    'IntersectionPoint',
    'XMonotoneArc',
    'BezierTraits',
    'SharedCaches',
    'CheckedBezierTraits',
    'ValidationError',
]
