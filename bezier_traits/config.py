"""Configuration helpers for the filtering and refinement stages."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from fractions import Fraction


@dataclass
class TraitsConfig:
    """Tunables shared by the bounding collaborator and point comparisons."""

    # Width below which an approximate vertical-tangency bound is reported.
    tangency_tolerance: Fraction = field(default_factory=lambda: Fraction(1, 1 << 12))
    # Subdivision depth after which a candidate is reported as unrefinable.
    max_subdivision_depth: int = 40
    # Interval refinements attempted before falling back to exact comparison.
    max_filter_refinements: int = 8


_TRAITS_CONFIG = TraitsConfig()


def get_traits_config() -> TraitsConfig:
    return copy.deepcopy(_TRAITS_CONFIG)


def set_traits_config(config: TraitsConfig) -> None:
    global _TRAITS_CONFIG
    _TRAITS_CONFIG = copy.deepcopy(config)
