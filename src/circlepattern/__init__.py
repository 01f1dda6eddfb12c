"""
circlepattern - Randomized, collision-free circle patterns on a rectangular canvas.

Usage:
    from circlepattern import Canvas, CircleSpec, generate_pattern

    # Basic usage
    specs = [CircleSpec(diameter=100, count=5, color="#FF0000")]
    circles = generate_pattern(Canvas(800, 600), specs, edge_margin=20, min_distance=20)

    # With configuration, a seeded generator and a requested/placed report
    config = PlacementConfig(min_distance=10, verbose=True)
    result = PatternGenerator(Canvas(500, 500), specs, config, rng=42).run()
    if not result.is_complete:
        print(result.warning)

    # Export for download
    svg = export_svg(result.canvas, result.placed)

Circles that cannot be placed are dropped, never raised; bad inputs
(negative sizes, NaN dimensions, ...) raise InvalidInputError.
"""

from .config import (
    Canvas,
    CircleSpec,
    InvalidInputError,
    PackingProgress,
    PlacedCircle,
    PlacementConfig,
)
from .geometry import SpatialIndex, circles_overlap, sampling_region, try_place_circle, within_bounds
from .packer import PatternGenerator, PatternResult, generate_pattern
from .export import export_svg, render_svg, write_svg
from .records import PatternRecord

__all__ = [
    "Canvas",
    "CircleSpec",
    "InvalidInputError",
    "PackingProgress",
    "PlacedCircle",
    "PlacementConfig",
    "SpatialIndex",
    "circles_overlap",
    "sampling_region",
    "try_place_circle",
    "within_bounds",
    "PatternGenerator",
    "PatternResult",
    "generate_pattern",
    "export_svg",
    "render_svg",
    "write_svg",
    "PatternRecord",
]

__version__ = "0.1.0"
