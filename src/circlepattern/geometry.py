"""
Geometry utilities for circle pattern generation.

Contains:
- circles_overlap / within_bounds: placement predicates
- sampling_region / try_place_circle: rejection sampling of a single circle
- SpatialIndex: grid-based spatial indexing for collision detection
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .config import (
    Canvas,
    GridKey,
    PlacedCircle,
    Point,
    require_count,
    require_non_negative,
    require_positive,
)

# Anything np.random.default_rng accepts: a Generator, an int seed, or None
RandomSource = Union[np.random.Generator, int, None]
# A single coordinate or an array of them
Coordinate = Union[float, np.ndarray]


def circles_overlap(
    x1: float, y1: float, r1: float,
    x2: float, y2: float, r2: float,
    min_distance: float = 0.0,
) -> bool:
    """
    Check whether two circles are closer than ``min_distance`` edge to edge.

    Circles whose centres are exactly ``r1 + r2 + min_distance`` apart do
    not overlap.
    """
    return bool(np.hypot(x2 - x1, y2 - y1) < r1 + r2 + min_distance)


def within_bounds(
    x: Coordinate,
    y: Coordinate,
    r: float,
    width: float,
    height: float,
    margin: float = 0.0,
) -> Union[bool, np.ndarray]:
    """
    Check whether a circle lies inside the canvas shrunk by ``margin``.

    Scalar centres give a plain bool. Arrays of centres are tested
    elementwise and give a boolean array of the same shape.
    """
    inside = (
        (x - r >= margin)
        & (x + r <= width - margin)
        & (y - r >= margin)
        & (y + r <= height - margin)
    )
    if np.ndim(inside) == 0:
        return bool(inside)
    return inside


def sampling_region(
    radius: float, canvas: Canvas, edge_margin: float
) -> Optional[Tuple[Point, Point]]:
    """
    Rectangle of admissible centres for a circle of ``radius``.

    Returns ``(low, high)`` corners, or None when the circle cannot fit at all.
    """
    inset = edge_margin + radius
    if 2 * inset >= canvas.width or 2 * inset >= canvas.height:
        return None
    low = np.array([inset, inset])
    high = np.array([canvas.width - inset, canvas.height - inset])
    return low, high


def _circle_arrays(circles: Sequence[PlacedCircle]) -> Tuple[np.ndarray, np.ndarray]:
    if len(circles) == 0:
        return np.empty((0, 2)), np.empty(0)
    centers = np.array([(c.x, c.y) for c in circles], dtype=float)
    radii = np.array([c.radius for c in circles], dtype=float)
    return centers, radii


def _conflict_mask(
    candidates: np.ndarray,
    radius: float,
    centers: np.ndarray,
    radii: np.ndarray,
    min_distance: float,
) -> np.ndarray:
    """Vectorized overlap test of every candidate against every placed circle."""
    if len(centers) == 0:
        return np.zeros(len(candidates), dtype=bool)
    diff = candidates[:, np.newaxis, :] - centers[np.newaxis, :, :]
    dists = np.hypot(diff[..., 0], diff[..., 1])
    return np.any(dists < radii[np.newaxis, :] + radius + min_distance, axis=1)


def try_place_circle(
    radius: float,
    color: str,
    existing_circles: Sequence[PlacedCircle],
    canvas: Canvas,
    edge_margin: float,
    min_distance: float,
    max_attempts: int = 50,
    rng: RandomSource = None,
    spatial_index: Optional["SpatialIndex"] = None,
) -> Optional[PlacedCircle]:
    """
    Try to drop one circle at a random free spot.

    Up to ``max_attempts`` centres are drawn uniformly from the sampling
    region in a single batch; the first one (in draw order) that is in
    bounds and clear of ``existing_circles`` wins.

    Args:
        spatial_index: Optional index holding exactly ``existing_circles``.
            Used instead of the brute-force check when given.

    Returns:
        The placed circle, or None if the circle cannot fit or every
        attempt collided.
    """
    require_positive("radius", radius)
    require_non_negative("edge_margin", edge_margin)
    require_non_negative("min_distance", min_distance)
    require_count("max_attempts", max_attempts, minimum=1)

    region = sampling_region(radius, canvas, edge_margin)
    if region is None:
        return None

    rng = np.random.default_rng(rng)
    low, high = region
    candidates = rng.uniform(low, high, size=(max_attempts, 2))

    in_bounds = within_bounds(
        candidates[:, 0], candidates[:, 1], radius,
        canvas.width, canvas.height, edge_margin,
    )

    if spatial_index is not None:
        for i in np.flatnonzero(in_bounds):
            if not spatial_index.overlaps(candidates[i], radius, min_distance):
                return PlacedCircle(float(candidates[i, 0]), float(candidates[i, 1]), radius, color)
        return None

    centers, radii = _circle_arrays(existing_circles)
    free = in_bounds & ~_conflict_mask(candidates, radius, centers, radii, min_distance)
    hits = np.flatnonzero(free)
    if len(hits) == 0:
        return None

    best = candidates[hits[0]]
    return PlacedCircle(float(best[0]), float(best[1]), radius, color)


@dataclass
class SpatialIndex:
    """Grid-based spatial index for efficient collision detection."""
    cell_size: float
    origin: np.ndarray = field(default_factory=lambda: np.zeros(2))
    mega_threshold: float = 0.5
    grid: Dict[GridKey, List[int]] = field(default_factory=dict)
    mega_circles: List[int] = field(default_factory=list)
    max_small_radius: float = 0.0

    _centers: List[Point] = field(default_factory=list)
    _radii: List[float] = field(default_factory=list)

    @classmethod
    def for_canvas(
        cls,
        canvas: Canvas,
        resolution_divisor: float = 25,
        mega_threshold: float = 0.5,
        circles: Iterable[PlacedCircle] = (),
    ) -> "SpatialIndex":
        """Build an index sized to the canvas, optionally pre-filled."""
        index = cls(
            cell_size=max(canvas.width, canvas.height) / resolution_divisor,
            mega_threshold=mega_threshold,
        )
        for circle in circles:
            index.add_circle(circle)
        return index

    def __len__(self) -> int:
        return len(self._radii)

    def add_circle(self, circle: PlacedCircle) -> None:
        """Add a placed circle to the spatial index."""
        index = len(self._radii)
        center = np.array([circle.x, circle.y], dtype=float)
        self._centers.append(center)
        self._radii.append(circle.radius)

        if circle.radius > self.cell_size * self.mega_threshold:
            self.mega_circles.append(index)
        else:
            self.max_small_radius = max(self.max_small_radius, circle.radius)
            key = self._get_cell_key(center)
            self.grid.setdefault(key, []).append(index)

    def get_nearby_indices(self, point: Point, reach: float) -> Iterator[int]:
        """Yield indices of circles whose centres may lie within ``reach`` of a point."""
        yield from self.mega_circles
        center_key = self._get_cell_key(point)
        span = int(np.ceil(reach / self.cell_size))
        for dx in range(-span, span + 1):
            for dy in range(-span, span + 1):
                neighbor_key = (center_key[0] + dx, center_key[1] + dy)
                if neighbor_key in self.grid:
                    yield from self.grid[neighbor_key]

    def overlaps(self, point: Point, radius: float, min_distance: float = 0.0) -> bool:
        """Check a candidate circle against every indexed circle that could reach it."""
        if not self._radii:
            return False

        reach = radius + self.max_small_radius + min_distance
        indices = list(self.get_nearby_indices(point, reach))
        if not indices:
            return False

        centers = np.array([self._centers[i] for i in indices])
        radii = np.array([self._radii[i] for i in indices])
        diff = centers - point
        dists = np.hypot(diff[:, 0], diff[:, 1])
        return bool(np.any(dists < radii + radius + min_distance))

    def _get_cell_key(self, point: Point) -> GridKey:
        """Convert a point to its grid cell coordinates."""
        cell_coords = ((np.asarray(point) - self.origin) // self.cell_size).astype(int)
        return (int(cell_coords[0]), int(cell_coords[1]))
