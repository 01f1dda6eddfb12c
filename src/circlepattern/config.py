"""
Configuration and type definitions for circle pattern generation.
"""

import numbers
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Tuple

# Type aliases
Point = np.ndarray
GridKey = Tuple[int, int]


class InvalidInputError(ValueError):
    """Raised when generation inputs are malformed (negative sizes, NaNs, ...)."""


def _require_real(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInputError(f"{name} must be a real number, got {value!r}")
    if not np.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return float(value)


def require_positive(name: str, value: Any) -> float:
    value = _require_real(name, value)
    if value <= 0:
        raise InvalidInputError(f"{name} must be positive, got {value!r}")
    return value


def require_non_negative(name: str, value: Any) -> float:
    value = _require_real(name, value)
    if value < 0:
        raise InvalidInputError(f"{name} must be >= 0, got {value!r}")
    return value


def format_number(value: float) -> str:
    """Plain decimal text, at most 4 fractional digits, never scientific notation."""
    return np.format_float_positional(float(value), precision=4, trim="-")


def require_count(name: str, value: Any, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidInputError(f"{name} must be >= {minimum}, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class Canvas:
    """Rectangular placement region, origin at the top-left corner."""
    width: float
    height: float

    def __post_init__(self):
        require_positive("canvas width", self.width)
        require_positive("canvas height", self.height)


@dataclass(frozen=True)
class CircleSpec:
    """One circle "type": every instance shares diameter and color."""
    diameter: float
    count: int
    color: str = "#000000"

    def __post_init__(self):
        require_positive("diameter", self.diameter)
        require_count("count", self.count)
        if not isinstance(self.color, str):
            raise InvalidInputError(f"color must be a string, got {self.color!r}")

    @property
    def radius(self) -> float:
        return self.diameter / 2

    def to_dict(self) -> Dict[str, Any]:
        return {"diameter": self.diameter, "count": self.count, "color": self.color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CircleSpec":
        try:
            return cls(data["diameter"], data["count"], data.get("color", "#000000"))
        except (KeyError, TypeError, AttributeError) as exc:
            raise InvalidInputError(f"malformed circle spec: {data!r}") from exc


@dataclass(frozen=True)
class PlacedCircle:
    """A circle that made it onto the canvas."""
    x: float
    y: float
    radius: float
    color: str

    @property
    def diameter(self) -> float:
        return self.radius * 2

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "radius": self.radius, "color": self.color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacedCircle":
        try:
            x, y, radius = data["x"], data["y"], data["radius"]
            color = str(data.get("color", "#000"))
        except (KeyError, TypeError, AttributeError) as exc:
            raise InvalidInputError(f"malformed placed circle: {data!r}") from exc
        return cls(
            _require_real("x", x),
            _require_real("y", y),
            require_positive("radius", radius),
            color,
        )


@dataclass
class PlacementConfig:
    """
    Configuration parameters for pattern generation.

    Basic parameters:
        edge_margin: Minimum gap between any circle and the canvas edge
        min_distance: Minimum gap between the edges of two circles
        max_attempts_per_circle: Random positions tried before a circle is dropped

    Performance tuning:
        use_spatial_index: Switch to grid lookups once many circles are placed
        spatial_index_threshold: Placed-circle count at which the grid kicks in
        grid_resolution_divisor: Controls spatial index granularity
        mega_circle_threshold: Circles larger than this fraction of a cell
            are checked globally instead of through the grid
    """
    # Basic parameters
    edge_margin: float = 20.0
    min_distance: float = 20.0
    max_attempts_per_circle: int = 50

    # Performance tuning
    use_spatial_index: bool = True
    spatial_index_threshold: int = 750
    grid_resolution_divisor: float = 25
    mega_circle_threshold: float = 0.5

    # Output
    verbose: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        require_non_negative("edge_margin", self.edge_margin)
        require_non_negative("min_distance", self.min_distance)
        require_count("max_attempts_per_circle", self.max_attempts_per_circle, minimum=1)
        require_count("spatial_index_threshold", self.spatial_index_threshold)
        require_positive("grid_resolution_divisor", self.grid_resolution_divisor)
        require_positive("mega_circle_threshold", self.mega_circle_threshold)


@dataclass
class PackingProgress:
    """Tracks the current state of a generation pass."""
    circles_requested: int = 0
    circles_placed: int = 0
    circles_skipped: int = 0

    @property
    def progress_ratio(self) -> float:
        """Share of instances already attempted (0.0 = just started, 1.0 = done)."""
        attempted = self.circles_placed + self.circles_skipped
        return attempted / self.circles_requested if self.circles_requested > 0 else 1.0

    def __str__(self) -> str:
        return (
            f"Placed: {self.circles_placed}/{self.circles_requested} | "
            f"Skipped: {self.circles_skipped} ({self.progress_ratio:.0%})"
        )
