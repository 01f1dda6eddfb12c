import numpy as np
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .config import (
    Canvas,
    CircleSpec,
    InvalidInputError,
    PackingProgress,
    PlacedCircle,
    PlacementConfig,
    format_number,
)
from .geometry import RandomSource, SpatialIndex, try_place_circle

# (radius, color) of one circle still waiting to be placed
Instance = Tuple[float, str]


@dataclass
class PatternResult:
    """Outcome of one generation pass: what was placed versus what was asked for."""
    canvas: Canvas
    placed: List[PlacedCircle] = field(default_factory=list)
    requested: int = 0
    circle_types: int = 0

    @property
    def placed_count(self) -> int:
        return len(self.placed)

    @property
    def missing(self) -> int:
        return self.requested - len(self.placed)

    @property
    def is_complete(self) -> bool:
        return self.missing == 0

    @property
    def warning(self) -> Optional[str]:
        if self.is_complete:
            return None
        return (
            f"Only {self.placed_count} of {self.requested} circles could fit. "
            "Try smaller circles, fewer circles, a larger canvas, or regenerate."
        )

    def summary(self) -> Dict[str, Any]:
        return {
            "canvas": f"{format_number(self.canvas.width)}x{format_number(self.canvas.height)}",
            "placed": self.placed_count,
            "requested": self.requested,
            "circle_types": self.circle_types,
        }


class PatternGenerator:
    """Places every requested circle it can, in random order, without overlaps."""

    def __init__(
        self,
        canvas: Canvas,
        circle_specs: Iterable[CircleSpec],
        config: Optional[PlacementConfig] = None,
        rng: RandomSource = None,
    ):
        self.config = config or PlacementConfig()
        self.config.validate()
        if not isinstance(canvas, Canvas):
            raise InvalidInputError(f"canvas must be a Canvas, got {canvas!r}")
        self.circle_specs = list(circle_specs)
        for spec in self.circle_specs:
            if not isinstance(spec, CircleSpec):
                raise InvalidInputError(f"expected CircleSpec, got {spec!r}")

        self.canvas = canvas
        self.rng = np.random.default_rng(rng)
        self.progress = PackingProgress(circles_requested=self.requested)

    @property
    def requested(self) -> int:
        return sum(spec.count for spec in self.circle_specs)

    def _flatten(self) -> List[Instance]:
        return [
            (spec.radius, spec.color)
            for spec in self.circle_specs
            for _ in range(spec.count)
        ]

    def _shuffled_instances(self) -> List[Instance]:
        instances = self._flatten()
        order = self.rng.permutation(len(instances))
        return [instances[i] for i in order]

    def generate(self) -> Iterator[PlacedCircle]:
        """
        Place the requested circles one by one.

        Each run starts from an empty canvas, so calling this again is a
        fresh "regenerate" with new randomness.

        Yields:
            Each circle as soon as it has been placed.
        """
        cfg = self.config
        self.progress = PackingProgress(circles_requested=self.requested)
        placed: List[PlacedCircle] = []
        index: Optional[SpatialIndex] = None

        for radius, color in self._shuffled_instances():
            if index is None and cfg.use_spatial_index and len(placed) >= cfg.spatial_index_threshold:
                index = SpatialIndex.for_canvas(
                    self.canvas,
                    resolution_divisor=cfg.grid_resolution_divisor,
                    mega_threshold=cfg.mega_circle_threshold,
                    circles=placed,
                )

            circle = try_place_circle(
                radius,
                color,
                placed,
                self.canvas,
                cfg.edge_margin,
                cfg.min_distance,
                max_attempts=cfg.max_attempts_per_circle,
                rng=self.rng,
                spatial_index=index,
            )

            if circle is None:
                self.progress.circles_skipped += 1
                continue

            placed.append(circle)
            if index is not None:
                index.add_circle(circle)
            self.progress.circles_placed += 1

            if cfg.verbose and self.progress.circles_placed % 25 == 0:
                print(self.progress)

            yield circle

        if cfg.verbose:
            print(f"Done! {self.progress}")

    def pack(self) -> List[PlacedCircle]:
        """Place circles and return them as a list."""
        return list(self.generate())

    def run(self) -> PatternResult:
        """Place circles and report them together with the requested total."""
        return PatternResult(
            canvas=self.canvas,
            placed=self.pack(),
            requested=self.requested,
            circle_types=len(self.circle_specs),
        )


def generate_pattern(
    canvas: Canvas,
    circle_specs: Iterable[CircleSpec],
    edge_margin: float = 20.0,
    min_distance: float = 20.0,
    rng: RandomSource = None,
    max_attempts: int = 50,
) -> List[PlacedCircle]:
    """
    Lay out every circle described by ``circle_specs`` that fits on ``canvas``.

    Circles that cannot be placed are dropped; compare ``len(result)`` with
    ``sum(spec.count for spec in circle_specs)`` to see how many.
    """
    config = PlacementConfig(
        edge_margin=edge_margin,
        min_distance=min_distance,
        max_attempts_per_circle=max_attempts,
    )
    return PatternGenerator(canvas, circle_specs, config, rng).pack()
