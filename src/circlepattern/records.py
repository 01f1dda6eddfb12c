"""
Pattern records as exchanged with the pattern storage API.

The wire shape is camelCase JSON:
    {"name", "canvasWidth", "canvasHeight", "circles": [...], "placedCircles": [...]}
with an optional "id" once the store has assigned one.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import Canvas, CircleSpec, InvalidInputError, PlacedCircle, PlacementConfig
from .geometry import RandomSource
from .packer import PatternGenerator, PatternResult


@dataclass
class PatternRecord:
    """A named pattern: the circle types that were asked for and where they ended up."""
    name: str
    canvas_width: float
    canvas_height: float
    circles: List[CircleSpec] = field(default_factory=list)
    placed_circles: List[PlacedCircle] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def canvas(self) -> Canvas:
        return Canvas(self.canvas_width, self.canvas_height)

    @classmethod
    def from_result(
        cls, name: str, circle_specs: Sequence[CircleSpec], result: PatternResult
    ) -> "PatternRecord":
        return cls(
            name=name,
            canvas_width=result.canvas.width,
            canvas_height=result.canvas.height,
            circles=list(circle_specs),
            placed_circles=list(result.placed),
        )

    def regenerate(
        self, config: Optional[PlacementConfig] = None, rng: RandomSource = None
    ) -> "PatternRecord":
        """Lay the same circle types out again; the stored id is not carried over."""
        result = PatternGenerator(self.canvas, self.circles, config, rng).run()
        return PatternRecord.from_result(self.name, self.circles, result)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "canvasWidth": self.canvas_width,
            "canvasHeight": self.canvas_height,
            "circles": [spec.to_dict() for spec in self.circles],
            "placedCircles": [c.to_dict() for c in self.placed_circles],
        }
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatternRecord":
        if not isinstance(data, dict):
            raise InvalidInputError(f"pattern record must be an object, got {type(data).__name__}")
        try:
            name = data["name"]
            width = data["canvasWidth"]
            height = data["canvasHeight"]
        except KeyError as exc:
            raise InvalidInputError(f"pattern record is missing {exc.args[0]!r}") from exc

        circles = data.get("circles") or []
        placed = data.get("placedCircles") or []
        if not isinstance(circles, list) or not isinstance(placed, list):
            raise InvalidInputError("circles and placedCircles must be lists")

        canvas = Canvas(width, height)
        return cls(
            name=str(name),
            canvas_width=canvas.width,
            canvas_height=canvas.height,
            circles=[CircleSpec.from_dict(c) for c in circles],
            placed_circles=[PlacedCircle.from_dict(c) for c in placed],
            id=None if data.get("id") is None else str(data["id"]),
        )

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, text: str) -> "PatternRecord":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"pattern record is not valid JSON: {exc}") from exc
        return cls.from_dict(data)
