"""
SVG rendering and export of generated patterns.

render_svg draws the on-screen preview (own-color strokes, optional margin
guide). export_svg builds the standalone document offered for download.
"""

import xml.etree.ElementTree as ET
from os import PathLike
from typing import Optional, Sequence, Union

from .config import Canvas, InvalidInputError, PlacedCircle, format_number

SVG_NS = "http://www.w3.org/2000/svg"

DEFAULT_FILL = "#000"
EXPORT_FILL_OPACITY = "0.8"
EXPORT_STROKE = "#333"
EXPORT_STROKE_WIDTH = "0.5"
PREVIEW_STROKE_WIDTH = "2"


def _svg_root(canvas: Canvas, background: Optional[str]) -> ET.Element:
    w, h = format_number(canvas.width), format_number(canvas.height)
    svg = ET.Element("svg", xmlns=SVG_NS, width=w, height=h, viewBox=f"0 0 {w} {h}")
    if background is not None:
        ET.SubElement(svg, "rect", width=w, height=h, fill=background)
    return svg


def render_svg(
    canvas: Canvas,
    circles: Sequence[PlacedCircle],
    edge_margin: Optional[float] = None,
    background: str = "#ffffff",
) -> str:
    """Preview drawing: background, dashed margin guide when edge_margin is set, circles."""
    svg = _svg_root(canvas, background)

    # no guide when the margins swallow the whole canvas
    if edge_margin is not None and 2 * edge_margin < min(canvas.width, canvas.height):
        ET.SubElement(
            svg, "rect",
            x=format_number(edge_margin),
            y=format_number(edge_margin),
            width=format_number(canvas.width - 2 * edge_margin),
            height=format_number(canvas.height - 2 * edge_margin),
            fill="none",
            stroke="#e0e0e0",
            opacity="0.3",
            **{"stroke-width": "1", "stroke-dasharray": "5,5"},
        )

    for c in circles:
        ET.SubElement(
            svg, "circle",
            cx=format_number(c.x), cy=format_number(c.y), r=format_number(c.radius),
            fill=c.color, stroke=c.color,
            **{"stroke-width": PREVIEW_STROKE_WIDTH},
        )

    return ET.tostring(svg, encoding="unicode")


def _export_tree(
    canvas: Canvas, circles: Sequence[PlacedCircle], background: str
) -> ET.Element:
    svg = _svg_root(canvas, background)
    for c in circles:
        ET.SubElement(
            svg, "circle",
            cx=format_number(c.x), cy=format_number(c.y), r=format_number(c.radius),
            fill=c.color or DEFAULT_FILL,
            stroke=EXPORT_STROKE,
            **{"fill-opacity": EXPORT_FILL_OPACITY, "stroke-width": EXPORT_STROKE_WIDTH},
        )
    return svg


def export_svg(
    canvas: Canvas, circles: Sequence[PlacedCircle], background: str = "#ffffff"
) -> str:
    """Self-contained SVG document: one background rect, one <circle> per placed circle."""
    return ET.tostring(_export_tree(canvas, circles, background), encoding="unicode")


def write_svg(
    path: Union[str, PathLike],
    canvas: Canvas,
    circles: Sequence[PlacedCircle],
    background: str = "#ffffff",
) -> None:
    """
    Write the export document to ``path`` (UTF-8 with XML declaration).

    Raises:
        InvalidInputError: If there are no placed circles to export.
    """
    if not circles:
        raise InvalidInputError("no placed circles to export")
    tree = ET.ElementTree(_export_tree(canvas, circles, background))
    tree.write(path, encoding="utf-8", xml_declaration=True)
