import os
import tempfile
import unittest
import xml.etree.ElementTree as ET

from circlepattern import Canvas, InvalidInputError, PlacedCircle, export_svg, render_svg, write_svg

NS = "{http://www.w3.org/2000/svg}"


class TestSvgExport(unittest.TestCase):
    def setUp(self):
        self.canvas = Canvas(800, 600)
        self.circles = [
            PlacedCircle(100.0, 120.5, 50.0, "#FF0000"),
            PlacedCircle(400.25, 300.0, 15.0, "#00FF00"),
            PlacedCircle(700.0, 500.0, 30.0, ""),
        ]

    def test_export_document_structure(self):
        """One background rect, one circle per placed circle."""
        root = ET.fromstring(export_svg(self.canvas, self.circles))
        self.assertEqual(root.tag, f"{NS}svg")
        self.assertEqual(root.get("viewBox"), "0 0 800 600")
        self.assertEqual(len(root.findall(f"{NS}rect")), 1)
        self.assertEqual(root.find(f"{NS}rect").get("fill"), "#ffffff")
        self.assertEqual(len(root.findall(f"{NS}circle")), 3)

    def test_export_circle_attributes(self):
        root = ET.fromstring(export_svg(self.canvas, self.circles))
        first, second, third = root.findall(f"{NS}circle")
        self.assertEqual(first.get("cx"), "100")
        self.assertEqual(first.get("cy"), "120.5")
        self.assertEqual(first.get("r"), "50")
        self.assertEqual(first.get("fill"), "#FF0000")
        self.assertEqual(first.get("stroke"), "#333")
        self.assertEqual(first.get("stroke-width"), "0.5")
        self.assertEqual(first.get("fill-opacity"), "0.8")
        self.assertEqual(second.get("cx"), "400.25")
        # missing color falls back to black
        self.assertEqual(third.get("fill"), "#000")

    def test_preview_with_margin_guide(self):
        root = ET.fromstring(render_svg(self.canvas, self.circles[:2], edge_margin=20))
        background, guide = root.findall(f"{NS}rect")
        self.assertEqual(background.get("width"), "800")
        self.assertEqual(guide.get("x"), "20")
        self.assertEqual(guide.get("width"), "760")
        self.assertEqual(guide.get("height"), "560")
        self.assertEqual(guide.get("stroke-dasharray"), "5,5")

        circle = root.find(f"{NS}circle")
        self.assertEqual(circle.get("stroke"), "#FF0000")
        self.assertEqual(circle.get("stroke-width"), "2")

    def test_preview_without_margin_guide(self):
        root = ET.fromstring(render_svg(self.canvas, []))
        self.assertEqual(len(root.findall(f"{NS}rect")), 1)
        self.assertEqual(root.findall(f"{NS}circle"), [])

    def test_preview_skips_guide_when_margins_cover_canvas(self):
        """Margins wider than half the canvas leave no guide rectangle to draw."""
        root = ET.fromstring(render_svg(Canvas(30, 30), [], edge_margin=20))
        rects = root.findall(f"{NS}rect")
        self.assertEqual(len(rects), 1)
        self.assertEqual(rects[0].get("width"), "30")

        root = ET.fromstring(render_svg(Canvas(100, 30), [], edge_margin=15))
        self.assertEqual(len(root.findall(f"{NS}rect")), 1)

    def test_write_svg(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "pattern.svg")
            write_svg(path, self.canvas, self.circles)
            with open(path, "rb") as fh:
                data = fh.read()
        self.assertTrue(data.startswith(b"<?xml"))
        self.assertEqual(len(ET.fromstring(data).findall(f"{NS}circle")), 3)

    def test_write_svg_refuses_empty_pattern(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(InvalidInputError):
                write_svg(os.path.join(tmp, "empty.svg"), self.canvas, [])


if __name__ == '__main__':
    unittest.main()
