from __future__ import annotations

from pathlib import Path
import tempfile
import unittest
import xml.etree.ElementTree as ET

from PIL import Image

from dashchart import BarChart, DonutChart, LineChart, ProgressRing, Sparkline
from dashchart.render import export_png, parse_path, scene_to_image, scene_to_svg, write_svg


NS = {"svg": "http://www.w3.org/2000/svg"}


def _svg_root(markup: str) -> ET.Element:
    return ET.fromstring(markup)


class SvgRenderTests(unittest.TestCase):
    def test_line_chart_markup(self) -> None:
        frame = LineChart().render([10, 20, 15, 30])
        root = _svg_root(scene_to_svg(frame.scene))
        self.assertEqual(root.attrib["width"], "280")
        self.assertEqual(root.attrib["viewBox"], "0 0 280 80")
        gradient = root.find("svg:defs/svg:linearGradient", NS)
        self.assertIsNotNone(gradient)
        self.assertEqual(gradient.attrib["id"], "gradient-value")
        stops = gradient.findall("svg:stop", NS)
        self.assertEqual([s.attrib["stop-opacity"] for s in stops], ["0.3", "0.05"])
        fills = [p.attrib["fill"] for p in root.findall("svg:path", NS)]
        self.assertIn("url(#gradient-value)", fills)
        self.assertEqual(len(root.findall("svg:circle", NS)), 4)
        self.assertEqual(len(root.findall("svg:text", NS)), 7)

    def test_tooltip_markup(self) -> None:
        chart = BarChart()
        chart.render({"Jan": 120, "Feb": 340})
        root = _svg_root(scene_to_svg(chart.pointer_enter(1).scene))
        rects = root.findall("svg:rect", NS)
        self.assertEqual([r.attrib.get("data-index") for r in rects], ["0", "1", None])
        self.assertEqual(rects[0].attrib["rx"], "3")
        self.assertEqual(len(root.findall("svg:polygon", NS)), 1)
        self.assertIn("340", [t.text for t in root.findall("svg:text", NS)])

    def test_donut_dash_pattern(self) -> None:
        frame = DonutChart().render([("a", 1), ("b", 3)])
        root = _svg_root(scene_to_svg(frame.scene))
        dashed = [p for p in root.findall("svg:path", NS) if "stroke-dasharray" in p.attrib]
        self.assertEqual(len(dashed), 2)
        self.assertEqual(dashed[0].attrib["stroke-dashoffset"], "0")
        self.assertTrue(dashed[1].attrib["stroke-dashoffset"].startswith("-"))

    def test_progress_ring_rotation(self) -> None:
        root = _svg_root(scene_to_svg(ProgressRing().render(40).scene))
        circles = root.findall("svg:circle", NS)
        self.assertEqual(circles[1].attrib["transform"], "rotate(-90 60 60)")
        self.assertEqual(circles[1].attrib["stroke-linecap"], "round")

    def test_write_svg(self) -> None:
        frame = Sparkline().render([1, 3, 2])
        with tempfile.TemporaryDirectory() as td:
            out = write_svg(frame.scene, Path(td) / "nested" / "spark.svg")
            self.assertTrue(out.exists())
            root = ET.parse(out).getroot()
            self.assertEqual(root.attrib["height"], "40")


class RasterRenderTests(unittest.TestCase):
    def test_image_size_follows_scale(self) -> None:
        frame = LineChart().render([10, 20, 15, 30])
        self.assertEqual(scene_to_image(frame.scene).size, (560, 160))
        self.assertEqual(scene_to_image(frame.scene, scale=1).size, (280, 80))
        with self.assertRaises(ValueError):
            scene_to_image(frame.scene, scale=0)

    def test_bar_pixels_use_bar_color(self) -> None:
        frame = BarChart().render([100, 200, 400])
        image = scene_to_image(frame.scene, scale=2)
        bar = frame.geometry.bars[2]
        pixel = image.getpixel((int(bar.center_x * 2), int((bar.y + bar.height * 0.75) * 2)))
        self.assertEqual(pixel, (0x8B, 0x5C, 0xF6, 255))

    def test_ring_segment_pixels(self) -> None:
        frame = DonutChart().render([("a", 1), ("b", 1)])
        image = scene_to_image(frame.scene, scale=2)
        anchor = frame.geometry.anchor(0)
        pixel = image.getpixel((int(round(anchor.x * 2)), int(round(anchor.y * 2))))
        self.assertEqual(pixel, (0x63, 0x66, 0xF1, 255))

    def test_export_png(self) -> None:
        chart = LineChart()
        chart.render([10, 20, 15, 30])
        frame = chart.pointer_enter(2)
        with tempfile.TemporaryDirectory() as td:
            with self.assertLogs("dashchart.render.raster", level="INFO"):
                out = export_png(frame.scene, Path(td) / "line.png")
            with Image.open(out) as image:
                self.assertEqual(image.format, "PNG")
                self.assertEqual(image.size, (560, 160))

    def test_parse_path(self) -> None:
        points, closed = parse_path("M 0 10 L 5 2.5 L 10 10 Z")
        self.assertEqual(points, [(0.0, 10.0), (5.0, 2.5), (10.0, 10.0)])
        self.assertTrue(closed)
        with self.assertRaises(ValueError):
            parse_path("M 0 0 A 5 5 0 0 1 10 0")
        with self.assertRaises(ValueError):
            parse_path("M 0")


if __name__ == "__main__":
    unittest.main()
