from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from dashchart import LineChart, LineChartConfig
from dashchart.scene import LineShape
from dashchart.style import DEFAULT_THEME, load_chart_theme, validate_chart_theme


class ChartThemeTests(unittest.TestCase):
    def test_defaults(self) -> None:
        self.assertEqual(validate_chart_theme(), DEFAULT_THEME)

    def test_partial_override(self) -> None:
        theme = validate_chart_theme({"grid_color": "#112233", "tick_font_px": 12})
        self.assertEqual(theme.grid_color, "#112233")
        self.assertEqual(theme.tick_font_px, 12.0)
        self.assertEqual(theme.axis_color, DEFAULT_THEME.axis_color)

    def test_rejects_unknown_token(self) -> None:
        with self.assertRaisesRegex(ValueError, "Unknown theme token"):
            validate_chart_theme({"glow": "#112233"})

    def test_rejects_invalid_values(self) -> None:
        with self.assertRaisesRegex(ValueError, "hex color"):
            validate_chart_theme({"tooltip_bg": "black"})
        with self.assertRaisesRegex(ValueError, "positive number"):
            validate_chart_theme({"label_font_px": 0})
        with self.assertRaisesRegex(ValueError, r"\[0, 1\]"):
            validate_chart_theme({"gradient_top_opacity": 1.5})

    def test_load_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "theme.toml"
            path.write_text('[theme]\ngrid_color = "#101010"\naxis_stroke_width = 2\n', encoding="utf-8")
            theme = load_chart_theme(path)
        self.assertEqual(theme.grid_color, "#101010")
        self.assertEqual(theme.axis_stroke_width, 2.0)

    def test_lenient_load_drops_unknown_tokens(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "theme.toml"
            path.write_text('grid_color = "#101010"\nsparkle = true\n', encoding="utf-8")
            with self.assertRaises(ValueError):
                load_chart_theme(path)
            with self.assertLogs("dashchart.style.theme", level="WARNING") as logs:
                theme = load_chart_theme(path, strict=False)
        self.assertEqual(theme.grid_color, "#101010")
        self.assertIn("sparkle", logs.output[0])

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_chart_theme(Path("/nonexistent/theme.toml"))

    def test_theme_flows_into_scene(self) -> None:
        theme = validate_chart_theme({"grid_color": "#abcdef"})
        frame = LineChart(LineChartConfig(theme=theme)).render([1, 2, 3])
        strokes = {line.stroke for line in frame.scene.of_type(LineShape)}
        self.assertIn("#abcdef", strokes)


if __name__ == "__main__":
    unittest.main()
