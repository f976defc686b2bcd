from __future__ import annotations

import unittest

from dashchart.formatting import format_currency
from dashchart.geometry import PlotBox, bar_geometry, line_geometry
from dashchart.interaction import TOOLTIP_GAP, TOOLTIP_HEIGHT, HoverController, HoverState, tooltip_for
from dashchart.scales import compute_scale


def _line():
    box = PlotBox.from_margins(280, 80, left=35, right=10, top=10, bottom=25)
    values = [10, 20, 15, 30]
    scale = compute_scale(values, box.vertical_range(), 0.1, integer_domain=True)
    return line_geometry(values, scale, box, labels=["Jan", "Feb", "Mar", "Apr"])


class HoverControllerTests(unittest.TestCase):
    def test_starts_idle(self) -> None:
        controller = HoverController(_line())
        self.assertEqual(controller.phase, "idle")
        self.assertIsNone(controller.active)
        self.assertIsNone(controller.tooltip())

    def test_enter_and_leave(self) -> None:
        geometry = _line()
        controller = HoverController(geometry)
        state = controller.on_pointer_enter(2)
        self.assertEqual(controller.phase, "hovering")
        self.assertEqual((state.x, state.y), (geometry.points[2].x, geometry.points[2].y))
        controller.on_pointer_enter(3)
        self.assertEqual(controller.active.index, 3)
        self.assertIsNone(controller.on_pointer_leave())
        self.assertEqual(controller.phase, "idle")

    def test_leave_while_idle_is_noop(self) -> None:
        controller = HoverController(_line())
        controller.on_pointer_leave()
        self.assertEqual(controller.phase, "idle")

    def test_pointer_move_hit_tests_geometry(self) -> None:
        geometry = _line()
        controller = HoverController(geometry)
        target = geometry.points[1]
        state = controller.on_pointer_move(target.x + 3, target.y)
        self.assertIsNotNone(state)
        self.assertEqual((state.index, state.series_key), (1, "value"))
        self.assertIs(controller.on_pointer_move(target.x + 2, target.y), controller.active)
        self.assertIsNone(controller.on_pointer_move(0, 0))
        self.assertEqual(controller.phase, "idle")

    def test_bind_clears_hover(self) -> None:
        controller = HoverController(_line())
        controller.on_pointer_enter(0)
        controller.bind(_line())
        self.assertEqual(controller.phase, "idle")

    def test_requires_geometry(self) -> None:
        controller = HoverController()
        with self.assertRaises(RuntimeError):
            controller.on_pointer_enter(0)
        with self.assertRaises(RuntimeError):
            controller.on_pointer_move(1, 1)

    def test_rejects_bad_index(self) -> None:
        controller = HoverController(_line())
        with self.assertRaises(IndexError):
            controller.on_pointer_enter(-1)
        with self.assertRaises(IndexError):
            controller.on_pointer_enter(4)
        self.assertEqual(controller.phase, "idle")


class TooltipTests(unittest.TestCase):
    def test_tooltip_sits_on_mark(self) -> None:
        geometry = _line()
        controller = HoverController(geometry)
        for index, point in enumerate(geometry.points):
            controller.on_pointer_enter(index)
            tooltip = controller.tooltip()
            self.assertEqual((tooltip.x, tooltip.y), (point.x, point.y))
            self.assertAlmostEqual(tooltip.box.x + tooltip.box.width / 2, point.x)
            self.assertAlmostEqual(tooltip.box.y, point.y - TOOLTIP_GAP - TOOLTIP_HEIGHT)
            self.assertEqual(tooltip.label, geometry.labels[index])
        self.assertEqual(tooltip.text, "30")

    def test_formatter_applies_to_value(self) -> None:
        box = PlotBox.from_margins(280, 100, left=40, right=10, top=10, bottom=25)
        scale = compute_scale([1500, 1_250_000], box.vertical_range(), zero_baseline=True, ceil_steps=(100, 10))
        geometry = bar_geometry([1500, 1_250_000], scale, box)
        controller = HoverController(geometry, formatter=format_currency)
        controller.on_pointer_enter(1)
        tooltip = controller.tooltip()
        self.assertEqual(tooltip.text, "$1.25M")
        self.assertEqual((tooltip.x, tooltip.y), (geometry.bars[1].center_x, geometry.bars[1].y))

    def test_rejects_foreign_scale(self) -> None:
        geometry = _line()
        other = compute_scale([0, 1000], (55.0, 10.0))
        state = HoverState(index=0, series_key="value", x=geometry.points[0].x, y=geometry.points[0].y)
        with self.assertRaisesRegex(ValueError, "scale"):
            tooltip_for(state, other, geometry)

    def test_rejects_stale_state(self) -> None:
        geometry = _line()
        state = HoverState(index=0, series_key="value", x=geometry.points[0].x, y=geometry.points[0].y + 5)
        with self.assertRaisesRegex(ValueError, "does not belong"):
            tooltip_for(state, geometry.scale, geometry)


if __name__ == "__main__":
    unittest.main()
