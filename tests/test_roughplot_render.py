from __future__ import annotations

from collections.abc import Sequence
import unittest
import xml.etree.ElementTree as ET

from roughplot import Line
from roughplot.config import ChartConfig
from roughplot.render import LegendAdapter, LegendItem, axis_font_size, legend_dimensions
from roughplot.sketch import SketchGenerator, SketchStyle
from roughplot.surface import classes_of, has_class, style_of


class RecordingGenerator(SketchGenerator):
    def __init__(self) -> None:
        super().__init__(seed=11)
        self.linear_calls: list[tuple[list[tuple[float, float]], SketchStyle]] = []
        self.path_calls: list[str] = []

    def linear_path(self, points, style, *, closed=False):  # type: ignore[override]
        if not closed:
            self.linear_calls.append(([(float(x), float(y)) for x, y in points], style))
        return super().linear_path(points, style, closed=closed)

    def path(self, d: str, style: SketchStyle) -> ET.Element:
        self.path_calls.append(d)
        return super().path(d, style)


def _groups(chart: Line, name: str) -> list[ET.Element]:
    return chart.find_class(name)


class AxisRendererTests(unittest.TestCase):
    def test_axes_carry_chart_classes_and_intercept(self) -> None:
        chart = Line({"a": [1, 2, 3], "b": [3, 2, 1]}, seed=1).draw()
        (x_axis,) = _groups(chart, "xAxisroughplot")
        (y_axis,) = _groups(chart, "yAxisroughplot")
        self.assertEqual(x_axis.get("transform"), "translate(0,300)")
        x_labels = [t.text for t in x_axis.iter("text")]
        y_labels = [t.text for t in y_axis.iter("text")]
        self.assertEqual(x_labels, ["0", "1", "2"])
        self.assertEqual(y_labels, ["1", "1.5", "2", "2.5", "3"])

    def test_x_tick_labels_are_rotated_and_end_anchored(self) -> None:
        chart = Line({"a": [1, 2]}, x=["Jan", "Feb"], seed=1).draw()
        (x_axis,) = _groups(chart, "xAxisroughplot")
        for text in x_axis.iter("text"):
            self.assertIn("rotate(-45)", text.get("transform", ""))
            self.assertEqual(style_of(text)["text-anchor"], "end")

    def test_ticks_have_zero_length(self) -> None:
        chart = Line({"a": [1, 2]}, seed=1).draw()
        for line in chart.require_svg().iter("line"):
            self.assertEqual((line.get("x2"), line.get("y2")), ("0", "0"))

    def test_crisp_baselines_hidden_and_sketch_overlay_added(self) -> None:
        generator = RecordingGenerator()
        chart = Line({"a": [-5, 10, 3]}, generator=generator, yDomain=[-5, 10]).draw()
        domains = [p for p in chart.require_svg().iter("path") if has_class(p, "domain")]
        self.assertEqual(len(domains), 2)
        self.assertTrue(all(p.get("stroke") == "transparent" for p in domains))
        self.assertEqual(generator.path_calls, ["M0,0H180", "M0,300V0"])

        (x_overlay,) = _groups(chart, "rough-xAxisroughplot")
        (y_overlay,) = _groups(chart, "rough-yAxisroughplot")
        self.assertEqual(x_overlay.get("transform"), "translate(0,200)")
        self.assertIsNone(y_overlay.get("transform"))

    def test_axes_can_be_disabled(self) -> None:
        chart = Line({"a": [1, 2]}, xAxis=False, yAxis=False, seed=1).draw()
        self.assertEqual(_groups(chart, "xAxisroughplot"), [])
        self.assertEqual(_groups(chart, "rough-yAxisroughplot"), [])

    def test_axis_font_size_scales_with_plot(self) -> None:
        self.assertEqual(axis_font_size(ChartConfig()), "0.95rem")
        self.assertEqual(axis_font_size(ChartConfig.from_options(width=200)), "0.571rem")
        self.assertEqual(axis_font_size(ChartConfig.from_options(axisFontSize="12px")), "12px")

    def test_value_formats_apply_to_ticks(self) -> None:
        chart = Line({"a": [0.5, 1.5]}, yValueFormat="%.2f", yDomain=[0, 2], seed=1).draw()
        (y_axis,) = _groups(chart, "yAxisroughplot")
        labels = [t.text for t in y_axis.iter("text")]
        self.assertIn("1.00", labels)


class AnnotationRendererTests(unittest.TestCase):
    def test_horizontal_line_at_zero_lies_on_intercept(self) -> None:
        generator = RecordingGenerator()
        chart = Line(
            {"a": [-5, 10, 3]},
            generator=generator,
            circle=False,
            interpolation="curve",
            yDomain=[-5, 10],
            yLines=[{"value": 0, "dash": [4, 4]}],
        ).draw()
        assert chart.scale is not None
        (line_points, style) = [call for call in generator.linear_calls if call[0][0][0] == 0.0 and call[0][1][0] == 180.0][0]
        self.assertAlmostEqual(line_points[0][1], chart.scale.intercept_height)
        self.assertAlmostEqual(line_points[1][1], chart.scale.intercept_height)
        self.assertEqual(style.dash_pattern, (4.0, 4.0))
        (node,) = _groups(chart, "yLineroughplot")
        self.assertEqual(node.find("path").get("stroke-dasharray"), "4 4")

    def test_vertical_line_positions(self) -> None:
        generator = RecordingGenerator()
        chart = Line({"a": [1, 2, 3]}, generator=generator, circle=False, xLines=[{"value": 1}]).draw()
        (node,) = _groups(chart, "xLineroughplot")
        self.assertIsNotNone(node)
        vertical = [pts for pts, _ in generator.linear_calls if pts[0][0] == pts[1][0]]
        self.assertEqual(vertical, [[(90.0, 0.0), (90.0, 300.0)]])

    def test_vertical_line_on_category(self) -> None:
        generator = RecordingGenerator()
        Line(
            {"a": [1, 2, 3]},
            generator=generator,
            circle=False,
            x=["Jan", "Feb", "Mar"],
            xLines=[{"value": "Mar"}],
        ).draw()
        vertical = [pts for pts, _ in generator.linear_calls if pts[0][0] == pts[1][0]]
        self.assertEqual(vertical, [[(180.0, 0.0), (180.0, 300.0)]])

    def test_unplaceable_vertical_line_is_skipped(self) -> None:
        with self.assertLogs("roughplot.render.annotations", level="WARNING"):
            chart = Line({"a": [1, 2]}, x=["Jan", "Feb"], xLines=[{"value": "Dec"}], seed=1).draw()
        self.assertEqual(_groups(chart, "xLineroughplot"), [])

    def test_labels_and_notes(self) -> None:
        chart = Line(
            {"a": [1, 2]},
            xLabel="month",
            yLabel="sales",
            yLabelDelta=5,
            notes=[{"x": 30, "y": 40, "text": "launch"}],
            seed=1,
        ).draw()
        labels = _groups(chart, "labelText")
        self.assertEqual([n.text for n in labels], ["month", "sales"])
        x_label, y_label = labels
        self.assertEqual((x_label.get("x"), x_label.get("y")), ("90", "338.462"))
        self.assertEqual(y_label.get("transform"), "rotate(-90)")
        self.assertEqual((y_label.get("x"), y_label.get("y")), ("-150", "-45"))
        (note,) = _groups(chart, "notesText")
        self.assertEqual((note.get("x"), note.get("y"), note.text), ("30", "40", "launch"))
        self.assertEqual(style_of(note)["font-size"], "1rem")


class LegendTests(unittest.TestCase):
    def test_dimensions_follow_longest_label(self) -> None:
        self.assertEqual(legend_dimensions(["a", "bbb"]), (53, 30))
        self.assertEqual(legend_dimensions([]), (35, 8))

    def test_legend_is_placed_in_top_corner(self) -> None:
        chart = Line({"a": [1, 2], "bbb": [2, 1]}, seed=1).draw()
        (legend,) = _groups(chart, "legend")
        self.assertEqual(legend.get("transform"), "translate(120,7)")
        texts = [n.text for n in legend.iter("text") if "legend-text" in classes_of(n)]
        self.assertEqual(texts, ["a", "bbb"])

        left = Line({"a": [1, 2]}, legendPosition="left", seed=1).draw()
        (legend,) = _groups(left, "legend")
        self.assertEqual(legend.get("transform"), "translate(7,7)")

    def test_disabled_legend_is_skipped(self) -> None:
        chart = Line({"a": [1, 2]}, legend=False, seed=1).draw()
        self.assertEqual(_groups(chart, "legend"), [])
        self.assertIsNone(LegendAdapter(chart).render(["a"], ["red"]))

    def test_custom_legend_collaborator_receives_items(self) -> None:
        calls: list[tuple[Sequence[LegendItem], float, float, float]] = []

        def record(chart, items, width, height, padding):  # type: ignore[no-untyped-def]
            calls.append((list(items), width, height, padding))
            return ET.Element("g")

        Line({"a": [1, 2], "b": [2, 1]}, colors=["red", "blue"], legend_renderer=record, seed=1).draw()
        self.assertEqual(calls, [([LegendItem("red", "a"), LegendItem("blue", "b")], 41, 30, 7)])


if __name__ == "__main__":
    unittest.main()
