from __future__ import annotations

import dataclasses
import unittest

from roughplot.config import (
    DEFAULT_COLORS,
    ChartConfig,
    Margin,
    Note,
    ReferenceLine,
    resolve_style,
    rough_ceiling,
)
from roughplot.errors import ConfigurationError


class ChartConfigTests(unittest.TestCase):
    def test_defaults_match_documented_values(self) -> None:
        cfg = ChartConfig()
        self.assertEqual(cfg.margin, Margin(top=50, right=20, bottom=50, left=100))
        self.assertEqual((cfg.width, cfg.height), (300, 400))
        self.assertEqual((cfg.plot_width, cfg.plot_height), (180, 300))
        self.assertEqual(cfg.stroke_width, 8)
        self.assertEqual(cfg.roughness, 2.2)
        self.assertEqual(cfg.axis_roughness, 0.9)
        self.assertEqual(cfg.axis_stroke_width, 0.4)
        self.assertEqual(cfg.circle_radius, 10)
        self.assertEqual(cfg.interpolation, ("curve",))
        self.assertEqual(cfg.colors, DEFAULT_COLORS)
        self.assertEqual(cfg.graph_class, "roughplot")
        self.assertEqual(cfg.font_family, "Gaegu")

    def test_config_is_immutable(self) -> None:
        cfg = ChartConfig()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            cfg.width = 10  # type: ignore[misc]

    def test_camel_case_options_map_to_fields(self) -> None:
        cfg = ChartConfig.from_options(
            {"strokeWidth": 3, "xLabel": "month", "yDomain": [0, 10], "legendPosition": "left", "el": "#sales"}
        )
        self.assertEqual(cfg.stroke_width, 3.0)
        self.assertEqual(cfg.x_label, "month")
        self.assertEqual(cfg.y_domain, (0.0, 10.0))
        self.assertEqual(cfg.legend_position, "left")
        self.assertEqual(cfg.graph_class, "sales")

    def test_snake_case_keywords_are_accepted(self) -> None:
        cfg = ChartConfig.from_options(circle_radius=6, interpolation="straight", font=1)
        self.assertEqual(cfg.circle_radius, 6.0)
        self.assertEqual(cfg.interpolation, ("straight",))
        self.assertEqual(cfg.font_family, "Indie Flower")

    def test_roughness_is_capped(self) -> None:
        cfg = ChartConfig.from_options(roughness=100, axisRoughness=45)
        self.assertEqual(cfg.roughness, 30.0)
        self.assertEqual(cfg.axis_roughness, 30.0)
        self.assertEqual(rough_ceiling(None, default=2.2), 2.2)
        with self.assertRaises(ConfigurationError):
            rough_ceiling(-1, default=1)

    def test_non_positive_plot_area_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(width=100)
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(height=90, margin={"top": 50, "bottom": 50})

    def test_partial_margin_keeps_other_defaults(self) -> None:
        cfg = ChartConfig.from_options(margin={"left": 40})
        self.assertEqual(cfg.margin, Margin(top=50, right=20, bottom=50, left=40))
        self.assertEqual(cfg.plot_width, 240)
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(margin={"middle": 3})

    def test_unknown_option_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(colour="red")

    def test_keys_containing_y_select_file_columns(self) -> None:
        cfg = ChartConfig.from_options(y="sales", y2="costs", yLabel="usd", yDomain=[0, 5])
        self.assertEqual(cfg.file_columns, ("sales", "costs"))
        self.assertIsNone(cfg.y_keys)
        self.assertEqual(cfg.y_label, "usd")

    def test_explicit_y_keys_win_over_loose_column_keys(self) -> None:
        cfg = ChartConfig.from_options(yKeys=["a"], y2="b")
        self.assertEqual(cfg.file_columns, ("a",))
        self.assertIsNone(ChartConfig().file_columns)

    def test_explicit_x_must_be_unique(self) -> None:
        cfg = ChartConfig.from_options(x=["Jan", "Feb", "Mar"])
        self.assertEqual(cfg.x, ("Jan", "Feb", "Mar"))
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(x=["Jan", "Jan"])
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(x=[])

    def test_notes_and_reference_lines_are_coerced(self) -> None:
        cfg = ChartConfig.from_options(
            notes=[{"x": 10, "y": 20, "text": "peak"}],
            xLines=[{"value": "Feb"}],
            yLines=[{"y": 0, "dash": [4, 4]}],
        )
        self.assertEqual(cfg.notes, (Note(x=10.0, y=20.0, text="peak"),))
        self.assertEqual(cfg.x_lines, (ReferenceLine(value="Feb"),))
        self.assertEqual(cfg.y_lines, (ReferenceLine(value=0.0, dash=(4.0, 4.0)),))
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(notes=[{"x": 1}])
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(yLines=[{"dash": [1]}])

    def test_invalid_values_are_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(legendPosition="top")
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(colors=[])
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(circleRadius=0)
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(yDomain=[0, 1, 2])
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(font=5)
        with self.assertRaises(ConfigurationError):
            ChartConfig.from_options(strokeWidth="thick")

    def test_notes_font_size_falls_back_to_label_size(self) -> None:
        self.assertEqual(ChartConfig().resolved_notes_font_size, "1rem")
        self.assertEqual(ChartConfig.from_options(notesFontSize="0.7rem").resolved_notes_font_size, "0.7rem")

    def test_with_options_returns_new_config(self) -> None:
        base = ChartConfig()
        changed = base.with_options(title="Sales")
        self.assertIsNone(base.title)
        self.assertEqual(changed.title, "Sales")


class ResolveStyleTests(unittest.TestCase):
    def test_single_entry_applies_to_every_series(self) -> None:
        self.assertEqual([resolve_style(("curve",), i) for i in range(4)], ["curve"] * 4)

    def test_entries_are_indexed_by_series_position(self) -> None:
        modes = ("curve", "straight", "curve")
        self.assertEqual([resolve_style(modes, i) for i in range(3)], list(modes))

    def test_more_series_than_entries_wraps(self) -> None:
        self.assertEqual(resolve_style(("red", "blue"), 3), "blue")

    def test_empty_sequence_is_a_configuration_error(self) -> None:
        with self.assertRaises(ConfigurationError):
            resolve_style((), 0)


if __name__ == "__main__":
    unittest.main()
