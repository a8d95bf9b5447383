from __future__ import annotations

import asyncio
from pathlib import Path
import tempfile
import threading
import unittest

from roughplot import AcquisitionError, ConfigurationError, Line
from roughplot.adapters import load_rows, load_rows_async, read_delimited
from roughplot.series import FileColumnSeries


CSV_TEXT = "month,y1,y2\nJan,1,4\nFeb,2,\nMar,3,6\n"
TSV_TEXT = "month\tsales\nJan\t10\nFeb\tNA\n"


class DelimitedLoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.csv_path = self.root / "sales.csv"
        self.csv_path.write_text(CSV_TEXT, encoding="utf-8")
        self.tsv_path = self.root / "sales.tsv"
        self.tsv_path.write_text(TSV_TEXT, encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_csv_rows_are_string_records(self) -> None:
        rows = read_delimited(self.csv_path)
        self.assertEqual(rows[0], {"month": "Jan", "y1": "1", "y2": "4"})
        self.assertEqual(rows[1]["y2"], "")

    def test_tsv_keeps_na_text(self) -> None:
        rows = read_delimited(str(self.tsv_path))
        self.assertEqual(rows[1], {"month": "Feb", "sales": "NA"})

    def test_missing_file_is_acquisition_error(self) -> None:
        with self.assertRaises(AcquisitionError) as ctx:
            load_rows(self.root / "absent.csv")
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_empty_file_is_acquisition_error(self) -> None:
        empty = self.root / "empty.csv"
        empty.write_text("", encoding="utf-8")
        with self.assertRaises(AcquisitionError):
            load_rows(empty)

    def test_custom_loader_errors_are_wrapped(self) -> None:
        def broken(_: str):  # type: ignore[no-untyped-def]
            raise OSError("network down")

        with self.assertRaises(AcquisitionError):
            load_rows("remote/sales.csv", broken)

    def test_any_loader_exception_is_wrapped_and_chained(self) -> None:
        def unauthorized(_: str):  # type: ignore[no-untyped-def]
            raise RuntimeError("auth failed")

        with self.assertRaises(AcquisitionError) as ctx:
            load_rows("remote/sales.csv", unauthorized)
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_malformed_rows_are_acquisition_error(self) -> None:
        with self.assertRaises(AcquisitionError) as ctx:
            load_rows("remote/sales.csv", lambda _: [42])
        self.assertIsInstance(ctx.exception.__cause__, TypeError)

    def test_async_load_runs_off_loop(self) -> None:
        seen: list[str] = []

        def loader(path: str):  # type: ignore[no-untyped-def]
            seen.append(threading.current_thread().name)
            return [{"v": "1"}]

        rows = asyncio.run(load_rows_async("remote/sales.csv", loader))
        self.assertEqual(rows, [{"v": "1"}])
        self.assertNotEqual(seen, [threading.main_thread().name])

    def test_file_chart_selects_columns(self) -> None:
        chart = Line(self.csv_path, x=["Jan", "Feb", "Mar"], yKeys=["y1", "y2"], seed=3).draw()
        self.assertEqual(chart.data_form, "file")
        self.assertEqual([s.key for s in chart.series], ["y1", "y2"])
        self.assertTrue(all(isinstance(s, FileColumnSeries) for s in chart.series))
        self.assertEqual(chart.rendered[1].missing, 1)
        assert chart.scale is not None
        self.assertEqual(chart.scale.extent, (1.0, 6.0))

    def test_loose_y_keys_name_columns(self) -> None:
        chart = Line(str(self.csv_path), y="y2", yLabel="cost", seed=3).draw()
        self.assertEqual([s.key for s in chart.series], ["y2"])
        self.assertEqual(chart.config.y_label, "cost")

    def test_tsv_chart_treats_na_as_missing(self) -> None:
        chart = Line(self.tsv_path, y="sales", seed=3).draw()
        self.assertEqual(chart.rendered[0].missing, 1)
        self.assertEqual(len(chart.rendered[0].points), 1)

    def test_missing_column_is_contained(self) -> None:
        with self.assertLogs("roughplot.series", level="WARNING"):
            chart = Line(self.csv_path, yKeys=["y1", "profit"], seed=3).draw()
        self.assertEqual([s.key for s in chart.series], ["y1"])

    def test_file_without_series_columns_draws_empty_state(self) -> None:
        with self.assertLogs("roughplot.line", level="WARNING"):
            chart = Line(self.csv_path, seed=3).draw()
        self.assertTrue(chart.empty)

    def test_missing_file_aborts_draw(self) -> None:
        chart = Line(self.root / "absent.csv", y="y1", seed=3)
        with self.assertRaises(AcquisitionError):
            chart.draw()

    def test_unsupported_source_is_rejected_at_construction(self) -> None:
        with self.assertRaises(ConfigurationError):
            Line("sales.json", y="y1")

    def test_draw_async_shares_one_pending_fetch(self) -> None:
        calls: list[str] = []

        def loader(path: str):  # type: ignore[no-untyped-def]
            calls.append(path)
            return [{"v": "1"}, {"v": "3"}]

        chart = Line("remote/sales.csv", loader=loader, y="v", seed=3)

        async def run() -> None:
            await asyncio.gather(chart.draw_async(), chart.draw_async())

        asyncio.run(run())
        self.assertEqual(calls, ["remote/sales.csv"])
        self.assertEqual(len(chart.rendered), 1)

    def test_draw_async_with_object_data_draws_immediately(self) -> None:
        chart = Line({"a": [1, 2]}, seed=3)
        asyncio.run(chart.draw_async())
        self.assertEqual(len(chart.rendered), 1)

    def test_draw_after_destroy_still_draws_and_warns(self) -> None:
        chart = Line(self.csv_path, y="y1", seed=3)
        chart.destroy()
        with self.assertLogs("roughplot.line", level="WARNING") as logs:
            asyncio.run(chart.draw_async())
        self.assertTrue(any("after destroy" in line for line in logs.output))
        self.assertEqual(len(chart.rendered), 1)


if __name__ == "__main__":
    unittest.main()
