from __future__ import annotations

import argparse
from pathlib import Path
import tempfile

from roughplot import Line


def _write_sales_csv(path: Path) -> Path:
    path.write_text(
        "month\tnorth\tsouth\n"
        "Jan\t4\t-2\n"
        "Feb\t7\t1\n"
        "Mar\t5\t\n"
        "Apr\t9\t3\n"
        "May\t6\t-1\n",
        encoding="utf-8",
    )
    return path


def _simulate_hover(chart: Line) -> None:
    margin = chart.margin
    chart.handle_event("pointer_move", {"x": margin.left + chart.width * 0.5, "y": margin.top + 20})


def main() -> None:
    parser = argparse.ArgumentParser(description="Render sketchy line chart demos to SVG and PNG.")
    parser.add_argument("--out", type=Path, default=Path("roughplot_demo"))
    parser.add_argument("--seed", type=int, default=7)
    args = parser.parse_args()

    out_dir: Path = args.out
    out_dir.mkdir(parents=True, exist_ok=True)

    object_chart = Line(
        {"coffee": [3, 5, 4, 8, 7, 9], "tea": [6, 4, 5, 3, 4, 2]},
        width=520,
        height=360,
        title="Cups per day",
        xLabel="day",
        yLabel="cups",
        interpolation=["curve", "straight"],
        colors=["coral", "skyblue"],
        seed=args.seed,
    ).draw()
    _simulate_hover(object_chart)

    with tempfile.TemporaryDirectory() as td:
        source = _write_sales_csv(Path(td) / "sales.tsv")
        file_chart = Line(
            source,
            width=520,
            height=360,
            x=["Jan", "Feb", "Mar", "Apr", "May"],
            yKeys=["north", "south"],
            yLines=[{"value": 0, "dash": [4, 4]}],
            notes=[{"x": 300, "y": 20, "text": "south dips below zero"}],
            legendPosition="left",
            font=1,
            seed=args.seed,
        ).draw()

    for name, chart in (("object_form", object_chart), ("file_form", file_chart)):
        svg_path = chart.save_svg(out_dir / f"{name}.svg")
        png_path = chart.save_png(out_dir / f"{name}.png")
        print(f"wrote {svg_path}")
        print(f"wrote {png_path}")


if __name__ == "__main__":
    main()
