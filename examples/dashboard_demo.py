from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dashchart import (
    BarChart,
    DonutChart,
    DonutChartConfig,
    LineChart,
    LineChartConfig,
    ProgressRing,
    Sparkline,
    StaticDataProvider,
    TrendChart,
)
from dashchart.adapters import dataset_from_records, dataset_from_values
from dashchart.formatting import format_currency
from dashchart.render import export_png, write_svg
from dashchart.style import AdoptionStatus, ChartColor, FeatureUsage


def _provider() -> StaticDataProvider:
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    return StaticDataProvider(
        {
            "enrollments": dataset_from_values([42, 58, 51, 73, 88, 95], labels=months),
            "payouts": dataset_from_values([120, 340, 90, 410, 275, 300], labels=months),
            "savings": dataset_from_values([1200, 1850, 2400, 3100, 3900, 4650], labels=months),
            "usage": dataset_from_records(
                [
                    {"month": m, "track": t, "pay": p, "save": s}
                    for m, t, p, s in zip(months, [40, 48, 55, 61, 68, 72], [20, 26, 31, 38, 44, 52], [10, 12, 15, 21, 24, 30])
                ]
            ),
        }
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Render the dashboard chart set to SVG and PNG.")
    parser.add_argument("--out", type=Path, default=Path("dashchart_demo"))
    parser.add_argument("--hover", type=int, default=None, help="mark index to hover in every chart")
    parser.add_argument("--scale", type=int, default=2)
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    provider = _provider()
    charts = {
        "enrollments": (LineChart(), "enrollments"),
        "payouts": (BarChart(), "payouts"),
        "savings": (
            LineChart(LineChartConfig(color=ChartColor.INDIGO.value), formatter=format_currency),
            "savings",
        ),
        "usage": (TrendChart(), "usage"),
    }
    frames = {}
    for name, (chart, key) in charts.items():
        frames[name] = chart.render_from(provider, key)
        if args.hover is not None:
            frames[name] = chart.pointer_enter(args.hover, FeatureUsage.PAY.name.lower() if name == "usage" else None)

    adoption = DonutChart(DonutChartConfig(sweep="half", radius=70, center_caption="Enrolled"))
    frames["adoption"] = adoption.render(
        {AdoptionStatus.ENROLLED: 1012, AdoptionStatus.ENROLLING: 29, AdoptionStatus.NOT_ENROLLED: 1602}
    )
    features = DonutChart()
    frames["features"] = features.render({FeatureUsage.TRACK: 640, FeatureUsage.PAY: 410, FeatureUsage.SAVE: 220})
    frames["completion"] = ProgressRing().render(68)
    for index, frame in enumerate(Sparkline().render_many([[3, 5, 4, 6, 8], [9, 7, 8, 5, 4], [2, 2, 3, 3, 4]])):
        frames[f"spark_{index}"] = frame

    for name, frame in frames.items():
        write_svg(frame.scene, args.out / f"{name}.svg")
        export_png(frame.scene, args.out / f"{name}.png", scale=args.scale)
    print(f"wrote {len(frames)} charts to {args.out}")


if __name__ == "__main__":
    main()
