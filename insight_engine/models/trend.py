from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class TrendPoint:
    year: int
    standalone: int
    integrated: int


# Illustrative only; not derived from any generated report.
SEARCH_MODALITY_TREND: Tuple[TrendPoint, ...] = (
    TrendPoint(2010, 90, 10),
    TrendPoint(2015, 80, 20),
    TrendPoint(2020, 60, 40),
    TrendPoint(2024, 45, 55),
    TrendPoint(2028, 20, 80),
    TrendPoint(2030, 5, 95),
)

SERIES_LABELS = {
    "standalone": "Standalone Search",
    "integrated": "Integrated OS/SaaS",
}


def series_points(
    data: Tuple[TrendPoint, ...],
    series: str,
    width: int = 280,
    height: int = 160,
    max_value: int = 100,
) -> List[Tuple[float, float]]:
    """Scale one series into SVG coordinates (origin top-left, years spaced by value)."""
    if not data:
        return []
    first_year = data[0].year
    span = (data[-1].year - first_year) or 1
    points = []
    for point in data:
        x = (point.year - first_year) / span * width
        y = height - getattr(point, series) / max_value * height
        points.append((round(x, 1), round(y, 1)))
    return points
