"""
Confidence Interval Estimator

Large-sample (normal approximation) confidence intervals for the mean line
revenue of each discount_applied group:

    mean ± z * sd / sqrt(n),   z = Φ⁻¹(1 - (1 - confidence) / 2)

The standard deviation uses the n - 1 denominator. No t correction is applied.
"""

from dataclasses import asdict, dataclass
from typing import List, Sequence

import numpy as np
import polars as pl
from scipy import stats
import structlog

from fashion_analytics.exceptions import InsufficientDataError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ConfidenceInterval:
    """Interval estimate of a group mean"""
    group_key: str
    n: int
    mean: float
    sd: float
    lower_bound: float
    upper_bound: float
    confidence: float = 0.95
    z: float = 1.959963984540054

    @property
    def midpoint(self) -> float:
        return (self.lower_bound + self.upper_bound) / 2

    @property
    def width(self) -> float:
        return self.upper_bound - self.lower_bound

    @property
    def standard_error(self) -> float:
        return self.sd / np.sqrt(self.n)


def critical_value(confidence: float = 0.95) -> float:
    """Two-sided standard normal quantile for the confidence level"""
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"Confidence level must be in (0, 1), got {confidence}")
    return float(stats.norm.ppf(1 - (1 - confidence) / 2))


def normal_interval(
    group_key: str,
    n: int,
    mean: float,
    sd: float,
    confidence: float = 0.95,
) -> ConfidenceInterval:
    """
    Build the interval from summary statistics.

    Raises:
        InsufficientDataError: n < 2 or sd is missing / not finite
    """
    if n < 2 or sd is None or mean is None or not np.isfinite(sd):
        raise InsufficientDataError(
            f"Group '{group_key}' needs at least 2 observations with a defined "
            f"standard deviation (n={n})",
            details={"group_key": group_key, "n": n},
        )

    z = critical_value(confidence)
    half_width = z * sd / np.sqrt(n)
    return ConfidenceInterval(
        group_key=group_key,
        n=int(n),
        mean=float(mean),
        sd=float(sd),
        lower_bound=float(mean - half_width),
        upper_bound=float(mean + half_width),
        confidence=confidence,
        z=z,
    )


def group_confidence_intervals(
    df: pl.DataFrame,
    group_col: str,
    value_col: str = "line_total",
    confidence: float = 0.95,
) -> List[ConfidenceInterval]:
    """
    Interval for the mean of value_col within each level of group_col.

    Null values are excluded, so n counts the non-null observations.
    Groups are returned in ascending order of their key.
    """
    summary = (
        df.filter(pl.col(value_col).is_not_null())
        .group_by(group_col)
        .agg([
            pl.len().alias("n"),
            pl.col(value_col).mean().alias("mean"),
            pl.col(value_col).std(ddof=1).alias("sd"),
        ])
        .with_columns(pl.col(group_col).cast(pl.Utf8))
        .sort(group_col, nulls_last=True)
    )

    intervals = [
        normal_interval(
            group_key=row[group_col],
            n=row["n"],
            mean=row["mean"],
            sd=row["sd"],
            confidence=confidence,
        )
        for row in summary.iter_rows(named=True)
    ]

    for interval in intervals:
        logger.info(
            "Confidence interval computed",
            group=interval.group_key,
            n=interval.n,
            mean=round(interval.mean, 4),
            lower=round(interval.lower_bound, 4),
            upper=round(interval.upper_bound, 4),
        )
    return intervals


def discount_confidence_intervals(
    transactions: pl.DataFrame,
    confidence: float = 0.95,
) -> List[ConfidenceInterval]:
    """Intervals of mean line revenue for discounted and full-price lines"""
    return group_confidence_intervals(
        transactions,
        group_col="discount_applied",
        value_col="line_total",
        confidence=confidence,
    )


def intervals_overlap(a: ConfidenceInterval, b: ConfidenceInterval) -> bool:
    """True when the two intervals share at least one point"""
    return a.lower_bound <= b.upper_bound and b.lower_bound <= a.upper_bound


def intervals_to_frame(intervals: Sequence[ConfidenceInterval]) -> pl.DataFrame:
    """Tabulate intervals for the presentation layer"""
    schema = {
        "group_key": pl.Utf8,
        "n": pl.Int64,
        "mean": pl.Float64,
        "sd": pl.Float64,
        "lower_bound": pl.Float64,
        "upper_bound": pl.Float64,
        "confidence": pl.Float64,
        "z": pl.Float64,
        "standard_error": pl.Float64,
    }
    rows = [{**asdict(i), "standard_error": float(i.standard_error)} for i in intervals]
    return pl.DataFrame(rows, schema=schema)
