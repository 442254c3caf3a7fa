"""
Aggregation Engine

Grouped revenue summaries feeding the descriptive charts of the report:
- Top stores by revenue
- Monthly revenue series
- Mean line revenue per product category
- Payment method summary
- Line revenue distribution with and without discount

Null line totals are excluded from sums and means. Every sort is stable, so
ties keep the order in which their keys first appear.
"""

from typing import Optional

import polars as pl
import structlog

from fashion_analytics.exceptions import JoinError
from fashion_analytics.schemas import PRODUCTS

logger = structlog.get_logger(__name__)

VALUE_COL = "line_total"
PRODUCT_KEY = PRODUCTS.primary_key


def join_products(transactions: pl.DataFrame, products: pl.DataFrame) -> pl.DataFrame:
    """
    Left-join product category onto transactions by product_id.

    Transactions whose product_id has no match keep a null category.

    Raises:
        JoinError: the product relation lacks the join columns or repeats a
            product_id, which would duplicate transaction rows
    """
    missing = [c for c in (PRODUCT_KEY, "category") if c not in products.columns]
    if missing or PRODUCT_KEY not in transactions.columns:
        raise JoinError(
            "Cannot join products onto transactions: join columns missing",
            details={"missing_product_columns": missing},
        )

    keys = products.select(PRODUCT_KEY).drop_nulls()
    duplicates = keys.height - keys.n_unique()
    if duplicates:
        raise JoinError(
            f"Product relation has {duplicates} duplicate product_id values",
            details={"duplicate_count": duplicates},
        )

    right = products.select([PRODUCT_KEY, "category"])
    if "category" in transactions.columns:
        transactions = transactions.drop("category")
    joined = transactions.join(right, on=PRODUCT_KEY, how="left", maintain_order="left")

    unmatched = joined.filter(pl.col("category").is_null()).height
    if unmatched:
        logger.warning("Transactions without product category", rows=unmatched)
    return joined


def summarize_by(
    df: pl.DataFrame,
    key: str,
    value: str = VALUE_COL,
) -> pl.DataFrame:
    """
    Grouped summary of a value column.

    Returns:
        One row per key (first-seen order) with count, mean, sum and sd
        (sample standard deviation) of the non-null values
    """
    return df.group_by(key, maintain_order=True).agg([
        pl.col(value).count().alias("count"),
        pl.col(value).mean().alias("mean"),
        pl.col(value).sum().alias("sum"),
        pl.col(value).std(ddof=1).alias("sd"),
    ])


def revenue_by_store(
    transactions: pl.DataFrame,
    top_n: Optional[int] = 10,
) -> pl.DataFrame:
    """
    Total line revenue per store, highest first.

    Args:
        transactions: Transaction relation
        top_n: Stores to keep; None keeps the full ranking

    Returns:
        DataFrame with store_id, store_label ("Store {id}") and revenue
    """
    ranking = (
        transactions.group_by("store_id", maintain_order=True)
        .agg(pl.col(VALUE_COL).sum().alias("revenue"))
        .sort("revenue", descending=True, nulls_last=True, maintain_order=True)
        .with_columns(
            pl.format("Store {}", pl.col("store_id")).alias("store_label")
        )
        .select(["store_id", "store_label", "revenue"])
    )
    if top_n is not None:
        ranking = ranking.head(top_n)
    return ranking


def revenue_by_month(transactions: pl.DataFrame, date_col: str = "date") -> pl.DataFrame:
    """Total line revenue per calendar month, in chronological order"""
    return (
        transactions.with_columns(pl.col(date_col).dt.truncate("1mo").alias("month"))
        .group_by("month")
        .agg(pl.col(VALUE_COL).sum().alias("revenue"))
        .sort("month", nulls_last=True)
    )


def mean_revenue_by_category(
    transactions: pl.DataFrame,
    products: pl.DataFrame,
) -> pl.DataFrame:
    """
    Mean line revenue per product category, highest first.

    Transactions are left-joined to products; unmatched rows form a null
    category group.
    """
    joined = join_products(transactions, products)
    return (
        joined.group_by("category", maintain_order=True)
        .agg([
            pl.col(VALUE_COL).mean().alias("mean_revenue"),
            pl.col(VALUE_COL).count().alias("count"),
        ])
        .sort("mean_revenue", descending=True, nulls_last=True, maintain_order=True)
    )


def payment_method_summary(
    transactions: pl.DataFrame,
    min_line_total: float = 0.0,
) -> pl.DataFrame:
    """Mean line revenue and row count per payment method over sales rows"""
    return (
        transactions.filter(pl.col(VALUE_COL) > min_line_total)
        .group_by("payment_method", maintain_order=True)
        .agg([
            pl.col(VALUE_COL).mean().alias("mean_revenue"),
            pl.len().alias("count"),
        ])
        .sort("mean_revenue", descending=True, nulls_last=True, maintain_order=True)
    )


def discount_distribution(transactions: pl.DataFrame) -> pl.DataFrame:
    """Quantile summary of line revenue per discount_applied level"""
    col = pl.col(VALUE_COL)
    return (
        transactions.group_by("discount_applied", maintain_order=True)
        .agg([
            col.count().alias("count"),
            col.mean().alias("mean"),
            col.min().alias("min"),
            col.quantile(0.25, interpolation="linear").alias("q25"),
            col.median().alias("median"),
            col.quantile(0.75, interpolation="linear").alias("q75"),
            col.max().alias("max"),
        ])
        .sort(pl.col("discount_applied").cast(pl.Utf8))
    )
