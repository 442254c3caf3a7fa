"""
Data Enrichment Module

Derived attributes for the transaction and product relations:
- Discount flag (discount_applied)
- Calendar month of each transaction
- Categorical typing of label columns

Every function returns a new DataFrame; inputs are never modified.
"""

from typing import Iterable

import polars as pl
import structlog

from fashion_analytics.schemas import PRODUCTS, TRANSACTIONS

logger = structlog.get_logger(__name__)

DISCOUNT_YES = "Yes"
DISCOUNT_NO = "No"


class DataEnricher:
    """
    Enricher for the transaction and product relations.

    Null discount policy: a missing discount value is read as "no discount"
    and the row gets discount_applied = "No". Negative values are also "No".
    """

    def derive_discount_applied(
        self,
        df: pl.DataFrame,
        discount_col: str = "discount",
    ) -> pl.DataFrame:
        """Add discount_applied: "Yes" when discount > 0, otherwise "No" """
        return df.with_columns(
            pl.when(pl.col(discount_col).fill_null(0) > 0)
            .then(pl.lit(DISCOUNT_YES))
            .otherwise(pl.lit(DISCOUNT_NO))
            .alias("discount_applied")
        )

    def add_month(self, df: pl.DataFrame, date_col: str = "date") -> pl.DataFrame:
        """Add month: the transaction date truncated to the first of its month"""
        return df.with_columns(
            pl.col(date_col).dt.truncate("1mo").alias("month")
        )

    def categorize(self, df: pl.DataFrame, columns: Iterable[str]) -> pl.DataFrame:
        """Cast label columns to an unordered categorical type"""
        present = [col for col in columns if col in df.columns]
        if not present:
            return df
        return df.with_columns(
            [pl.col(col).cast(pl.Utf8).cast(pl.Categorical).alias(col) for col in present]
        )

    def enrich_transactions(self, df: pl.DataFrame) -> pl.DataFrame:
        """Apply every transaction-level derivation"""
        df = self.derive_discount_applied(df)
        df = self.add_month(df)
        df = self.categorize(df, TRANSACTIONS.categorical + ("discount_applied",))

        logger.info(
            "Transactions enriched",
            rows=df.height,
            discounted=df.filter(pl.col("discount_applied") == DISCOUNT_YES).height,
        )
        return df

    def enrich_products(self, df: pl.DataFrame) -> pl.DataFrame:
        """Type product labels as categorical without changing row count"""
        return self.categorize(df, PRODUCTS.categorical)


def enrich_transactions(df: pl.DataFrame) -> pl.DataFrame:
    """Convenience function to enrich the transaction relation"""
    return DataEnricher().enrich_transactions(df)


def enrich_products(df: pl.DataFrame) -> pl.DataFrame:
    """Convenience function to enrich the product relation"""
    return DataEnricher().enrich_products(df)
