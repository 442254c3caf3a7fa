"""
Data Cleaning Module

Cleaning transformations applied to every relation as it is loaded:
- Column name canonicalisation (lower snake_case)
- Source vocabulary aliases
- String trimming
- Removal of completely empty rows
- Coercion to the relation's declared schema
"""

from typing import Dict, List
import re

import polars as pl
import structlog

from fashion_analytics.exceptions import LoadError
from fashion_analytics.schemas import RelationSchema

logger = structlog.get_logger(__name__)

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]+")


def canonicalize_column_name(name: str) -> str:
    """
    Lower snake_case form of a raw column header.

    "Line Total" -> "line_total", "StoreID" -> "store_id",
    "Unit Price ($)" -> "unit_price".
    """
    name = _CAMEL_BOUNDARY.sub(r"\1_\2", str(name).strip())
    name = _NON_ALNUM.sub("_", name)
    return name.strip("_").lower()


class DataCleaner:
    """
    Schema-driven cleaner for raw relations.

    Example:
        cleaner = DataCleaner()
        df = cleaner.clean(raw_df, TRANSACTIONS)
    """

    def canonicalize_columns(self, df: pl.DataFrame, relation: str = "relation") -> pl.DataFrame:
        """Rename every column to its canonical snake_case name"""
        mapping: Dict[str, str] = {}
        seen: Dict[str, str] = {}
        for column in df.columns:
            canonical = canonicalize_column_name(column)
            if not canonical:
                raise LoadError(
                    f"Column '{column}' in {relation} has no usable characters",
                    details={"relation": relation, "column": column},
                )
            if canonical in seen:
                raise LoadError(
                    f"Columns '{seen[canonical]}' and '{column}' in {relation} "
                    f"both normalise to '{canonical}'",
                    details={"relation": relation, "column": canonical},
                )
            seen[canonical] = column
            mapping[column] = canonical
        return df.rename(mapping)

    def apply_aliases(self, df: pl.DataFrame, aliases: Dict[str, str]) -> pl.DataFrame:
        """Map source vocabulary onto canonical names"""
        mapping = {
            source: target
            for source, target in aliases.items()
            if source in df.columns and target not in df.columns
        }
        return df.rename(mapping) if mapping else df

    def trim_strings(self, df: pl.DataFrame) -> pl.DataFrame:
        """Trim whitespace from string columns; blank cells become null"""
        string_cols = [col for col, dtype in df.schema.items() if dtype == pl.Utf8]
        if not string_cols:
            return df
        return df.with_columns(
            [
                pl.when(pl.col(col).str.strip_chars() == "")
                .then(None)
                .otherwise(pl.col(col).str.strip_chars())
                .alias(col)
                for col in string_cols
            ]
        )

    def drop_empty_rows(self, df: pl.DataFrame) -> pl.DataFrame:
        """Remove rows where every cell is null"""
        if df.width == 0:
            return df
        return df.filter(~pl.all_horizontal(pl.all().is_null()))

    def _coerce_expr(self, column: str, current: pl.DataType, target: pl.DataType) -> pl.Expr:
        if target == pl.Datetime:
            if current == pl.Utf8:
                return pl.col(column).str.to_datetime(strict=True)
            return pl.col(column).cast(pl.Datetime)
        return pl.col(column).cast(target, strict=True)

    def coerce_schema(self, df: pl.DataFrame, schema: RelationSchema) -> pl.DataFrame:
        """
        Check required columns and cast declared columns to their types.

        Raises:
            LoadError: a required column is absent or a value cannot be cast
        """
        missing = [col for col in schema.required if col not in df.columns]
        if missing:
            raise LoadError(
                f"Relation '{schema.name}' is missing required columns: {missing}",
                details={"relation": schema.name, "missing_columns": missing},
            )

        exprs: List[pl.Expr] = []
        for column, target in schema.columns.items():
            if column not in df.columns:
                continue
            current = df.schema[column]
            if current == target:
                continue
            exprs.append(self._coerce_expr(column, current, target).alias(column))

        if not exprs:
            return df

        try:
            return df.with_columns(exprs)
        except pl.exceptions.PolarsError as e:
            raise LoadError(
                f"Relation '{schema.name}' has values that do not match its schema: {e}",
                details={"relation": schema.name},
            ) from e

    def clean(self, df: pl.DataFrame, schema: RelationSchema) -> pl.DataFrame:
        """Apply the full cleaning sequence for one relation"""
        df = self.canonicalize_columns(df, schema.name)
        df = self.apply_aliases(df, schema.aliases)
        df = self.trim_strings(df)
        df = self.drop_empty_rows(df)
        df = self.coerce_schema(df, schema)

        logger.debug(
            "Relation cleaned",
            relation=schema.name,
            rows=df.height,
            columns=df.width,
        )
        return df


def clean_relation(df: pl.DataFrame, schema: RelationSchema) -> pl.DataFrame:
    """
    Convenience function to clean a relation.

    Args:
        df: Raw DataFrame as read from its source file
        schema: Declared schema of the relation

    Returns:
        Cleaned DataFrame
    """
    return DataCleaner().clean(df, schema)
