"""
Unit Tests - Data Transformation
"""
from datetime import datetime

import pytest
import polars as pl

from fashion_analytics.transformation.enrichers import DataEnricher, enrich_products, enrich_transactions


class TestDataEnricher:
    """Tests for DataEnricher"""

    @pytest.mark.parametrize(
        "discount, expected",
        [
            (0.0, "No"),
            (0.2, "Yes"),
            (0.0001, "Yes"),
            (None, "No"),
            (-0.1, "No"),
        ],
    )
    def test_discount_applied(self, discount, expected):
        """Test discount flag is Yes exactly when discount > 0"""
        df = pl.DataFrame({"discount": [discount]}, schema={"discount": pl.Float64})

        result = DataEnricher().derive_discount_applied(df)

        assert result["discount_applied"].to_list() == [expected]

    def test_discount_applied_all_rows(self, sample_transactions_df):
        """Test flag agrees with discount on every row"""
        result = DataEnricher().derive_discount_applied(sample_transactions_df)

        for discount, flag in result.select(["discount", "discount_applied"]).iter_rows():
            assert (flag == "Yes") == (discount > 0)

    def test_add_month(self):
        """Test month truncation"""
        df = pl.DataFrame({
            "date": [datetime(2023, 3, 17, 15, 45), datetime(2024, 12, 31, 23, 59)],
        })

        result = DataEnricher().add_month(df)

        assert result["month"].to_list() == [datetime(2023, 3, 1), datetime(2024, 12, 1)]

    def test_categorize_keeps_rows(self, sample_products_df):
        """Test categorical typing leaves row count and labels unchanged"""
        result = enrich_products(sample_products_df)

        assert result.schema["category"] == pl.Categorical
        assert len(result) == len(sample_products_df)
        assert result["category"].to_list() == sample_products_df["category"].to_list()

    def test_enrich_transactions(self, sample_transactions_df):
        """Test full transaction enrichment"""
        result = enrich_transactions(sample_transactions_df)

        assert "discount_applied" in result.columns
        assert "month" in result.columns
        assert result.schema["payment_method"] == pl.Categorical
        assert len(result) == len(sample_transactions_df)

    def test_input_not_modified(self, sample_transactions_df):
        """Test enrichment returns a new frame"""
        columns_before = list(sample_transactions_df.columns)

        enrich_transactions(sample_transactions_df)

        assert sample_transactions_df.columns == columns_before
        assert sample_transactions_df.schema["payment_method"] == pl.Utf8
