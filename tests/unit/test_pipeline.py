"""
Unit Tests - Report Pipeline
"""
from dataclasses import replace
from pathlib import Path

import pytest
import polars as pl

from fashion_analytics.exceptions import InsufficientDataError, JoinError
from fashion_analytics.pipeline import ReportPipeline
from fashion_analytics.quality.validators import ValidationStatus


class TestReportPipeline:
    """Tests for ReportPipeline"""

    def test_run_produces_every_output(self, test_settings, sample_relations):
        """Test an end-to-end run over in-memory relations"""
        result = ReportPipeline(settings=test_settings).run(relations=sample_relations)

        assert set(result.tables()) == {
            "store_revenue_top",
            "monthly_revenue",
            "category_revenue",
            "discount_distribution",
            "confidence_intervals",
            "regression_coefficients",
            "regression_fit",
            "payment_methods",
            "missing_values",
        }
        assert len(result.store_revenue) == 3
        assert result.category_revenue["category"][0] == "Masculine"
        assert [i.group_key for i in result.confidence_intervals] == ["No", "Yes"]
        assert result.regression.n == 24
        assert result.missing_values["employees"] == 1
        assert result.validations["products"].status == ValidationStatus.PASSED
        assert result.duration_seconds >= 0

    def test_store_revenue_matches_total(self, test_settings, sample_relations):
        """Test the store ranking accounts for all revenue"""
        result = ReportPipeline(settings=test_settings).run(relations=sample_relations)

        assert result.store_revenue["revenue"].sum() == pytest.approx(
            sample_relations.transactions["line_total"].sum()
        )

    def test_inputs_unchanged(self, test_settings, sample_relations):
        """Test the run leaves its input relations untouched"""
        before = sample_relations.transactions.clone()

        ReportPipeline(settings=test_settings).run(relations=sample_relations)

        assert sample_relations.transactions.equals(before)

    def test_insufficient_group_is_fatal(self, test_settings, sample_relations):
        """Test a discount group with a single line aborts the report"""
        tx = sample_relations.transactions
        single_discount = pl.concat([
            tx.filter(pl.col("discount") == 0),
            tx.filter(pl.col("discount") > 0).head(1),
        ])
        relations = replace(sample_relations, transactions=single_discount)

        with pytest.raises(InsufficientDataError):
            ReportPipeline(settings=test_settings).run(relations=relations)

    def test_duplicate_products_are_fatal(self, test_settings, sample_relations):
        """Test a product relation with repeated ids aborts the report"""
        products = pl.concat([sample_relations.products, sample_relations.products.head(1)])
        relations = replace(sample_relations, products=products)

        with pytest.raises(JoinError):
            ReportPipeline(settings=test_settings).run(relations=relations)

    def test_write_tables(self, test_settings, sample_relations, tmp_path):
        """Test every table is written as CSV"""
        pipeline = ReportPipeline(settings=test_settings)
        result = pipeline.run(relations=sample_relations)

        written = pipeline.write_tables(result, output_dir=str(tmp_path))

        assert set(written) == set(result.tables())
        for path in written.values():
            assert Path(path).exists()
        coefficients = pl.read_csv(written["regression_coefficients"])
        assert coefficients["term"][0] == "category[Masculine]"
