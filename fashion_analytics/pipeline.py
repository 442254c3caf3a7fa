"""
Report Pipeline

Runs the report end to end, once, in dependency order:
1. Load the six relations
2. Enrich transactions and products
3. Quality diagnostics
4. Grouped revenue summaries
5. Confidence intervals by discount status
6. Revenue regression

Each stage reads the previous stage's frames and returns new ones. Any
AnalysisError is fatal: it is logged and re-raised, no partial report.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import polars as pl
import structlog

from fashion_analytics.analytics.aggregations import (
    discount_distribution,
    mean_revenue_by_category,
    payment_method_summary,
    revenue_by_month,
    revenue_by_store,
)
from fashion_analytics.analytics.intervals import (
    ConfidenceInterval,
    discount_confidence_intervals,
    intervals_to_frame,
)
from fashion_analytics.analytics.regression import RegressionResult, fit_revenue_model
from fashion_analytics.config import Settings, get_settings
from fashion_analytics.exceptions import AnalysisError
from fashion_analytics.ingestion.loader import DatasetLoader, LoadResult, RelationSet
from fashion_analytics.quality.validators import (
    ValidationResult,
    create_products_validator,
    create_transactions_validator,
    missing_value_counts,
    missing_value_report,
)
from fashion_analytics.transformation.enrichers import DataEnricher

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReportResult:
    """Every output of one report run"""
    store_revenue: pl.DataFrame
    monthly_revenue: pl.DataFrame
    category_revenue: pl.DataFrame
    discount_distribution: pl.DataFrame
    confidence_intervals: List[ConfidenceInterval]
    regression: RegressionResult
    payment_methods: pl.DataFrame
    missing_values: Dict[str, int]
    missing_value_detail: pl.DataFrame
    validations: Dict[str, ValidationResult]
    started_at: datetime
    completed_at: datetime
    load_results: Dict[str, LoadResult] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()

    def tables(self) -> Dict[str, pl.DataFrame]:
        """Output tables keyed by name, for the presentation layer"""
        return {
            "store_revenue_top": self.store_revenue,
            "monthly_revenue": self.monthly_revenue,
            "category_revenue": self.category_revenue,
            "discount_distribution": self.discount_distribution,
            "confidence_intervals": intervals_to_frame(self.confidence_intervals),
            "regression_coefficients": self.regression.to_frame(),
            "regression_fit": self.regression.fit_summary(),
            "payment_methods": self.payment_methods,
            "missing_values": self.missing_value_detail,
        }


class ReportPipeline:
    """
    Report pipeline orchestrator.

    Example:
        pipeline = ReportPipeline()
        result = pipeline.run()
        pipeline.write_tables(result)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        loader: Optional[DatasetLoader] = None,
    ):
        self.settings = settings or get_settings()
        self.loader = loader or DatasetLoader(self.settings.data)
        self.enricher = DataEnricher()

    def run(
        self,
        relations: Optional[RelationSet] = None,
        source_dir: Optional[str] = None,
    ) -> ReportResult:
        """
        Execute every stage once.

        Args:
            relations: Pre-loaded relations; loaded from files when omitted
            source_dir: Override the configured source directory

        Returns:
            ReportResult with all output tables
        """
        started_at = datetime.utcnow()
        analysis = self.settings.analysis
        load_results: Dict[str, LoadResult] = {}

        logger.info("Starting report pipeline")

        try:
            # Step 1: Load
            if relations is None:
                relations, load_results = self.loader.load_all(source_dir)

            # Step 2: Enrich
            transactions = self.enricher.enrich_transactions(relations.transactions)
            products = self.enricher.enrich_products(relations.products)

            # Step 3: Quality diagnostics
            frames = relations.as_dict()
            missing = missing_value_counts(frames)
            logger.info("Missing values per relation", **missing)
            validations = {
                "transactions": create_transactions_validator(products).validate(transactions),
                "products": create_products_validator().validate(products),
            }

            # Step 4: Aggregations
            store_revenue = revenue_by_store(transactions, top_n=analysis.top_stores)
            monthly_revenue = revenue_by_month(transactions)
            category_revenue = mean_revenue_by_category(transactions, products)
            distribution = discount_distribution(transactions)
            payment_methods = payment_method_summary(
                transactions, min_line_total=analysis.min_line_total
            )

            # Step 5: Confidence intervals
            intervals = discount_confidence_intervals(
                transactions, confidence=analysis.confidence_level
            )

            # Step 6: Regression
            regression = fit_revenue_model(
                transactions, products, min_line_total=analysis.min_line_total
            )

        except AnalysisError as e:
            logger.error(
                "Report pipeline failed",
                error=e.message,
                error_type=type(e).__name__,
                **e.details,
            )
            raise

        completed_at = datetime.utcnow()
        result = ReportResult(
            store_revenue=store_revenue,
            monthly_revenue=monthly_revenue,
            category_revenue=category_revenue,
            discount_distribution=distribution,
            confidence_intervals=intervals,
            regression=regression,
            payment_methods=payment_methods,
            missing_values=missing,
            missing_value_detail=missing_value_report(frames),
            validations=validations,
            started_at=started_at,
            completed_at=completed_at,
            load_results=load_results,
        )

        logger.info(
            "Report pipeline complete",
            transactions=transactions.height,
            r_squared=round(regression.r_squared, 4),
            duration=f"{result.duration_seconds:.2f}s",
        )
        return result

    def write_tables(
        self,
        result: ReportResult,
        output_dir: Optional[str] = None,
    ) -> Dict[str, str]:
        """Write every output table as CSV; returns table name to file path"""
        output_path = Path(output_dir or self.settings.data.output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        written = {}
        for name, table in result.tables().items():
            output_file = output_path / f"{name}.csv"
            table.write_csv(output_file)
            written[name] = str(output_file)
            logger.info(f"Written {table.height} rows to {output_file}")

        return written


def run_report(source_dir: Optional[str] = None) -> ReportResult:
    """Convenience function to run the report with default settings"""
    return ReportPipeline().run(source_dir=source_dir)
