"""
Data Quality Module

Diagnostic checks over the loaded relations:
- Missing value counts per relation and per column
- Rule-based checks (not null, uniqueness, ranges, referential integrity)

Checks never alter data and never halt the pipeline. Failures are logged as
warnings and surfaced in the report for inspection.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

import polars as pl
import structlog

from fashion_analytics.schemas import PRODUCTS

logger = structlog.get_logger(__name__)


def missing_value_counts(relations: Mapping[str, pl.DataFrame]) -> Dict[str, int]:
    """
    Count null cells across all columns of each relation.

    Args:
        relations: Relation name to DataFrame

    Returns:
        Relation name to total number of null cells
    """
    counts: Dict[str, int] = {}
    for name, df in relations.items():
        counts[name] = sum(df.null_count().row(0)) if df.width else 0
    return counts


def missing_value_report(relations: Mapping[str, pl.DataFrame]) -> pl.DataFrame:
    """Per-column null counts as a long table (relation, column, null_count, null_percentage)"""
    rows: List[Dict[str, Any]] = []
    for name, df in relations.items():
        if df.width == 0:
            continue
        for column, nulls in zip(df.columns, df.null_count().row(0)):
            rows.append({
                "relation": name,
                "column": column,
                "null_count": int(nulls),
                "null_percentage": (nulls / df.height) * 100 if df.height else 0.0,
            })
    return pl.DataFrame(
        rows,
        schema={
            "relation": pl.Utf8,
            "column": pl.Utf8,
            "null_count": pl.Int64,
            "null_percentage": pl.Float64,
        },
    )


class ValidationSeverity(str, Enum):
    """Severity levels for validation findings"""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    relation: str
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Percentage of passed checks"""
        if self.total_checks == 0:
            return 100.0
        return (self.passed_checks / self.total_checks) * 100


class DataValidator:
    """
    Rule-based validator for a single relation.

    Example:
        validator = DataValidator("products")
        validator.add_unique_check("product_id")
        result = validator.validate(df)
    """

    def __init__(self, relation: str = "relation"):
        self.relation = relation
        self._checks: List[Callable[[pl.DataFrame], ValidationCheck]] = []

    def _missing_column(self, name: str, column: str, severity: ValidationSeverity) -> ValidationCheck:
        return ValidationCheck(
            name=name,
            passed=False,
            severity=severity,
            message=f"Column '{column}' not found",
        )

    def _add_count_check(
        self,
        name: str,
        column: str,
        severity: ValidationSeverity,
        count_failures: Callable[[pl.DataFrame], int],
        problem: str,
    ) -> "DataValidator":
        """Register a check that passes when count_failures finds no offending rows"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return self._missing_column(name, column, severity)

            failed = int(count_failures(df))
            passed = failed == 0
            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {failed} {problem}" if not passed else f"Column '{column}' passed",
                details={"failed_count": failed},
                failed_rows=failed,
                total_rows=df.height,
            )

        self._checks.append(check)
        return self

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.WARNING,
    ) -> "DataValidator":
        """Add check for null values in column"""
        return self._add_count_check(
            f"not_null_{column}",
            column,
            severity,
            lambda df: df[column].null_count(),
            "null values",
        )

    def add_unique_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for uniqueness of column values"""
        return self._add_count_check(
            f"unique_{column}",
            column,
            severity,
            lambda df: df.height - df[column].n_unique(),
            "duplicate values",
        )

    def add_range_check(
        self,
        column: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        severity: ValidationSeverity = ValidationSeverity.WARNING,
    ) -> "DataValidator":
        """Add check for values within specified range (nulls are not counted)"""
        conditions = []
        if min_value is not None:
            conditions.append(pl.col(column) < min_value)
        if max_value is not None:
            conditions.append(pl.col(column) > max_value)

        def out_of_range(df: pl.DataFrame) -> int:
            if not conditions:
                return 0
            return df.filter(pl.any_horizontal(conditions)).height

        return self._add_count_check(
            f"range_{column}",
            column,
            severity,
            out_of_range,
            f"values outside range [{min_value}, {max_value}]",
        )

    def add_referential_integrity_check(
        self,
        column: str,
        reference_df: pl.DataFrame,
        reference_column: str,
        severity: ValidationSeverity = ValidationSeverity.WARNING,
    ) -> "DataValidator":
        """Add check that every non-null key exists in the reference relation"""
        name = f"ref_integrity_{column}"
        if reference_column not in reference_df.columns:
            self._checks.append(lambda df: self._missing_column(name, reference_column, severity))
            return self

        keys = reference_df[reference_column].drop_nulls().unique().to_list()
        return self._add_count_check(
            name,
            column,
            severity,
            lambda df: df.filter(pl.col(column).is_not_null() & ~pl.col(column).is_in(keys)).height,
            "orphan records",
        )

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """
        Run all validation checks on DataFrame.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult with all check results
        """
        started_at = datetime.utcnow()
        results = []

        logger.info(
            "Running validation checks",
            relation=self.relation,
            checks=len(self._checks),
            rows=df.height,
        )

        for check_func in self._checks:
            result = check_func(df)
            results.append(result)

            if not result.passed:
                logger.warning(
                    f"Validation failed: {result.name}",
                    relation=self.relation,
                    message=result.message,
                    severity=result.severity.value,
                )

        passed_checks = sum(1 for r in results if r.passed)
        failed_checks = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.ERROR)
        warning_count = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.WARNING)

        if failed_checks > 0:
            status = ValidationStatus.FAILED
        elif warning_count > 0:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        return ValidationResult(
            relation=self.relation,
            status=status,
            total_checks=len(results),
            passed_checks=passed_checks,
            failed_checks=failed_checks,
            warning_count=warning_count,
            checks=results,
            started_at=started_at,
            completed_at=datetime.utcnow(),
        )


# Pre-built validators for the report relations
def create_transactions_validator(products: Optional[pl.DataFrame] = None) -> DataValidator:
    """Create pre-configured validator for transactions data"""
    validator = (
        DataValidator("transactions")
        .add_not_null_check("transaction_id")
        .add_not_null_check("line_total")
        .add_not_null_check("discount")
        .add_range_check("discount", min_value=0)
    )
    if products is not None:
        validator.add_referential_integrity_check("product_id", products, PRODUCTS.primary_key)
    return validator


def create_products_validator() -> DataValidator:
    """Create pre-configured validator for products data"""
    return (
        DataValidator(PRODUCTS.name)
        .add_not_null_check(PRODUCTS.primary_key, severity=ValidationSeverity.ERROR)
        .add_unique_check(PRODUCTS.primary_key)
        .add_not_null_check("category")
    )
