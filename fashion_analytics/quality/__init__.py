"""
Data Quality Module
"""
from .validators import (
    DataValidator,
    ValidationResult,
    create_products_validator,
    create_transactions_validator,
    missing_value_counts,
    missing_value_report,
)

__all__ = [
    "DataValidator",
    "ValidationResult",
    "create_products_validator",
    "create_transactions_validator",
    "missing_value_counts",
    "missing_value_report",
]
