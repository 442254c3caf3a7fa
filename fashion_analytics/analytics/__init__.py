"""
Statistical Analysis Module
"""
from .aggregations import (
    discount_distribution,
    join_products,
    mean_revenue_by_category,
    payment_method_summary,
    revenue_by_month,
    revenue_by_store,
    summarize_by,
)
from .intervals import (
    ConfidenceInterval,
    discount_confidence_intervals,
    intervals_overlap,
    intervals_to_frame,
    normal_interval,
)
from .regression import RegressionResult, RegressionTerm, fit_linear_model, fit_revenue_model

__all__ = [
    "discount_distribution",
    "join_products",
    "mean_revenue_by_category",
    "payment_method_summary",
    "revenue_by_month",
    "revenue_by_store",
    "summarize_by",
    "ConfidenceInterval",
    "discount_confidence_intervals",
    "intervals_overlap",
    "intervals_to_frame",
    "normal_interval",
    "RegressionResult",
    "RegressionTerm",
    "fit_linear_model",
    "fit_revenue_model",
]
