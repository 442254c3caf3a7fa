"""
Test Suite Configuration
"""
from datetime import datetime
from itertools import product

import pytest
import polars as pl

from fashion_analytics.config import Settings
from fashion_analytics.ingestion.loader import RelationSet


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def sample_products_df() -> pl.DataFrame:
    """Create sample products DataFrame for testing"""
    return pl.DataFrame({
        "product_id": ["1", "2", "3"],
        "category": ["Masculine", "Feminine", "Children"],
        "sub_category": ["Suits", "Dresses", "Pajamas"],
        "production_cost": [40.0, 30.0, 10.0],
    })


@pytest.fixture
def sample_transactions_df() -> pl.DataFrame:
    """
    Balanced factorial transactions: every product x discount x payment cell
    appears twice, with line totals following an exact additive model
    (base by product, -10 when discounted, +5 for credit card) +/- 1.
    """
    base = {"1": 100.0, "2": 70.0, "3": 40.0}
    rows = []
    cells = product(["1", "2", "3"], [0.0, 0.2], ["Cash", "Credit Card"], [1.0, -1.0])
    for i, (product_id, discount, payment, noise) in enumerate(cells):
        line_total = base[product_id] - (10.0 if discount > 0 else 0.0)
        line_total += 5.0 if payment == "Credit Card" else 0.0
        rows.append({
            "transaction_id": f"INV-{i:04d}",
            "store_id": str(i % 3 + 1),
            "product_id": product_id,
            "customer_id": str(i % 5 + 1),
            "employee_id": str(i % 4 + 1),
            "date": datetime(2023, 1 + i % 3, 1 + i, 10, 0),
            "quantity": 1,
            "discount": discount,
            "line_total": line_total + noise,
            "payment_method": payment,
        })
    return pl.DataFrame(rows)


@pytest.fixture
def sample_relations(sample_transactions_df, sample_products_df) -> RelationSet:
    """Create a complete relation set for pipeline tests"""
    return RelationSet(
        transactions=sample_transactions_df,
        products=sample_products_df,
        discounts=pl.DataFrame({
            "start_date": [datetime(2023, 1, 1)],
            "end_date": [datetime(2023, 1, 15)],
            "discount": [0.2],
            "category": ["Feminine"],
        }),
        stores=pl.DataFrame({"store_id": ["1", "2", "3"]}),
        customers=pl.DataFrame({"customer_id": ["1", "2", "3", "4", "5"]}),
        employees=pl.DataFrame({
            "employee_id": ["1", "2", "3", "4"],
            "store_id": ["1", "1", "2", None],
        }),
    )
