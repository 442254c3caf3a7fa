"""
Relation Schemas

Fixed schema per relation, declared once and applied at load time so that no
stage has to coerce types on its own. Identifier columns are strings in every
relation so join keys always agree.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import polars as pl


@dataclass(frozen=True)
class RelationSchema:
    """Declared columns, types and keys of one relation"""
    name: str
    required: Dict[str, pl.DataType]
    optional: Dict[str, pl.DataType] = field(default_factory=dict)
    categorical: Tuple[str, ...] = ()
    primary_key: Optional[str] = None
    aliases: Dict[str, str] = field(default_factory=dict)

    @property
    def columns(self) -> Dict[str, pl.DataType]:
        """All declared columns, required first"""
        return {**self.required, **self.optional}


TRANSACTIONS = RelationSchema(
    name="transactions",
    required={
        "transaction_id": pl.Utf8,
        "store_id": pl.Utf8,
        "product_id": pl.Utf8,
        "date": pl.Datetime,
        "discount": pl.Float64,
        "line_total": pl.Float64,
        "payment_method": pl.Utf8,
    },
    optional={
        "customer_id": pl.Utf8,
        "employee_id": pl.Utf8,
        "quantity": pl.Int64,
        "unit_price": pl.Float64,
        "invoice_total": pl.Float64,
        "transaction_type": pl.Utf8,
    },
    categorical=("payment_method",),
    aliases={"invoice_id": "transaction_id"},
)

PRODUCTS = RelationSchema(
    name="products",
    required={
        "product_id": pl.Utf8,
        "category": pl.Utf8,
    },
    optional={
        "sub_category": pl.Utf8,
        "production_cost": pl.Float64,
    },
    categorical=("category",),
    primary_key="product_id",
)

DISCOUNTS = RelationSchema(
    name="discounts",
    required={},
    optional={
        "start_date": pl.Datetime,
        "end_date": pl.Datetime,
        "discount": pl.Float64,
        "category": pl.Utf8,
        "sub_category": pl.Utf8,
    },
    aliases={"start": "start_date", "end": "end_date", "discont": "discount"},
)

STORES = RelationSchema(
    name="stores",
    required={"store_id": pl.Utf8},
    optional={
        "number_of_employees": pl.Int64,
        "latitude": pl.Float64,
        "longitude": pl.Float64,
    },
    primary_key="store_id",
)

CUSTOMERS = RelationSchema(
    name="customers",
    required={"customer_id": pl.Utf8},
    optional={"date_of_birth": pl.Datetime},
    primary_key="customer_id",
)

EMPLOYEES = RelationSchema(
    name="employees",
    required={"employee_id": pl.Utf8},
    optional={"store_id": pl.Utf8},
    primary_key="employee_id",
)

RELATION_SCHEMAS: Dict[str, RelationSchema] = {
    schema.name: schema
    for schema in (TRANSACTIONS, PRODUCTS, DISCOUNTS, STORES, CUSTOMERS, EMPLOYEES)
}
