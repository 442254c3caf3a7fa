"""
Data Transformation Module
"""
from .cleaners import DataCleaner, canonicalize_column_name, clean_relation
from .enrichers import DataEnricher, enrich_products, enrich_transactions

__all__ = [
    "DataCleaner",
    "canonicalize_column_name",
    "clean_relation",
    "DataEnricher",
    "enrich_products",
    "enrich_transactions",
]
