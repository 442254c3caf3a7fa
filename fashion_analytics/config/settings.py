"""
Fashion Retail Analytics
Centralized Configuration Management

This module provides configuration management using Pydantic settings with
environment variable support, validation, and type safety.
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataSourceSettings(BaseSettings):
    """Input relation files and report output location"""

    model_config = SettingsConfigDict(env_prefix="DATA_")

    source_dir: str = Field(default="./data/raw", description="Directory holding the relation files")
    output_dir: str = Field(default="./data/report", description="Directory for rendered report tables")
    file_format: Optional[str] = Field(default=None, description="Force a file format (csv, parquet, json, jsonl)")

    transactions_file: str = Field(default="transactions.csv", description="Transactions relation file")
    products_file: str = Field(default="products.csv", description="Products relation file")
    discounts_file: str = Field(default="discounts.csv", description="Discounts relation file")
    stores_file: str = Field(default="stores.csv", description="Stores relation file")
    customers_file: str = Field(default="customers.csv", description="Customers relation file")
    employees_file: str = Field(default="employees.csv", description="Employees relation file")

    def relation_paths(self, source_dir: Optional[str] = None) -> Dict[str, Path]:
        """Full path of every relation file keyed by relation name"""
        root = Path(source_dir or self.source_dir)
        return {
            "transactions": root / self.transactions_file,
            "products": root / self.products_file,
            "discounts": root / self.discounts_file,
            "stores": root / self.stores_file,
            "customers": root / self.customers_file,
            "employees": root / self.employees_file,
        }


class AnalysisSettings(BaseSettings):
    """Statistical analysis parameters"""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    top_stores: int = Field(default=10, ge=1, description="Stores kept in the revenue ranking")
    confidence_level: float = Field(default=0.95, description="Two-sided confidence level for intervals")
    min_line_total: float = Field(
        default=0.0,
        description="Rows must exceed this line total for payment and regression analyses",
    )

    @field_validator("confidence_level")
    @classmethod
    def validate_confidence_level(cls, v: float) -> float:
        """Confidence level must be a proper probability"""
        if not 0.0 < v < 1.0:
            raise ValueError("Confidence level must be strictly between 0 and 1")
        return v


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="fashion-retail-analytics", description="Application name")
    app_env: str = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Debug mode")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    data: DataSourceSettings = Field(default_factory=DataSourceSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
