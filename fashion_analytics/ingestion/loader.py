"""
Dataset Loader

Reads the six fashion-retail relations from CSV, JSON, JSON Lines or Parquet
files into polars DataFrames with canonical column names and the declared
relation schema applied.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union
import hashlib

import polars as pl
import structlog
from pydantic import BaseModel

from fashion_analytics.config import DataSourceSettings, get_settings
from fashion_analytics.exceptions import LoadError
from fashion_analytics.schemas import RELATION_SCHEMAS, RelationSchema
from fashion_analytics.transformation.cleaners import DataCleaner

logger = structlog.get_logger(__name__)


class FileFormat(str, Enum):
    """Supported file formats"""
    CSV = "csv"
    JSON = "json"
    JSONL = "jsonl"
    PARQUET = "parquet"

    @classmethod
    def from_path(cls, path: Path) -> "FileFormat":
        suffix = path.suffix.lower().lstrip(".")
        if suffix == "ndjson":
            return cls.JSONL
        try:
            return cls(suffix)
        except ValueError:
            raise LoadError(
                f"Cannot infer file format from '{path.name}'",
                details={"file_path": str(path)},
            )


@dataclass
class RelationFileConfig:
    """Configuration for loading one relation file"""
    relation: str
    file_path: Union[str, Path]
    file_format: Optional[FileFormat] = None
    delimiter: str = ","
    encoding: str = "utf8"
    infer_schema_length: int = 10000
    null_values: List[str] = field(default_factory=lambda: ["", "NULL", "null", "None", "NA", "N/A"])


class LoadResult(BaseModel):
    """Audit record of a relation load"""
    relation: str
    file_path: str
    rows_loaded: int = 0
    columns: List[str] = []
    load_duration_seconds: float = 0
    started_at: datetime
    completed_at: Optional[datetime] = None
    file_hash: Optional[str] = None


@dataclass(frozen=True)
class RelationSet:
    """The six relations of one report run"""
    transactions: pl.DataFrame
    products: pl.DataFrame
    discounts: pl.DataFrame
    stores: pl.DataFrame
    customers: pl.DataFrame
    employees: pl.DataFrame

    def as_dict(self) -> Dict[str, pl.DataFrame]:
        return {
            "transactions": self.transactions,
            "products": self.products,
            "discounts": self.discounts,
            "stores": self.stores,
            "customers": self.customers,
            "employees": self.employees,
        }


class DatasetLoader:
    """
    Loader for the fashion-retail relations.

    Example:
        loader = DatasetLoader()
        relations, results = loader.load_all()
    """

    def __init__(
        self,
        data_settings: Optional[DataSourceSettings] = None,
        schemas: Optional[Mapping[str, RelationSchema]] = None,
    ):
        self.data_settings = data_settings or get_settings().data
        self.schemas = dict(schemas or RELATION_SCHEMAS)
        self.cleaner = DataCleaner()

    def _compute_file_hash(self, file_path: Path) -> str:
        """Compute MD5 hash of file for the audit record"""
        hash_md5 = hashlib.md5()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(4096), b""):
                hash_md5.update(chunk)
        return hash_md5.hexdigest()

    def _read_csv(self, config: RelationFileConfig) -> pl.DataFrame:
        return pl.read_csv(
            config.file_path,
            separator=config.delimiter,
            encoding=config.encoding,
            null_values=config.null_values,
            infer_schema_length=config.infer_schema_length,
            try_parse_dates=True,
        )

    def _read_json(self, config: RelationFileConfig) -> pl.DataFrame:
        return pl.read_json(config.file_path)

    def _read_jsonl(self, config: RelationFileConfig) -> pl.DataFrame:
        return pl.read_ndjson(config.file_path)

    def _read_parquet(self, config: RelationFileConfig) -> pl.DataFrame:
        return pl.read_parquet(config.file_path)

    def _read_file(self, config: RelationFileConfig) -> pl.DataFrame:
        """Read file based on format"""
        path = Path(config.file_path)
        file_format = config.file_format or FileFormat.from_path(path)
        readers = {
            FileFormat.CSV: self._read_csv,
            FileFormat.JSON: self._read_json,
            FileFormat.JSONL: self._read_jsonl,
            FileFormat.PARQUET: self._read_parquet,
        }
        try:
            return readers[file_format](config)
        except (pl.exceptions.PolarsError, OSError, UnicodeDecodeError) as e:
            raise LoadError(
                f"Failed to parse {config.relation} from {path}: {e}",
                details={"relation": config.relation, "file_path": str(path)},
            ) from e

    def load(self, config: RelationFileConfig) -> Tuple[pl.DataFrame, LoadResult]:
        """
        Load and clean a single relation.

        Args:
            config: File location and parsing options

        Returns:
            Cleaned DataFrame and its load audit record

        Raises:
            LoadError: file absent, unparsable, or not matching the schema
        """
        started_at = datetime.utcnow()
        path = Path(config.file_path)

        schema = self.schemas.get(config.relation)
        if schema is None:
            raise LoadError(
                f"Unknown relation: {config.relation}",
                details={"relation": config.relation},
            )

        if not path.is_file():
            raise LoadError(
                f"File not found for {config.relation}: {path}",
                details={"relation": config.relation, "file_path": str(path)},
            )

        logger.info("Loading relation", relation=config.relation, file_path=str(path))

        raw = self._read_file(config)
        df = self.cleaner.clean(raw, schema)

        completed_at = datetime.utcnow()
        result = LoadResult(
            relation=config.relation,
            file_path=str(path),
            rows_loaded=df.height,
            columns=df.columns,
            load_duration_seconds=(completed_at - started_at).total_seconds(),
            started_at=started_at,
            completed_at=completed_at,
            file_hash=self._compute_file_hash(path),
        )

        logger.info(
            "Relation loaded",
            relation=config.relation,
            rows=df.height,
            columns=df.width,
            duration=result.load_duration_seconds,
        )
        return df, result

    def load_all(
        self,
        source_dir: Optional[str] = None,
    ) -> Tuple[RelationSet, Dict[str, LoadResult]]:
        """
        Load every relation named in the data settings.

        Args:
            source_dir: Override the configured source directory

        Returns:
            The relation set and per-relation load results
        """
        forced_format = (
            FileFormat(self.data_settings.file_format)
            if self.data_settings.file_format
            else None
        )

        frames: Dict[str, pl.DataFrame] = {}
        results: Dict[str, LoadResult] = {}
        for relation, path in self.data_settings.relation_paths(source_dir).items():
            config = RelationFileConfig(
                relation=relation,
                file_path=path,
                file_format=forced_format,
            )
            frames[relation], results[relation] = self.load(config)

        return RelationSet(**frames), results


def load_relations(source_dir: Optional[str] = None) -> RelationSet:
    """Convenience function to load all relations with default settings"""
    relations, _ = DatasetLoader().load_all(source_dir)
    return relations
