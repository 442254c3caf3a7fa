"""
Data Ingestion Module
"""
from .loader import (
    DatasetLoader,
    FileFormat,
    LoadResult,
    RelationFileConfig,
    RelationSet,
    load_relations,
)

__all__ = [
    "DatasetLoader",
    "FileFormat",
    "LoadResult",
    "RelationFileConfig",
    "RelationSet",
    "load_relations",
]
