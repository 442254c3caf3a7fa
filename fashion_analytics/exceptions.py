"""
Pipeline error taxonomy.

Every error raised here is fatal to a report run: the pipeline logs it and
re-raises, no partial report is produced.
"""

from typing import Any, Dict, Optional


class AnalysisError(Exception):
    """Base class for report pipeline failures"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LoadError(AnalysisError):
    """A relation file is missing, unreadable, or does not match its schema"""


class JoinError(AnalysisError):
    """Join keys cannot be matched without duplicating rows"""


class InsufficientDataError(AnalysisError):
    """A group has too few observations for the requested statistic"""


class SingularDesignError(AnalysisError):
    """Regression design matrix is not of full column rank"""
