"""
Runtime module - processing context, pipeline, extraction and error reporting.
"""

from __future__ import annotations

from .context import ProcessingContext
from .error_builder import build_error_response
from .extractor import ResultExtractor
from .pipeline import FieldSelectionPipeline, action_return_type, process_fields

__all__ = [
    "ProcessingContext",
    "FieldSelectionPipeline",
    "action_return_type",
    "process_fields",
    "ResultExtractor",
    "build_error_response",
]
