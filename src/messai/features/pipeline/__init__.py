"""
Batch pipeline for MESSAI.

Runs extraction, validation, relevance and quality scoring over the stored
papers.
"""

from .config import DEFAULT_CONFIG, PipelineConfig
from .runner import BatchRunner, BatchSummary

__all__ = [
    'DEFAULT_CONFIG',
    'PipelineConfig',
    'BatchRunner',
    'BatchSummary',
]
