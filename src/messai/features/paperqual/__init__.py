"""
Paper quality module for MESSAI.

Scores papers for microbial relevance and bibliographic quality, validates
extracted parameters against physical rules, and finds duplicate records.
"""

from .config import PaperQualityConfig, RelevanceConfig, ValidationConfig
from .duplicates import DuplicateGroup, find_duplicates
from .quality import QualityScore, score_paper_quality
from .relevance import Recommendation, RelevanceScore, score_relevance
from .reporting import PaperQualityReporter
from .validation import ParameterValidator, ValidationResult, validate

__all__ = [
    'PaperQualityConfig',
    'RelevanceConfig',
    'ValidationConfig',
    'DuplicateGroup',
    'find_duplicates',
    'QualityScore',
    'score_paper_quality',
    'Recommendation',
    'RelevanceScore',
    'score_relevance',
    'PaperQualityReporter',
    'ParameterValidator',
    'ValidationResult',
    'validate',
]
