"""
Configuration model for parameter extraction.

Uses Pydantic for validation and type safety.
"""

from typing import List

from pydantic import BaseModel, Field, validator

from ...core.config import MODEL_VERSION
from .patterns import CATEGORY_ORDER


class ExtractionConfig(BaseModel):
    """Settings for the paper extractor."""
    enabled_categories: List[str] = Field(
        default_factory=lambda: list(CATEGORY_ORDER),
        description="Categories to extract, in output order"
    )
    max_list_items: int = Field(
        default=5, ge=1, le=50,
        description="Maximum entries kept for list fields such as organisms"
    )
    text_separator: str = Field(
        default=" ",
        description="Separator placed between title and abstract"
    )
    model_version: str = Field(
        default=MODEL_VERSION,
        description="Version tag written alongside stored extraction results"
    )

    @validator('enabled_categories')
    def validate_categories(cls, v):
        unknown = [category for category in v if category not in CATEGORY_ORDER]
        if unknown:
            raise ValueError(f'Unknown categories {unknown}; must be among {list(CATEGORY_ORDER)}')
        return v

    @validator('model_version')
    def validate_model_version(cls, v):
        if not v or not v.strip():
            raise ValueError('model_version cannot be empty')
        return v.strip()
