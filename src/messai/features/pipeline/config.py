"""
Configuration for the batch pipeline.

Bundles the extraction, relevance, validation and quality settings with the
batch options, and loads them from dicts or JSON files.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import BaseModel, Field, ValidationError, validator

from ...core.config import DEFAULT_BATCH_LIMIT, DEFAULT_DELAY_SECONDS, MAX_BATCH_LIMIT
from ...core.settings import BackendSettings
from ..extraction.config import ExtractionConfig
from ..extraction.exceptions import ConfigurationError
from ..paperqual.config import PaperQualityConfig, RelevanceConfig, ValidationConfig


class PipelineConfig(BaseModel):
    """Complete configuration for batch runs."""
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    relevance: RelevanceConfig = Field(default_factory=RelevanceConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    quality: PaperQualityConfig = Field(default_factory=PaperQualityConfig)

    batch_limit: int = Field(
        default=DEFAULT_BATCH_LIMIT, ge=1,
        description="Papers processed per run when no limit is given"
    )
    delay_seconds: float = Field(
        default_factory=lambda: BackendSettings.get_delay_seconds(DEFAULT_DELAY_SECONDS), ge=0.0,
        description="Pause between papers; defaults to MESSAI_DELAY_SECONDS"
    )

    @validator('batch_limit')
    def validate_batch_limit(cls, v):
        if v > MAX_BATCH_LIMIT:
            raise ValueError(f'batch_limit cannot exceed {MAX_BATCH_LIMIT}')
        return v

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid pipeline configuration: {e}") from e

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "PipelineConfig":
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Could not read configuration file {path}: {e}", setting=str(path)) from e
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration file must contain a JSON object", setting=str(path))
        return cls.from_dict(data)


# Default configuration instance
DEFAULT_CONFIG = PipelineConfig()
