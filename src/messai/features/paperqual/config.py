"""
Configuration models for paper relevance, validation and quality scoring.

Uses Pydantic for validation and type safety.
"""

from typing import Dict

from pydantic import BaseModel, Field, validator


class RelevanceConfig(BaseModel):
    """Weights and thresholds for the microbial relevance score."""
    microbial_weight: float = Field(default=15.0, ge=0.0, description="Points per distinct microbial keyword")
    algae_weight: float = Field(default=20.0, ge=0.0, description="Points per distinct algae keyword")
    system_score: float = Field(default=50.0, ge=0.0, le=100.0, description="Score when a system acronym is present")
    density_scale: float = Field(default=1000.0, ge=0.0, description="Keyword density multiplier")

    microbial_share: float = Field(default=0.4, ge=0.0, le=1.0)
    algae_share: float = Field(default=0.3, ge=0.0, le=1.0)
    system_share: float = Field(default=0.2, ge=0.0, le=1.0)
    density_share: float = Field(default=0.1, ge=0.0, le=1.0)

    exclusion_penalty_per_match: float = Field(default=25.0, ge=0.0)
    exclusion_penalty_cap: float = Field(default=50.0, ge=0.0, le=100.0)

    keep_threshold: float = Field(default=30.0, ge=0.0, le=100.0, description="Overall score at or above which papers are kept")
    remove_threshold: float = Field(default=10.0, ge=0.0, le=100.0, description="Overall score below which papers are removed")

    @validator('remove_threshold')
    def validate_remove_threshold(cls, v, values):
        keep = values.get('keep_threshold')
        if keep is not None and v > keep:
            raise ValueError('remove_threshold cannot exceed keep_threshold')
        return v


class ValidationConfig(BaseModel):
    """Penalties and tolerances for cross-parameter validation."""
    violation_penalties: Dict[str, float] = Field(
        default_factory=lambda: {"critical": 0.3, "major": 0.2, "minor": 0.1},
        description="Consistency penalty per violation severity"
    )
    warning_penalties: Dict[str, float] = Field(
        default_factory=lambda: {"high": 0.15, "medium": 0.1, "low": 0.05},
        description="Consistency penalty per warning impact"
    )
    critical_plausibility_penalty: float = Field(default=0.4, ge=0.0, le=1.0)
    plausibility_penalty: float = Field(default=0.2, ge=0.0, le=1.0)

    ohms_law_tolerance: float = Field(default=0.3, gt=0.0, le=1.0)
    power_tolerance: float = Field(default=0.5, gt=0.0, le=1.0)
    efficiency_tolerance: float = Field(default=0.3, gt=0.0, le=1.0)
    max_biofilm_spacing_ratio: float = Field(default=0.5, gt=0.0, le=1.0)
    organism_temperature_tolerance: float = Field(default=10.0, ge=0.0, description="Degrees from optimum")

    @validator('violation_penalties')
    def validate_violation_penalties(cls, v):
        allowed = {'critical', 'major', 'minor'}
        if set(v) != allowed:
            raise ValueError(f'violation_penalties must define exactly {sorted(allowed)}')
        if any(not 0 <= penalty <= 1 for penalty in v.values()):
            raise ValueError('violation penalties must be between 0 and 1')
        return v

    @validator('warning_penalties')
    def validate_warning_penalties(cls, v):
        allowed = {'high', 'medium', 'low'}
        if set(v) != allowed:
            raise ValueError(f'warning_penalties must define exactly {sorted(allowed)}')
        if any(not 0 <= penalty <= 1 for penalty in v.values()):
            raise ValueError('warning penalties must be between 0 and 1')
        return v


class PaperQualityConfig(BaseModel):
    """Settings for the bibliographic quality score."""
    enhancement_threshold: float = Field(
        default=70.0, ge=0.0, le=100.0,
        description="Overall score below which a paper needs enhancement"
    )
    max_recommendations: int = Field(
        default=2, ge=0,
        description="More recommendations than this also flags enhancement"
    )
    low_relevance_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
