"""
Configuration management for the cricket fixture scheduler.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List


class ScoringWeights(BaseModel):
    """Penalty weights used when scoring a candidate slot."""
    fairness: int = Field(default=50, ge=0, description="Penalty per unit of round-robin progress lead")
    day_clumping: int = Field(default=10, ge=0, description="Penalty per existing match a team has on the date")
    ground_clumping: int = Field(default=8, ge=0, description="Penalty per existing match a team has on the ground")
    time_clumping: int = Field(default=8, ge=0, description="Penalty per existing match a team has at the start time")
    day_load: int = Field(default=1, ge=0, description="Penalty per occupied slot on the date")
    ratio_resolution: int = Field(default=100, ge=1, description="Buckets a progress ratio is floored into")


class PointsConfig(BaseModel):
    """Points awarded per result in the group table."""
    win: int = Field(default=2, ge=0)
    tie: int = Field(default=1, ge=0)
    loss: int = Field(default=0, ge=0)


class SchedulerConfig(BaseModel):
    """Main configuration for the scheduler."""
    formats: List[str] = Field(
        default=["leather", "tape_ball"],
        description="Match formats a ground can be set up for"
    )
    umpires_per_knockout_match: int = Field(
        default=2, ge=1, le=2, description="Umpiring teams assigned to each knockout match"
    )
    log_level: str = Field(default="INFO", description="Logging level for the CLI")

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    points: PointsConfig = Field(default_factory=PointsConfig)

    @field_validator('formats')
    @classmethod
    def validate_formats(cls, v):
        if not v:
            raise ValueError("At least one match format is required")
        if len(set(v)) != len(v):
            raise ValueError(f"Duplicate match formats: {v}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        level = v.upper()
        if level not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return level


def load_config(config_path: str) -> SchedulerConfig:
    """Load configuration from YAML file."""
    import yaml

    with open(config_path, 'r') as f:
        config_data = yaml.safe_load(f) or {}

    return SchedulerConfig(**config_data)


def save_config(config: SchedulerConfig, config_path: str) -> None:
    """Save configuration to YAML file."""
    import yaml

    with open(config_path, 'w') as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, indent=2)
