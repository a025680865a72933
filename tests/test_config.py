"""
Tests for configuration management.
"""

import pytest
import tempfile
import yaml
from pathlib import Path
import sys

# Add the scheduler package to the path
sys.path.append(str(Path(__file__).parent.parent))

from cricket_scheduler.config import SchedulerConfig, ScoringWeights, load_config, save_config


def test_default_config():
    """Test the defaults match the documented penalty weights."""
    config = SchedulerConfig()

    assert config.formats == ["leather", "tape_ball"]
    assert config.umpires_per_knockout_match == 2
    assert config.weights.fairness == 50
    assert config.weights.day_clumping == 10
    assert config.weights.ground_clumping == 8
    assert config.weights.time_clumping == 8
    assert config.weights.day_load == 1
    assert config.points.win == 2
    assert config.points.tie == 1
    assert config.points.loss == 0


def test_config_validation():
    """Test configuration validation."""
    # Test empty formats
    with pytest.raises(ValueError, match="At least one match format"):
        SchedulerConfig(formats=[])

    # Test duplicate formats
    with pytest.raises(ValueError, match="Duplicate match formats"):
        SchedulerConfig(formats=["leather", "leather"])

    # Test invalid log level
    with pytest.raises(ValueError, match="Invalid log level"):
        SchedulerConfig(log_level="LOUD")

    # Test negative weight
    with pytest.raises(ValueError):
        ScoringWeights(day_clumping=-1)

    # Test umpire count out of range
    with pytest.raises(ValueError):
        SchedulerConfig(umpires_per_knockout_match=3)


def test_log_level_is_normalised():
    """Test log levels are accepted in any case."""
    assert SchedulerConfig(log_level="debug").log_level == "DEBUG"


def test_config_load_save():
    """Test loading and saving configuration."""
    config_data = {
        "formats": ["leather", "tape_ball", "t10"],
        "weights": {"day_clumping": 12, "day_load": 2},
        "points": {"win": 4, "tie": 2},
    }

    # Create temporary file
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config_data, f)
        temp_path = f.name

    save_path = temp_path.replace('.yaml', '_saved.yaml')

    try:
        # Load configuration
        loaded_config = load_config(temp_path)

        # Verify loaded config matches the file
        assert loaded_config.formats == config_data["formats"]
        assert loaded_config.weights.day_clumping == 12
        assert loaded_config.weights.ground_clumping == 8
        assert loaded_config.points.win == 4

        # Test saving configuration
        save_config(loaded_config, save_path)

        # Load saved configuration
        saved_config = load_config(save_path)
        assert saved_config == loaded_config

    finally:
        # Clean up
        import os
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        if os.path.exists(save_path):
            os.unlink(save_path)


def test_load_empty_config_file():
    """Test an empty YAML file gives the default configuration."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        temp_path = f.name

    try:
        assert load_config(temp_path) == SchedulerConfig()
    finally:
        import os
        os.unlink(temp_path)
