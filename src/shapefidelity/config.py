"""
Configuration management for shape fidelity scoring.

Loads YAML configuration with defaults for every section. The scoring
functions never read configuration themselves; the batch and CLI layers
pass the relevant values in explicitly.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml

from shapefidelity.models import CircleThresholds, ThresholdBand


@dataclass
class CircleConfig:
    """Configuration for circle scoring."""
    difficulty_level: float = 50.0  # 0-100
    penalty_mode: bool = False
    deviation: list = field(default_factory=lambda: [0.05, 0.10, 0.20])
    smoothness: list = field(default_factory=lambda: [15.0, 30.0, 45.0])  # degrees
    completion: list = field(default_factory=lambda: [0.05, 0.10, 0.20])

    def thresholds(self):
        """Threshold bands as a CircleThresholds model."""
        def band(values):
            excellent, good, poor = values
            return ThresholdBand(excellent=excellent, good=good, poor=poor)

        return CircleThresholds(
            deviation=band(self.deviation),
            smoothness=band(self.smoothness),
            completion=band(self.completion),
        )


@dataclass
class TargetConfig:
    """Configuration for target shape generation."""
    canvas_width: float = 390.0
    canvas_height: float = 844.0
    size_ratio: float = 0.3
    bottom_inset: float = 70.0
    circle_padding: float = 100.0


@dataclass
class OutputConfig:
    """Configuration for batch reports."""
    round_digits: int = 2


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class ScoringConfig:
    """Complete configuration."""
    circle: CircleConfig = field(default_factory=CircleConfig)
    target: TargetConfig = field(default_factory=TargetConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


SECTIONS = ("circle", "target", "output", "tracing")


def load_config(config_path=None):
    """
    Load configuration from a YAML file.

    Falls back to defaults for any missing file, section or key. Unknown
    keys are ignored.
    """
    config = ScoringConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into the config dataclass."""
    for section_name in SECTIONS:
        values = yaml_data.get(section_name)
        if not isinstance(values, dict):
            continue
        section = getattr(config, section_name)
        for key, value in values.items():
            if hasattr(section, key):
                setattr(section, key, value)

    return config


def save_default_config(path):
    """Save default configuration to a YAML file for reference."""
    yaml_data = asdict(ScoringConfig())
    yaml_data["tracing"].pop("file_path")

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
