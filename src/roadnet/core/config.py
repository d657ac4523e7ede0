#!/usr/bin/env python3
"""
Configuration System for Road Network Generation

Centralized configuration for segment geometry, branching heuristics,
collision resolution, spatial indexing and path cost. All values are injected
constants; nothing here is computed during a run.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Tuple

logger = logging.getLogger(__name__)


@dataclass
class SegmentConfig:
    """Lengths and widths of generated segments (world units)."""
    default_segment_length: float = 300.0
    highway_segment_length: float = 400.0
    default_segment_width: float = 6.0
    highway_segment_width: float = 16.0


@dataclass
class BranchingConfig:
    """Global-goal heuristics for proposing new segments."""
    default_branch_probability: float = 0.4
    highway_branch_probability: float = 0.05
    highway_branch_population_threshold: float = 0.1
    normal_branch_population_threshold: float = 0.1
    normal_branch_time_delay_from_highway: int = 5
    branch_angle_deviation: float = 3.0  # degrees
    forward_angle_deviation: float = 15.0  # degrees


@dataclass
class ConstraintConfig:
    """Local-constraint tolerances."""
    road_snap_distance: float = 50.0
    minimum_intersection_deviation: float = 30.0  # degrees


@dataclass
class GenerationLimits:
    """Termination safeguard for the growth loop."""
    segment_count_limit: int = 2000


@dataclass
class SpatialConfig:
    """Spatial index region and node capacity."""
    region: Tuple[float, float, float, float] = (-20000.0, -20000.0, 40000.0, 40000.0)
    max_objects: int = 10


@dataclass
class TrafficConfig:
    """Speed and capacity figures used for path cost."""
    min_speed_proportion: float = 0.1
    highway_max_speed: float = 1200.0
    highway_capacity: int = 12
    default_max_speed: float = 800.0
    default_capacity: int = 6


@dataclass
class InteractionConfig:
    """Lookup ranges consumed by interactive front ends."""
    selection_range: float = 50.0
    default_pickup_range: float = 150.0


@dataclass
class BuildingConfig:
    """Building templates."""
    residential_diagonal: float = 80.0
    import_diagonal: float = 150.0
    import_probability: float = 0.4
    min_aspect_ratio: float = 0.5
    max_aspect_ratio: float = 2.0


@dataclass
class PopulationConfig:
    """Population heat map sampling."""
    heat_map_cell_size: float = 50.0


@dataclass
class PerformanceConfig:
    """Configuration for performance tracking."""
    enable_performance_tracking: bool = True
    max_history_size: int = 1000


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    log_level: str = "INFO"
    progress_log_interval: int = 500


@dataclass
class RoadNetworkConfig:
    """
    Master configuration for road network generation and path planning.

    Groups are plain dataclasses so callers can override a single value
    without restating the rest; the whole tree is validated on construction.
    """
    segments: SegmentConfig = field(default_factory=SegmentConfig)
    branching: BranchingConfig = field(default_factory=BranchingConfig)
    constraints: ConstraintConfig = field(default_factory=ConstraintConfig)
    limits: GenerationLimits = field(default_factory=GenerationLimits)
    spatial: SpatialConfig = field(default_factory=SpatialConfig)
    traffic: TrafficConfig = field(default_factory=TrafficConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    buildings: BuildingConfig = field(default_factory=BuildingConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_config()

    def _validate_config(self):
        """Validate configuration parameters."""
        if self.segments.default_segment_length <= 0 or self.segments.highway_segment_length <= 0:
            raise ValueError("segment lengths must be positive")
        if self.segments.default_segment_width <= 0 or self.segments.highway_segment_width <= 0:
            raise ValueError("segment widths must be positive")

        for name in ('default_branch_probability', 'highway_branch_probability'):
            value = getattr(self.branching, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be between 0 and 1")
        if self.branching.branch_angle_deviation <= 0 or self.branching.forward_angle_deviation <= 0:
            raise ValueError("angle deviations must be positive")

        if self.constraints.road_snap_distance < 0:
            raise ValueError("road_snap_distance must be non-negative")
        if not (0.0 <= self.constraints.minimum_intersection_deviation <= 90.0):
            raise ValueError("minimum_intersection_deviation must be between 0 and 90 degrees")

        if self.limits.segment_count_limit <= 0:
            raise ValueError("segment_count_limit must be positive")

        if len(self.spatial.region) != 4:
            raise ValueError("spatial region must be (x, y, width, height)")
        if self.spatial.region[2] <= 0 or self.spatial.region[3] <= 0:
            raise ValueError("spatial region must have positive width and height")
        if self.spatial.max_objects < 4:
            raise ValueError("max_objects must be at least 4")

        if not (0.0 < self.traffic.min_speed_proportion <= 1.0):
            raise ValueError("min_speed_proportion must be in (0, 1]")
        if self.traffic.highway_capacity <= 0 or self.traffic.default_capacity <= 0:
            raise ValueError("road capacities must be positive")

        if self.buildings.min_aspect_ratio <= 0 or self.buildings.min_aspect_ratio > self.buildings.max_aspect_ratio:
            raise ValueError("building aspect ratio range is invalid")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging.log_level.upper() not in valid_log_levels:
            raise ValueError(f"log_level must be one of {valid_log_levels}")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'RoadNetworkConfig':
        """
        Create configuration from a (possibly partial) nested dictionary.

        Missing groups and keys fall back to their defaults.
        """
        spatial_dict = dict(config_dict.get('spatial', {}))
        if 'region' in spatial_dict:
            spatial_dict['region'] = tuple(spatial_dict['region'])

        return cls(
            segments=SegmentConfig(**config_dict.get('segments', {})),
            branching=BranchingConfig(**config_dict.get('branching', {})),
            constraints=ConstraintConfig(**config_dict.get('constraints', {})),
            limits=GenerationLimits(**config_dict.get('limits', {})),
            spatial=SpatialConfig(**spatial_dict),
            traffic=TrafficConfig(**config_dict.get('traffic', {})),
            interaction=InteractionConfig(**config_dict.get('interaction', {})),
            buildings=BuildingConfig(**config_dict.get('buildings', {})),
            population=PopulationConfig(**config_dict.get('population', {})),
            performance=PerformanceConfig(**config_dict.get('performance', {})),
            logging=LoggingConfig(**config_dict.get('logging', {}))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain nested dictionary."""
        config_dict = asdict(self)
        config_dict['spatial']['region'] = list(self.spatial.region)
        return config_dict

    def validate_compatibility(self) -> List[str]:
        """Return warnings for settings that are legal but likely unintended."""
        warnings = []

        if self.constraints.road_snap_distance >= self.segments.default_segment_length / 2:
            warnings.append("road_snap_distance is large relative to segment length - most candidates will snap")

        if self.limits.segment_count_limit > 20000:
            warnings.append("Very high segment_count_limit may take a long time to generate")

        if self.branching.highway_branch_probability > self.branching.default_branch_probability:
            warnings.append("Highways branch more often than normal roads")

        return warnings

    def log_configuration_summary(self):
        """Log a summary of the current configuration."""
        logger.info("=== ROAD NETWORK CONFIGURATION SUMMARY ===")
        logger.info(f"Segments: default={self.segments.default_segment_length}, highway={self.segments.highway_segment_length}")
        logger.info(f"Branching: default_p={self.branching.default_branch_probability}, highway_p={self.branching.highway_branch_probability}")
        logger.info(f"Constraints: snap={self.constraints.road_snap_distance}, min_deviation={self.constraints.minimum_intersection_deviation}")
        logger.info(f"Limits: segment_count_limit={self.limits.segment_count_limit}")

        warnings = self.validate_compatibility()
        if warnings:
            logger.warning("Configuration warnings:")
            for warning in warnings:
                logger.warning(f"  - {warning}")


# Global default configuration instance
DEFAULT_CONFIG = RoadNetworkConfig()


def get_default_config() -> RoadNetworkConfig:
    """Get default configuration instance."""
    return DEFAULT_CONFIG


def create_config_from_file(config_path: str) -> RoadNetworkConfig:
    """
    Create configuration from YAML or JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        RoadNetworkConfig instance
    """
    import os
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if config_path.endswith('.yaml') or config_path.endswith('.yml'):
        import yaml
        with open(config_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
    elif config_path.endswith('.json'):
        import json
        with open(config_path, 'r') as f:
            config_dict = json.load(f)
    else:
        raise ValueError("Configuration file must be .yaml, .yml, or .json")

    return RoadNetworkConfig.from_dict(config_dict)


def save_config_to_file(config: RoadNetworkConfig, config_path: str):
    """
    Save configuration to YAML or JSON file.

    Args:
        config: Configuration to save
        config_path: Path to save configuration
    """
    config_dict = config.to_dict()

    if config_path.endswith('.yaml') or config_path.endswith('.yml'):
        import yaml
        with open(config_path, 'w') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False)
    elif config_path.endswith('.json'):
        import json
        with open(config_path, 'w') as f:
            json.dump(config_dict, f, indent=2)
    else:
        raise ValueError("Configuration file must be .yaml, .yml, or .json")
