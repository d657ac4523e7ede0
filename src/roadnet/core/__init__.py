"""
Core Module

Configuration, errors, geometry helpers and the segment data model.
Segment and growth are imported from their submodules directly since they
depend on the collision package, which in turn depends on this one.
"""

from .config import RoadNetworkConfig, DEFAULT_CONFIG, get_default_config
from .errors import RoadNetworkError, InvalidShapeType, UnknownBuildingType

__all__ = [
    'RoadNetworkConfig',
    'DEFAULT_CONFIG',
    'get_default_config',
    'RoadNetworkError',
    'InvalidShapeType',
    'UnknownBuildingType',
]
