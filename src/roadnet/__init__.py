# Procedural road network generation
# Growth simulation, collision resolution and path planning

from .core.config import RoadNetworkConfig, get_default_config, create_config_from_file
from .core.errors import RoadNetworkError, InvalidShapeType, UnknownBuildingType
from .core.segment import Segment, SegmentMeta, SegmentEnd
from .core.growth import RoadNetworkGenerator, GenerationResult, PopulationService, generate
from .collision import CollisionShape, ShapeType
from .spatial import SpatialIndex, BoundingBoxEntry
from .pathing import PathLocation, PathPlanner, PathResult, find_path
from .buildings import Building, BuildingFactory, BuildingType

__version__ = "0.1.0"

__all__ = [
    'RoadNetworkConfig',
    'get_default_config',
    'create_config_from_file',
    'RoadNetworkError',
    'InvalidShapeType',
    'UnknownBuildingType',
    'Segment',
    'SegmentMeta',
    'SegmentEnd',
    'RoadNetworkGenerator',
    'GenerationResult',
    'PopulationService',
    'generate',
    'CollisionShape',
    'ShapeType',
    'SpatialIndex',
    'BoundingBoxEntry',
    'PathLocation',
    'PathPlanner',
    'PathResult',
    'find_path',
    'Building',
    'BuildingFactory',
    'BuildingType',
]
