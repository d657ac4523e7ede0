#!/usr/bin/env python3
"""
Building Entities

Rectangular buildings described by a centre, a facing direction, a
half-diagonal and an aspect ratio. Placement around roads is left to
consumers; this module only builds the entities and their colliders.
"""

import logging
import random
from enum import Enum
from typing import List, Optional, Union

from ..collision.collision import CollisionShape, ShapeType
from ..core.config import RoadNetworkConfig, get_default_config
from ..core.errors import UnknownBuildingType
from ..core.geometry_utils import Vector2, atan_degrees, cos_degrees, random_range, sin_degrees

logger = logging.getLogger(__name__)


class BuildingType(Enum):
    RESIDENTIAL = "residential"
    IMPORT = "import"


class Building:
    """
    A rectangular building with a RECT collider.

    Moving or rotating the building regenerates its corners and updates the
    collider, so cached collision boxes follow.
    """

    def __init__(self, center: Vector2, direction: float, diagonal: float,
                 building_type: BuildingType, aspect_ratio: float = 1.0):
        self._center = (float(center[0]), float(center[1]))
        self._direction = direction
        self.diagonal = diagonal
        self.building_type = building_type
        self.aspect_ratio = aspect_ratio
        # degrees either side of the facing direction that give the aspect ratio
        self.aspect_degree = atan_degrees(aspect_ratio)

        self.corners = self._generate_corners()
        self.collider = CollisionShape(self, ShapeType.RECT, corners=self.corners)

    def _corner(self, angle: float) -> Vector2:
        return (
            self._center[0] + self.diagonal * sin_degrees(angle + self._direction),
            self._center[1] + self.diagonal * cos_degrees(angle + self._direction)
        )

    def _generate_corners(self) -> List[Vector2]:
        return [
            self._corner(self.aspect_degree),
            self._corner(-self.aspect_degree),
            self._corner(180 + self.aspect_degree),
            self._corner(180 - self.aspect_degree)
        ]

    def _refresh(self):
        self.corners = self._generate_corners()
        self.collider.update(corners=self.corners)

    @property
    def center(self) -> Vector2:
        return self._center

    @center.setter
    def center(self, value: Vector2):
        self._center = (float(value[0]), float(value[1]))
        self._refresh()

    @property
    def direction(self) -> float:
        return self._direction

    @direction.setter
    def direction(self, value: float):
        self._direction = value
        self._refresh()

    def __repr__(self):
        return f"Building({self.building_type.value}, center=({self._center[0]:.1f}, {self._center[1]:.1f}))"


class BuildingFactory:
    """Creates template buildings at the origin, facing +y."""

    def __init__(self, rng: Optional[random.Random] = None, config: Optional[RoadNetworkConfig] = None):
        self.rng = rng or random.Random()
        self.config = config or get_default_config()

    def by_type(self, building_type: Union[BuildingType, str]) -> Building:
        """
        Create a building of the given type with a random aspect ratio.

        Raises:
            UnknownBuildingType: If the type is not a BuildingType
        """
        try:
            building_type = BuildingType(building_type)
        except ValueError:
            raise UnknownBuildingType(building_type) from None

        buildings_config = self.config.buildings
        if building_type is BuildingType.RESIDENTIAL:
            diagonal = buildings_config.residential_diagonal
        else:
            diagonal = buildings_config.import_diagonal

        aspect_ratio = random_range(self.rng, buildings_config.min_aspect_ratio, buildings_config.max_aspect_ratio)
        return Building((0.0, 0.0), 0.0, diagonal, building_type, aspect_ratio)

    def from_probability(self) -> Building:
        """Import building with the configured probability, residential otherwise."""
        if self.rng.random() < self.config.buildings.import_probability:
            return self.by_type(BuildingType.IMPORT)
        return self.by_type(BuildingType.RESIDENTIAL)
