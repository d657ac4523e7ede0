"""Exception types for the road network package.

Only programming errors are modelled as exceptions. "No collision", "no snap
candidate" and "no path" are ordinary return values.
"""


class RoadNetworkError(Exception):
    """Base class for road network errors."""


class InvalidShapeType(RoadNetworkError, ValueError):
    """A collision shape was created or evaluated with an unknown variant."""

    def __init__(self, shape_type):
        self.shape_type = shape_type
        super().__init__(f"Invalid collision type: {shape_type!r}")


class UnknownBuildingType(RoadNetworkError, ValueError):
    """A building factory was asked for an unsupported type tag."""

    def __init__(self, building_type):
        self.building_type = building_type
        super().__init__(f"Unknown type of building: {building_type!r}")
