"""
Building entities and their factory.
"""

from .building import Building, BuildingFactory, BuildingType

__all__ = [
    'Building',
    'BuildingFactory',
    'BuildingType',
]
