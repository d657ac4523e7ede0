"""
Spatial Operations Module

Bounding-box indexing used by collision resolution and consumer lookups.
"""

from .spatial_index import SpatialIndex, BoundingBoxEntry

__all__ = [
    'SpatialIndex',
    'BoundingBoxEntry',
]
