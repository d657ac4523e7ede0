"""
Collision Module

Typed collision shapes and pairwise overlap tests.
"""

from .collision import CollisionShape, ShapeType, rect_rect_intersection, rect_circle_collision

__all__ = [
    'CollisionShape',
    'ShapeType',
    'rect_rect_intersection',
    'rect_circle_collision',
]
