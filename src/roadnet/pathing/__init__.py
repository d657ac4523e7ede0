"""
Path planning over generated road networks.
"""

from .path_planner import PathLocation, PathPlanner, PathResult, find_path

__all__ = [
    'PathLocation',
    'PathPlanner',
    'PathResult',
    'find_path',
]
