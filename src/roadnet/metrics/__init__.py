"""
Performance Metrics Module

Timing and rule counting for road network generation runs.
"""

from .performance_tracker import PerformanceTracker

__all__ = [
    'PerformanceTracker',
]
