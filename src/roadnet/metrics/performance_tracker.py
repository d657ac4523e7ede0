#!/usr/bin/env python3
"""
Performance Tracker Module

Timing and counting for road network generation runs: time spent in local
constraints, global goals and spatial index queries, how often each
constraint rule fired, and per-step queue metrics. History lists are bounded
so long runs do not grow memory without limit.
"""

import time
import logging
from collections import Counter
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)


class PerformanceTracker:
    """
    Per-run performance tracking for the growth loop.

    Timings are grouped by operation name; each list keeps at most
    max_history_size recent entries.
    """

    def __init__(self, max_history_size: int = 1000):
        """
        Initialize performance tracker with configurable bounds.

        Args:
            max_history_size: Maximum number of entries to keep in history lists
        """
        if max_history_size <= 0:
            raise ValueError("max_history_size must be positive")
        self.max_history_size = max_history_size
        self.reset()

    def reset(self):
        """Reset all performance metrics."""
        self.start_time = time.perf_counter()
        self.operation_times: Dict[str, List[float]] = {}
        self.spatial_index_times: Dict[str, List[float]] = {}
        self.rule_counts: Counter = Counter()
        self.step_metrics: List[Dict[str, Any]] = []
        self.total_steps = 0
        self._current_ops: Dict[str, float] = {}

    def _append_bounded(self, history: List, value):
        history.append(value)
        if len(history) > self.max_history_size:
            del history[:len(history) - self.max_history_size]

    def start_operation(self, operation_name: str):
        """Start timing an operation."""
        self._current_ops[operation_name] = time.perf_counter()

    def end_operation(self, operation_name: str):
        """End timing an operation started with start_operation."""
        start_time = self._current_ops.pop(operation_name, None)
        if start_time is None:
            logger.debug(f"end_operation called for '{operation_name}' without a matching start")
            return
        self.record_operation_time(operation_name, time.perf_counter() - start_time)

    def record_operation_time(self, operation_name: str, duration: float):
        self._append_bounded(self.operation_times.setdefault(operation_name, []), duration)

    def record_spatial_index_time(self, operation: str, duration: float):
        """Record time spent in a spatial index operation."""
        self._append_bounded(self.spatial_index_times.setdefault(operation, []), duration)

    def record_rule(self, rule_name: Optional[str]):
        """Count which local-constraint rule resolved a candidate ('none' if no rule matched)."""
        self.rule_counts[rule_name or 'none'] += 1

    def record_step_metrics(self, step: int, segments_before: int, segments_after: int,
                            queue_size: int, proposed: int):
        """Record metrics for one accepted candidate."""
        self.total_steps += 1
        self._append_bounded(self.step_metrics, {
            'step': step,
            'elapsed': time.perf_counter() - self.start_time,
            'segments_before': segments_before,
            'segments_after': segments_after,
            'queue_size': queue_size,
            'proposed': proposed
        })

    @staticmethod
    def _timing_stats(times: List[float], total_time: float) -> Dict[str, float]:
        return {
            'count': len(times),
            'total_time': sum(times),
            'avg_time': sum(times) / len(times),
            'min_time': min(times),
            'max_time': max(times),
            'pct_total': sum(times) / total_time * 100 if total_time > 0 else 0.0
        }

    def get_summary_stats(self) -> Dict[str, Any]:
        """Get a summary of the run so far."""
        total_time = time.perf_counter() - self.start_time

        operation_stats = {
            name: self._timing_stats(times, total_time)
            for name, times in self.operation_times.items() if times
        }
        spatial_stats = {
            name: self._timing_stats(times, total_time)
            for name, times in self.spatial_index_times.items() if times
        }

        segments_added = sum(m['segments_after'] - m['segments_before'] for m in self.step_metrics)

        return {
            'total_time': total_time,
            'total_steps': self.total_steps,
            'segments_added': segments_added,
            'steps_per_second': self.total_steps / total_time if total_time > 0 else 0,
            'operation_stats': operation_stats,
            'spatial_index_stats': spatial_stats,
            'rule_counts': dict(self.rule_counts),
            'step_metrics': list(self.step_metrics)
        }

    def log_performance_summary(self):
        """Log a human-readable performance summary."""
        stats = self.get_summary_stats()

        logger.info("=== PERFORMANCE SUMMARY ===")
        logger.info(f"Total time: {stats['total_time']:.2f}s")
        logger.info(f"Total steps: {stats['total_steps']}")
        logger.info(f"Steps per second: {stats['steps_per_second']:.2f}")

        if stats['operation_stats']:
            logger.info("Top operations by time:")
            sorted_ops = sorted(stats['operation_stats'].items(),
                                key=lambda x: x[1]['total_time'], reverse=True)
            for op_name, op_stats in sorted_ops[:5]:
                logger.info(f"  {op_name}: {op_stats['total_time']:.3f}s ({op_stats['pct_total']:.1f}%)")

        if stats['rule_counts']:
            logger.info("Local constraint rules:")
            for rule_name, count in sorted(stats['rule_counts'].items()):
                logger.info(f"  {rule_name}: {count}")
