#!/usr/bin/env python3
"""
Road Network Growth Engine

Grows a road network from two highway segments at the origin. Candidates
wait in a priority queue keyed by time delay; each popped candidate is
resolved against placed segments (local constraints), added to the network
and asked for successors (global goals). Growth stops when the queue empties
or the segment ceiling is reached.
"""

import heapq
import itertools
import logging
import random
from typing import List, Optional, Tuple

from ..config import RoadNetworkConfig, get_default_config
from ..segment import Segment, SegmentMeta
from ...metrics.performance_tracker import PerformanceTracker
from ...spatial.spatial_index import SpatialIndex
from .contracts import DebugAnnotations, GenerationResult, GrowthCandidate, LinkSetup
from .global_goals import generate_branches
from .local_constraints import apply_local_constraints, find_constraint_match
from .population import PopulationService

logger = logging.getLogger(__name__)

QueueEntry = Tuple[int, int, GrowthCandidate]


class RoadNetworkGenerator:
    """
    Runs the growth simulation for a seed.

    Each call to generate() builds a fresh segment list, spatial index and
    population service; results of earlier runs are never touched.
    """

    def __init__(self, config: Optional[RoadNetworkConfig] = None):
        """
        Initialize the generator.

        Args:
            config: Configuration instance (uses default if None)
        """
        self.config = config or get_default_config()
        logger.info(f"RoadNetworkGenerator initialized with segment limit {self.config.limits.segment_count_limit}")

    def _bootstrap(self) -> List[GrowthCandidate]:
        """Two highway segments leaving the origin in opposite directions, linked to each other."""
        highway_length = self.config.segments.highway_segment_length

        root = Segment((0.0, 0.0), (highway_length, 0.0), 0, SegmentMeta(highway=True), self.config)
        opposite = Segment.from_existing(root)
        opposite.end = (root.start[0] - highway_length, opposite.end[1])

        opposite.links_b.append(root)
        root.links_b.append(opposite)

        return [GrowthCandidate(root), GrowthCandidate(opposite)]

    def generate(self, seed: int) -> GenerationResult:
        """
        Grow a complete network.

        Args:
            seed: Seed for the random source and population service

        Returns:
            GenerationResult with ids assigned in list order
        """
        config = self.config
        segment_limit = config.limits.segment_count_limit
        progress_interval = config.logging.progress_log_interval

        rng = random.Random(seed)
        population = PopulationService(seed)
        segments: List[Segment] = []
        spatial_index = SpatialIndex(config.spatial.region, config.spatial.max_objects)
        debug = DebugAnnotations()

        tracker = None
        if config.performance.enable_performance_tracking:
            tracker = PerformanceTracker(max_history_size=config.performance.max_history_size)

        queue: List[QueueEntry] = []
        counter = itertools.count()

        def enqueue(candidate: GrowthCandidate):
            # counter keeps pops first-in first-out among equal delays
            heapq.heappush(queue, (candidate.time_delay, next(counter), candidate))

        for candidate in self._bootstrap():
            enqueue(candidate)

        logger.info(f"Generating road network with seed {seed}")

        step = 0
        while queue and len(segments) < segment_limit:
            _, _, candidate = heapq.heappop(queue)
            segment = candidate.segment

            if tracker is not None:
                tracker.start_operation("local_constraints")
            match = find_constraint_match(segment, spatial_index, config, tracker)

            slots_needed = 2 if match is not None and match.requires_split else 1
            if len(segments) + slots_needed > segment_limit:
                logger.debug(f"Candidate needs {slots_needed} slots with {len(segments)}/{segment_limit} used, stopping")
                if tracker is not None:
                    tracker.end_operation("local_constraints")
                break

            segments_before = len(segments)
            accepted = apply_local_constraints(segment, match, segments, spatial_index, debug, config)
            if tracker is not None:
                tracker.end_operation("local_constraints")
                tracker.record_rule(match.kind.name.lower() if match is not None else None)

            if not accepted:
                continue

            candidate.setup_links()
            segment.add_to(segments, spatial_index)

            if tracker is not None:
                tracker.start_operation("global_goals")
            proposals = generate_branches(segment, rng, population, config)
            for proposal in proposals:
                proposal.segment.time_delay = segment.time_delay + 1 + proposal.segment.time_delay
                enqueue(proposal)
            if tracker is not None:
                tracker.end_operation("global_goals")
                tracker.record_step_metrics(step, segments_before, len(segments), len(queue), len(proposals))

            step += 1
            if progress_interval > 0 and step % progress_interval == 0:
                logger.info(f"Step {step}: {len(segments)} segments, {len(queue)} candidates queued")

        for segment_id, segment in enumerate(segments):
            segment.id = segment_id

        logger.info(f"{len(segments)} segments generated")
        logger.debug(f"Debug annotations: {debug.counts()}")

        if tracker is not None:
            tracker.log_performance_summary()

        return GenerationResult(
            segments=segments,
            spatial_index=spatial_index,
            population=population,
            debug_annotations=debug,
            seed=seed,
            performance=tracker,
            config=config
        )


def generate(seed: int, config: Optional[RoadNetworkConfig] = None) -> GenerationResult:
    """Generate a road network for a seed with the given (or default) configuration."""
    return RoadNetworkGenerator(config).generate(seed)
