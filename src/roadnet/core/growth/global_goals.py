#!/usr/bin/env python3
"""
Global Goals

Propose successor candidates for an accepted segment. Highways follow
population: they continue along whichever of a straight or a randomly
deviated continuation samples more people, and occasionally fork. Normal
roads continue only into populated areas. Both spawn side branches where
the straight continuation is populated enough.
"""

import logging
import random
from typing import List, Optional

from ..config import RoadNetworkConfig
from ..geometry_utils import random_angle
from ..segment import Segment, SegmentMeta
from .contracts import GrowthCandidate, LinkSetup
from .population import PopulationService

logger = logging.getLogger(__name__)


def generate_branches(previous: Segment,
                      rng: random.Random,
                      population: PopulationService,
                      config: RoadNetworkConfig) -> List[GrowthCandidate]:
    """
    Propose the candidates growing from the end of a segment.

    Args:
        previous: Accepted segment to grow from
        rng: Run's random source
        population: Population density service
        config: Generation configuration

    Returns:
        Candidates with delays relative to previous (the caller adds
        previous.time_delay + 1) and a pending branch link setup
    """
    if previous.meta.severed:
        return []

    branching = config.branching
    previous_dir = previous.direction()

    def template(direction: float, segment_length: float, time_delay: int, meta: Optional[SegmentMeta]) -> Segment:
        return Segment.using_direction(previous.end, direction, segment_length, time_delay, meta, config)

    def continuation(direction: float) -> Segment:
        return template(direction, previous.length(), 0, previous.meta)

    def side_branch(direction: float) -> Segment:
        time_delay = branching.normal_branch_time_delay_from_highway if previous.meta.highway else 0
        return template(direction, config.segments.default_segment_length, time_delay, None)

    new_branches: List[Segment] = []

    continue_straight = continuation(previous_dir)
    straight_pop = population.pop_on_road(continue_straight)

    if previous.meta.highway:
        random_straight = continuation(previous_dir + random_angle(rng, branching.forward_angle_deviation))
        random_pop = population.pop_on_road(random_straight)

        if random_pop > straight_pop:
            new_branches.append(random_straight)
            road_pop = random_pop
        else:
            new_branches.append(continue_straight)
            road_pop = straight_pop

        if road_pop > branching.highway_branch_population_threshold:
            if rng.random() < branching.highway_branch_probability:
                new_branches.append(continuation(previous_dir - 90 + random_angle(rng, branching.branch_angle_deviation)))
            elif rng.random() < branching.highway_branch_probability:
                new_branches.append(continuation(previous_dir + 90 + random_angle(rng, branching.branch_angle_deviation)))

    elif straight_pop > branching.normal_branch_population_threshold:
        new_branches.append(continue_straight)

    if straight_pop > branching.normal_branch_population_threshold:
        if rng.random() < branching.default_branch_probability:
            new_branches.append(side_branch(previous_dir - 90 + random_angle(rng, branching.branch_angle_deviation)))
        elif rng.random() < branching.default_branch_probability:
            new_branches.append(side_branch(previous_dir + 90 + random_angle(rng, branching.branch_angle_deviation)))

    return [GrowthCandidate(branch, LinkSetup.BRANCH, previous) for branch in new_branches]
