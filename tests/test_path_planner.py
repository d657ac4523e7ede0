#!/usr/bin/env python3
"""
Unit tests for the path planner.
"""

import math
import unittest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roadnet.core.config import GenerationLimits, RoadNetworkConfig
from roadnet.core.growth.growth_engine import generate
from roadnet.core.segment import Segment
from roadnet.pathing.path_planner import PathLocation, PathPlanner, PathResult, find_path


def link(backward_owner, forward_owner):
    backward_owner.links_f.append(forward_owner)
    forward_owner.links_b.append(backward_owner)


class TestPathLocation(unittest.TestCase):
    """Test cases for PathLocation validation."""

    def test_fraction_bounds(self):
        """Fractions outside [0, 1] are rejected."""
        segment = Segment((0, 0), (1, 0))
        PathLocation(segment, 0.0)
        PathLocation(segment, 1.0)
        with self.assertRaises(ValueError):
            PathLocation(segment, 1.5)
        with self.assertRaises(ValueError):
            PathLocation(segment, -0.1)


class TestPathPlannerChain(unittest.TestCase):
    """Test cases on a straight chain A-B-C of equal cost."""

    def setUp(self):
        """Set up test fixtures."""
        self.a = Segment((0, 0), (100, 0))
        self.b = Segment((100, 0), (200, 0))
        self.c = Segment((200, 0), (300, 0))
        link(self.a, self.b)
        link(self.b, self.c)
        self.isolated = Segment((1000, 1000), (1100, 1000))
        self.planner = PathPlanner([self.a, self.b, self.c, self.isolated])
        self.cost = self.a.cost()

    def test_segment_cost(self):
        """Each chain segment costs length over speed."""
        self.assertAlmostEqual(self.cost, 0.125)
        self.assertAlmostEqual(self.b.cost(), self.cost)

    def test_full_chain(self):
        """Start of A to end of C crosses all three segments in full."""
        result = self.planner.shortest_path(PathLocation(self.a, 0.0), PathLocation(self.c, 1.0))
        self.assertEqual(result.segments, [self.a, self.b, self.c])
        self.assertAlmostEqual(result.cost, 3 * self.cost)
        self.assertTrue(result.found)

    def test_reverse_chain(self):
        """Travelling the chain backwards costs the same."""
        result = self.planner.shortest_path(PathLocation(self.c, 1.0), PathLocation(self.a, 0.0))
        self.assertEqual(result.segments, [self.c, self.b, self.a])
        self.assertAlmostEqual(result.cost, 3 * self.cost)

    def test_partial_end_segment(self):
        """Stopping at the start of C costs nothing on C."""
        result = self.planner.shortest_path(PathLocation(self.a, 0.0), PathLocation(self.c, 0.0))
        self.assertEqual(result.segments, [self.a, self.b, self.c])
        self.assertAlmostEqual(result.cost, 2 * self.cost)

    def test_same_segment(self):
        """Queries within one segment bypass the search."""
        result = self.planner.shortest_path(PathLocation(self.a, 0.5), PathLocation(self.a, 1.0))
        self.assertEqual(result.segments, [self.a])
        self.assertAlmostEqual(result.cost, 0.5 * self.cost)

    def test_unreachable(self):
        """Disconnected targets give an empty result with infinite cost."""
        result = self.planner.shortest_path(PathLocation(self.a, 0.0), PathLocation(self.isolated, 0.5))
        self.assertEqual(result, PathResult([], math.inf))
        self.assertFalse(result.found)
        self.assertEqual(self.planner.find_path(PathLocation(self.a, 0.0), PathLocation(self.isolated, 0.5)), [])

    def test_unknown_segment(self):
        """Locations on segments outside the network are rejected."""
        stranger = Segment((0, 0), (1, 1))
        with self.assertRaises(ValueError):
            self.planner.shortest_path(PathLocation(stranger, 0.0), PathLocation(self.a, 0.0))

    def test_congestion_raises_cost(self):
        """Users on a segment slow traffic and raise the path cost."""
        for user in range(4):
            self.b.add_user(user)
        result = self.planner.shortest_path(PathLocation(self.a, 0.0), PathLocation(self.c, 1.0))
        self.assertAlmostEqual(result.cost, 2 * self.cost + 2 * self.cost)

    def test_module_level_find_path(self):
        """Convenience wrapper builds a planner and returns segments."""
        path = find_path([self.a, self.b, self.c], PathLocation(self.a, 0.0), PathLocation(self.c, 1.0))
        self.assertEqual(path, [self.a, self.b, self.c])


class TestPathPlannerDetour(unittest.TestCase):
    """Cheaper routes win over fewer segments."""

    def test_congested_segment_is_avoided(self):
        """A longer but faster route is preferred."""
        start = Segment((0, 0), (100, 0))
        slow = Segment((100, 0), (200, 0))
        end = Segment((200, 0), (300, 0))
        link(start, slow)
        link(slow, end)
        for user in range(20):
            slow.add_user(user)

        up = Segment((100, 0), (150, 50))
        down = Segment((150, 50), (200, 0))
        link(start, up)
        link(up, down)
        link(down, end)
        # junction mirrors: the detour shares ends with the slow segment
        slow.links_b.append(up)
        up.links_b.append(slow)
        slow.links_f.append(down)
        down.links_f.append(slow)

        result = PathPlanner([start, slow, end, up, down]).shortest_path(
            PathLocation(start, 0.0), PathLocation(end, 1.0)
        )
        self.assertEqual(result.segments, [start, up, down, end])


class TestPathPlannerGenerated(unittest.TestCase):
    """Test cases on a generated network."""

    def test_paths_follow_links(self):
        """Consecutive path segments are neighbours."""
        config = RoadNetworkConfig(limits=GenerationLimits(segment_count_limit=150))
        result = generate(3, config)
        planner = PathPlanner(result.segments)
        start = result.segments[0]

        found = 0
        for target in result.segments[1::10]:
            path = planner.shortest_path(PathLocation(start, 0.5), PathLocation(target, 0.5))
            if not path.found:
                continue
            found += 1
            self.assertIs(path.segments[0], start)
            self.assertIs(path.segments[-1], target)
            for current, following in zip(path.segments, path.segments[1:]):
                self.assertIn(following, current.neighbours())
            self.assertGreaterEqual(path.cost, 0)

        self.assertGreater(found, 0)


if __name__ == '__main__':
    unittest.main()
