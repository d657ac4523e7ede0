#!/usr/bin/env python3
"""
Unit tests for local constraint resolution.
"""

import unittest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roadnet.core.config import RoadNetworkConfig
from roadnet.core.growth.contracts import DebugAnnotations
from roadnet.core.growth.local_constraints import (
    ConstraintKind, apply_local_constraints, find_constraint_match
)
from roadnet.core.segment import Segment
from roadnet.spatial.spatial_index import SpatialIndex


class LocalConstraintTestCase(unittest.TestCase):
    """Shared fixtures: an empty network with default configuration."""

    def setUp(self):
        """Set up test fixtures."""
        self.config = RoadNetworkConfig()
        self.segments = []
        self.index = SpatialIndex()
        self.debug = DebugAnnotations()

    def place(self, start, end):
        segment = Segment(start, end, config=self.config)
        segment.add_to(self.segments, self.index)
        return segment

    def resolve(self, candidate):
        match = find_constraint_match(candidate, self.index, self.config)
        accepted = apply_local_constraints(candidate, match, self.segments, self.index, self.debug, self.config)
        return match, accepted

    def assertPointEqual(self, actual, expected):
        self.assertAlmostEqual(actual[0], expected[0])
        self.assertAlmostEqual(actual[1], expected[1])


class TestNoMatch(LocalConstraintTestCase):
    """Candidates away from existing segments."""

    def test_no_match_accepts_unchanged(self):
        """Nothing nearby leaves the candidate untouched."""
        self.place((0, 0), (100, 0))
        candidate = Segment((0, 500), (0, 800))

        match, accepted = self.resolve(candidate)

        self.assertIsNone(match)
        self.assertTrue(accepted)
        self.assertEqual(candidate.end, (0, 800))
        self.assertFalse(candidate.meta.severed)
        self.assertEqual(len(self.segments), 1)


class TestCrossing(LocalConstraintTestCase):
    """Candidates crossing an existing segment."""

    def test_crossing_splits_and_truncates(self):
        """A perpendicular crossing becomes a four-way junction."""
        existing = self.place((0, -100), (0, 100))
        candidate = Segment((-100, 0), (100, 0))

        match, accepted = self.resolve(candidate)

        self.assertIs(match.kind, ConstraintKind.CROSSING)
        self.assertTrue(match.requires_split)
        self.assertAlmostEqual(match.rank, 0.5)
        self.assertTrue(accepted)

        self.assertPointEqual(candidate.end, (0, 0))
        self.assertTrue(candidate.meta.severed)
        self.assertEqual(len(self.segments), 2)
        split_part = self.segments[1]
        self.assertPointEqual(split_part.end, (0, 0))
        self.assertPointEqual(existing.start, (0, 0))
        self.assertEqual(candidate.links_f, [split_part, existing])
        self.assertEqual(len(self.debug.intersections), 1)

    def test_shallow_crossing_is_skipped(self):
        """Near-parallel crossings leave the candidate as proposed."""
        self.place((0, -100), (0, 100))
        candidate = Segment((-10, -100), (10, 100))

        match, accepted = self.resolve(candidate)

        self.assertIs(match.kind, ConstraintKind.CROSSING)
        self.assertFalse(match.requires_split)
        self.assertTrue(accepted)
        self.assertEqual(candidate.end, (10, 100))
        self.assertFalse(candidate.meta.severed)
        self.assertEqual(len(self.segments), 1)
        self.assertEqual(self.debug.intersections, [])

    def test_nearest_crossing_wins(self):
        """The crossing closest to the candidate's start is chosen."""
        self.place((50, -100), (50, 100))
        near = self.place((-50, -100), (-50, 100))
        candidate = Segment((-100, 0), (100, 0))

        match = find_constraint_match(candidate, self.index, self.config)

        self.assertIs(match.other, near)
        self.assertAlmostEqual(match.rank, 0.25)
        self.assertPointEqual(match.point, (-50, 0))


class TestEndpointSnap(LocalConstraintTestCase):
    """Candidates ending near an existing segment's end."""

    def test_snap_joins_junction(self):
        """Snapping links the candidate to every segment at the junction."""
        existing = self.place((0, 0), (100, 0))
        following = self.place((100, 0), (200, 0))
        existing.links_f.append(following)
        following.links_b.append(existing)
        candidate = Segment((130, -290), (120, -10))

        match, accepted = self.resolve(candidate)

        self.assertIs(match.kind, ConstraintKind.ENDPOINT_SNAP)
        self.assertIs(match.other, existing)
        self.assertFalse(match.requires_split)
        self.assertTrue(accepted)

        self.assertPointEqual(candidate.end, (100, 0))
        self.assertTrue(candidate.meta.severed)
        self.assertEqual(candidate.links_f, [following, existing])
        self.assertEqual(existing.links_f, [following, candidate])
        self.assertEqual(following.links_b, [existing, candidate])
        self.assertEqual(len(self.segments), 2)
        self.assertEqual(len(self.debug.snaps), 1)

    def test_duplicate_edge_is_not_linked(self):
        """A snap recreating an existing edge is truncated but not linked."""
        existing = self.place((0, 0), (100, 0))
        duplicate = self.place((100, 0), (100, 100))
        existing.links_f.append(duplicate)
        duplicate.links_b.append(existing)
        candidate = Segment((100, 100), (105, 5))

        match, accepted = self.resolve(candidate)

        self.assertIs(match.kind, ConstraintKind.ENDPOINT_SNAP)
        self.assertTrue(accepted)
        self.assertPointEqual(candidate.end, (100, 0))
        self.assertTrue(candidate.meta.severed)
        self.assertEqual(candidate.links_f, [])
        self.assertEqual(duplicate.links_b, [existing])
        self.assertEqual(self.debug.snaps, [])


class TestMidEdgeSnap(LocalConstraintTestCase):
    """Candidates ending near the interior of an existing segment."""

    def test_mid_edge_snap_splits(self):
        """The candidate is extended onto the segment, which is split there."""
        existing = self.place((0, 0), (200, 0))
        candidate = Segment((100, -200), (100, -20))

        match, accepted = self.resolve(candidate)

        self.assertIs(match.kind, ConstraintKind.MID_EDGE_SNAP)
        self.assertTrue(match.requires_split)
        self.assertTrue(accepted)
        self.assertPointEqual(candidate.end, (100, 0))
        self.assertTrue(candidate.meta.severed)
        self.assertEqual(len(self.segments), 2)
        self.assertPointEqual(existing.start, (100, 0))
        self.assertEqual(len(self.debug.intersections_radius), 1)

    def test_shallow_mid_edge_snap_truncates_only(self):
        """Near-parallel approaches are truncated and severed without a split."""
        self.place((0, 0), (200, 0))
        candidate = Segment((0, -30), (150, -10))

        match, accepted = self.resolve(candidate)

        self.assertIs(match.kind, ConstraintKind.MID_EDGE_SNAP)
        self.assertFalse(match.requires_split)
        self.assertTrue(accepted)
        self.assertPointEqual(candidate.end, (150, 0))
        self.assertTrue(candidate.meta.severed)
        self.assertEqual(len(self.segments), 1)
        self.assertEqual(self.debug.intersections_radius, [])

    def test_projection_onto_start_is_not_snapped(self):
        """Ends projecting onto another segment's start leave it unsplit."""
        existing = self.place((0, 0), (200, 0))
        candidate = Segment((0, -200), (0, -20))

        match, accepted = self.resolve(candidate)

        self.assertIsNone(match)
        self.assertTrue(accepted)
        self.assertEqual(candidate.end, (0, -20))
        self.assertFalse(candidate.meta.severed)
        self.assertEqual(self.segments, [existing])
        self.assertEqual((existing.start, existing.end), ((0, 0), (200, 0)))
        self.assertEqual(self.debug.intersections_radius, [])

    def test_projection_onto_end_snaps_to_endpoint(self):
        """Ends projecting onto another segment's end join it as a junction."""
        existing = self.place((0, 0), (200, 0))
        candidate = Segment((200, -200), (200, -20))

        match, accepted = self.resolve(candidate)

        self.assertIs(match.kind, ConstraintKind.ENDPOINT_SNAP)
        self.assertTrue(accepted)
        self.assertPointEqual(candidate.end, (200, 0))
        self.assertEqual(candidate.links_f, [existing])
        self.assertEqual(len(self.segments), 1)
        for segment in self.segments:
            self.assertGreater(segment.length(), 0)

    def test_endpoint_snap_outranks_mid_edge(self):
        """Priority decides between rules matched on different segments."""
        first = self.place((0, 0), (100, 0))
        self.place((100, 0), (300, 0))
        candidate = Segment((130, -290), (120, -10))

        match = find_constraint_match(candidate, self.index, self.config)

        self.assertIs(match.kind, ConstraintKind.ENDPOINT_SNAP)
        self.assertIs(match.other, first)


if __name__ == '__main__':
    unittest.main()
