#!/usr/bin/env python3
"""
Unit tests for SpatialIndex module.
"""

import unittest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from roadnet.spatial.spatial_index import BoundingBoxEntry, SpatialIndex


class TestBoundingBoxEntry(unittest.TestCase):
    """Test cases for BoundingBoxEntry."""

    def test_bounds(self):
        """Bounds are (minx, miny, maxx, maxy)."""
        entry = BoundingBoxEntry(1, 2, 3, 4)
        self.assertEqual(entry.bounds, (1, 2, 4, 6))

    def test_overlaps(self):
        """Overlap uses closed intervals on both axes."""
        a = BoundingBoxEntry(0, 0, 10, 10)
        self.assertTrue(a.overlaps(BoundingBoxEntry(5, 5, 10, 10)))
        self.assertTrue(a.overlaps(BoundingBoxEntry(10, 0, 5, 5)))
        self.assertFalse(a.overlaps(BoundingBoxEntry(11, 0, 5, 5)))
        # separated on y only
        self.assertFalse(a.overlaps(BoundingBoxEntry(0, 20, 5, 5)))

    def test_degenerate_boxes_overlap(self):
        """Zero-height boxes of horizontal lines still overlap crossing boxes."""
        horizontal = BoundingBoxEntry(0, 5, 10, 0)
        vertical = BoundingBoxEntry(5, 0, 0, 10)
        self.assertTrue(horizontal.overlaps(vertical))


class TestSpatialIndex(unittest.TestCase):
    """Test cases for SpatialIndex class."""

    def setUp(self):
        """Set up test fixtures."""
        self.spatial_index = SpatialIndex()
        self.entries = [
            BoundingBoxEntry(0, 0, 10, 0, payload="horizontal"),
            BoundingBoxEntry(5, 5, 0, 10, payload="vertical"),
            BoundingBoxEntry(100, 100, 20, 20, payload="far"),
        ]
        for entry in self.entries:
            self.spatial_index.insert(entry)

    def test_initialization(self):
        """Test SpatialIndex initialization."""
        index = SpatialIndex(region=(0, 0, 100, 100), max_objects=8)
        self.assertEqual(len(index), 0)
        self.assertEqual(index.max_objects, 8)
        self.assertEqual(index.region.bounds, (0, 0, 100, 100))

    def test_empty_retrieve(self):
        """Empty index returns no candidates."""
        self.assertEqual(SpatialIndex().retrieve((0, 0, 10, 10)), [])

    def test_insert_and_len(self):
        """Inserted entries are counted and kept in order."""
        self.assertEqual(len(self.spatial_index), 3)
        self.assertEqual([e.payload for e in self.spatial_index.entries], ["horizontal", "vertical", "far"])

    def test_retrieve_overlapping(self):
        """Only boxes overlapping the query are returned, in insertion order."""
        results = self.spatial_index.retrieve(BoundingBoxEntry(-1, -1, 12, 20))
        self.assertEqual([e.payload for e in results], ["horizontal", "vertical"])

    def test_retrieve_with_tuple(self):
        """Queries may be plain (x, y, width, height) tuples."""
        results = self.spatial_index.retrieve((90, 90, 15, 15))
        self.assertEqual([e.payload for e in results], ["far"])

    def test_retrieve_no_match(self):
        """Queries in empty space return nothing."""
        self.assertEqual(self.spatial_index.retrieve((50, 50, 5, 5)), [])

    def test_find_entries_near_point(self):
        """Point queries use a square of half-size radius."""
        results = self.spatial_index.find_entries_near_point((5, 2), 2.5)
        self.assertEqual([e.payload for e in results], ["horizontal"])

        results = self.spatial_index.find_entries_near_point((5, 2), 4)
        self.assertEqual([e.payload for e in results], ["horizontal", "vertical"])

    def test_many_entries(self):
        """Retrieval stays exact for boxes across many nodes."""
        index = SpatialIndex(max_objects=4)
        for i in range(200):
            index.insert(BoundingBoxEntry(i * 10, 0, 5, 5, payload=i))

        results = index.retrieve((96, 0, 18, 5))
        self.assertEqual([e.payload for e in results], [10, 11])

    def test_insert_outside_region_is_kept(self):
        """Entries outside the region are stored with a warning."""
        index = SpatialIndex(region=(0, 0, 100, 100))
        with self.assertLogs('roadnet.spatial.spatial_index', level='WARNING'):
            index.insert(BoundingBoxEntry(500, 500, 1, 1, payload="outside"))

        self.assertEqual([e.payload for e in index.retrieve((499, 499, 3, 3))], ["outside"])


if __name__ == '__main__':
    unittest.main()
