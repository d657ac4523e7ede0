#!/usr/bin/env python3
"""
Path Planner Module

Shortest paths over a generated segment graph between positions part-way
along segments. Edge weights depend on the query: leaving the start segment
and entering the end segment only cost the part of those segments actually
travelled.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List

import networkx as nx

from ..core.segment import Segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathLocation:
    """A position on a segment, as a fraction of the way from its start to its end."""
    segment: Segment
    fraction: float

    def __post_init__(self):
        if not (0.0 <= self.fraction <= 1.0):
            raise ValueError(f"fraction must be between 0 and 1, got {self.fraction}")


@dataclass(frozen=True)
class PathResult:
    """Ordered segments from the start location's segment to the end location's, and total cost."""
    segments: List[Segment]
    cost: float

    @property
    def found(self) -> bool:
        return bool(self.segments)


class PathPlanner:
    """
    Dijkstra search over the neighbour graph of a segment list.

    The graph is built once from the list; nodes are positions in the list.
    The list is treated as a read-only snapshot.
    """

    def __init__(self, segments: List[Segment]):
        self.segments = list(segments)
        self._index_of: Dict[int, int] = {id(segment): i for i, segment in enumerate(self.segments)}
        self.graph = self._build_graph()

    def _build_graph(self) -> nx.DiGraph:
        graph = nx.DiGraph()
        graph.add_nodes_from(range(len(self.segments)))

        for i, segment in enumerate(self.segments):
            for neighbour in segment.neighbours():
                j = self._index_of.get(id(neighbour))
                if j is None:
                    logger.warning(f"Neighbour {neighbour!r} of {segment!r} is not in the segment list")
                    continue
                graph.add_edge(i, j)

        logger.debug(f"Built path graph with {graph.number_of_nodes()} nodes and {graph.number_of_edges()} edges")
        return graph

    def _node(self, segment: Segment) -> int:
        node = self._index_of.get(id(segment))
        if node is None:
            raise ValueError(f"{segment!r} is not part of this network")
        return node

    def shortest_path(self, start: PathLocation, end: PathLocation) -> PathResult:
        """
        Find the cheapest route between two locations.

        Args:
            start: Where the route begins
            end: Where the route ends

        Returns:
            PathResult including both end segments; an empty result with
            infinite cost when end cannot be reached
        """
        if start.segment is end.segment:
            self._node(start.segment)
            return PathResult([start.segment], abs(start.fraction - end.fraction) * start.segment.cost())

        source = self._node(start.segment)
        target = self._node(end.segment)

        def weight(u: int, v: int, _attributes) -> float:
            current = self.segments[u]
            following = self.segments[v]
            current_fraction = start.fraction if current is start.segment else None
            following_fraction = end.fraction if following is end.segment else None
            return current.cost_to(following, current_fraction) + following.cost_to(current, following_fraction)

        try:
            cost, nodes = nx.single_source_dijkstra(self.graph, source, target, weight=weight)
        except nx.NetworkXNoPath:
            logger.debug(f"No path from {start.segment!r} to {end.segment!r}")
            return PathResult([], math.inf)

        return PathResult([self.segments[node] for node in nodes], cost)

    def find_path(self, start: PathLocation, end: PathLocation) -> List[Segment]:
        """Segments of the cheapest route, empty if end is unreachable."""
        return self.shortest_path(start, end).segments


def find_path(segments: List[Segment], start: PathLocation, end: PathLocation) -> List[Segment]:
    """Build a planner for a segment list and run a single query."""
    return PathPlanner(segments).find_path(start, end)
