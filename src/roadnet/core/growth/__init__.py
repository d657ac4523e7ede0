"""
Road network growth: population sampling, local constraints, global goals
and the priority-queue driven generator.
"""

from .contracts import DebugAnnotations, GenerationResult, GrowthCandidate, LinkSetup
from .population import PopulationService
from .local_constraints import ConstraintKind, ConstraintMatch, apply_local_constraints, find_constraint_match
from .global_goals import generate_branches
from .growth_engine import RoadNetworkGenerator, generate

__all__ = [
    'DebugAnnotations',
    'GenerationResult',
    'GrowthCandidate',
    'LinkSetup',
    'PopulationService',
    'ConstraintKind',
    'ConstraintMatch',
    'apply_local_constraints',
    'find_constraint_match',
    'generate_branches',
    'RoadNetworkGenerator',
    'generate',
]
