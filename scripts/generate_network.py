#!/usr/bin/env python3
"""
Road Network Generation CLI
===========================

Command-line interface for growing a road network from a seed and
inspecting the result.

Usage Examples
--------------

Generate with the default configuration:
    python scripts/generate_network.py --seed 42

Generate a small network from a custom configuration file:
    python scripts/generate_network.py --seed 7 --segment-limit 300 --config roadnet.yaml

Find the cheapest route between the midpoints of two segments:
    python scripts/generate_network.py --seed 42 --path 0 120
"""

import argparse
import sys
import logging
from collections import Counter
from pathlib import Path
from typing import Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from roadnet.core.config import RoadNetworkConfig, create_config_from_file, get_default_config
from roadnet.core.growth import RoadNetworkGenerator
from roadnet.pathing import PathLocation, PathPlanner


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure logging for the script.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path to write logs
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers
    )


def load_config(config_path: Optional[str], segment_limit: Optional[int]) -> RoadNetworkConfig:
    """Load configuration from file (or defaults) and apply command-line overrides."""
    config = create_config_from_file(config_path) if config_path else get_default_config()

    if segment_limit is not None:
        config_dict = config.to_dict()
        config_dict['limits']['segment_count_limit'] = segment_limit
        config = RoadNetworkConfig.from_dict(config_dict)

    return config


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description='Grow a procedural road network from a seed',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=0,
        help='Seed for the random source and population map (default: 0)'
    )
    parser.add_argument(
        '--segment-limit',
        type=int,
        help='Override the maximum number of segments'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Configuration file (.yaml, .yml or .json)'
    )
    parser.add_argument(
        '--path',
        type=int,
        nargs=2,
        metavar=('FROM_ID', 'TO_ID'),
        help='Find a path between the midpoints of two segment ids'
    )

    logging_group = parser.add_argument_group('Logging')
    logging_group.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    logging_group.add_argument(
        '--log-file',
        type=str,
        help='Optional file to write logs'
    )

    args = parser.parse_args()

    setup_logging(args.log_level, args.log_file)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("Road Network Generation")
    logger.info("=" * 60)

    try:
        config = load_config(args.config, args.segment_limit)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    config.log_configuration_summary()

    result = RoadNetworkGenerator(config).generate(args.seed)

    kinds = Counter('highway' if segment.meta.highway else 'road' for segment in result.segments)
    severed = sum(1 for segment in result.segments if segment.meta.severed)
    logger.info(f"Segments: {len(result.segments)} ({kinds['highway']} highway, {kinds['road']} road, {severed} severed)")
    for name, count in result.debug_annotations.counts().items():
        logger.info(f"  {name}: {count}")

    if args.path:
        from_id, to_id = args.path
        if not all(0 <= segment_id < len(result.segments) for segment_id in args.path):
            logger.error(f"Segment ids must be between 0 and {len(result.segments) - 1}")
            sys.exit(1)

        planner = PathPlanner(result.segments)
        path = planner.shortest_path(
            PathLocation(result.segments[from_id], 0.5),
            PathLocation(result.segments[to_id], 0.5)
        )
        if path.found:
            logger.info(f"Path {from_id} -> {to_id}: {[segment.id for segment in path.segments]} (cost {path.cost:.3f})")
        else:
            logger.warning(f"Segment {to_id} is not reachable from segment {from_id}")


if __name__ == '__main__':
    main()
