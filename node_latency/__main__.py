"""CLI entrypoint for node latency measurement."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .catalog import build_sources, load_catalog
from .config import NodeLatencyConfig
from .timeline import collect_timings, terminal_reached


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Measure node bootstrap latency from logs and the Kubernetes API")

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to a TOML configuration file",
    )

    parser.add_argument(
        "--catalog",
        type=str,
        help="Path to a YAML event catalog (default: bundled catalog)",
    )

    parser.add_argument(
        "--node-name",
        type=str,
        help="Node to measure (default: NODE_NAME environment variable)",
    )

    parser.add_argument(
        "--no-k8s",
        action="store_true",
        help="Only read local logs, do not query the Kubernetes API",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Write timings as JSON to this file instead of stdout",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def run(args) -> int:
    logger = logging.getLogger("node_latency")

    cfg = NodeLatencyConfig.from_toml(args.config) if args.config else NodeLatencyConfig()
    if args.node_name:
        cfg.node_name = args.node_name
    if args.catalog:
        cfg.catalog_path = args.catalog
    if args.no_k8s:
        cfg.enable_k8s = False

    sources = build_sources(cfg)
    events = load_catalog(cfg.resolved_catalog_path(), sources)
    timings = collect_timings(events)

    if not terminal_reached(timings):
        logger.warning("No terminal event was found, the timeline may be incomplete")

    output = json.dumps([timing.to_dict() for timing in timings], indent=2)
    if args.output:
        Path(args.output).write_text(output)
        logger.info(f"Timings written to: {args.output}")
    else:
        print(output)
    return 0


def main():
    """Main entry point."""
    args = parse_args()
    setup_logging(args.verbose)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Node latency measurement failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
