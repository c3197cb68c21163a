#!/usr/bin/env python3
"""
Fetch USD exchange rates and write <output-dir>/fx.json.

Source failures are masked by a fallback snapshot, so this exits 0 unless
the file itself cannot be written.
"""
import argparse
import logging
import os
import sys

from cloudfeed.pipelines.fx_pipeline import run_fx_pipeline
from cloudfeed.utils.config import DEFAULT_OUTPUT_DIR, FeedConfig, load_config

logger = logging.getLogger("run_fx_fetch")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Fetch USD FX rates")
    parser.add_argument("--output-dir", help="Root directory for the JSON feeds (default: data)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default: none)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the FX job."""
    args = parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(output_dir=args.output_dir, http_timeout=args.timeout)
    except ValueError as e:
        output_dir = args.output_dir or os.getenv("CLOUDFEED_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR
        logger.warning(f"Invalid configuration, continuing without a timeout: {e}")
        config = FeedConfig(output_dir=output_dir)

    try:
        run_fx_pipeline(config)
        return 0
    except OSError as e:
        logger.error(f"Could not write FX snapshot: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
