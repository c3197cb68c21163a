#!/usr/bin/env python3
"""
Fetch AWS instance, storage and egress prices and write the cloud feeds.

Writes <output-dir>/cloud/instances.json, storage.json and egress.json.
Exits 1 if any fetch fails.
"""
import argparse
import asyncio
import logging
import sys

from cloudfeed.pipelines.aws_pipeline import run_aws_pipeline
from cloudfeed.utils.config import load_config, parse_regions

logger = logging.getLogger("run_aws_fetch")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Fetch AWS on-demand price feeds")
    parser.add_argument("--output-dir", help="Root directory for the JSON feeds (default: data)")
    parser.add_argument("--regions", type=parse_regions,
                        help="Comma-separated AWS region codes (default: ap-south-1,us-east-1)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default: none)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the AWS price job."""
    args = parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(output_dir=args.output_dir, regions=args.regions, http_timeout=args.timeout)
        counts = asyncio.run(run_aws_pipeline(config))
        logger.info(f"AWS fetch completed: {counts}")
        return 0
    except Exception as e:
        logger.error(f"AWS fetch failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
