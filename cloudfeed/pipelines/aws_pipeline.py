"""
AWS price job: instance, storage and egress feeds.
"""
import logging
from typing import Dict, Optional

from cloudfeed.clients.aws_provider import warn_unknown_regions
from cloudfeed.clients.provider_factory import ProviderFactory
from cloudfeed.models.enums import Provider
from cloudfeed.utils.config import FeedConfig
from cloudfeed.utils.json_writer import write_json

logger = logging.getLogger(__name__)


async def run_aws_pipeline(config: FeedConfig, provider_factory: Optional[ProviderFactory] = None) -> Dict[str, int]:
    """
    Fetch and write instances.json, storage.json and egress.json.

    Any failure propagates. Files written before the failure are left in place.

    Returns:
        Row count per written feed
    """
    factory = provider_factory or ProviderFactory(config)
    counts = {}

    try:
        warn_unknown_regions(config.target_regions)
        aws = factory.get_provider(Provider.AWS)

        instances = await aws.get_instance_pricing(config.target_regions)
        write_json(config.instances_path, [row.to_feed_row() for row in instances])
        counts["instances"] = len(instances)
        logger.info(f"{config.instances_path} ({len(instances)} rows)")

        # one offer file at a time
        storage_rows = []
        for provider in factory.get_all_providers():
            price = await provider.get_storage_price()
            if price is not None:
                storage_rows.append(price.to_feed_row())

        egress_rows = []
        for provider in factory.get_all_providers():
            price = await provider.get_egress_price()
            if price is not None:
                egress_rows.append(price.to_feed_row())

        write_json(config.storage_path, storage_rows)
        counts["storage"] = len(storage_rows)
        logger.info(f"{config.storage_path} ({len(storage_rows)} rows)")

        write_json(config.egress_path, egress_rows)
        counts["egress"] = len(egress_rows)
        logger.info(f"{config.egress_path} ({len(egress_rows)} rows)")
    finally:
        await factory.close_all()

    return counts
