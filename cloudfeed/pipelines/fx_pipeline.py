"""
FX job: writes fx.json, falling back to fixed rates when the source fails.
"""
import logging
from typing import Optional

from cloudfeed.clients.fx_client import FxRatesClient
from cloudfeed.models.fx_schemas import FxSnapshot, utc_timestamp
from cloudfeed.utils.config import FeedConfig
from cloudfeed.utils.json_writer import write_json

logger = logging.getLogger(__name__)


def run_fx_pipeline(config: FeedConfig, client: Optional[FxRatesClient] = None) -> FxSnapshot:
    """
    Fetch the rates and write the snapshot.

    Fetch and parse errors never escape: the whole snapshot is replaced by
    the fallback rates. Errors writing the file do escape.

    Returns:
        The snapshot that was written
    """
    client = client or FxRatesClient(config)
    try:
        snapshot = client.get_snapshot()
        logger.info("Fetched FX rates")
    except Exception as e:
        logger.warning(f"FX error, writing fallback: {e}")
        snapshot = client.fallback_snapshot()
    finally:
        client.close()

    # updated_at is the write time
    snapshot = snapshot.model_copy(update={"updated_at": utc_timestamp()})
    write_json(config.fx_path, snapshot.model_dump(mode="json"))
    logger.info(f"{config.fx_path} written")
    return snapshot
