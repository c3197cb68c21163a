"""
Configuration for the price feed jobs.
"""
import os
from pathlib import Path
from typing import Dict, List, Optional

import dotenv
from pydantic import BaseModel, Field

from cloudfeed.models.enums import Currency, Provider

dotenv.load_dotenv()

DEFAULT_TARGET_REGIONS = ["ap-south-1", "us-east-1"]
DEFAULT_OUTPUT_DIR = "data"

PRICING_BASE_URL = "https://pricing.us-east-1.amazonaws.com/offers/v1.0/aws"


class FeedConfig(BaseModel):
    """Everything the fetch jobs need that is not fetched."""
    target_regions: List[str] = Field(default_factory=lambda: list(DEFAULT_TARGET_REGIONS))
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    http_timeout: Optional[float] = Field(None, description="Per-request timeout in seconds, None waits forever", gt=0)

    ec2_offer_url_template: str = f"{PRICING_BASE_URL}/AmazonEC2/current/{{region}}/index.json"
    s3_offer_url: str = f"{PRICING_BASE_URL}/AmazonS3/current/index.json"
    data_transfer_offer_url: str = f"{PRICING_BASE_URL}/AWSDataTransfer/current/index.json"
    fx_url: str = "https://open.er-api.com/v6/latest/USD"

    # common list prices used when the offer files have no usable entry
    storage_fallback_usd_per_gb_month: float = 0.023
    egress_fallback_usd_per_gb: float = 0.09

    placeholder_storage_usd_per_gb_month: Dict[Provider, float] = Field(
        default_factory=lambda: {Provider.GCP: 0.02, Provider.AZURE: 0.02}
    )
    placeholder_egress_usd_per_gb: Dict[Provider, float] = Field(
        default_factory=lambda: {Provider.GCP: 0.085, Provider.AZURE: 0.087}
    )

    fx_fallback_rates: Dict[Currency, float] = Field(
        default_factory=lambda: {Currency.INR: 83, Currency.EUR: 0.92, Currency.GBP: 0.78}
    )

    @property
    def cloud_dir(self) -> Path:
        return self.output_dir / "cloud"

    @property
    def instances_path(self) -> Path:
        return self.cloud_dir / "instances.json"

    @property
    def storage_path(self) -> Path:
        return self.cloud_dir / "storage.json"

    @property
    def egress_path(self) -> Path:
        return self.cloud_dir / "egress.json"

    @property
    def fx_path(self) -> Path:
        return self.output_dir / "fx.json"

    def ec2_offer_url(self, region_code: str) -> str:
        return self.ec2_offer_url_template.format(region=region_code)


def parse_regions(value: str) -> List[str]:
    """Split a comma-separated region list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_timeout(value: str) -> Optional[float]:
    """
    Parse a timeout in seconds. Empty, "0" and "none" mean no timeout.

    Raises:
        ValueError: If the value is not a number
    """
    value = value.strip().lower()
    if value in ("", "none", "0"):
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise ValueError(f"Invalid HTTP timeout: {value!r}")
    return timeout if timeout > 0 else None


def load_config(
    output_dir: Optional[str] = None,
    regions: Optional[List[str]] = None,
    http_timeout: Optional[float] = None,
) -> FeedConfig:
    """
    Build the feed configuration.

    Explicit arguments win over environment variables, which win over the
    built-in defaults.

    Args:
        output_dir: Root directory for the JSON files
        regions: Region codes to fetch instance prices for
        http_timeout: Per-request timeout in seconds

    Returns:
        FeedConfig: The resolved configuration
    """
    values = {}

    env_output_dir = os.getenv("CLOUDFEED_OUTPUT_DIR")
    env_regions = os.getenv("CLOUDFEED_REGIONS")
    env_timeout = os.getenv("CLOUDFEED_HTTP_TIMEOUT")

    if output_dir:
        values["output_dir"] = Path(output_dir)
    elif env_output_dir:
        values["output_dir"] = Path(env_output_dir)

    if regions:
        values["target_regions"] = list(regions)
    elif env_regions and parse_regions(env_regions):
        values["target_regions"] = parse_regions(env_regions)

    if http_timeout:
        values["http_timeout"] = http_timeout
    elif env_timeout:
        values["http_timeout"] = parse_timeout(env_timeout)

    return FeedConfig(**values)
