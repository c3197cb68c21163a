import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from cloudfeed.clients.http_client import JsonHttpClient
from cloudfeed.clients.provider_interface import CloudProviderInterface, ProviderError
from cloudfeed.models.base_schemas import ExtractionStats, PriceLookup
from cloudfeed.models.compute_schemas import InstancePrice
from cloudfeed.models.enums import ProductFamily, Provider
from cloudfeed.models.storage_schemas import EgressPrice, StoragePrice
from cloudfeed.utils.config import FeedConfig
from cloudfeed.utils.transform_data_types import (
    parse_memory_gib,
    parse_vcpu,
    positive_float,
    safe_float_convert,
)

logger = logging.getLogger(__name__)

# Public AWS regions with a regional EC2 offer file.
# The display name is only used to make log lines readable.
AWS_REGION_DISPLAY_NAMES = {
    # North America
    "us-east-1":      "US East (N. Virginia)",
    "us-east-2":      "US East (Ohio)",
    "us-west-1":      "US West (N. California)",
    "us-west-2":      "US West (Oregon)",
    "ca-central-1":   "Canada (Central)",
    "ca-west-1":      "Canada West (Calgary)",
    "mx-central-1":   "Mexico (Central)",
    "us-gov-west-1":  "AWS GovCloud (US-West)",
    "us-gov-east-1":  "AWS GovCloud (US-East)",
    # South America
    "sa-east-1":      "South America (Sao Paulo)",
    # Europe
    "eu-central-1":   "EU (Frankfurt)",
    "eu-central-2":   "Europe (Zurich)",
    "eu-west-1":      "EU (Ireland)",
    "eu-west-2":      "EU (London)",
    "eu-west-3":      "EU (Paris)",
    "eu-south-1":     "EU (Milan)",
    "eu-south-2":     "Europe (Spain)",
    "eu-north-1":     "EU (Stockholm)",
    # Asia and Middle East
    "ap-east-1":      "Asia Pacific (Hong Kong)",
    "ap-south-1":     "Asia Pacific (Mumbai)",
    "ap-south-2":     "Asia Pacific (Hyderabad)",
    "ap-northeast-1": "Asia Pacific (Tokyo)",
    "ap-northeast-2": "Asia Pacific (Seoul)",
    "ap-northeast-3": "Asia Pacific (Osaka)",
    "ap-southeast-1": "Asia Pacific (Singapore)",
    "ap-southeast-3": "Asia Pacific (Jakarta)",
    "ap-southeast-5": "Asia Pacific (Malaysia)",
    "ap-southeast-7": "Asia Pacific (Thailand)",
    "il-central-1":   "Israel (Tel Aviv)",
    "me-south-1":     "Middle East (Bahrain)",
    "me-central-1":   "Middle East (UAE)",
    # Oceania
    "ap-southeast-2": "Asia Pacific (Sydney)",
    "ap-southeast-4": "Asia Pacific (Melbourne)",
    # Africa
    "af-south-1":     "Africa (Cape Town)",
}


def warn_unknown_regions(region_codes: Iterable[str]) -> List[str]:
    """Log and return the region codes that are not in the known region table."""
    unknown = [code for code in region_codes if code not in AWS_REGION_DISPLAY_NAMES]
    for code in unknown:
        logger.warning(f"Region {code} is not a known AWS region, fetching it anyway")
    return unknown


def on_demand_terms(offer: Dict[str, Any]) -> Dict[str, Any]:
    return (offer.get("terms") or {}).get("OnDemand") or {}


def select_on_demand_price(sku_terms: Dict[str, Any]) -> Optional[float]:
    """
    Pick the USD price out of the on-demand terms of one SKU.

    Terms are visited in term id order. Within a term, dimensions are ordered
    by (beginRange, price) so the entry-level tier wins, and the cheapest rate
    wins among dimensions that start at the same point. Only strictly
    positive prices count.

    Returns:
        The price, or None if no dimension carries a positive USD price
    """
    for term_id in sorted(sku_terms):
        term = sku_terms[term_id] or {}
        candidates = []
        for dimension in (term.get("priceDimensions") or {}).values():
            usd = positive_float((dimension.get("pricePerUnit") or {}).get("USD"))
            if usd is None:
                continue
            begin = safe_float_convert(dimension.get("beginRange")) or 0.0
            candidates.append((begin, usd))
        if candidates:
            return min(candidates)[1]
    return None


def is_linux_shared_compute(product: Dict[str, Any]) -> bool:
    """On-demand Linux, shared tenancy, no pre-installed software, no capacity reservation."""
    if product.get("productFamily") != ProductFamily.COMPUTE_INSTANCE:
        return False
    attrs = product.get("attributes") or {}
    if attrs.get("operatingSystem") != "Linux":
        return False
    if attrs.get("tenancy") != "Shared":
        return False
    if attrs.get("preInstalledSw") not in (None, "", "NA"):
        return False
    if attrs.get("capacitystatus") not in (None, "", "Used"):
        return False
    return True


def is_s3_standard_storage(product: Dict[str, Any]) -> bool:
    storage_class = (product.get("attributes") or {}).get("storageClass") or ""
    return (
        product.get("productFamily") == ProductFamily.STORAGE
        and "Amazon S3" in storage_class
        and "Standard" in storage_class
    )


def is_internet_egress(product: Dict[str, Any]) -> bool:
    attrs = product.get("attributes") or {}
    return (
        product.get("productFamily") == ProductFamily.DATA_TRANSFER
        and "Internet Out" in (attrs.get("usagetype") or "")
        and "AWS Outbound Data Transfer" in (attrs.get("group") or "")
    )


def find_first_priced_sku(
    offer: Dict[str, Any],
    predicate: Callable[[Dict[str, Any]], bool],
    label: str,
) -> PriceLookup:
    """
    Find the first product (in document order) matching ``predicate`` and price it.

    Only the first match is priced; later matches are not tried. Errors while
    walking the document are logged and reported as not found.
    """
    try:
        products = offer.get("products") or {}
        sku = next((sku for sku, product in products.items() if predicate(product)), None)
        if sku is None:
            return PriceLookup.not_found(f"no {label} SKU in offer file")

        sku_terms = on_demand_terms(offer).get(sku)
        if not sku_terms:
            return PriceLookup.not_found(f"{label} SKU {sku} has no on-demand terms")

        price = select_on_demand_price(sku_terms)
        if price is None:
            return PriceLookup.not_found(f"{label} SKU {sku} has no positive USD price")

        return PriceLookup.found(price, sku)
    except Exception as e:
        logger.warning(f"Error searching offer file for {label}: {e}", exc_info=True)
        return PriceLookup.not_found(f"error while searching for {label}: {e}")


def extract_instance_prices(offer: Dict[str, Any], region_code: str) -> Tuple[List[InstancePrice], ExtractionStats]:
    """Filter a regional EC2 offer file down to instance price rows, sorted by type."""
    stats = ExtractionStats(region=region_code)
    terms = on_demand_terms(offer)
    rows = []

    for sku, product in (offer.get("products") or {}).items():
        stats.items_seen += 1
        if not is_linux_shared_compute(product):
            stats.items_filtered_out += 1
            continue

        attrs = product.get("attributes") or {}
        instance_type = attrs.get("instanceType")
        if not instance_type:
            stats.items_filtered_out += 1
            continue

        sku_terms = terms.get(sku)
        price = select_on_demand_price(sku_terms) if sku_terms else None
        if price is None:
            stats.items_without_price += 1
            continue

        rows.append(InstancePrice(
            provider=Provider.AWS,
            region=region_code,
            type=instance_type,
            vCPU=parse_vcpu(attrs.get("vcpu")),
            RAM_GB=parse_memory_gib(attrs.get("memory")),
            usd_per_hour=price,
        ))

    stats.rows_emitted = len(rows)
    rows.sort(key=lambda row: row.type)
    return rows, stats


class AwsProvider(CloudProviderInterface):
    """Reads the public AWS bulk offer files. No credentials needed."""

    def __init__(self, config: FeedConfig, http_client: Optional[JsonHttpClient] = None):
        logger.info("Initializing AwsProvider...")
        super().__init__(provider=Provider.AWS)
        self.config = config
        self.http = http_client or JsonHttpClient("aws", timeout=config.http_timeout)

    def fetch_region_instances(self, region_code: str) -> List[InstancePrice]:
        display_name = AWS_REGION_DISPLAY_NAMES.get(region_code, "unknown region")
        logger.info(f"Fetching EC2 offer file for {region_code} ({display_name})")
        offer = self.http.fetch_json(self.config.ec2_offer_url(region_code))
        if not isinstance(offer, dict):
            raise ProviderError(
                provider=self.provider_name,
                message=f"EC2 offer file for {region_code} is not a JSON object",
                details={"region": region_code},
            )
        rows, stats = extract_instance_prices(offer, region_code)
        logger.info(f"Extraction stats {stats.summary()}")
        return rows

    async def get_instance_pricing(self, region_codes: List[str]) -> List[InstancePrice]:
        """
        Fetch all regions concurrently and combine their rows, sorted by instance type.

        Raises:
            ProviderError: If any region failed. No rows are returned in that case.
        """
        logger.info(f"Fetching instance pricing for regions={region_codes}")
        tasks = [
            asyncio.to_thread(self.fetch_region_instances, region_code)
            for region_code in region_codes
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        failures = {
            region_code: result
            for region_code, result in zip(region_codes, results)
            if isinstance(result, BaseException)
        }
        if failures:
            for region_code, error in failures.items():
                logger.error(f"Instance pricing failed for {region_code}: {error}")
            raise ProviderError(
                provider=self.provider_name,
                message=f"Instance pricing failed for {len(failures)} of {len(region_codes)} regions: {', '.join(failures)}",
                details={region_code: str(error) for region_code, error in failures.items()},
            ) from next(iter(failures.values()))

        combined = [row for region_rows in results for row in region_rows]
        combined.sort(key=lambda row: row.type)
        logger.info(f"Total instance prices found: {len(combined)}")
        return combined

    def find_storage_price(self, offer: Dict[str, Any]) -> PriceLookup:
        return find_first_priced_sku(offer, is_s3_standard_storage, "S3 Standard storage")

    def find_egress_price(self, offer: Dict[str, Any]) -> PriceLookup:
        return find_first_priced_sku(offer, is_internet_egress, "internet egress")

    async def get_storage_price(self) -> StoragePrice:
        offer = await asyncio.to_thread(self.http.fetch_json, self.config.s3_offer_url)
        lookup = self.find_storage_price(offer)
        if not lookup.is_found:
            logger.warning(
                f"Using fallback S3 price {self.config.storage_fallback_usd_per_gb_month}: {lookup.reason}")
        return StoragePrice(
            provider=Provider.AWS,
            usd_per_gb_month=lookup.or_default(self.config.storage_fallback_usd_per_gb_month),
        )

    async def get_egress_price(self) -> EgressPrice:
        offer = await asyncio.to_thread(self.http.fetch_json, self.config.data_transfer_offer_url)
        lookup = self.find_egress_price(offer)
        if not lookup.is_found:
            logger.warning(
                f"Using fallback egress price {self.config.egress_fallback_usd_per_gb}: {lookup.reason}")
        return EgressPrice(
            provider=Provider.AWS,
            usd_per_gb=lookup.or_default(self.config.egress_fallback_usd_per_gb),
        )

    async def close(self):
        self.http.close()
