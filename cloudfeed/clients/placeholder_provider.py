"""
Providers whose feed rows are fixed list prices until a real fetcher exists.
"""
from typing import Optional

from cloudfeed.clients.provider_interface import CloudProviderInterface
from cloudfeed.models.enums import Provider
from cloudfeed.models.storage_schemas import EgressPrice, StoragePrice


class PlaceholderProvider(CloudProviderInterface):
    """Returns configured constant prices. Never touches the network."""

    def __init__(
        self,
        provider: Provider,
        usd_per_gb_month: Optional[float] = None,
        usd_per_gb_egress: Optional[float] = None,
    ):
        super().__init__(provider=provider)
        self.usd_per_gb_month = usd_per_gb_month
        self.usd_per_gb_egress = usd_per_gb_egress

    async def get_storage_price(self) -> Optional[StoragePrice]:
        if self.usd_per_gb_month is None:
            return None
        return StoragePrice(provider=self.provider, usd_per_gb_month=self.usd_per_gb_month)

    async def get_egress_price(self) -> Optional[EgressPrice]:
        if self.usd_per_gb_egress is None:
            return None
        return EgressPrice(provider=self.provider, usd_per_gb=self.usd_per_gb_egress)

    async def close(self):
        pass
