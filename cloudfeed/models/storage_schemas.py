"""
Storage and egress schemas for the price feeds.
"""
from pydantic import BaseModel, Field

from cloudfeed.models.enums import Provider


class StoragePrice(BaseModel):
    """Object storage price from a provider."""
    provider: Provider = Field(..., description="Provider of the price")
    usd_per_gb_month: float = Field(..., description="Price per GB per month in USD", gt=0)

    def to_feed_row(self) -> dict:
        return self.model_dump(mode="json")


class EgressPrice(BaseModel):
    """Internet egress price from a provider."""
    provider: Provider = Field(..., description="Provider of the price")
    usd_per_gb: float = Field(..., description="Price per GB transferred out in USD", gt=0)

    def to_feed_row(self) -> dict:
        return self.model_dump(mode="json")
