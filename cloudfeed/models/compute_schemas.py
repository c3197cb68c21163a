"""
Compute-specific schemas for the price feeds.
"""
from typing import Optional

from pydantic import BaseModel, Field

from cloudfeed.models.enums import Provider


class InstancePrice(BaseModel):
    """On-demand hourly price of one instance type in one region."""
    provider: Provider = Field(Provider.AWS, description="Provider of the price")
    region: str = Field(..., description="Provider region code, e.g. us-east-1")
    type: str = Field(..., description="Instance type, e.g. m5.large")
    vCPU: Optional[int] = Field(None, description="Number of virtual CPUs", gt=0)
    RAM_GB: Optional[float] = Field(None, description="Memory in GiB", ge=0)
    usd_per_hour: float = Field(..., description="Price per hour in USD", gt=0)

    def to_feed_row(self) -> dict:
        return self.model_dump(mode="json")
