"""
FX snapshot schema.
"""
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FxSnapshot(BaseModel):
    """USD-based exchange rates at a point in time."""
    updated_at: str = Field(default_factory=utc_timestamp, description="ISO-8601 time the snapshot was taken")
    USD: Literal[1] = Field(1, description="Base currency, always 1")
    INR: Optional[float] = Field(None, description="Indian rupees per USD", gt=0)
    EUR: Optional[float] = Field(None, description="Euros per USD", gt=0)
    GBP: Optional[float] = Field(None, description="Pounds sterling per USD", gt=0)
