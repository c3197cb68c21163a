"""
Enum definitions for the cloud price feeds.
"""
from enum import Enum


class StrEnum(str, Enum):
    """String Enum base class to allow for string comparison."""

    def __str__(self) -> str:
        return self.value


class Provider(StrEnum):
    """Cloud providers that appear in the published feeds."""
    AWS = "aws"
    GCP = "gcp"
    AZURE = "azure"


class Currency(StrEnum):
    """Currencies published in the FX snapshot. Rates are quoted against USD."""
    USD = "USD"
    INR = "INR"
    EUR = "EUR"
    GBP = "GBP"


class ProductFamily(StrEnum):
    """AWS offer file product families the feeds care about."""
    COMPUTE_INSTANCE = "Compute Instance"
    STORAGE = "Storage"
    DATA_TRANSFER = "Data Transfer"
