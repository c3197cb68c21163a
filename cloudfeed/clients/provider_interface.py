"""
Interface for cloud provider implementations.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from cloudfeed.models.enums import Provider
from cloudfeed.models.storage_schemas import EgressPrice, StoragePrice


@dataclass
class ProviderError(Exception):
    """Exception raised when there's an error fetching from an upstream source."""
    provider: str
    message: str
    details: Optional[Dict] = None

    def __str__(self) -> str:
        return f"{self.provider}: {self.message}"


class CloudProviderInterface(ABC):
    """Interface that every provider in the storage and egress feeds must follow."""

    def __init__(self, provider: Provider):
        """
        Initialize the cloud provider.

        Args:
            provider: Provider the prices belong to
        """
        self.provider = provider

    @property
    def provider_name(self) -> str:
        return str(self.provider)

    @abstractmethod
    async def get_storage_price(self) -> Optional[StoragePrice]:
        """
        Get the per GB-month object storage price.

        Returns:
            The storage price, or None if the provider has no storage price

        Raises:
            ProviderError: If the price source could not be fetched
        """
        pass

    @abstractmethod
    async def get_egress_price(self) -> Optional[EgressPrice]:
        """
        Get the per GB internet egress price.

        Returns:
            The egress price, or None if the provider has no egress price

        Raises:
            ProviderError: If the price source could not be fetched
        """
        pass

    @abstractmethod
    async def close(self):
        """Close any open connections."""
        pass
