"""
Factory for creating cloud provider instances.
"""
import logging
from typing import List, Optional

from cloudfeed.clients.aws_provider import AwsProvider
from cloudfeed.clients.http_client import JsonHttpClient
from cloudfeed.clients.placeholder_provider import PlaceholderProvider
from cloudfeed.clients.provider_interface import CloudProviderInterface
from cloudfeed.models.enums import Provider
from cloudfeed.utils.config import FeedConfig

logger = logging.getLogger(__name__)


class ProviderFactory:
    """Factory for creating and managing cloud provider instances."""

    def __init__(self, config: FeedConfig, http_client: Optional[JsonHttpClient] = None):
        """
        Initialize the provider factory.

        Args:
            config: Feed configuration
            http_client: Optional HTTP client for the AWS provider, for dependency injection
        """
        self.config = config
        self._http_client = http_client
        self._providers: List[CloudProviderInterface] = []
        self._initialize_providers()

    def _initialize_providers(self):
        """AWS first, then one placeholder per configured provider."""
        self._providers.append(AwsProvider(self.config, http_client=self._http_client))

        storage = self.config.placeholder_storage_usd_per_gb_month
        egress = self.config.placeholder_egress_usd_per_gb
        for provider in list(storage) + [p for p in egress if p not in storage]:
            if provider == Provider.AWS:
                logger.warning("Ignoring placeholder prices configured for aws")
                continue
            self._providers.append(PlaceholderProvider(
                provider=provider,
                usd_per_gb_month=storage.get(provider),
                usd_per_gb_egress=egress.get(provider),
            ))

    def get_all_providers(self) -> List[CloudProviderInterface]:
        """
        Get all initialized cloud providers.

        Returns:
            List of cloud provider instances, in feed order
        """
        return self._providers

    def get_provider(self, provider: Provider) -> CloudProviderInterface:
        for instance in self._providers:
            if instance.provider == provider:
                return instance
        raise KeyError(f"Provider {provider} is not configured")

    async def close_all(self):
        """Close all provider clients."""
        for provider in self._providers:
            try:
                await provider.close()
            except Exception as e:
                logger.error(f"Error closing {provider.provider_name} provider: {str(e)}")
