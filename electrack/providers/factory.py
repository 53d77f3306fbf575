"""
Resolve the configured price provider from its DSN.
"""

from urllib.parse import unquote, urlparse

from electrack.exceptions import ConfigurationError
from electrack.logging_config import get_logger
from electrack.providers.base import ElectricityPriceProvider
from electrack.providers.tibber import TibberProvider

logger = get_logger(__name__)


def resolve_provider(dsn: str, timeout: float = 30) -> ElectricityPriceProvider:
    """
    Build a provider from a DSN such as ``tibber://<api token>@api.tibber.com``.

    Currently only a tibber implementation exists.

    Raises:
        ConfigurationError: If the DSN is empty, malformed or names an unknown provider
    """
    if not dsn:
        raise ConfigurationError("ELECTRICITY_PRICE_PROVIDER_DSN is missing, you need to configure it")

    parsed = urlparse(dsn)
    driver = parsed.scheme
    logger.debug("Resolving price provider", driver=driver)

    if driver == "tibber":
        if not parsed.username:
            raise ConfigurationError("Cannot create a tibber provider without an API token in the DSN")
        return TibberProvider(api_key=unquote(parsed.username), timeout=timeout)

    raise ConfigurationError(f"The provider DSN does not match any supported provider: '{driver}'")
