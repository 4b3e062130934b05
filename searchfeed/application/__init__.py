"""Application layer module.

Contains the plugin configuration and the storefront subscriber that
rewrites search and category results.
"""

from searchfeed.application.plugin_config import (
    FilterPosition,
    IntegrationType,
    PluginConfig,
    PluginConfigLoader,
)
from searchfeed.application.search_subscriber import (
    HeaderLoadedEvent,
    ProductCriteriaEvent,
    Snippet,
    StorefrontRequest,
    StorefrontSearchSubscriber,
)

__all__ = [
    "FilterPosition",
    "IntegrationType",
    "PluginConfig",
    "PluginConfigLoader",
    "HeaderLoadedEvent",
    "ProductCriteriaEvent",
    "Snippet",
    "StorefrontRequest",
    "StorefrontSearchSubscriber",
]
