"""Catalog export pipeline.

Resolves shopkeys, builds product URLs and items, and serializes the
paginated feed consumed by the external search service.
"""

from searchfeed.export.headers import HeaderHandler
from searchfeed.export.item_builder import ItemBuilder
from searchfeed.export.service import ExportResult, ExportService
from searchfeed.export.shopkey import ShopkeyResolver, StorefrontContextFactory
from searchfeed.export.url_builder import UrlBuilder
from searchfeed.export.user_groups import calculate_user_group_hash
from searchfeed.export.xml_exporter import XmlExporter

__all__ = [
    "ExportResult",
    "ExportService",
    "HeaderHandler",
    "ItemBuilder",
    "ShopkeyResolver",
    "StorefrontContextFactory",
    "UrlBuilder",
    "XmlExporter",
    "calculate_user_group_hash",
]
