"""Catalog export feed and storefront search result rewriting."""

__version__ = "0.1.0"
