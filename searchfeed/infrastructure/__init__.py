"""Infrastructure layer module.

Contains settings, database access, storefront routing and the HTTP
clients of the external search service.
"""
