"""
Catalog API Layer.

This package handles all communication with the catalog service and the
construction of catalog requests.
"""

from .client import CatalogClient
from .query_builder import build_from_query, build_request

__all__ = ["CatalogClient", "build_from_query", "build_request"]
