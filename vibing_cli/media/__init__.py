"""
Media Layer.

This package handles fetching track assets from the catalog's download endpoint.
"""

from .downloader import Downloader, close_connection_pool

__all__ = ["Downloader", "close_connection_pool"]
