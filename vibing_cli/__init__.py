"""
vibing-cli: a client for browsing, playing and downloading tracks from a
vibing-storage catalog.
"""

__version__ = "0.1.0"
