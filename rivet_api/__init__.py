"""
Rivet API - Python client for the Rivet platform HTTP API.

Layers:
- core: Raw types, error taxonomy and HTTP client
- sdk: High-level RivetClient with one operations object per resource
"""

from rivet_api.sdk import RivetClient

__version__ = "0.1.0"
__all__ = ["RivetClient"]
