"""Inbound adapters for the authorization engine.

Provides the REST API adapter for decisions and runtime management.
"""

from authz_engine.adapters.inbound.rest_api import create_app

__all__ = ["create_app"]
