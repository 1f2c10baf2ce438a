"""
Core Module
============

Infrastructure components for the application:
- di_container: Dependency injection container
- mongodb_client: MongoDB connection and index creation

Usage:
    from hoptrip.core.mongodb_client import get_mongodb_client
    from hoptrip.core import DIContainer
"""

from .di_container import DIContainer

__all__ = [
    'DIContainer',
]
