"""
Places Providers Module
=======================

Providers for external place data:
- Google Places API
"""

from .google_places_provider import GooglePlacesProvider

__all__ = ['GooglePlacesProvider']
