"""
Providers Package - External Service Integrations
==================================================

Submodules:
- places/: Place lookup providers (Google Places)
- google/: Google sign-in (ID token verification)
"""

from .base_provider import PlaceLookupProvider
from .places.google_places_provider import GooglePlacesProvider

__all__ = ['PlaceLookupProvider', 'GooglePlacesProvider']
