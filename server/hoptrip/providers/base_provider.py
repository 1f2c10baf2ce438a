"""
Base Provider Interface for external place lookup sources
All provider implementations must inherit from this abstract class
"""

from abc import ABC, abstractmethod
from typing import Dict


class PlaceLookupProvider(ABC):
    """
    Abstract base class for place lookup providers (Google Places, ...)
    """

    @abstractmethod
    def get_details(self, place_id: str) -> Dict:
        """
        Resolve a provider place id into a Place document

        Args:
            place_id: Provider-specific place identifier

        Returns:
            Dict with Place keys: name, phoneNumber, website, openingHours,
            photos, reviews, types, formatted_address, briefDescription, geometry

        Raises:
            UpstreamError: lookup failed, timed out or returned no result

        Example:
            >>> provider.get_details("ChIJLU7jZClu5kcR4PcOOO6p3I0")
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return provider identifier (e.g. 'google_places')"""
        pass
