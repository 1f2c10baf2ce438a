"""
HopTrip API client used by scripts and the mobile app's data layer.
"""

from .api_client import HopTripClient, HopTripAPIError

__all__ = [
    'HopTripClient',
    'HopTripAPIError',
]
