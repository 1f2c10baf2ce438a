"""
Google Places Provider Implementation
Resolves place ids through the Places Details web service
"""

import logging
import requests
from typing import Dict, Optional

from ..base_provider import PlaceLookupProvider
from ...common.exceptions import UpstreamError

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"


class GooglePlacesProvider(PlaceLookupProvider):
    """
    Google Places provider

    APIs used:
    - Place Details: full metadata for one place id
    - Place Photos: photo URLs built from photo references

    Docs: https://developers.google.com/maps/documentation/places/web-service/details
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/place"

    DETAILS_FIELDS = [
        "place_id",
        "name",
        "formatted_address",
        "formatted_phone_number",
        "website",
        "opening_hours",
        "photos",
        "reviews",
        "types",
        "geometry",
        "editorial_summary",
    ]

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10, photo_max_width: int = 400,
                 session: Optional[requests.Session] = None):
        """
        Initialize Google Places Provider

        Args:
            api_key: Google Places API key
            timeout: Outbound request timeout in seconds
            photo_max_width: maxwidth used for photo URLs
            session: Optional requests session (tests pass a mock)
        """
        self.api_key = api_key
        self.timeout = timeout
        self.photo_max_width = photo_max_width
        self.session = session or requests.Session()

        if not self.api_key:
            logger.warning("GOOGLE_PLACES_API_KEY not configured, place lookups will fail")

    def get_provider_name(self) -> str:
        return "google_places"

    def get_details(self, place_id: str) -> Dict:
        if not self.api_key:
            raise UpstreamError("Google Places API key not configured", provider=self.get_provider_name())

        url = f"{self.BASE_URL}/details/json"
        params = {
            "place_id": place_id,
            "fields": ",".join(self.DETAILS_FIELDS),
            "key": self.api_key,
        }

        logger.info(f"Fetching Google Place details for ID: {place_id}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.HTTPError as e:
            logger.error(f"Google Places Details API error: {e.response.status_code}")
            raise UpstreamError("Place lookup failed", provider=self.get_provider_name(),
                                details={"placeId": place_id}) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Google Places Details API request failed: {e}")
            raise UpstreamError("Place lookup failed", provider=self.get_provider_name(),
                                details={"placeId": place_id}) from e
        except ValueError as e:
            logger.error(f"Google Places Details API returned invalid JSON: {e}")
            raise UpstreamError("Place lookup returned an invalid response",
                                provider=self.get_provider_name()) from e

        status = data.get("status")
        result = data.get("result")
        if status != "OK" or not result:
            logger.warning(f"Google Places Details status {status} for ID: {place_id}")
            raise UpstreamError(
                f"Place lookup returned status {status}",
                provider=self.get_provider_name(),
                details={"placeId": place_id, "status": status}
            )

        logger.info(f"Retrieved details for place: {result.get('name', 'Unknown')}")
        try:
            return self.transform_to_place(result)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Google Places Details result malformed for ID {place_id}: {e}")
            raise UpstreamError("Place lookup returned incomplete data", provider=self.get_provider_name(),
                                details={"placeId": place_id}) from e

    def photo_url(self, photo_reference: str) -> str:
        return (
            f"{self.BASE_URL}/photo?maxwidth={self.photo_max_width}"
            f"&photoreference={photo_reference}&key={self.api_key}"
        )

    def transform_to_place(self, details: Dict) -> Dict:
        """
        Map a Details result onto the Place document shape

        briefDescription falls back from the editorial summary to the first
        review text, then to a fixed placeholder.
        """
        reviews = [
            {
                "authorName": review.get("author_name"),
                "rating": review.get("rating"),
                "text": review.get("text"),
            }
            for review in details.get("reviews") or []
        ]

        description = (details.get("editorial_summary") or {}).get("overview")
        if not description and reviews:
            description = reviews[0]["text"]

        return {
            "name": details.get("name"),
            "phoneNumber": details.get("formatted_phone_number"),
            "website": details.get("website"),
            "openingHours": (details.get("opening_hours") or {}).get("weekday_text"),
            "photos": [
                self.photo_url(photo["photo_reference"])
                for photo in details.get("photos") or []
                if photo.get("photo_reference")
            ],
            "reviews": reviews,
            "types": details.get("types") or [],
            "formatted_address": details.get("formatted_address"),
            "briefDescription": description or NO_DESCRIPTION,
            "geometry": _geometry(details.get("geometry") or {}),
        }


def _lat_lng(point: Dict) -> Dict:
    lat, lng = point.get("lat"), point.get("lng")
    if lat is None or lng is None:
        raise ValueError(f"incomplete coordinates: {point}")
    return {"lat": lat, "lng": lng}


def _geometry(geometry: Dict) -> Dict:
    location = geometry.get("location")
    viewport = geometry.get("viewport")
    return {
        "location": _lat_lng(location) if location else None,
        "viewport": {
            "northeast": _lat_lng(viewport.get("northeast") or {}),
            "southwest": _lat_lng(viewport.get("southwest") or {}),
        } if viewport else None,
    }
