"""
HopTrip API Client
==================

Thin wrapper over requests.Session:
- injects the bearer token on every call
- applies a fixed timeout
- logs and raises HopTripAPIError on non-2xx responses

Usage:
    client = HopTripClient("http://localhost:8000", token=token)
    trip = client.create_trip("Paris", "2024-06-01", "2024-06-03", background)
    client.add_activity(trip["_id"], "2024-06-01", {"name": "Louvre"})
"""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 10


class HopTripAPIError(Exception):
    """Non-2xx response from the HopTrip API."""

    def __init__(self, status_code: int, message: str, kind: Optional[str] = None, body: Optional[dict] = None):
        self.status_code = status_code
        self.message = message
        self.kind = kind
        self.body = body or {}
        super().__init__(f"{status_code} {kind or 'Error'}: {message}")


class HopTripClient:
    """Session-based client for the HopTrip REST API."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT_SEC,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.set_token(token)

    def set_token(self, token: Optional[str]):
        """Attach (or clear, with None) the bearer token used on later calls."""
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def _request(self, method: str, path: str, json: Optional[dict] = None,
                 params: Optional[dict] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        response = self.session.request(method, url, json=json, params=params, timeout=self.timeout)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not 200 <= response.status_code < 300:
            message = body.get("resultMessage") or response.reason or "Request failed"
            logger.error(f"[API] {method} {path} -> {response.status_code}: {message}")
            raise HopTripAPIError(response.status_code, message, body.get("error"), body)

        return body

    # ============================================
    # Auth
    # ============================================

    def google_login(self, id_token: str) -> Dict[str, Any]:
        """Exchange a Google ID token for a session token; the token is kept for later calls."""
        body = self._request("POST", "/google-login", json={"idToken": id_token})
        self.set_token(body.get("token"))
        return body

    # ============================================
    # Trips
    # ============================================

    def create_trip(self, trip_name: str, start_date: str, end_date: str, background: str,
                    **extra) -> Dict[str, Any]:
        payload = {
            "tripName": trip_name,
            "startDate": start_date,
            "endDate": end_date,
            "background": background,
        }
        payload.update(extra)
        return self._request("POST", "/trip", json=payload)["trip"]

    def get_trip(self, trip_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/trip/{trip_id}")["trip"]

    def update_trip(self, trip_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/trip/{trip_id}", json=fields)["trip"]

    def delete_trip(self, trip_id: str):
        self._request("DELETE", f"/trip/{trip_id}")

    def list_user_trips(self, user_id: str, status: Optional[str] = None, limit: int = 10,
                        offset: int = 0) -> Dict[str, Any]:
        params = {"limit": limit, "offset": offset}
        if status:
            params["status"] = status
        body = self._request("GET", f"/trips/user/{user_id}", params=params)
        return {"trips": body.get("trips", []), "pagination": body.get("pagination", {})}

    def search_trips(self, query: Optional[str] = None, tags: Optional[List[str]] = None,
                     status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {}
        if query:
            params["query"] = query
        if tags:
            params["tags"] = ",".join(tags)
        if status:
            params["status"] = status
        return self._request("GET", "/trips/search", params=params)["trips"]

    def get_trip_stats(self, trip_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/trip/{trip_id}/stats")["stats"]

    # ============================================
    # Itinerary & places
    # ============================================

    def get_itinerary(self, trip_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/trip/{trip_id}/itinerary")["itinerary"]

    def add_activity(self, trip_id: str, date: str, activity: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._request("POST", f"/trips/{trip_id}/itinerary/{date}", json=activity)["itinerary"]

    def remove_activity(self, trip_id: str, date: str, activity_id: str) -> List[Dict[str, Any]]:
        path = f"/trips/{trip_id}/itinerary/{date}/activity/{activity_id}"
        return self._request("DELETE", path)["itinerary"]

    def get_places(self, trip_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/trip/{trip_id}/placesToVisit")["placesToVisit"]

    def add_place(self, trip_id: str, place_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/trip/{trip_id}/addPlace", json={"placeId": place_id})["trip"]

    def remove_place(self, trip_id: str, place_id: str) -> List[Dict[str, Any]]:
        return self._request("DELETE", f"/trip/{trip_id}/place/{place_id}")["placesToVisit"]

    # ============================================
    # Budget & expenses
    # ============================================

    def set_budget(self, trip_id: str, budget: float) -> Dict[str, Any]:
        return self._request("PUT", f"/setBudget/{trip_id}", json={"budget": budget})["trip"]

    def add_expense(self, trip_id: str, category: str, price: float, paid_by: str,
                    split_by: str) -> Dict[str, Any]:
        payload = {"category": category, "price": price, "paidBy": paid_by, "splitBy": split_by}
        return self._request("POST", f"/addExpense/{trip_id}", json=payload)["trip"]

    def get_expenses(self, trip_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/getExpenses/{trip_id}")["expenses"]

    def remove_expense(self, trip_id: str, expense_id: str) -> List[Dict[str, Any]]:
        return self._request("DELETE", f"/trip/{trip_id}/expense/{expense_id}")["expenses"]

    # ============================================
    # Invitations
    # ============================================

    def send_invite(self, trip_id: str, email: str) -> Dict[str, Any]:
        return self._request("POST", "/sendInviteEmail", json={"tripId": trip_id, "email": email})

    def join_trip(self, token: str) -> Dict[str, Any]:
        return self._request("GET", "/joinTrip", params={"token": token})
