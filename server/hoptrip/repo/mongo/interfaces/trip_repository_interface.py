"""
Trip Repository Interface - MongoDB Data Access Layer
======================================================

Purpose:
- Define abstract interface for trip aggregate persistence
- Enable dependency injection and unit testing (in-memory fakes)
- Nested collections change only through targeted push/pull operations,
  never by rewriting the whole document
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any


class TripRepositoryInterface(ABC):
    """
    Abstract interface for Trip data access.

    Implementations:
    - TripRepository (MongoDB) - Production implementation
    - InMemoryTripRepository (tests)

    Documents are returned as dicts with camelCase keys and `_id` as a
    hex string.
    """

    @abstractmethod
    def create(self, trip_doc: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new trip document.

        Args:
            trip_doc: Trip document (camelCase keys, no `_id`)

        Returns:
            Created document including its new `_id`
        """
        pass

    @abstractmethod
    def get_by_id(self, trip_id: str) -> Optional[Dict[str, Any]]:
        """Get trip by id. Malformed ids behave like missing trips."""
        pass

    @abstractmethod
    def find_for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        visibility: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> List[Dict[str, Any]]:
        """
        Trips where the user is host or traveler, newest first.

        Args:
            user_id: User identifier
            status: Filter by status (optional)
            visibility: Filter by visibility (optional)
            skip: Offset for pagination
            limit: Max results (0 = no limit)
        """
        pass

    @abstractmethod
    def count_for_user(self, user_id: str, status: Optional[str] = None) -> int:
        """Count trips where the user is host or traveler."""
        pass

    @abstractmethod
    def update_fields(self, trip_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        $set scalar fields and stamp updatedAt.

        Returns:
            Updated document, or None if the trip does not exist
        """
        pass

    @abstractmethod
    def delete(self, trip_id: str) -> bool:
        """Delete a trip. Returns True if a document was removed."""
        pass

    # --- travelers ---

    @abstractmethod
    def add_traveler(self, trip_id: str, user_id: str) -> bool:
        """
        Append user_id to travelers unless already present.

        Returns:
            True if appended, False if the user was already a traveler
        """
        pass

    @abstractmethod
    def remove_traveler(self, trip_id: str, user_id: str) -> bool:
        """Pull user_id from travelers. Returns True if the trip exists."""
        pass

    # --- itinerary ---

    @abstractmethod
    def push_activity(self, trip_id: str, date: str, activity: Dict[str, Any]) -> bool:
        """
        Append an activity to the itinerary day matching `date`.

        Returns:
            True if the trip has a day with that date
        """
        pass

    @abstractmethod
    def pull_activity(self, trip_id: str, date: str, activity_id: str) -> bool:
        """Remove an activity by id from the day matching `date`."""
        pass

    # --- places / expenses ---

    @abstractmethod
    def push_place(self, trip_id: str, place: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Append a place; returns the updated document."""
        pass

    @abstractmethod
    def pull_place(self, trip_id: str, place_id: str) -> Optional[Dict[str, Any]]:
        """Remove a place by id; returns the updated document."""
        pass

    @abstractmethod
    def push_expense(self, trip_id: str, expense: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Append an expense; returns the updated document."""
        pass

    @abstractmethod
    def pull_expense(self, trip_id: str, expense_id: str) -> Optional[Dict[str, Any]]:
        """Remove an expense by id; returns the updated document."""
        pass

    # --- discovery ---

    @abstractmethod
    def search_public(
        self,
        query: Optional[str] = None,
        tags: Optional[List[str]] = None,
        status: Optional[str] = None,
        limit: int = 20
    ) -> List[Dict[str, Any]]:
        """
        Public trips matching a literal, case-insensitive substring of
        tripName/notes and sharing any of `tags`, newest first.
        """
        pass

    @abstractmethod
    def find_public_for_user(self, user_id: str, skip: int = 0, limit: int = 10) -> List[Dict[str, Any]]:
        """Public trips where the user is host or traveler, newest first."""
        pass
