"""
User Repository Interface - MongoDB Data Access Layer
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any


class UserRepositoryInterface(ABC):
    """
    Abstract interface for User data access.

    Implementations:
    - UserRepository (MongoDB)
    - InMemoryUserRepository (tests)
    """

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get user by id. Malformed ids behave like missing users."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get user by lower-cased email."""
        pass

    @abstractmethod
    def get_by_google_id(self, google_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def upsert_google_user(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert or refresh a user keyed by googleId and stamp lastLogin.

        Args:
            profile: googleId, email, name, givenName, familyName, photo

        Returns:
            The stored user document

        Raises:
            ConflictError: email already belongs to another googleId
        """
        pass

    @abstractmethod
    def update_profile(self, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def update_preferences(self, user_id: str, preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge preference keys (dotted $set) and return the updated user."""
        pass

    @abstractmethod
    def deactivate(self, user_id: str) -> bool:
        pass

    @abstractmethod
    def search(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Active users whose name or email contains `query` (case-insensitive)."""
        pass

    @abstractmethod
    def get_summaries(self, user_ids: List[str]) -> List[Dict[str, Any]]:
        """{_id, name, email, photo} for each existing id, in input order."""
        pass
