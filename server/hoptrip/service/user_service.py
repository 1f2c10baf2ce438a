import logging
from datetime import date

from ..common.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..model.mongo.user import PreferencesUpdateRequest, UserUpdateRequest
from ..utils.date_helpers import parse_display_date
from ..utils.sanitization import clean_query_text
from ..utils.validation_helpers import parse_model

logger = logging.getLogger(__name__)

PRIVATE_FIELDS = ("refreshToken",)
MIN_SEARCH_LENGTH = 2
MAX_SEARCH_LIMIT = 50


def _require_self(actor_id, user_id, action):
    if actor_id != user_id:
        logger.warning(f"[WARN] User {actor_id} tried to {action} for {user_id}")
        raise ForbiddenError(f"Not authorized to {action} for this user")


class UserService:
    """User profile, preferences and per-user trip statistics."""

    def __init__(self, user_repo, trip_repo):
        self.user_repo = user_repo
        self.trip_repo = trip_repo

    @staticmethod
    def _strip_private(user):
        return {k: v for k, v in user.items() if k not in PRIVATE_FIELDS}

    def _load(self, user_id):
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def get_user(self, user_id):
        return self._strip_private(self._load(user_id))

    def get_public_profile(self, user_id):
        user = self._load(user_id)
        return {"_id": user["_id"], "name": user.get("name"), "photo": user.get("photo")}

    def update_profile(self, user_id, actor_id, data):
        """Self only; name and photo are the only writable fields."""
        _require_self(actor_id, user_id, "update the profile")
        request = parse_model(UserUpdateRequest, data)
        changes = request.model_dump(by_alias=True, exclude_none=True)
        if not changes:
            return self.get_user(user_id)

        updated = self.user_repo.update_profile(user_id, changes)
        if not updated:
            raise NotFoundError("User", user_id)
        logger.info(f"Profile updated: {user_id} fields={sorted(changes)}")
        return self._strip_private(updated)

    def update_preferences(self, user_id, actor_id, data):
        """Accepts {preferences: {...}} or the preference keys directly."""
        _require_self(actor_id, user_id, "update preferences")
        if isinstance(data, dict) and isinstance(data.get("preferences"), dict):
            data = data["preferences"]
        request = parse_model(PreferencesUpdateRequest, data)
        changes = request.model_dump(by_alias=True, exclude_none=True)
        if not changes:
            raise ValidationError("No preferences supplied", field="preferences")

        updated = self.user_repo.update_preferences(user_id, changes)
        if not updated:
            raise NotFoundError("User", user_id)
        return self._strip_private(updated)

    def deactivate(self, user_id, actor_id):
        _require_self(actor_id, user_id, "deactivate the account")
        if not self.user_repo.deactivate(user_id):
            raise NotFoundError("User", user_id)

    def search(self, query, limit=10):
        """Active users whose name or email contains `query`."""
        query = clean_query_text(query)
        if not query or len(query) < MIN_SEARCH_LENGTH:
            raise ValidationError(
                f"Search query must be at least {MIN_SEARCH_LENGTH} characters", field="query"
            )
        if not 1 <= limit <= MAX_SEARCH_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_SEARCH_LIMIT}", field="limit")
        return self.user_repo.search(query, limit)

    def get_stats(self, user_id, actor_id, today=None):
        """
        Aggregate counts over every trip the user hosts or travels on.

        joinedTrips counts trips where the user is a traveler but not the host.
        """
        _require_self(actor_id, user_id, "view statistics")
        today = today or date.today()
        trips = self.trip_repo.find_for_user(user_id, limit=0)

        def starts_after_today(trip):
            try:
                return parse_display_date(trip.get("startDate")) > today
            except ValueError:
                return False

        hosted = [trip for trip in trips if trip.get("host") == user_id]
        return {
            "totalTrips": len(trips),
            "hostedTrips": len(hosted),
            "joinedTrips": len(trips) - len(hosted),
            "totalExpenses": sum(
                expense.get("price", 0) for trip in trips for expense in trip.get("expenses", [])
            ),
            "upcomingTrips": sum(
                1 for trip in trips if starts_after_today(trip) and trip.get("status") != "cancelled"
            ),
            "completedTrips": sum(1 for trip in trips if trip.get("status") == "completed"),
        }
