"""
Trip Service - trip aggregate operations
=========================================

Owns the lifecycle of a trip document and every nested-collection
mutation (itinerary activities, places to visit, expenses, travelers).

Rules:
- payloads are validated before any storage call
- existence is checked before authorization (missing trip -> NotFound)
- delete and archive are host-only, every other mutation needs a member
- nested arrays change through targeted push/pull, never whole-document writes
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..common.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from ..model.mongo.trip import (
    ActivityCreateRequest,
    AddPlaceRequest,
    BudgetRequest,
    ExpenseCreateRequest,
    ItineraryDay,
    Place,
    Trip,
    TripCreateRequest,
    TripStats,
    TripStatusEnum,
    TripUpdateRequest,
)
from ..utils.validation_helpers import normalize_email, parse_model
from ..utils.date_helpers import (
    expand_itinerary_dates,
    format_display_date,
    parse_display_date,
    weekday_name,
)
from .authorization import TripRole, authorize

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class TripService:
    """Trip aggregate service with dependency injection."""

    def __init__(self, trip_repo, user_repo, place_provider, config=None):
        self.trip_repo = trip_repo
        self.user_repo = user_repo
        self.place_provider = place_provider
        self.search_limit = getattr(config, "SEARCH_RESULT_LIMIT", 20)

    # ============================================
    # Helpers
    # ============================================

    def _load(self, trip_id: str) -> Dict[str, Any]:
        trip = self.trip_repo.get_by_id(trip_id)
        if not trip:
            raise NotFoundError("Trip", trip_id)
        return trip

    def _load_authorized(self, trip_id, actor_id, role=TripRole.MEMBER):
        trip = self._load(trip_id)
        authorize(actor_id, trip, role)
        return trip

    def _populate(self, trip: Dict[str, Any], public: bool = False) -> Dict[str, Any]:
        """
        Resolve host and travelers into {_id, name, email, photo} summaries.

        public=True drops emails (search and public profile listings).
        """
        ids = [trip["host"]] + [uid for uid in trip.get("travelers", []) if uid != trip["host"]]
        summaries = {}
        for summary in self.user_repo.get_summaries(ids):
            if public:
                summary = {k: v for k, v in summary.items() if k != "email"}
            summaries[summary["_id"]] = summary
        populated = dict(trip)
        populated["host"] = summaries.get(trip["host"], {"_id": trip["host"]})
        populated["travelers"] = [summaries.get(uid, {"_id": uid}) for uid in trip.get("travelers", [])]
        return populated

    @staticmethod
    def _build_itinerary(start, end, existing=None) -> List[Dict[str, Any]]:
        """One entry per day in [start, end]; days already present keep their activities."""
        kept = {day["date"]: day.get("activities", []) for day in existing or []}
        return [
            {"date": day, "activities": kept.get(day, [])}
            for day in expand_itinerary_dates(start, end)
        ]

    # ============================================
    # Trip lifecycle
    # ============================================

    def create(self, actor_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a trip hosted by the actor.

        The itinerary holds one empty day per date from startDate to endDate
        inclusive; the host is enrolled into travelers.
        """
        request = parse_model(TripCreateRequest, data)

        trip = Trip(
            trip_name=request.trip_name,
            start_date=format_display_date(request.start_date),
            end_date=format_display_date(request.end_date),
            start_day=request.start_day or weekday_name(request.start_date),
            end_day=request.end_day or weekday_name(request.end_date),
            background=request.background,
            host=actor_id,
            travelers=[actor_id],
            itinerary=[
                ItineraryDay(date=day) for day in expand_itinerary_dates(request.start_date, request.end_date)
            ],
        )
        created = self.trip_repo.create(trip.to_document())
        logger.info(f"Trip created: {created['_id']} by {actor_id}")
        return created

    def get_trip(self, trip_id: str, actor_id: str) -> Dict[str, Any]:
        return self._populate(self._load_authorized(trip_id, actor_id))

    def list_user_trips(self, user_id: str, actor_id: str, status: Optional[str] = None,
                        limit: int = 10, offset: int = 0) -> Dict[str, Any]:
        """Trips where the user is host or traveler, newest first, paginated."""
        if actor_id != user_id:
            raise ForbiddenError("You can only list your own trips")
        self._check_page(limit, offset)
        if status:
            self._check_status(status)

        trips = self.trip_repo.find_for_user(user_id, status=status, skip=offset, limit=limit)
        total = self.trip_repo.count_for_user(user_id, status=status)
        return {
            "trips": [self._populate(trip) for trip in trips],
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "hasMore": total > offset + limit,
            },
        }

    def update(self, trip_id: str, actor_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge whitelisted fields into the trip. Setting status to completed
        requires the host.

        A date change rebuilds the itinerary for the new range: days still in
        range keep their activities, days outside it are dropped.
        """
        request = parse_model(TripUpdateRequest, patch)
        changes = request.model_dump(by_alias=True, exclude_unset=True)
        changes = {k: v for k, v in changes.items() if v is not None}

        trip = self._load_authorized(trip_id, actor_id)

        # completing a trip is the host's call, same as archive
        if changes.get("status") == TripStatusEnum.COMPLETED.value:
            authorize(actor_id, trip, TripRole.HOST)

        if "startDate" in changes or "endDate" in changes:
            start = request.start_date or parse_display_date(trip["startDate"])
            end = request.end_date or parse_display_date(trip["endDate"])
            if end <= start:
                raise ValidationError("End date must be after start date", field="endDate")
            changes["startDate"] = format_display_date(start)
            changes["endDate"] = format_display_date(end)
            changes.setdefault("startDay", weekday_name(start))
            changes.setdefault("endDay", weekday_name(end))
            changes["itinerary"] = self._build_itinerary(start, end, trip.get("itinerary"))

        if not changes:
            return self._populate(trip)

        updated = self.trip_repo.update_fields(trip_id, changes)
        if not updated:
            raise NotFoundError("Trip", trip_id)
        logger.info(f"Trip updated: {trip_id} fields={sorted(changes)}")
        return self._populate(updated)

    def archive(self, trip_id: str, actor_id: str) -> Dict[str, Any]:
        self._load_authorized(trip_id, actor_id, TripRole.HOST)
        updated = self.trip_repo.update_fields(trip_id, {"status": TripStatusEnum.COMPLETED.value})
        if not updated:
            raise NotFoundError("Trip", trip_id)
        logger.info(f"Trip archived: {trip_id}")
        return self._populate(updated)

    def delete(self, trip_id: str, actor_id: str) -> None:
        self._load_authorized(trip_id, actor_id, TripRole.HOST)
        if not self.trip_repo.delete(trip_id):
            raise NotFoundError("Trip", trip_id)
        logger.info(f"Trip deleted: {trip_id} by {actor_id}")

    def duplicate(self, trip_id: str, actor_id: str) -> Dict[str, Any]:
        """
        Copy a trip for the actor. Itinerary and places are deep-copied;
        expenses are reset and the actor becomes the sole host/traveler.
        """
        source = self._load_authorized(trip_id, actor_id)

        now = datetime.now(tz=timezone.utc)
        copy_doc = copy.deepcopy(source)
        copy_doc.pop("_id", None)
        copy_doc.update({
            "tripName": f"{source['tripName']} (Copy)",
            "host": actor_id,
            "travelers": [actor_id],
            "expenses": [],
            "status": TripStatusEnum.PLANNING.value,
            "createdAt": now,
            "updatedAt": now,
        })
        created = self.trip_repo.create(copy_doc)
        logger.info(f"Trip duplicated: {trip_id} -> {created['_id']}")
        return self._populate(created)

    # ============================================
    # Travelers
    # ============================================

    def add_traveler(self, trip_id: str, email: str, actor_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Enroll the user registered under `email` as a traveler.

        actor_id None means the enrollment is already authorized by the
        caller (a verified invitation token); otherwise the actor must be
        a member.

        Raises:
            NotFoundError: no trip, or no user with that email
            ConflictError: user already a traveler
        """
        normalized = normalize_email(email)

        trip = self._load(trip_id)
        if actor_id is not None:
            authorize(actor_id, trip)

        user = self.user_repo.get_by_email(normalized)
        if not user:
            raise NotFoundError("User", details={"email": normalized})

        if user["_id"] in trip.get("travelers", []) or not self.trip_repo.add_traveler(trip_id, user["_id"]):
            raise ConflictError("User is already a traveler", details={"userId": user["_id"]})

        logger.info(f"Traveler {user['_id']} added to trip {trip_id}")
        return self._populate(self._load(trip_id))

    def remove_traveler(self, trip_id: str, user_id: str, actor_id: str) -> Dict[str, Any]:
        """Host may remove anyone; a traveler may remove only themselves. Idempotent."""
        trip = self._load(trip_id)
        if actor_id != user_id:
            authorize(actor_id, trip, TripRole.HOST)

        self.trip_repo.remove_traveler(trip_id, user_id)
        logger.info(f"Traveler {user_id} removed from trip {trip_id} by {actor_id}")
        return self._populate(self._load(trip_id))

    # ============================================
    # Itinerary
    # ============================================

    def get_itinerary(self, trip_id: str, actor_id: str) -> List[Dict[str, Any]]:
        return self._load_authorized(trip_id, actor_id).get("itinerary", [])

    def add_activity(self, trip_id: str, date: str, data: Dict[str, Any], actor_id: str) -> List[Dict[str, Any]]:
        """
        Append an activity to the itinerary day whose date equals `date`.

        A date outside the itinerary is NotFound; no day is created.
        """
        payload = dict(data) if isinstance(data, dict) else data
        if isinstance(payload, dict):
            payload.pop("_id", None)
            payload.setdefault("date", date)
        activity = parse_model(ActivityCreateRequest, payload)

        trip = self._load_authorized(trip_id, actor_id)
        if not any(day.get("date") == date for day in trip.get("itinerary", [])):
            raise NotFoundError("Itinerary day", date)

        if not self.trip_repo.push_activity(trip_id, date, activity.to_document()):
            raise NotFoundError("Itinerary day", date)
        logger.info(f"Activity {activity.id} added to trip {trip_id} on {date}")
        return self._load(trip_id).get("itinerary", [])

    def remove_activity(self, trip_id: str, date: str, activity_id: str, actor_id: str) -> List[Dict[str, Any]]:
        """Remove an activity by id from the matching day; absent ids are a no-op."""
        trip = self._load_authorized(trip_id, actor_id)
        if not any(day.get("date") == date for day in trip.get("itinerary", [])):
            raise NotFoundError("Itinerary day", date)

        self.trip_repo.pull_activity(trip_id, date, activity_id)
        return self._load(trip_id).get("itinerary", [])

    # ============================================
    # Places to visit
    # ============================================

    def get_places(self, trip_id: str, actor_id: str) -> List[Dict[str, Any]]:
        return self._load_authorized(trip_id, actor_id).get("placesToVisit", [])

    def add_place(self, trip_id: str, data: Dict[str, Any], actor_id: str) -> Dict[str, Any]:
        """
        Resolve a provider place id and append the Place record.

        Lookup failures propagate as UpstreamError; nothing is stored.
        """
        request = parse_model(AddPlaceRequest, data)
        self._load_authorized(trip_id, actor_id)

        details = self.place_provider.get_details(request.place_id)
        try:
            place = Place.model_validate(details)
        except PydanticValidationError as e:
            logger.error(f"Place lookup returned an unusable record for {request.place_id}: {e}")
            raise UpstreamError("Place lookup returned incomplete data",
                                provider=self.place_provider.get_provider_name()) from e

        updated = self.trip_repo.push_place(trip_id, place.to_document())
        if not updated:
            raise NotFoundError("Trip", trip_id)
        logger.info(f"Place '{place.name}' added to trip {trip_id}")
        return updated

    def remove_place(self, trip_id: str, place_id: str, actor_id: str) -> List[Dict[str, Any]]:
        self._load_authorized(trip_id, actor_id)
        updated = self.trip_repo.pull_place(trip_id, place_id)
        if not updated:
            raise NotFoundError("Trip", trip_id)
        return updated.get("placesToVisit", [])

    # ============================================
    # Budget & expenses
    # ============================================

    def get_expenses(self, trip_id: str, actor_id: str) -> List[Dict[str, Any]]:
        return self._load_authorized(trip_id, actor_id).get("expenses", [])

    def add_expense(self, trip_id: str, data: Dict[str, Any], actor_id: str) -> Dict[str, Any]:
        payload = dict(data) if isinstance(data, dict) else data
        if isinstance(payload, dict):
            payload.pop("_id", None)
        expense = parse_model(ExpenseCreateRequest, payload)

        self._load_authorized(trip_id, actor_id)
        updated = self.trip_repo.push_expense(trip_id, expense.to_document())
        if not updated:
            raise NotFoundError("Trip", trip_id)
        logger.info(f"Expense {expense.id} ({expense.price}) added to trip {trip_id}")
        return updated

    def remove_expense(self, trip_id: str, expense_id: str, actor_id: str) -> List[Dict[str, Any]]:
        self._load_authorized(trip_id, actor_id)
        updated = self.trip_repo.pull_expense(trip_id, expense_id)
        if not updated:
            raise NotFoundError("Trip", trip_id)
        return updated.get("expenses", [])

    def set_budget(self, trip_id: str, data: Dict[str, Any], actor_id: str) -> Dict[str, Any]:
        request = parse_model(BudgetRequest, data)
        self._load_authorized(trip_id, actor_id)
        updated = self.trip_repo.update_fields(trip_id, {"budget": request.budget})
        if not updated:
            raise NotFoundError("Trip", trip_id)
        logger.info(f"Budget set to {request.budget} on trip {trip_id}")
        return updated

    # ============================================
    # Derived views
    # ============================================

    @staticmethod
    def stats_for(trip: Dict[str, Any]) -> Dict[str, Any]:
        """Fold a loaded trip into its stats. Overspend gives a negative budgetRemaining."""
        total_expenses = sum(expense.get("price", 0) for expense in trip.get("expenses", []))
        budget = trip.get("budget")
        members = {trip["host"], *trip.get("travelers", [])}
        stats = TripStats(
            total_places=len(trip.get("placesToVisit", [])),
            total_activities=sum(len(day.get("activities", [])) for day in trip.get("itinerary", [])),
            total_expenses=total_expenses,
            budget_remaining=budget - total_expenses if budget is not None else None,
            traveler_count=len(members),
            days_count=len(trip.get("itinerary", [])),
        )
        return stats.to_document()

    def compute_stats(self, trip_id: str, actor_id: str) -> Dict[str, Any]:
        return self.stats_for(self._load_authorized(trip_id, actor_id))

    @staticmethod
    def _check_status(status: str):
        allowed = [s.value for s in TripStatusEnum]
        if status not in allowed:
            raise ValidationError(f"status must be one of {', '.join(allowed)}", field="status")

    def search(self, query: Optional[str] = None, tags: Optional[List[str]] = None,
               status: Optional[str] = None) -> List[Dict[str, Any]]:
        """Public trips only, newest first, capped at the configured limit."""
        if status:
            self._check_status(status)
        trips = self.trip_repo.search_public(query=query, tags=tags or None, status=status,
                                             limit=self.search_limit)
        return [self._populate(trip, public=True) for trip in trips]

    def list_public_for_user(self, user_id: str, limit: int = 10, offset: int = 0) -> List[Dict[str, Any]]:
        """Public trips the user hosts or travels on."""
        self._check_page(limit, offset)
        trips = self.trip_repo.find_public_for_user(user_id, skip=offset, limit=limit)
        return [self._populate(trip, public=True) for trip in trips]

    @staticmethod
    def _check_page(limit: int, offset: int):
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}", field="limit")
        if offset < 0:
            raise ValidationError("offset must be non-negative", field="offset")
