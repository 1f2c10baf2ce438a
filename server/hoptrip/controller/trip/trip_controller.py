"""
Trip Controller - REST API for trips
=====================================

Every mutating route requires a bearer token; the acting user is
always the authenticated one. Search is public.
"""

import logging
from flask import request

from ...middleware import JWT_required, get_json_body, get_int_arg
from ...service.trip_service import TripService
from ...utils.response_helpers import build_success_response
from ...utils.sanitization import clean_query_text, split_tags

logger = logging.getLogger(__name__)


class TripController:
    """
    Controller for trip endpoints.

    Routes:
    - POST   /trip                                               Create trip
    - GET    /trip/<trip_id>                                     Get trip
    - PUT    /trip/<trip_id>                                     Update trip
    - DELETE /trip/<trip_id>                                     Delete trip (host)
    - GET    /trips/<owner_id>, /trips/user/<owner_id>           List user's trips
    - POST   /trips/<trip_id>/duplicate                          Duplicate trip
    - PATCH  /trips/<trip_id>/archive                            Archive trip (host)
    - GET    /trips/search                                       Search public trips
    - GET    /trip/<trip_id>/stats                               Trip stats
    - POST   /trip/<trip_id>/traveler                            Add traveler by email
    - DELETE /trip/<trip_id>/traveler/<member_id>                 Remove traveler
    - GET    /trip/<trip_id>/itinerary                           Itinerary
    - POST   /trips/<trip_id>/itinerary/<date>                   Add activity
    - DELETE /trips/<trip_id>/itinerary/<date>/activity/<id>     Remove activity
    - GET    /trip/<trip_id>/placesToVisit, /trips/<trip_id>/places
    - POST   /trip/<trip_id>/addPlace                            Resolve + add place
    - DELETE /trip/<trip_id>/place/<place_id>                    Remove place
    - PUT    /setBudget/<trip_id>                                Set budget
    - POST   /addExpense/<trip_id>                               Add expense
    - GET    /getExpenses/<trip_id>                              Expenses
    - DELETE /trip/<trip_id>/expense/<expense_id>                Remove expense
    """

    def __init__(self, blueprint, trip_service: TripService):
        self.api = blueprint
        self.trip_service = trip_service
        self._register_routes()

    def _register_routes(self):
        """Register all routes with Flask."""
        api = self.api
        jwt = self._wrap_jwt_required

        api.add_url_rule("/trip", "create_trip", jwt(self.create_trip), methods=["POST"])
        api.add_url_rule("/trip/<trip_id>", "get_trip", jwt(self.get_trip), methods=["GET"])
        api.add_url_rule("/trip/<trip_id>", "update_trip", jwt(self.update_trip), methods=["PUT"])
        api.add_url_rule("/trip/<trip_id>", "delete_trip", jwt(self.delete_trip), methods=["DELETE"])

        api.add_url_rule("/trips/search", "search_trips", self.search_trips, methods=["GET"])
        api.add_url_rule("/trips/<owner_id>", "list_user_trips", jwt(self.list_user_trips), methods=["GET"])
        api.add_url_rule("/trips/user/<owner_id>", "list_user_trips_paged", jwt(self.list_user_trips),
                         methods=["GET"])
        api.add_url_rule("/trips/<trip_id>/duplicate", "duplicate_trip", jwt(self.duplicate_trip),
                         methods=["POST"])
        api.add_url_rule("/trips/<trip_id>/archive", "archive_trip", jwt(self.archive_trip), methods=["PATCH"])
        api.add_url_rule("/trip/<trip_id>/stats", "trip_stats", jwt(self.trip_stats), methods=["GET"])

        api.add_url_rule("/trip/<trip_id>/traveler", "add_traveler", jwt(self.add_traveler), methods=["POST"])
        api.add_url_rule("/trip/<trip_id>/traveler/<member_id>", "remove_traveler", jwt(self.remove_traveler),
                         methods=["DELETE"])

        api.add_url_rule("/trip/<trip_id>/itinerary", "get_itinerary", jwt(self.get_itinerary), methods=["GET"])
        api.add_url_rule("/trips/<trip_id>/itinerary/<date>", "add_activity", jwt(self.add_activity),
                         methods=["POST"])
        api.add_url_rule("/trips/<trip_id>/itinerary/<date>/activity/<activity_id>", "remove_activity",
                         jwt(self.remove_activity), methods=["DELETE"])

        api.add_url_rule("/trip/<trip_id>/placesToVisit", "get_places", jwt(self.get_places), methods=["GET"])
        api.add_url_rule("/trips/<trip_id>/places", "get_places_alias", jwt(self.get_places), methods=["GET"])
        api.add_url_rule("/trip/<trip_id>/addPlace", "add_place", jwt(self.add_place), methods=["POST"])
        api.add_url_rule("/trip/<trip_id>/place/<place_id>", "remove_place", jwt(self.remove_place),
                         methods=["DELETE"])

        api.add_url_rule("/setBudget/<trip_id>", "set_budget", jwt(self.set_budget), methods=["PUT"])
        api.add_url_rule("/addExpense/<trip_id>", "add_expense", jwt(self.add_expense), methods=["POST"])
        api.add_url_rule("/getExpenses/<trip_id>", "get_expenses", jwt(self.get_expenses), methods=["GET"])
        api.add_url_rule("/trip/<trip_id>/expense/<expense_id>", "remove_expense", jwt(self.remove_expense),
                         methods=["DELETE"])

    def _wrap_jwt_required(self, f):
        """Helper to maintain JWT required middleware."""
        @JWT_required
        def wrapper(user_id, *args, **kwargs):
            return f(user_id, *args, **kwargs)
        return wrapper

    # ============================================
    # Trip lifecycle
    # ============================================

    def create_trip(self, user_id):
        """
        Create a trip hosted by the caller.

        POST /trip
        Body:
        {
            "tripName": "Paris",
            "startDate": "2024-06-01",
            "endDate": "2024-06-03",
            "background": "https://images.example.com/paris.jpg"
        }
        """
        trip = self.trip_service.create(user_id, get_json_body(request))
        return build_success_response("Trip created successfully.", "20001", {"trip": trip}, 201)

    def get_trip(self, user_id, trip_id):
        trip = self.trip_service.get_trip(trip_id, user_id)
        return build_success_response("Trip retrieved successfully.", "20000", {"trip": trip})

    def update_trip(self, user_id, trip_id):
        trip = self.trip_service.update(trip_id, user_id, get_json_body(request))
        return build_success_response("Trip updated successfully.", "20000", {"trip": trip})

    def delete_trip(self, user_id, trip_id):
        self.trip_service.delete(trip_id, user_id)
        return build_success_response("Trip deleted successfully.", "20002")

    def list_user_trips(self, user_id, owner_id):
        """
        GET /trips/<owner_id>?status=planning&limit=10&offset=0
        """
        result = self.trip_service.list_user_trips(
            owner_id,
            user_id,
            status=request.args.get("status") or None,
            limit=get_int_arg(request, "limit", 10),
            offset=get_int_arg(request, "offset", 0),
        )
        return build_success_response("Trips retrieved successfully.", "20000", result)

    def duplicate_trip(self, user_id, trip_id):
        trip = self.trip_service.duplicate(trip_id, user_id)
        return build_success_response("Trip duplicated successfully.", "20001", {"trip": trip}, 201)

    def archive_trip(self, user_id, trip_id):
        trip = self.trip_service.archive(trip_id, user_id)
        return build_success_response("Trip archived successfully.", "20000", {"trip": trip})

    def trip_stats(self, user_id, trip_id):
        stats = self.trip_service.compute_stats(trip_id, user_id)
        return build_success_response("Trip stats retrieved successfully.", "20000", {"stats": stats})

    def search_trips(self):
        """
        Search public trips.

        GET /trips/search?query=paris&tags=food,museum&status=planning
        """
        trips = self.trip_service.search(
            query=clean_query_text(request.args.get("query")),
            tags=split_tags(request.args.get("tags")),
            status=request.args.get("status") or None,
        )
        return build_success_response("Trips retrieved successfully.", "20000", {"trips": trips})

    # ============================================
    # Travelers
    # ============================================

    def add_traveler(self, user_id, trip_id):
        data = get_json_body(request)
        trip = self.trip_service.add_traveler(trip_id, data.get("email"), actor_id=user_id)
        return build_success_response("Traveler added successfully.", "20000", {"trip": trip})

    def remove_traveler(self, user_id, trip_id, member_id):
        trip = self.trip_service.remove_traveler(trip_id, member_id, user_id)
        return build_success_response("Traveler removed successfully.", "20000", {"trip": trip})

    # ============================================
    # Itinerary
    # ============================================

    def get_itinerary(self, user_id, trip_id):
        itinerary = self.trip_service.get_itinerary(trip_id, user_id)
        return build_success_response("Itinerary retrieved successfully.", "20000", {"itinerary": itinerary})

    def add_activity(self, user_id, trip_id, date):
        itinerary = self.trip_service.add_activity(trip_id, date, get_json_body(request), user_id)
        return build_success_response("Activity added successfully.", "20001", {"itinerary": itinerary}, 201)

    def remove_activity(self, user_id, trip_id, date, activity_id):
        itinerary = self.trip_service.remove_activity(trip_id, date, activity_id, user_id)
        return build_success_response("Activity removed successfully.", "20000", {"itinerary": itinerary})

    # ============================================
    # Places
    # ============================================

    def get_places(self, user_id, trip_id):
        places = self.trip_service.get_places(trip_id, user_id)
        return build_success_response("Places retrieved successfully.", "20000", {"placesToVisit": places})

    def add_place(self, user_id, trip_id):
        """
        POST /trip/<trip_id>/addPlace
        Body: {"placeId": "ChIJLU7jZClu5kcR4PcOOO6p3I0"}
        """
        trip = self.trip_service.add_place(trip_id, get_json_body(request), user_id)
        return build_success_response("Place added successfully.", "20000", {"trip": trip})

    def remove_place(self, user_id, trip_id, place_id):
        places = self.trip_service.remove_place(trip_id, place_id, user_id)
        return build_success_response("Place removed successfully.", "20000", {"placesToVisit": places})

    # ============================================
    # Budget & expenses
    # ============================================

    def set_budget(self, user_id, trip_id):
        trip = self.trip_service.set_budget(trip_id, get_json_body(request), user_id)
        return build_success_response("Budget updated successfully.", "20000", {"trip": trip})

    def add_expense(self, user_id, trip_id):
        """
        POST /addExpense/<trip_id>
        Body: {"category": "Food", "price": 40, "paidBy": "U1", "splitBy": "U1,U2"}
        """
        trip = self.trip_service.add_expense(trip_id, get_json_body(request), user_id)
        return build_success_response("Expense added successfully.", "20000", {"trip": trip})

    def get_expenses(self, user_id, trip_id):
        expenses = self.trip_service.get_expenses(trip_id, user_id)
        return build_success_response("Expenses retrieved successfully.", "20000", {"expenses": expenses})

    def remove_expense(self, user_id, trip_id, expense_id):
        expenses = self.trip_service.remove_expense(trip_id, expense_id, user_id)
        return build_success_response("Expense removed successfully.", "20000", {"expenses": expenses})
