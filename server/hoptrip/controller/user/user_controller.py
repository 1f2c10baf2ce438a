import logging
from flask import request

from ...middleware import JWT_required, get_json_body, get_int_arg
from ...service.trip_service import TripService
from ...service.user_service import UserService
from ...utils.response_helpers import build_success_response

logger = logging.getLogger(__name__)


class UserController:
    """
    Controller for user profile endpoints.

    Routes:
    - GET   /user/<profile_id>                    Full profile (auth)
    - PUT   /user/<profile_id>                    Update name/photo (self)
    - GET   /user/<profile_id>/stats              Trip statistics (self)
    - GET   /users/<profile_id>/profile           Public profile
    - GET   /users/<profile_id>/trips/public      Public trips
    - GET   /users/search?query=&limit=           Search active users
    - PATCH /users/<profile_id>/preferences       Update preferences (self)
    - PATCH /users/<profile_id>/deactivate        Deactivate account (self)
    """

    def __init__(self, blueprint, user_service: UserService, trip_service: TripService):
        self.api = blueprint
        self.user_service = user_service
        self.trip_service = trip_service
        self._register_routes()

    def _register_routes(self):
        """Register all routes with Flask."""
        api = self.api
        jwt = self._wrap_jwt_required

        api.add_url_rule("/user/<profile_id>", "get_user", jwt(self.get_user), methods=["GET"])
        api.add_url_rule("/user/<profile_id>", "update_user", jwt(self.update_user), methods=["PUT"])
        api.add_url_rule("/user/<profile_id>/stats", "user_stats", jwt(self.user_stats), methods=["GET"])

        api.add_url_rule("/users/search", "search_users", self.search_users, methods=["GET"])
        api.add_url_rule("/users/<profile_id>/profile", "public_profile", self.public_profile, methods=["GET"])
        api.add_url_rule("/users/<profile_id>/trips/public", "public_trips", self.public_trips, methods=["GET"])
        api.add_url_rule("/users/<profile_id>/preferences", "update_preferences",
                         jwt(self.update_preferences), methods=["PATCH"])
        api.add_url_rule("/users/<profile_id>/deactivate", "deactivate_user",
                         jwt(self.deactivate_user), methods=["PATCH"])

    def _wrap_jwt_required(self, f):
        """Helper to maintain JWT required middleware while using class methods."""
        @JWT_required
        def wrapper(user_id, *args, **kwargs):
            return f(user_id, *args, **kwargs)
        return wrapper

    def get_user(self, user_id, profile_id):
        user = self.user_service.get_user(profile_id)
        return build_success_response("User retrieved successfully.", "20000", {"user": user})

    def update_user(self, user_id, profile_id):
        user = self.user_service.update_profile(profile_id, user_id, get_json_body(request))
        return build_success_response("Profile updated successfully.", "20000", {"user": user})

    def user_stats(self, user_id, profile_id):
        stats = self.user_service.get_stats(profile_id, user_id)
        return build_success_response("User stats retrieved successfully.", "20000", {"stats": stats})

    def search_users(self):
        users = self.user_service.search(request.args.get("query"), get_int_arg(request, "limit", 10))
        return build_success_response("Users retrieved successfully.", "20000", {"users": users})

    def public_profile(self, profile_id):
        user = self.user_service.get_public_profile(profile_id)
        return build_success_response("Profile retrieved successfully.", "20000", {"user": user})

    def public_trips(self, profile_id):
        trips = self.trip_service.list_public_for_user(
            profile_id,
            limit=get_int_arg(request, "limit", 10),
            offset=get_int_arg(request, "offset", 0),
        )
        return build_success_response("Trips retrieved successfully.", "20000", {"trips": trips})

    def update_preferences(self, user_id, profile_id):
        user = self.user_service.update_preferences(profile_id, user_id, get_json_body(request))
        return build_success_response("Preferences updated successfully.", "20000", {"user": user})

    def deactivate_user(self, user_id, profile_id):
        self.user_service.deactivate(profile_id, user_id)
        return build_success_response("Account deactivated successfully", "20000")
