import logging
from flask import request

from ...middleware import JWT_required, get_json_body
from ...service.invitation_service import InvitationService
from ...utils.response_helpers import build_success_response

logger = logging.getLogger(__name__)


class InviteController:
    def __init__(self, blueprint, invitation_service: InvitationService):
        self.api = blueprint
        self.invitation_service = invitation_service
        self._register_routes()

    def _register_routes(self):
        """Register all routes with Flask."""
        self.api.add_url_rule("/sendInviteEmail", "send_invite_email",
                              self._wrap_jwt_required(self.send_invite_email), methods=["POST"])
        self.api.add_url_rule("/joinTrip", "join_trip", self.join_trip, methods=["GET"])

    def _wrap_jwt_required(self, f):
        """Helper to maintain JWT required middleware while using class methods."""
        @JWT_required
        def wrapper(user, *args, **kwargs):
            return f(user, *args, **kwargs)
        return wrapper

    def send_invite_email(self, user):
        """
        POST /sendInviteEmail
        Body: {"tripId": "...", "email": "friend@example.com"}
        """
        data = get_json_body(request)
        result = self.invitation_service.send_invite(data.get("tripId"), data.get("email"), user)
        return build_success_response("Invitation email sent successfully", "20000", result)

    def join_trip(self):
        """GET /joinTrip?token=<signed invite token>"""
        trip = self.invitation_service.join_trip(request.args.get("token"))
        return build_success_response(
            "You have been successfully added to the trip",
            "20000",
            {"tripId": trip["_id"], "tripName": trip.get("tripName")}
        )
