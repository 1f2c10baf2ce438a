from flask import request
import logging

from ...service.auth_service import AuthService
from ...middleware import get_json_body
from ...utils.response_helpers import build_success_response

logger = logging.getLogger(__name__)


class AuthController:
    def __init__(self, blueprint, auth_service: AuthService):
        self.api = blueprint
        self.auth_service = auth_service
        self._register_routes()

    def _register_routes(self):
        """Register all routes with Flask."""
        self.api.add_url_rule("/google-login", "google_login", self.google_login, methods=["POST"])

    def google_login(self):
        """
        Handle Google sign-in.

        POST /google-login
        Body: {"idToken": "<Google ID token>"}

        Returns the session token (1 hour) and the stored user.
        """
        data = get_json_body(request)
        token, user = self.auth_service.google_login(data.get("idToken") or data.get("token"))
        user = {k: v for k, v in user.items() if k != "refreshToken"}
        return build_success_response(
            "Google login successful",
            "20000",
            {"token": token, "user": user}
        )
