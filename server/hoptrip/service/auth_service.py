import logging

from ..common.exceptions import ForbiddenError, InvalidTokenError, HopTripError, UnauthorizedError
from ..providers.google.google_oauth_helper import verify_google_token
from ..utils.jwt_helpers import decode_jwt_token, generate_access_token

logger = logging.getLogger(__name__)


class AuthService:
    """
    Session tokens, bearer-token authentication and Google sign-in.

    The signing secret comes from the injected config; it is never generated
    at runtime.
    """

    def __init__(self, user_repo, config, google_verifier=verify_google_token):
        self.user_repo = user_repo
        self.config = config
        self.google_verifier = google_verifier

    def issue_token(self, user):
        """Session token embedding {userId, email}."""
        return generate_access_token(user["_id"], user["email"], self.config)

    def authenticate(self, token):
        """
        Resolve a bearer token to the active user document.

        Raises:
            UnauthorizedError: no token
            TokenExpiredError / InvalidTokenError: token rejected
            ForbiddenError: user missing or deactivated
        """
        if not token:
            raise UnauthorizedError()

        payload = decode_jwt_token(
            token, self.config.JWT_SECRET_KEY, self.config.JWT_ALGORITHM, required=("userId",)
        )
        user = self.user_repo.get_by_id(payload["userId"])
        if not user:
            logger.warning(f"Token for unknown user: {payload['userId']}")
            raise ForbiddenError("User not found")
        if not user.get("isActive", True):
            logger.warning(f"Inactive user attempted access: {user['_id']}")
            raise ForbiddenError("User account is deactivated")
        return user

    def optional_authenticate(self, token):
        """Same checks as authenticate, but any failure yields None."""
        if not token:
            return None
        try:
            return self.authenticate(token)
        except HopTripError as e:
            logger.info(f"Optional auth ignored: {e.kind}")
            return None

    def google_login(self, id_token):
        """
        Verify a Google ID token, upsert the user and issue a session token.

        Returns:
            (token, user)
        """
        if not id_token:
            raise InvalidTokenError("Google ID token required")

        info = self.google_verifier(id_token, self.config.GOOGLE_CLIENT_ID)
        existing = self.user_repo.get_by_google_id(info["sub"])
        if existing and not existing.get("isActive", True):
            raise ForbiddenError("User account is deactivated")

        user = self.user_repo.upsert_google_user({
            "googleId": info["sub"],
            "email": info["email"],
            "name": info["name"],
            "givenName": info.get("given_name"),
            "familyName": info.get("family_name"),
            "photo": info.get("picture"),
        })
        token = self.issue_token(user)
        logger.info(f"Google login succeeded for {user['email']}")
        return token, user
