from flask import Blueprint


def init_app():
    """Initialize all controllers for the AuthService."""
    from .auth_controller import AuthController
    from ...core.di_container import DIContainer

    auth_api = Blueprint("auth_api", __name__)
    AuthController(auth_api, DIContainer.get_instance().resolve("AuthService"))
    return auth_api
