from flask import Blueprint


def init_app():
    """Initialize all controllers for the user service."""
    from .user_controller import UserController
    from ...core.di_container import DIContainer

    container = DIContainer.get_instance()
    user_api = Blueprint("user_api", __name__)
    UserController(user_api, container.resolve("UserService"), container.resolve("TripService"))
    return user_api
