"""
Trip Blueprint - trip aggregate routes
=======================================

Purpose:
- Trip CRUD, membership, itinerary, places, budget and expenses
- Public trip search
"""

from flask import Blueprint


def init_app():
    """Initialize trip controller and return blueprint."""
    from .trip_controller import TripController
    from ...core.di_container import DIContainer

    trip_api = Blueprint('trip_api', __name__)
    TripController(trip_api, DIContainer.get_instance().resolve("TripService"))
    return trip_api
