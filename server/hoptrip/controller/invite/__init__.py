"""
Invite Blueprint - trip invitation routes
==========================================

- POST /sendInviteEmail  email a signed join link (members only)
- GET  /joinTrip         follow the link, enroll the invited email
"""

from flask import Blueprint


def init_app():
    """Initialize invite controller and return blueprint."""
    from .invite_controller import InviteController
    from ...core.di_container import DIContainer

    invite_api = Blueprint("invite_api", __name__)
    InviteController(invite_api, DIContainer.get_instance().resolve("InvitationService"))
    return invite_api
