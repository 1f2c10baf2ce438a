"""Trip role checks shared by the trip, invitation and user services."""
from enum import Enum
import logging

from ..common.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


class TripRole(str, Enum):
    HOST = "host"
    MEMBER = "member"


def is_host(actor_id, trip) -> bool:
    return actor_id is not None and actor_id == trip.get("host")


def is_member(actor_id, trip) -> bool:
    return is_host(actor_id, trip) or (actor_id is not None and actor_id in trip.get("travelers", []))


def authorize(actor_id, trip, required_role=TripRole.MEMBER):
    """
    Raise ForbiddenError unless the actor holds `required_role` on the trip.

    host: actor is trip.host
    member: actor is trip.host or listed in trip.travelers
    """
    role = TripRole(required_role)
    allowed = is_host(actor_id, trip) if role == TripRole.HOST else is_member(actor_id, trip)
    if not allowed:
        logger.warning(f"[WARN] User {actor_id} lacks {role.value} role on trip {trip.get('_id')}")
        message = "Only the trip host can perform this action" if role == TripRole.HOST \
            else "You are not a member of this trip"
        raise ForbiddenError(message, details={"tripId": trip.get("_id"), "requiredRole": role.value})
