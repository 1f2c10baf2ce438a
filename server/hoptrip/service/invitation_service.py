"""
Invitation Service
==================

Emails a join link for a trip. The link carries a signed invite token
{tripId, email, purpose=trip_invite}; following it enrolls the invited
email as a traveler.
"""

import logging
import smtplib
from urllib.parse import urlencode

from flask_mail import Message
from markupsafe import escape

from ..common.exceptions import UpstreamError, ValidationError
from ..utils.jwt_helpers import decode_invite_token, generate_invite_token
from ..utils.validation_helpers import normalize_email

logger = logging.getLogger(__name__)

INVITE_TEMPLATE = """
<h3>Hello,</h3>
<p>{sender} has invited you to join their trip "<strong>{trip_name}</strong>".</p>
<p>Click the button below to join the trip:</p>
<a href="{link}"
   style="background-color: #4B61D1; color: white; padding: 10px 20px; text-decoration: none; font-size: 16px; border-radius: 5px;">
  Join Trip
</a>
<p>If the button doesn't work, copy and paste this link into your browser:</p>
<p>{link}</p>
<p>Best regards,</p>
<p>The HopTrip Team</p>
"""


class InvitationService:
    def __init__(self, trip_service, mail, config):
        self.trip_service = trip_service
        self.mail = mail
        self.config = config

    def build_join_link(self, trip_id, email):
        token = generate_invite_token(trip_id, email, self.config)
        base = self.config.PUBLIC_BASE_URL.rstrip("/")
        return f"{base}/joinTrip?{urlencode({'token': token})}"

    def send_invite(self, trip_id, email, actor):
        """
        Email an invitation for `trip_id` to `email`. Members only.

        Args:
            actor: authenticated user document (sender)

        Returns:
            dict: {email, tripId}

        Raises:
            UpstreamError: mail delivery failed
        """
        normalized = normalize_email(email)
        trip = self.trip_service.get_trip(trip_id, actor["_id"])

        if not self.config.MAIL_DEFAULT_SENDER:
            logger.error("MAIL_DEFAULT_SENDER / MAIL_USERNAME not configured, cannot send invitations")
            raise UpstreamError("Mail delivery is not configured", provider="mail")

        link = self.build_join_link(trip_id, normalized)
        sender = actor.get("name") or actor.get("email")
        prefix = self.config.MAIL_SUBJECT_PREFIX
        message = Message(
            subject=f"{prefix} Invitation to join the trip: {trip['tripName']}".strip(),
            recipients=[normalized],
            html=INVITE_TEMPLATE.format(
                sender=escape(sender),
                trip_name=escape(trip["tripName"]),
                link=escape(link),
            ),
        )

        try:
            self.mail.send(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send invitation for trip {trip_id} to {normalized}: {e}")
            raise UpstreamError("Error sending invitation email", provider="mail") from e

        logger.info(f"Invitation for trip {trip_id} sent to {normalized} by {actor['_id']}")
        return {"email": normalized, "tripId": trip_id}

    def join_trip(self, token):
        """
        Verify an invite token and enroll its email as a traveler.

        Raises:
            TokenExpiredError / InvalidTokenError: bad link
            NotFoundError / ConflictError: from add_traveler
        """
        if not token:
            raise ValidationError("Invitation token required", field="token")
        payload = decode_invite_token(token, self.config)
        return self.trip_service.add_traveler(payload["tripId"], payload["email"])
