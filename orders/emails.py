"""Outgoing order notifications."""

import logging

from django.conf import settings
from django.core.mail import send_mail


logger = logging.getLogger(__name__)


class EmailService:
    subject = 'Your order status has changed'

    def send_status_change_email(self, address, status):
        body = f"The status of your order is now {status}."
        send_mail(self.subject, body, settings.DEFAULT_FROM_EMAIL, [address], fail_silently=False)
        logger.info('Sent status change email (%s) to %s', status, address)
