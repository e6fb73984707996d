"""
Waitlist helpers
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from ..exceptions import ValidationError
from ..models import WaitlistEntry

logger = logging.getLogger(__name__)


def join_waitlist(email, program_slug, name=""):
    """
    Put an email on a program's waitlist.
    Returns (entry, created); created is False when the email was already listed.
    """
    email = (email or '').strip().lower()
    try:
        validate_email(email)
    except DjangoValidationError:
        raise ValidationError("Enter a valid email address.")
    if not program_slug:
        raise ValidationError("Program is required.")

    entry, created = WaitlistEntry.objects.get_or_create(
        email=email,
        program_slug=program_slug,
        defaults={'name': (name or '').strip()},
    )
    if created:
        logger.info("Waitlist join: %s -> %s", email, program_slug)
    return entry, created


def get_waitlist(program_slug=None):
    entries = WaitlistEntry.objects.all()
    if program_slug:
        entries = entries.filter(program_slug=program_slug)
    return list(entries.order_by('-created_at', '-id'))


def mark_contacted(entry):
    entry.status = 'contacted'
    entry.save(update_fields=['status'])
    return entry
