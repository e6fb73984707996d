"""
Profile signals
Every auth user gets a Profile row as soon as it is created
"""
import logging

from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_profile_for_new_user(sender, instance, created, **kwargs):
    """Create the Profile for a newly created user (role defaults to student)"""
    if not created:
        return

    profile, profile_created = Profile.objects.get_or_create(user=instance)
    if profile_created:
        logger.debug("Created profile for user %s", instance.pk)
