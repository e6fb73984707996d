from django.conf import settings

from .utils.session import get_current_user


def current_user(request):
    """Expose the session user snapshot and the program slugs to every template"""
    return {
        'current_user': get_current_user(request),
        'membership_slug': getattr(settings, 'ACADEMY_MEMBERSHIP_SLUG', 'membership'),
        'master_slug': getattr(settings, 'ACADEMY_MASTER_SLUG', 'text-influencer'),
    }
