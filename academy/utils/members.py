"""
Member Utilities
Accounts, profiles and admin flags
Core concept: the platform must always keep at least one admin
"""
import logging

from django.contrib.auth.models import User
from django.core.validators import validate_email
from django.core.exceptions import ValidationError as DjangoValidationError

from ..exceptions import LastAdminError, NotFound, ValidationError
from ..models import Lecture, LectureProgress, Profile, Review
from .access import has_lecture_access
from .search import filter_by_search

logger = logging.getLogger(__name__)

USER_SEARCH_FIELDS = ('email', 'role', 'master_cohort')
ROLES = [choice[0] for choice in Profile.ROLE_CHOICES]


class UserRow:
    """Flat view of a user + profile for lists and search"""

    def __init__(self, user):
        profile = getattr(user, 'profile', None)
        self.user = user
        self.id = user.id
        self.email = user.email
        self.role = profile.role if profile else ''
        self.master_cohort = profile.master_cohort if profile else ''
        self.is_admin = user.is_staff
        self.created_at = user.date_joined


def get_users():
    """All users, newest first"""
    users = User.objects.select_related('profile').order_by('-date_joined', '-id')
    return [UserRow(user) for user in users]


def get_user(user_id):
    try:
        return User.objects.select_related('profile').get(id=user_id)
    except (User.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"User not found: {user_id}")


def search_users(rows, term):
    return filter_by_search(rows, term, USER_SEARCH_FIELDS)


def role_counts(rows):
    """Stat cards for the users dashboard, counted over the full user list"""
    return {
        'total': len(rows),
        'admins': len([row for row in rows if row.is_admin]),
        'students': len([row for row in rows if row.role == 'student']),
        'masters': len([row for row in rows if row.role == 'master']),
    }


def get_or_create_profile(user):
    profile, created = Profile.objects.get_or_create(user=user)
    return profile


def _clean_email(email):
    email = (email or '').strip().lower()
    try:
        validate_email(email)
    except DjangoValidationError:
        raise ValidationError("Enter a valid email address.")
    return email


def sign_up(email, password, confirm_password):
    """Create a student account. Returns the new User."""
    email = _clean_email(email)
    if not password:
        raise ValidationError("Password is required.")
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError("An account with this email already exists.")

    user = User.objects.create_user(username=email[:150], email=email, password=password)
    profile = get_or_create_profile(user)
    profile.role = 'student'
    profile.master_cohort = ''
    profile.save()
    logger.info("New account created: %s", email)
    return user


def update_profile(user, email=None, role=None, master_cohort=None):
    profile = get_or_create_profile(user)

    if email is not None:
        email = _clean_email(email)
        if User.objects.filter(email__iexact=email).exclude(id=user.id).exists():
            raise ValidationError("An account with this email already exists.")
        user.email = email
        user.save(update_fields=['email'])

    if role is not None:
        if role not in ROLES:
            raise ValidationError(f"Invalid role: {role}")
        profile.role = role
    if master_cohort is not None:
        profile.master_cohort = master_cohort.strip()
    profile.save()
    return user


def _is_last_admin(user):
    if not user.is_staff:
        return False
    return not User.objects.filter(is_staff=True).exclude(id=user.id).exists()


def toggle_admin(user):
    """Grant or revoke admin (staff) rights. Returns the new is_staff value."""
    if _is_last_admin(user):
        raise LastAdminError("Cannot remove admin privileges from the last admin")
    user.is_staff = not user.is_staff
    user.save(update_fields=['is_staff'])
    logger.info("Admin status %s for %s", 'granted' if user.is_staff else 'revoked', user.email)
    return user.is_staff


def delete_user(user):
    if _is_last_admin(user):
        raise LastAdminError("Cannot delete the last admin user")
    email = user.email
    user.delete()
    logger.info("User deleted: %s", email)


def user_stats(user):
    """
    Learning stats for the profile page.
    Returns dict with keys: 'lectures_watched', 'programs_enrolled', 'reviews_written', 'total_progress'
    """
    completed = LectureProgress.objects.filter(user=user, completed=True).select_related('lecture')
    completed_ids = {p.lecture_id for p in completed}
    program_ids = {p.lecture.program_id for p in completed}

    accessible = [l for l in Lecture.objects.select_related('program') if has_lecture_access(user, l)]
    done = len([l for l in accessible if l.id in completed_ids])
    total_progress = int(done / len(accessible) * 100) if accessible else 0

    return {
        'lectures_watched': len(completed_ids),
        'programs_enrolled': len(program_ids),
        'reviews_written': Review.objects.filter(author=user).count(),
        'total_progress': total_progress,
    }
