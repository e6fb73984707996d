"""
Access Control Utilities
Core concept: lecture access is a lookup on (program slug, user role, lecture level)
"""
from django.conf import settings

from ..models import Lecture


def _membership_slug():
    return getattr(settings, 'ACADEMY_MEMBERSHIP_SLUG', 'membership')


def _master_slug():
    return getattr(settings, 'ACADEMY_MASTER_SLUG', 'text-influencer')


def get_user_role(user):
    """Role of an authenticated user, None for anonymous visitors"""
    if user is None or not user.is_authenticated:
        return None
    profile = getattr(user, 'profile', None)
    return profile.role if profile else None


def can_access_lecture(program_slug, user, level):
    """
    Check if user may view a lecture of the given level in the given program.
    Returns bool.
    """
    # Membership program is open to everyone
    if program_slug == _membership_slug():
        return True

    # Master program: master role, or a lecture shared with everyone
    if program_slug == _master_slug():
        if get_user_role(user) is None:
            return level == Lecture.LEVEL_MASTER_COMMON
        return get_user_role(user) == 'master' or level == Lecture.LEVEL_MASTER_COMMON

    return True


def has_lecture_access(user, lecture):
    return can_access_lecture(lecture.program.slug, user, lecture.level)


def annotate_access(program, user, lectures):
    """
    Pair each lecture with its access flag.
    Returns list of (lecture, has_access) ordered by lecture.order.
    """
    ordered = sorted(lectures, key=lambda l: (l.order, l.id))
    return [(lecture, can_access_lecture(program.slug, user, lecture.level)) for lecture in ordered]


def group_by_category(annotated):
    """
    Group (lecture, has_access) pairs under their category, in order of first appearance.
    Lectures without a category go under 'General'.
    Returns list of (category, pairs).
    """
    groups = {}
    for lecture, allowed in annotated:
        groups.setdefault(lecture.category or 'General', []).append((lecture, allowed))
    return list(groups.items())


def accessible_lectures(program, user, lectures):
    """Lectures of a program the user may open, in lecture order"""
    return [lecture for lecture, allowed in annotate_access(program, user, lectures) if allowed]


def lecture_navigation(lecture, user, lectures=None):
    """
    Work out previous/next accessible lectures around the current one.
    Returns dict with keys: 'previous', 'next', 'position', 'total', 'total_accessible'
    """
    program = lecture.program
    if lectures is None:
        lectures = program.lectures.all()

    annotated = annotate_access(program, user, lectures)
    ordered = [l for l, _ in annotated]
    allowed_ids = {l.id for l, allowed in annotated if allowed}

    try:
        index = [l.id for l in ordered].index(lecture.id)
    except ValueError:
        index = -1

    previous_lecture = None
    if index > 0:
        for candidate in reversed(ordered[:index]):
            if candidate.id in allowed_ids:
                previous_lecture = candidate
                break

    next_lecture = None
    for candidate in ordered[index + 1:]:
        if candidate.id in allowed_ids:
            next_lecture = candidate
            break

    return {
        'previous': previous_lecture,
        'next': next_lecture,
        'position': index + 1,
        'total': len(ordered),
        'total_accessible': len(allowed_ids),
    }


def access_denied_reason(user):
    if user is None or not user.is_authenticated:
        return "Please log in to access this lecture."
    return "This lecture requires master level access."
