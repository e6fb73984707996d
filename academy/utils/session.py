"""
Current user snapshot kept in the session
Set on login/signup/profile update, cleared on logout.
"""
SESSION_KEY = 'current_user'


def serialize_user(user):
    profile = getattr(user, 'profile', None)
    return {
        'id': user.id,
        'email': user.email,
        'role': profile.role if profile else '',
        'master_cohort': profile.master_cohort if profile else '',
        'is_admin': user.is_staff,
        'created_at': user.date_joined.isoformat() if user.date_joined else None,
    }


def remember_current_user(request, user):
    request.session[SESSION_KEY] = serialize_user(user)


def forget_current_user(request):
    request.session.pop(SESSION_KEY, None)


def get_current_user(request):
    return request.session.get(SESSION_KEY)
