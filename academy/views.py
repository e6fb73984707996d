import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.db import DatabaseError
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_http_methods

from .exceptions import NotFound, PlatformError, ValidationError
from .models import Profile, Review
from .utils import catalog, insights, members
from .utils.access import access_denied_reason, annotate_access, group_by_category, has_lecture_access, lecture_navigation
from .utils.reviews import create_review, has_liked, review_stats, sort_reviews, split_featured, toggle_review_like
from .utils.search import filter_by_search
from .utils.session import forget_current_user, remember_current_user
from .utils.waitlist import join_waitlist

logger = logging.getLogger(__name__)

LOAD_ERRORS = (PlatformError, DatabaseError)


def render_load_error(request, message, status=500):
    """Page-level error with a retry link back to the same URL"""
    return render(request, 'error.html', {
        'message': message,
        'retry_url': request.get_full_path(),
    }, status=status)


def home(request):
    """Landing page - featured programs and latest insights"""
    try:
        programs = catalog.get_programs()[:2]
        posts = insights.get_published_posts()[:3]
        counts = catalog.lecture_counts(programs)
    except LOAD_ERRORS:
        logger.exception("Failed to load homepage content")
        return render_load_error(request, "Failed to load homepage content")

    return render(request, 'home.html', {
        'programs': [(program, counts.get(program.id, 0)) for program in programs],
        'posts': posts,
    })


def programs(request):
    """Program listing page"""
    search_query = request.GET.get('search', '')
    try:
        all_programs = catalog.get_programs()
        counts = catalog.lecture_counts(all_programs)
    except LOAD_ERRORS:
        logger.exception("Failed to load programs")
        return render_load_error(request, "Failed to load programs")

    filtered = filter_by_search(all_programs, search_query, ('title', 'description'))

    return render(request, 'programs.html', {
        'programs': [(program, counts.get(program.id, 0)) for program in filtered],
        'search_query': search_query,
    })


def program_detail(request, program_slug):
    """Program detail page - lecture list with lock state and waitlist form"""
    try:
        program = catalog.get_program_by_slug(program_slug)
        lectures = catalog.get_lectures_for_program(program)
    except NotFound:
        return render_load_error(request, "Program not found", status=404)
    except LOAD_ERRORS:
        logger.exception("Failed to load program details for %s", program_slug)
        return render_load_error(request, "Failed to load program details")

    is_membership = program.slug == getattr(settings, 'ACADEMY_MEMBERSHIP_SLUG', 'membership')

    annotated = annotate_access(program, request.user, lectures)

    return render(request, 'program_detail.html', {
        'program': program,
        'lectures': annotated,
        'lecture_groups': group_by_category(annotated),
        'program_type': "Member Course" if is_membership else "Master Course",
    })


def lecture_detail(request, lecture_id):
    """Lecture page - gated by program/role/level, with previous/next navigation"""
    try:
        lecture = catalog.get_lecture(lecture_id)
        program = lecture.program
        lectures = catalog.get_lectures_for_program(program)
    except NotFound:
        return render_load_error(request, "Lecture not found", status=404)
    except LOAD_ERRORS:
        logger.exception("Failed to load lecture %s", lecture_id)
        return render_load_error(request, "Failed to load lecture")

    if not has_lecture_access(request.user, lecture):
        return render(request, 'lecture_locked.html', {
            'program': program,
            'reason': access_denied_reason(request.user),
        }, status=403)

    navigation = lecture_navigation(lecture, request.user, lectures)

    return render(request, 'lecture.html', {
        'lecture': lecture,
        'program': program,
        'previous_lecture': navigation['previous'],
        'next_lecture': navigation['next'],
        'position': navigation['position'],
        'total': navigation['total'],
        'total_accessible': navigation['total_accessible'],
    })


def insights_list(request):
    """Insight (blog) listing page"""
    search_query = request.GET.get('search', '')
    try:
        posts = insights.get_published_posts()
    except LOAD_ERRORS:
        logger.exception("Failed to load insights")
        return render_load_error(request, "Failed to load insights")

    return render(request, 'insights.html', {
        'posts': filter_by_search(posts, search_query, ('title', 'content')),
        'search_query': search_query,
    })


def post_detail(request, post_slug):
    try:
        post = insights.get_post_by_slug(post_slug)
        related = insights.related_posts(post)
    except NotFound:
        return render_load_error(request, "Post not found", status=404)
    except LOAD_ERRORS:
        logger.exception("Failed to load post %s", post_slug)
        return render_load_error(request, "Failed to load post")

    return render(request, 'post_detail.html', {
        'post': post,
        'author': post.author,
        'related_posts': related,
    })


@require_http_methods(["GET", "POST"])
def reviews(request):
    """Reviews page - featured first, then newest. POST submits a new review."""
    if request.method == 'POST':
        if not request.user.is_authenticated:
            messages.info(request, 'Please log in to write a review.')
            return redirect('login')
        try:
            create_review(request.user, request.POST.get('text'), rating=request.POST.get('rating'))
            messages.success(request, 'Review submitted successfully!')
        except ValidationError as e:
            messages.error(request, str(e))
        return redirect('reviews')

    try:
        all_reviews = sort_reviews(Review.objects.select_related('author'))
    except LOAD_ERRORS:
        logger.exception("Failed to load reviews")
        return render_load_error(request, "Failed to load reviews")

    featured, regular = split_featured(all_reviews)

    return render(request, 'reviews.html', {
        'featured_reviews': [(r, has_liked(r, request.user)) for r in featured],
        'regular_reviews': [(r, has_liked(r, request.user)) for r in regular],
        'stats': review_stats(all_reviews),
    })


@require_http_methods(["POST"])
def review_like(request, review_id):
    """Toggle the current user's like on a review"""
    if not request.user.is_authenticated:
        messages.info(request, 'Please log in to like reviews.')
        return redirect('login')

    review = Review.objects.filter(id=review_id).first()
    if review is None:
        return render_load_error(request, "Review not found", status=404)

    try:
        toggle_review_like(review, request.user)
    except DatabaseError:
        logger.exception("Failed to update like on review %s", review_id)
        messages.error(request, 'Failed to update like. Please try again.')
    return redirect('reviews')


@require_http_methods(["POST"])
def join_waitlist_view(request, program_slug):
    try:
        program = catalog.get_program_by_slug(program_slug)
    except NotFound:
        return render_load_error(request, "Program not found", status=404)

    try:
        entry, created = join_waitlist(request.POST.get('email'), program.slug, request.POST.get('name', ''))
    except ValidationError as e:
        messages.error(request, str(e))
        return redirect('program_detail', program_slug=program.slug)

    if created:
        messages.success(request, 'Successfully joined the waitlist!')
    else:
        messages.info(request, "You're already on the waitlist for this program!")
    return redirect('program_detail', program_slug=program.slug)


def login_view(request):
    """Email + password login"""
    if request.user.is_authenticated:
        return redirect('home')

    if request.method == 'POST':
        email = (request.POST.get('email') or '').strip().lower()
        password = request.POST.get('password')

        user = authenticate(request, username=email, password=password)
        if user is not None:
            login(request, user)
            remember_current_user(request, user)
            messages.success(request, 'Successfully logged in!')
            next_url = request.GET.get('next', '')
            if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                return redirect(next_url)
            return redirect('home')
        else:
            messages.error(request, 'Invalid email or password')

    return render(request, 'login.html')


def signup_view(request):
    if request.user.is_authenticated:
        return redirect('home')

    if request.method == 'POST':
        try:
            user = members.sign_up(
                request.POST.get('email'),
                request.POST.get('password'),
                request.POST.get('confirm_password'),
            )
        except ValidationError as e:
            messages.error(request, str(e))
            return render(request, 'signup.html', {'email': request.POST.get('email', '')})

        login(request, user, backend='django.contrib.auth.backends.ModelBackend')
        remember_current_user(request, user)
        messages.success(request, 'Account created successfully!')
        return redirect('home')

    return render(request, 'signup.html')


def logout_view(request):
    forget_current_user(request)
    logout(request)
    messages.success(request, 'Successfully logged out!')
    return redirect('home')


@login_required
def profile(request):
    """Profile page - edit email/role/cohort and see learning stats"""
    user = request.user

    if request.method == 'POST':
        try:
            members.update_profile(
                user,
                email=request.POST.get('email'),
                role=request.POST.get('role'),
                master_cohort=request.POST.get('master_cohort', ''),
            )
            user.refresh_from_db()
            remember_current_user(request, user)
            messages.success(request, 'Profile updated successfully!')
        except ValidationError as e:
            messages.error(request, str(e))
        return redirect('profile')

    try:
        stats = members.user_stats(user)
    except LOAD_ERRORS:
        logger.exception("Failed to load profile data for user %s", user.id)
        return render_load_error(request, "Failed to load profile data")

    return render(request, 'profile.html', {
        'profile': members.get_or_create_profile(user),
        'stats': stats,
        'roles': Profile.ROLE_CHOICES,
    })
