import csv
import logging

from django.contrib import messages
from django.contrib.admin.views.decorators import staff_member_required
from django.db import DatabaseError
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_http_methods

from .exceptions import LastAdminError, NotFound, ValidationError
from .models import Lecture, Post, Program, Review, WaitlistEntry
from .utils import catalog, members
from .utils.search import filter_by_search
from .utils.waitlist import get_waitlist, mark_contacted
from .views import render_load_error

logger = logging.getLogger(__name__)


@staff_member_required
def dashboard_home(request):
    """Main dashboard overview"""
    try:
        stats = {
            'users': len(members.get_users()),
            'programs': Program.objects.count(),
            'lectures': Lecture.objects.count(),
            'posts': Post.objects.count(),
            'reviews': Review.objects.count(),
            'waitlist': WaitlistEntry.objects.count(),
        }
    except DatabaseError:
        logger.exception("Failed to load admin data")
        return render_load_error(request, "Failed to load admin data")

    return render(request, 'dashboard/home.html', {
        'stats': stats,
    })


# ========== USERS ==========

@staff_member_required
def dashboard_users(request):
    """User list with search over email, role and cohort"""
    search_query = request.GET.get('search', '')
    try:
        users = members.get_users()
    except DatabaseError:
        logger.exception("Failed to load users")
        return render_load_error(request, "Failed to load users")

    return render(request, 'dashboard/users.html', {
        'users': members.search_users(users, search_query),
        'counts': members.role_counts(users),
        'search_query': search_query,
    })


@staff_member_required
@require_http_methods(["POST"])
def dashboard_toggle_admin(request, user_id):
    try:
        user = members.get_user(user_id)
        is_admin = members.toggle_admin(user)
        messages.success(request, f"Admin status {'granted' if is_admin else 'revoked'} for {user.email}")
    except NotFound:
        messages.error(request, 'User not found.')
    except LastAdminError as e:
        messages.error(request, str(e))
    return redirect('dashboard_users')


@staff_member_required
@require_http_methods(["POST"])
def dashboard_delete_user(request, user_id):
    try:
        user = members.get_user(user_id)
        members.delete_user(user)
        messages.success(request, 'User deleted successfully')
    except NotFound:
        messages.error(request, 'User not found.')
    except LastAdminError as e:
        messages.error(request, str(e))
    return redirect('dashboard_users')


# ========== PROGRAMS ==========

@staff_member_required
def dashboard_programs(request):
    """List all programs with lecture counts"""
    search_query = request.GET.get('search', '')
    try:
        programs = catalog.get_programs()
        counts = catalog.lecture_counts(programs)
    except DatabaseError:
        logger.exception("Failed to load programs")
        return render_load_error(request, "Failed to load programs")

    filtered = filter_by_search(programs, search_query, ('title', 'description', 'slug'))

    return render(request, 'dashboard/programs.html', {
        'programs': [(program, counts.get(program.id, 0)) for program in filtered],
        'search_query': search_query,
    })


def _program_form_data(request):
    return {
        'slug': request.POST.get('slug', ''),
        'title': request.POST.get('title', ''),
        'description': request.POST.get('description', ''),
        'has_common_course': 'has_common_course' in request.POST,
    }


@staff_member_required
def dashboard_add_program(request):
    if request.method == 'POST':
        try:
            program = catalog.create_program(_program_form_data(request))
            messages.success(request, f'Program "{program.title}" created successfully!')
            return redirect('dashboard_programs')
        except ValidationError as e:
            messages.error(request, str(e))
            return render(request, 'dashboard/program_form.html', {'form': _program_form_data(request)})

    return render(request, 'dashboard/program_form.html', {'form': {}})


@staff_member_required
def dashboard_edit_program(request, program_id):
    program = get_object_or_404(Program, id=program_id)

    if request.method == 'POST':
        try:
            catalog.update_program(program, _program_form_data(request))
            messages.success(request, 'Program updated successfully!')
            return redirect('dashboard_programs')
        except ValidationError as e:
            messages.error(request, str(e))

    return render(request, 'dashboard/program_form.html', {
        'program': program,
        'form': program.to_dict(),
    })


@staff_member_required
@require_http_methods(["POST"])
def dashboard_delete_program(request, program_id):
    """Delete a program (and its lectures)"""
    program = get_object_or_404(Program, id=program_id)
    program_title = program.title

    try:
        catalog.delete_program(program)
        messages.success(request, f'Program "{program_title}" has been deleted successfully.')
    except DatabaseError as e:
        logger.exception("Error deleting program %s", program_id)
        messages.error(request, f'Error deleting program: {str(e)}')

    return redirect('dashboard_programs')


# ========== LECTURES ==========

@staff_member_required
def dashboard_lectures(request):
    """Lectures grouped by program, searchable by title, content and category"""
    search_query = request.GET.get('search', '')
    program_filter = request.GET.get('program', '')
    try:
        lectures = catalog.get_lectures()
        programs = catalog.get_programs()
        stats = catalog.lecture_stats()
    except DatabaseError:
        logger.exception("Failed to load lectures")
        return render_load_error(request, "Failed to load lectures")

    if program_filter:
        lectures = [l for l in lectures if str(l.program_id) == program_filter]

    lectures = filter_by_search(catalog.admin_lecture_order(lectures), search_query, ('title', 'content', 'category'))

    return render(request, 'dashboard/lectures.html', {
        'lectures': lectures,
        'programs': programs,
        'total_lectures': stats['total_lectures'],
        'by_level': stats['by_level'],
        'search_query': search_query,
        'program_filter': program_filter,
    })


def _lecture_form_data(request):
    return {
        'program_id': request.POST.get('program_id', ''),
        'title': request.POST.get('title', ''),
        'content': request.POST.get('content', ''),
        'category': request.POST.get('category', ''),
        'level': request.POST.get('level', Lecture.LEVEL_MEMBER),
        'order': request.POST.get('order', 1),
    }


@staff_member_required
def dashboard_add_lecture(request):
    programs = catalog.get_programs()

    if request.method == 'POST':
        try:
            catalog.create_lecture(_lecture_form_data(request))
            messages.success(request, 'Lecture created successfully!')
            return redirect('dashboard_lectures')
        except ValidationError as e:
            messages.error(request, str(e))
            form = _lecture_form_data(request)
    else:
        form = {
            'program_id': request.GET.get('program') or (programs[0].id if programs else ''),
            'level': Lecture.LEVEL_MEMBER,
            'order': 1,
        }

    return render(request, 'dashboard/lecture_form.html', {
        'form': form,
        'programs': programs,
        'levels': Lecture.LEVEL_CHOICES,
    })


@staff_member_required
def dashboard_edit_lecture(request, lecture_id):
    lecture = get_object_or_404(Lecture, id=lecture_id)

    if request.method == 'POST':
        try:
            catalog.update_lecture(lecture, _lecture_form_data(request))
            messages.success(request, 'Lecture updated successfully!')
            return redirect('dashboard_lectures')
        except ValidationError as e:
            messages.error(request, str(e))

    return render(request, 'dashboard/lecture_form.html', {
        'lecture': lecture,
        'form': lecture.to_dict(),
        'programs': catalog.get_programs(),
        'levels': Lecture.LEVEL_CHOICES,
    })


@staff_member_required
@require_http_methods(["POST"])
def dashboard_delete_lecture(request, lecture_id):
    lecture = get_object_or_404(Lecture, id=lecture_id)
    try:
        catalog.delete_lecture(lecture)
        messages.success(request, 'Lecture deleted successfully!')
    except DatabaseError as e:
        logger.exception("Error deleting lecture %s", lecture_id)
        messages.error(request, f'Error deleting lecture: {str(e)}')
    return redirect('dashboard_lectures')


# ========== WAITLIST ==========

@staff_member_required
def dashboard_waitlist(request):
    """Waitlist entries, optionally filtered by program. ?export=csv downloads them."""
    program_filter = request.GET.get('program', '')
    entries = get_waitlist(program_filter or None)

    if request.GET.get('export') == 'csv':
        response = HttpResponse(content_type='text/csv')
        filename = f"waitlist-{program_filter or 'all'}.csv"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        writer = csv.writer(response)
        writer.writerow(['email', 'name', 'program_slug', 'status', 'created_at'])
        for entry in entries:
            writer.writerow([entry.email, entry.name, entry.program_slug, entry.status, entry.created_at.isoformat()])
        return response

    return render(request, 'dashboard/waitlist.html', {
        'entries': entries,
        'program_filter': program_filter,
        'programs': catalog.get_programs(),
    })


@staff_member_required
@require_http_methods(["POST"])
def dashboard_waitlist_contacted(request, entry_id):
    entry = get_object_or_404(WaitlistEntry, id=entry_id)
    mark_contacted(entry)
    messages.success(request, f'{entry.email} marked as contacted.')
    return redirect('dashboard_waitlist')
