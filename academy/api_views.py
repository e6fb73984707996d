"""
JSON API for programs and lectures
Reads are public, but locked lectures come back without content. Writes need a staff session
or the ACADEMY_API_TOKEN bearer token, and a JSON body (Content-Type: application/json).
"""
import json
import logging
from functools import wraps

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .exceptions import PlatformError
from .utils import catalog
from .utils.access import access_denied_reason, has_lecture_access

logger = logging.getLogger(__name__)


def _has_write_access(request):
    token = getattr(settings, 'ACADEMY_API_TOKEN', '')
    auth_header = request.headers.get('Authorization', '')
    if token and auth_header == f'Bearer {token}':
        return True
    return request.user.is_authenticated and request.user.is_staff


def _parse_body(request):
    if not request.body:
        return {}
    data = json.loads(request.body)
    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object")
    return data


def api_endpoint(view_func):
    """Shared error handling + write guard for API views"""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if request.method in ('POST', 'PUT') and request.content_type != 'application/json':
            return JsonResponse({'error': 'Content-Type must be application/json'}, status=415)
        try:
            return view_func(request, *args, **kwargs)
        except (json.JSONDecodeError, ValueError) as e:
            return JsonResponse({'error': f'Invalid data: {str(e)}'}, status=400)
        except PlatformError as e:
            status = e.status_code or 500
            if status >= 500:
                logger.exception("API error on %s", request.path)
            return JsonResponse({'error': str(e)}, status=status)
    return csrf_exempt(wrapper)


def _forbidden():
    return JsonResponse({'error': 'Admin access required'}, status=403)


def _can_read(request, lecture):
    return _has_write_access(request) or has_lecture_access(request.user, lecture)


def _lecture_payload(request, lecture):
    """Lecture dict for the caller; locked lectures come back without content"""
    data = lecture.to_dict()
    data['has_access'] = _can_read(request, lecture)
    if not data['has_access']:
        data['content'] = ''
    return data


# ========== LECTURES ==========

@api_endpoint
@require_http_methods(["GET", "POST"])
def lectures_collection(request):
    """GET all lectures / POST a new lecture"""
    if request.method == 'POST':
        if not _has_write_access(request):
            return _forbidden()
        lecture = catalog.create_lecture(_parse_body(request))
        return JsonResponse(lecture.to_dict(), status=201)

    return JsonResponse([_lecture_payload(request, lecture) for lecture in catalog.get_lectures()], safe=False)


@api_endpoint
@require_http_methods(["GET", "PUT", "DELETE"])
def lecture_item(request, lecture_id):
    lecture = catalog.get_lecture(lecture_id)

    if request.method == 'GET':
        if not _can_read(request, lecture):
            return JsonResponse({'error': access_denied_reason(request.user)}, status=403)
        return JsonResponse(_lecture_payload(request, lecture))

    if not _has_write_access(request):
        return _forbidden()

    if request.method == 'PUT':
        lecture = catalog.update_lecture(lecture, _parse_body(request))
        return JsonResponse(lecture.to_dict())

    data = lecture.to_dict()
    catalog.delete_lecture(lecture)
    return JsonResponse({'success': True, 'deleted': data})


@api_endpoint
@require_http_methods(["GET"])
def lecture_stats(request):
    return JsonResponse(catalog.lecture_stats())


@api_endpoint
@require_http_methods(["POST"])
def lecture_complete(request, lecture_id):
    """Mark a lecture as complete for the current user"""
    if not request.user.is_authenticated:
        return JsonResponse({'error': 'Login required'}, status=401)
    lecture = catalog.get_lecture(lecture_id)
    if not has_lecture_access(request.user, lecture):
        return JsonResponse({'error': access_denied_reason(request.user)}, status=403)
    catalog.mark_lecture_completed(request.user, lecture)
    return JsonResponse({
        'success': True,
        'message': 'Lecture marked as complete',
        'lecture_id': lecture.id,
    })


@api_endpoint
@require_http_methods(["GET"])
def lecture_progress(request, lecture_id):
    if not request.user.is_authenticated:
        return JsonResponse({'error': 'Login required'}, status=401)
    lecture = catalog.get_lecture(lecture_id)
    return JsonResponse(catalog.lecture_progress(request.user, lecture))


@api_endpoint
@require_http_methods(["GET"])
def program_lectures(request, program_id):
    program = catalog.get_program(program_id)
    return JsonResponse([_lecture_payload(request, l) for l in catalog.get_lectures_for_program(program)], safe=False)


@api_endpoint
@require_http_methods(["GET"])
def program_lectures_by_slug(request, slug):
    program = catalog.get_program_by_slug(slug)
    return JsonResponse([_lecture_payload(request, l) for l in catalog.get_lectures_for_program(program)], safe=False)


# ========== PROGRAMS ==========

@api_endpoint
@require_http_methods(["GET", "POST"])
def programs_collection(request):
    if request.method == 'POST':
        if not _has_write_access(request):
            return _forbidden()
        program = catalog.create_program(_parse_body(request))
        return JsonResponse(program.to_dict(), status=201)

    return JsonResponse([program.to_dict() for program in catalog.get_programs()], safe=False)


@api_endpoint
@require_http_methods(["GET", "PUT", "DELETE"])
def program_item(request, program_id):
    program = catalog.get_program(program_id)

    if request.method == 'GET':
        return JsonResponse(program.to_dict())

    if not _has_write_access(request):
        return _forbidden()

    if request.method == 'PUT':
        program = catalog.update_program(program, _parse_body(request))
        return JsonResponse(program.to_dict())

    data = program.to_dict()
    catalog.delete_program(program)
    return JsonResponse({'success': True, 'deleted': data})


@api_endpoint
@require_http_methods(["GET"])
def program_by_slug(request, slug):
    return JsonResponse(catalog.get_program_by_slug(slug).to_dict())


@api_endpoint
@require_http_methods(["GET"])
def program_stats(request):
    return JsonResponse(catalog.program_stats())
