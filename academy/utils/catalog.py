"""
Catalog Utilities
Programs and lectures: lookups, CRUD, counts and stats used by pages, dashboard and API
"""
import logging

from django.db.models import Count
from django.utils.text import slugify

from ..exceptions import NotFound, ValidationError
from ..models import Lecture, LectureProgress, Program

logger = logging.getLogger(__name__)

LECTURE_LEVELS = [choice[0] for choice in Lecture.LEVEL_CHOICES]


def text_field(data, field, strip=True):
    """String value of data[field] (stripped by default); missing or null becomes ''"""
    value = data.get(field)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f"Field '{field}' must be a string.")
    return value.strip() if strip else value


# ========== PROGRAMS ==========

def get_programs():
    return list(Program.objects.all())


def get_program(program_id):
    try:
        return Program.objects.get(id=program_id)
    except (Program.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Program not found: {program_id}")


def get_program_by_slug(slug):
    try:
        return Program.objects.get(slug=slug)
    except Program.DoesNotExist:
        raise NotFound(f"Program not found: {slug}")


def _clean_program_data(data, program=None):
    title = text_field(data, 'title')
    slug = slugify(text_field(data, 'slug') or title)
    if not title:
        raise ValidationError("Program title is required.")
    if not slug:
        raise ValidationError("Program slug is required.")

    duplicates = Program.objects.filter(slug=slug)
    if program is not None:
        duplicates = duplicates.exclude(id=program.id)
    if duplicates.exists():
        raise ValidationError(f'A program with slug "{slug}" already exists.')

    has_common = data.get('has_common_course', False)
    if isinstance(has_common, str):
        has_common = has_common.lower() in ('1', 'true', 'on', 'yes')

    return {
        'slug': slug,
        'title': title,
        'description': text_field(data, 'description'),
        'has_common_course': bool(has_common),
    }


def create_program(data):
    program = Program.objects.create(**_clean_program_data(data))
    logger.info("Program created: %s", program.slug)
    return program


def update_program(program, data):
    merged = program.to_dict()
    merged.update({k: v for k, v in data.items() if v is not None})
    for field, value in _clean_program_data(merged, program=program).items():
        setattr(program, field, value)
    program.save()
    logger.info("Program updated: %s", program.slug)
    return program


def delete_program(program):
    slug = program.slug
    program.delete()
    logger.info("Program deleted: %s", slug)


def lecture_counts(programs=None):
    """Returns {program_id: lecture count}"""
    queryset = Program.objects.annotate(lecture_count=Count('lectures'))
    if programs is not None:
        queryset = queryset.filter(id__in=[p.id for p in programs])
    return {program.id: program.lecture_count for program in queryset}


def program_stats():
    programs = Program.objects.annotate(lecture_count=Count('lectures')).order_by('title')
    return {
        'total_programs': programs.count(),
        'with_common_course': programs.filter(has_common_course=True).count(),
        'lectures_per_program': {p.slug: p.lecture_count for p in programs},
    }


# ========== LECTURES ==========

def get_lectures():
    return list(Lecture.objects.select_related('program').all())


def get_lecture(lecture_id):
    try:
        return Lecture.objects.select_related('program').get(id=lecture_id)
    except (Lecture.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Lecture not found: {lecture_id}")


def get_lectures_for_program(program):
    return list(program.lectures.order_by('order', 'id'))


def _clean_lecture_data(data):
    title = text_field(data, 'title')
    if not title:
        raise ValidationError("Lecture title is required.")

    program = data.get('program')
    if program is None:
        program_id = data.get('program_id')
        if program_id in (None, ''):
            raise ValidationError("Lecture program is required.")
        try:
            program = get_program(int(program_id))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid program id: {program_id}")
        except NotFound:
            raise ValidationError(f"Program does not exist: {program_id}")

    level = data.get('level') or Lecture.LEVEL_MEMBER
    if level not in LECTURE_LEVELS:
        raise ValidationError(f"Invalid lecture level: {level}")

    order = data.get('order')
    if order in (None, ''):
        order = 1
    try:
        order = int(order)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid lecture order: {order}")

    return {
        'program': program,
        'title': title,
        'content': text_field(data, 'content', strip=False),
        'category': text_field(data, 'category'),
        'level': level,
        'order': order,
    }


def create_lecture(data):
    lecture = Lecture.objects.create(**_clean_lecture_data(data))
    logger.info("Lecture created: %s (program %s)", lecture.id, lecture.program.slug)
    return lecture


def update_lecture(lecture, data):
    merged = lecture.to_dict()
    merged.update({k: v for k, v in data.items() if v is not None})
    for field, value in _clean_lecture_data(merged).items():
        setattr(lecture, field, value)
    lecture.save()
    logger.info("Lecture updated: %s", lecture.id)
    return lecture


def delete_lecture(lecture):
    lecture_id = lecture.id
    lecture.delete()
    logger.info("Lecture deleted: %s", lecture_id)


def admin_lecture_order(lectures):
    """
    Group lectures by program for the dashboard list.
    Within a program lectures follow their order; programs whose newest lecture
    is most recent come first.
    """
    groups = {}
    for lecture in lectures:
        groups.setdefault(lecture.program_id, []).append(lecture)

    def newest(group):
        return max(l.created_at for l in group)

    ordered = []
    for group in sorted(groups.values(), key=newest, reverse=True):
        ordered.extend(sorted(group, key=lambda l: (l.order, l.id)))
    return ordered


def lecture_stats():
    lectures = Lecture.objects.all()
    by_level = {level: 0 for level in LECTURE_LEVELS}
    for row in lectures.values('level').annotate(total=Count('id')):
        by_level[row['level']] = row['total']

    return {
        'total_lectures': lectures.count(),
        'by_level': by_level,
        'completed': LectureProgress.objects.filter(completed=True).count(),
    }


# ========== PROGRESS ==========

def mark_lecture_completed(user, lecture):
    progress, created = LectureProgress.objects.get_or_create(user=user, lecture=lecture)
    progress.mark_completed()
    return progress


def lecture_progress(user, lecture):
    """
    Current user's progress on a lecture.
    Returns dict with keys: 'lecture_id', 'completed', 'completed_at'
    """
    progress = LectureProgress.objects.filter(user=user, lecture=lecture).first()
    return {
        'lecture_id': lecture.id,
        'completed': bool(progress and progress.completed),
        'completed_at': progress.completed_at.isoformat() if progress and progress.completed_at else None,
    }
