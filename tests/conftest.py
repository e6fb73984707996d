"""
Shared fixtures: demo users, the membership program and the master program.
"""
import pytest

from academy.models import Lecture, Program

from .factories import make_user


@pytest.fixture
def staff_user(db):
    return make_user('admin@academy.test', role='member', is_staff=True)


@pytest.fixture
def student(db):
    return make_user('student@academy.test')


@pytest.fixture
def master(db):
    return make_user('master@academy.test', role='master', cohort='Cohort 3')


@pytest.fixture
def staff_client(client, staff_user):
    client.force_login(staff_user)
    return client


@pytest.fixture
def student_client(client, student):
    client.force_login(student)
    return client


@pytest.fixture
def membership(db):
    program = Program.objects.create(slug='membership', title='Membership', description='Weekly member lectures')
    for order, title in enumerate(['Welcome', 'Finding your niche', 'Writing hooks'], start=1):
        Lecture.objects.create(program=program, title=title, content=f'{title} notes', category='Basics', order=order)
    return program


@pytest.fixture
def master_program(db):
    program = Program.objects.create(
        slug='text-influencer',
        title='Text Influencer',
        description='Cohort-based master course',
        has_common_course=True,
    )
    levels = [Lecture.LEVEL_MASTER_COMMON, Lecture.LEVEL_MASTER, Lecture.LEVEL_MASTER_COMMON, Lecture.LEVEL_MASTER]
    for order, level in enumerate(levels, start=1):
        Lecture.objects.create(program=program, title=f'Master lecture {order}', content='Deep dive', category='Strategy', level=level, order=order)
    return program