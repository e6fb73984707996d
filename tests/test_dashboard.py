"""
Staff dashboard tests (academy.dashboard_views).
"""
import pytest
from django.contrib.auth.models import User
from django.contrib.messages import get_messages
from django.urls import reverse

from academy.models import Lecture, Post, Program, Review, WaitlistEntry

from .factories import lecture_at

pytestmark = pytest.mark.django_db


def _messages(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


def test_dashboard_requires_staff(student_client):
    response = student_client.get(reverse('dashboard_home'))
    assert response.status_code == 302
    assert '/admin/login/' in response.url


def test_dashboard_home_counts(staff_client, student, membership, master_program):
    Post.objects.create(slug='p', title='P', content='c', status='published')
    Review.objects.create(author=student, text='ok')
    WaitlistEntry.objects.create(email='w@example.com', program_slug='text-influencer')

    response = staff_client.get(reverse('dashboard_home'))

    assert response.context['stats'] == {
        'users': 2,
        'programs': 2,
        'lectures': 7,
        'posts': 1,
        'reviews': 1,
        'waitlist': 1,
    }


# ============================================================================
# Users
# ============================================================================

def test_users_search(staff_client, student, master):
    response = staff_client.get(reverse('dashboard_users'), {'search': 'cohort 3'})
    assert [row.email for row in response.context['users']] == [master.email]


def test_users_stat_cards_ignore_search(staff_client, student, master):
    response = staff_client.get(reverse('dashboard_users'), {'search': 'cohort 3'})

    assert response.context['counts'] == {'total': 3, 'admins': 1, 'students': 1, 'masters': 1}
    assert b'Master users' in response.content


def test_toggle_admin_last_admin_refused(staff_client, staff_user):
    response = staff_client.post(reverse('dashboard_toggle_admin', args=[staff_user.id]))

    assert response.url == reverse('dashboard_users')
    assert 'Cannot remove admin privileges from the last admin' in _messages(response)
    staff_user.refresh_from_db()
    assert staff_user.is_staff is True


def test_toggle_admin_grants(staff_client, student):
    response = staff_client.post(reverse('dashboard_toggle_admin', args=[student.id]))
    student.refresh_from_db()
    assert student.is_staff is True
    assert f'Admin status granted for {student.email}' in _messages(response)


def test_toggle_admin_requires_post(staff_client, student):
    assert staff_client.get(reverse('dashboard_toggle_admin', args=[student.id])).status_code == 405


def test_delete_user(staff_client, student):
    response = staff_client.post(reverse('dashboard_delete_user', args=[student.id]))
    assert not User.objects.filter(id=student.id).exists()
    assert 'User deleted successfully' in _messages(response)


def test_delete_last_admin_refused(staff_client, staff_user):
    response = staff_client.post(reverse('dashboard_delete_user', args=[staff_user.id]))
    assert User.objects.filter(id=staff_user.id).exists()
    assert 'Cannot delete the last admin user' in _messages(response)


def test_delete_unknown_user(staff_client):
    response = staff_client.post(reverse('dashboard_delete_user', args=[9999]))
    assert 'User not found.' in _messages(response)


# ============================================================================
# Programs
# ============================================================================

def test_programs_list_with_counts_and_search(staff_client, membership, master_program):
    response = staff_client.get(reverse('dashboard_programs'))
    assert dict((p.slug, count) for p, count in response.context['programs']) == {'membership': 3, 'text-influencer': 4}

    response = staff_client.get(reverse('dashboard_programs'), {'search': 'text-inf'})
    assert [p.slug for p, _ in response.context['programs']] == ['text-influencer']


def test_add_program(staff_client):
    response = staff_client.post(reverse('dashboard_add_program'), {
        'title': 'Writing Bootcamp',
        'description': 'Four weeks',
        'has_common_course': 'on',
    })

    assert response.url == reverse('dashboard_programs')
    program = Program.objects.get(slug='writing-bootcamp')
    assert program.has_common_course is True


def test_add_program_invalid_rerenders(staff_client, membership):
    response = staff_client.post(reverse('dashboard_add_program'), {'title': 'Dup', 'slug': 'membership'})
    assert response.status_code == 200
    assert response.context['form']['title'] == 'Dup'
    assert Program.objects.count() == 1


def test_edit_program_unchecks_common_course(staff_client, master_program):
    response = staff_client.post(reverse('dashboard_edit_program', args=[master_program.id]), {
        'title': 'Text Influencer 2',
        'slug': 'text-influencer',
        'description': 'Updated',
    })

    assert response.url == reverse('dashboard_programs')
    master_program.refresh_from_db()
    assert master_program.title == 'Text Influencer 2'
    assert master_program.has_common_course is False


def test_edit_program_form(staff_client, membership):
    response = staff_client.get(reverse('dashboard_edit_program', args=[membership.id]))
    assert response.status_code == 200
    assert response.context['form']['slug'] == 'membership'


def test_delete_program(staff_client, membership):
    response = staff_client.post(reverse('dashboard_delete_program', args=[membership.id]))
    assert not Program.objects.exists()
    assert 'Program "Membership" has been deleted successfully.' in _messages(response)


# ============================================================================
# Lectures
# ============================================================================

def test_lectures_filter_and_search(staff_client, membership, master_program):
    response = staff_client.get(reverse('dashboard_lectures'), {'program': str(membership.id)})
    assert {l.program_id for l in response.context['lectures']} == {membership.id}
    assert len(response.context['lectures']) == 3

    response = staff_client.get(reverse('dashboard_lectures'), {'search': 'hooks'})
    assert [l.title for l in response.context['lectures']] == ['Writing hooks']


def test_lectures_stat_cards_by_level(staff_client, membership, master_program):
    response = staff_client.get(reverse('dashboard_lectures'), {'program': str(membership.id)})

    assert response.context['total_lectures'] == 7
    assert response.context['by_level'] == {'member': 3, 'master': 2, 'master_common': 2}
    assert b'Common lectures' in response.content


def test_add_lecture(staff_client, master_program):
    response = staff_client.post(reverse('dashboard_add_lecture'), {
        'program_id': master_program.id,
        'title': 'Launch week',
        'category': 'Monetisation',
        'level': Lecture.LEVEL_MASTER,
        'order': '5',
        'content': 'Notes',
    })

    assert response.url == reverse('dashboard_lectures')
    lecture = Lecture.objects.get(title='Launch week')
    assert lecture.order == 5
    assert lecture.level == Lecture.LEVEL_MASTER


def test_add_lecture_form_defaults(staff_client, membership):
    response = staff_client.get(reverse('dashboard_add_lecture'))
    assert response.context['form']['program_id'] == membership.id
    assert response.context['form']['level'] == Lecture.LEVEL_MEMBER


def test_add_lecture_invalid_level(staff_client, membership):
    response = staff_client.post(reverse('dashboard_add_lecture'), {
        'program_id': membership.id,
        'title': 'Bad',
        'level': 'vip',
    })
    assert response.status_code == 200
    assert 'Invalid lecture level: vip' in _messages(response)


def test_edit_lecture(staff_client, membership):
    lecture = lecture_at(membership, 1)
    staff_client.post(reverse('dashboard_edit_lecture', args=[lecture.id]), {
        'program_id': membership.id,
        'title': 'Welcome aboard',
        'level': Lecture.LEVEL_MEMBER,
        'order': '1',
    })
    lecture.refresh_from_db()
    assert lecture.title == 'Welcome aboard'


def test_delete_lecture(staff_client, membership):
    lecture = lecture_at(membership, 2)
    staff_client.post(reverse('dashboard_delete_lecture', args=[lecture.id]))
    assert not Lecture.objects.filter(id=lecture.id).exists()


# ============================================================================
# Waitlist
# ============================================================================

@pytest.fixture
def waitlist_entries(db):
    return [
        WaitlistEntry.objects.create(email='a@example.com', name='A', program_slug='text-influencer'),
        WaitlistEntry.objects.create(email='b@example.com', program_slug='membership'),
    ]


def test_waitlist_filter(staff_client, waitlist_entries):
    response = staff_client.get(reverse('dashboard_waitlist'), {'program': 'text-influencer'})
    assert [e.email for e in response.context['entries']] == ['a@example.com']


def test_waitlist_csv_export(staff_client, waitlist_entries):
    response = staff_client.get(reverse('dashboard_waitlist'), {'program': 'text-influencer', 'export': 'csv'})

    assert response['Content-Type'] == 'text/csv'
    assert 'waitlist-text-influencer.csv' in response['Content-Disposition']
    lines = response.content.decode().strip().splitlines()
    assert lines[0] == 'email,name,program_slug,status,created_at'
    assert lines[1].startswith('a@example.com,A,text-influencer,pending,')
    assert len(lines) == 2


def test_mark_contacted(staff_client, waitlist_entries):
    entry = waitlist_entries[1]
    response = staff_client.post(reverse('dashboard_waitlist_contacted', args=[entry.id]))
    entry.refresh_from_db()
    assert entry.status == 'contacted'
    assert response.url == reverse('dashboard_waitlist')
