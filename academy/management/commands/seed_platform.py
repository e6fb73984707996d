"""
Management command to load the demo catalog.

Usage:
    # Load (or refresh) the demo programs, lectures, posts, reviews, users and waitlist
    python manage.py seed_platform

    # Wipe platform content first, then load
    python manage.py seed_platform --reset

    # Preview what would be created
    python manage.py seed_platform --dry-run
"""
from datetime import timedelta

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from academy.models import Lecture, Post, Profile, Program, Review, WaitlistEntry


PROGRAMS = [
    {
        'slug': 'membership',
        'title': 'Membership',
        'description': 'Weekly member lectures on writing, audience growth and monetisation.',
        'has_common_course': False,
        'lectures': [
            ('Welcome to the membership', 'Orientation', Lecture.LEVEL_MEMBER),
            ('Finding your niche', 'Foundations', Lecture.LEVEL_MEMBER),
            ('Writing hooks that work', 'Writing', Lecture.LEVEL_MEMBER),
            ('Building a posting routine', 'Habits', Lecture.LEVEL_MEMBER),
        ],
    },
    {
        'slug': 'text-influencer',
        'title': 'Text Influencer Master Course',
        'description': 'The cohort-based master course. Common lectures are open to everyone.',
        'has_common_course': True,
        'lectures': [
            ('Course overview', 'Orientation', Lecture.LEVEL_MASTER_COMMON),
            ('What makes a text influencer', 'Foundations', Lecture.LEVEL_MASTER_COMMON),
            ('Positioning workshop', 'Strategy', Lecture.LEVEL_MASTER),
            ('Long-form threads', 'Writing', Lecture.LEVEL_MASTER),
            ('Launching a paid product', 'Monetisation', Lecture.LEVEL_MASTER),
        ],
    },
]

USERS = [
    # email, role, master_cohort, is_staff
    ('admin@academy.test', 'member', '', True),
    ('member@academy.test', 'member', '', False),
    ('master@academy.test', 'master', 'Cohort 3', False),
    ('student@academy.test', 'student', '', False),
]

POSTS = [
    {
        'slug': 'why-writing-daily-compounds',
        'title': 'Why writing daily compounds',
        'excerpt': 'Small daily posts beat occasional long essays.',
        'content': 'Publishing every day builds a feedback loop. Each post teaches you what your audience responds to.',
        'tags': ['Writing', 'Habits'],
    },
    {
        'slug': 'anatomy-of-a-good-hook',
        'title': 'Anatomy of a good hook',
        'excerpt': 'The first line decides whether anyone reads the second.',
        'content': 'A hook makes a promise. Good hooks are specific, surprising and short.',
        'tags': ['Writing'],
    },
    {
        'slug': 'from-audience-to-income',
        'title': 'From audience to income',
        'excerpt': 'How members turned followers into a paid product.',
        'content': 'Monetisation starts with listening. The products that sell solve problems your readers already mention.',
        'tags': ['Monetisation', 'Strategy'],
    },
    {
        'slug': 'master-course-cohort-3-recap',
        'title': 'Master course: cohort 3 recap',
        'excerpt': 'Highlights from the latest cohort.',
        'content': 'Cohort 3 shipped 40 launches in eight weeks. Here is what worked.',
        'tags': ['Strategy', 'Community'],
    },
]

REVIEWS = [
    # author email, program slug, rating, text, featured
    ('master@academy.test', 'text-influencer', 5, 'The positioning workshop changed how I write. Worth every minute.', True),
    ('member@academy.test', 'membership', 4, 'Great weekly lectures and a helpful community.', False),
    ('student@academy.test', 'membership', 5, 'Clear, practical and easy to follow.', False),
]

WAITLIST = [
    ('future.master@example.com', 'Future Master', 'text-influencer'),
    ('curious@example.com', '', 'text-influencer'),
]


class Command(BaseCommand):
    help = 'Load the demo catalog: programs, lectures, posts, reviews, users and waitlist entries'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete existing programs, lectures, posts, reviews, waitlist entries and demo users first'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be created without writing anything'
        )
        parser.add_argument(
            '--password',
            type=str,
            default='demo1234',
            help='Password for the demo users (default: demo1234)'
        )

    def handle(self, *args, **options):
        dry_run = options.get('dry_run', False)
        reset = options.get('reset', False)

        if dry_run:
            self._print_plan(reset)
            return

        with transaction.atomic():
            if reset:
                self._reset()
            users = self._seed_users(options['password'])
            programs = self._seed_programs()
            self._seed_posts(users)
            self._seed_reviews(users, programs)
            self._seed_waitlist()

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {len(programs)} programs, {Lecture.objects.count()} lectures, '
            f'{Post.objects.count()} posts, {Review.objects.count()} reviews, '
            f'{len(users)} demo users, {WaitlistEntry.objects.count()} waitlist entries'
        ))

    def _print_plan(self, reset):
        self.stdout.write(self.style.WARNING('DRY RUN - nothing will be written'))
        if reset:
            self.stdout.write('Would delete all programs, lectures, posts, reviews, waitlist entries and demo users')
        for program in PROGRAMS:
            self.stdout.write(f"Program: {program['slug']} ({len(program['lectures'])} lectures)")
            for title, category, level in program['lectures']:
                self.stdout.write(f'  - {title} [{level}]')
        for email, role, cohort, is_staff in USERS:
            self.stdout.write(f"User: {email} role={role}{' (admin)' if is_staff else ''}")
        for post in POSTS:
            self.stdout.write(f"Post: {post['slug']}")
        self.stdout.write(f'Reviews: {len(REVIEWS)}')
        self.stdout.write(f'Waitlist entries: {len(WAITLIST)}')

    def _reset(self):
        demo_emails = [email for email, _, _, _ in USERS]
        WaitlistEntry.objects.all().delete()
        Review.objects.all().delete()
        Post.objects.all().delete()
        Program.objects.all().delete()
        deleted, _ = User.objects.filter(email__in=demo_emails).delete()
        self.stdout.write(self.style.WARNING(f'Reset platform content ({deleted} demo user rows removed)'))

    def _seed_users(self, password):
        users = {}
        for email, role, cohort, is_staff in USERS:
            user, created = User.objects.get_or_create(username=email, defaults={'email': email})
            if created:
                user.set_password(password)
            user.email = email
            user.is_staff = is_staff
            user.save()
            Profile.objects.update_or_create(user=user, defaults={'role': role, 'master_cohort': cohort})
            users[email] = user
        return users

    def _seed_programs(self):
        programs = {}
        for data in PROGRAMS:
            program, _ = Program.objects.update_or_create(
                slug=data['slug'],
                defaults={
                    'title': data['title'],
                    'description': data['description'],
                    'has_common_course': data['has_common_course'],
                },
            )
            for order, (title, category, level) in enumerate(data['lectures'], start=1):
                Lecture.objects.update_or_create(
                    program=program,
                    title=title,
                    defaults={
                        'content': f'{title}. Lecture notes for {program.title}.',
                        'category': category,
                        'level': level,
                        'order': order,
                    },
                )
            programs[program.slug] = program
        return programs

    def _seed_posts(self, users):
        author = users.get('admin@academy.test')
        now = timezone.now()
        for offset, data in enumerate(POSTS):
            Post.objects.update_or_create(
                slug=data['slug'],
                defaults={
                    'title': data['title'],
                    'excerpt': data['excerpt'],
                    'content': data['content'],
                    'tags': data['tags'],
                    'author': author,
                    'status': 'published',
                    'published_at': now - timedelta(days=offset * 3),
                },
            )

    def _seed_reviews(self, users, programs):
        for email, program_slug, rating, text, featured in REVIEWS:
            Review.objects.update_or_create(
                author=users[email],
                text=text,
                defaults={
                    'program': programs.get(program_slug),
                    'rating': rating,
                    'featured': featured,
                },
            )

    def _seed_waitlist(self):
        for email, name, program_slug in WAITLIST:
            WaitlistEntry.objects.get_or_create(
                email=email,
                program_slug=program_slug,
                defaults={'name': name},
            )
