"""
Management command to export programs and lectures as CSV through the platform API.

Usage:
    # Export from the configured API (ACADEMY_API_BASE_URL) to stdout
    python manage.py export_catalog

    # Export from another deployment into a file
    python manage.py export_catalog --base-url https://academy.example.com/api --output catalog.csv
"""
import csv

from django.core.management.base import BaseCommand, CommandError

from academy.exceptions import APIClientError
from academy.utils.api_client import PlatformAPIClient

CSV_FIELDS = ['program_id', 'program_slug', 'program_title', 'lecture_id', 'lecture_title', 'category', 'level', 'order']


class Command(BaseCommand):
    help = 'Export the program/lecture catalog to CSV using the platform JSON API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--base-url',
            type=str,
            help='API base URL (defaults to ACADEMY_API_BASE_URL)'
        )
        parser.add_argument(
            '--output',
            type=str,
            help='Write CSV to this file instead of stdout'
        )

    def handle(self, *args, **options):
        client = PlatformAPIClient(base_url=options.get('base_url'))

        try:
            programs = client.get_programs()
            lectures = client.get_lectures()
        except APIClientError as e:
            raise CommandError(f'Export failed: {e}')

        rows = self.build_rows(programs, lectures)

        output_path = options.get('output')
        if output_path:
            with open(output_path, 'w', newline='', encoding='utf-8') as handle:
                self.write_csv(handle, rows)
            self.stdout.write(self.style.SUCCESS(f'Exported {len(rows)} rows to {output_path}'))
        else:
            self.write_csv(self.stdout, rows)

    @staticmethod
    def build_rows(programs, lectures):
        """One row per lecture, joined to its program. Programs with no lectures get an empty row."""
        by_program = {}
        for lecture in lectures:
            by_program.setdefault(lecture.get('program_id'), []).append(lecture)

        rows = []
        for program in programs:
            program_lectures = sorted(
                by_program.get(program['id'], []),
                key=lambda l: (l.get('order') or 0, l.get('id') or 0),
            )
            base = {
                'program_id': program['id'],
                'program_slug': program.get('slug', ''),
                'program_title': program.get('title', ''),
            }
            if not program_lectures:
                rows.append(dict(base, lecture_id='', lecture_title='', category='', level='', order=''))
                continue
            for lecture in program_lectures:
                rows.append(dict(
                    base,
                    lecture_id=lecture.get('id'),
                    lecture_title=lecture.get('title', ''),
                    category=lecture.get('category', ''),
                    level=lecture.get('level', ''),
                    order=lecture.get('order', ''),
                ))
        return rows

    @staticmethod
    def write_csv(handle, rows):
        writer = csv.DictWriter(handle, fieldnames=CSV_FIELDS)
        writer.writeheader()
        writer.writerows(rows)
