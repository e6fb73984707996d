"""
HTTP client for the platform JSON API (/api/programs, /api/lectures)
Thin pass-through wrappers; every failure is logged and raised as APIClientError.
"""
import logging

import requests
from django.conf import settings

from ..exceptions import APIClientError

logger = logging.getLogger(__name__)


class PlatformAPIClient:
    def __init__(self, base_url=None, session=None, timeout=10, token=None):
        base_url = base_url or getattr(settings, 'ACADEMY_API_BASE_URL', 'http://localhost:8000/api')
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = token if token is not None else getattr(settings, 'ACADEMY_API_TOKEN', '')

    def _headers(self):
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def _request(self, method, path, payload=None, action='calling API'):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Error %s: %s", action, e)
            raise APIClientError(f"Error {action}: {e}")

        if not response.ok:
            logger.error("Error %s: HTTP %s from %s", action, response.status_code, url)
            raise APIClientError(f"HTTP error! status: {response.status_code}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError:
            logger.error("Error %s: response from %s is not JSON", action, url)
            raise APIClientError(f"Error {action}: invalid JSON response", status_code=response.status_code)

    # ========== LECTURES ==========

    def get_lectures(self):
        return self._request('GET', '/lectures', action='fetching lectures')

    def get_lecture(self, lecture_id):
        return self._request('GET', f'/lectures/{lecture_id}', action='fetching lecture')

    def get_lectures_by_program(self, program_id):
        return self._request('GET', f'/programs/{program_id}/lectures', action='fetching lectures by program')

    def get_lectures_by_program_slug(self, slug):
        return self._request('GET', f'/programs/slug/{slug}/lectures', action='fetching lectures by program slug')

    def create_lecture(self, lecture_data):
        return self._request('POST', '/lectures', lecture_data, action='creating lecture')

    def update_lecture(self, lecture_id, lecture_data):
        return self._request('PUT', f'/lectures/{lecture_id}', lecture_data, action='updating lecture')

    def delete_lecture(self, lecture_id):
        return self._request('DELETE', f'/lectures/{lecture_id}', action='deleting lecture')

    def get_lecture_stats(self):
        return self._request('GET', '/lectures/stats', action='fetching lecture stats')

    def mark_lecture_completed(self, lecture_id):
        return self._request('POST', f'/lectures/{lecture_id}/complete', action='marking lecture as completed')

    def get_lecture_progress(self, lecture_id):
        return self._request('GET', f'/lectures/{lecture_id}/progress', action='fetching lecture progress')

    # ========== PROGRAMS ==========

    def get_programs(self):
        return self._request('GET', '/programs', action='fetching programs')

    def get_program(self, program_id):
        return self._request('GET', f'/programs/{program_id}', action='fetching program')

    def get_program_by_slug(self, slug):
        return self._request('GET', f'/programs/slug/{slug}', action='fetching program by slug')

    def create_program(self, program_data):
        return self._request('POST', '/programs', program_data, action='creating program')

    def update_program(self, program_id, program_data):
        return self._request('PUT', f'/programs/{program_id}', program_data, action='updating program')

    def delete_program(self, program_id):
        return self._request('DELETE', f'/programs/{program_id}', action='deleting program')

    def get_program_stats(self):
        return self._request('GET', '/programs/stats', action='fetching program stats')
