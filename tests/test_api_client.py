"""
Unit tests for PlatformAPIClient (academy.utils.api_client).

requests is mocked; no server is started.
"""
from unittest.mock import Mock

import pytest
import requests

from academy.exceptions import APIClientError
from academy.utils.api_client import PlatformAPIClient


def _response(status=200, payload=None, json_error=False):
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 400
    if json_error:
        response.json.side_effect = ValueError('No JSON object could be decoded')
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return PlatformAPIClient(base_url='http://platform.test/api/', session=session, token='')


def test_get_programs(client, session):
    session.request.return_value = _response(payload=[{'id': 1, 'slug': 'membership'}])

    assert client.get_programs() == [{'id': 1, 'slug': 'membership'}]
    session.request.assert_called_once_with(
        'GET',
        'http://platform.test/api/programs',
        json=None,
        headers={'Content-Type': 'application/json'},
        timeout=10,
    )


@pytest.mark.parametrize('call, method, path', [
    (lambda c: c.get_lectures(), 'GET', '/lectures'),
    (lambda c: c.get_lecture(3), 'GET', '/lectures/3'),
    (lambda c: c.get_lectures_by_program(2), 'GET', '/programs/2/lectures'),
    (lambda c: c.get_lectures_by_program_slug('membership'), 'GET', '/programs/slug/membership/lectures'),
    (lambda c: c.delete_lecture(3), 'DELETE', '/lectures/3'),
    (lambda c: c.get_lecture_stats(), 'GET', '/lectures/stats'),
    (lambda c: c.mark_lecture_completed(3), 'POST', '/lectures/3/complete'),
    (lambda c: c.get_lecture_progress(3), 'GET', '/lectures/3/progress'),
    (lambda c: c.get_program(2), 'GET', '/programs/2'),
    (lambda c: c.get_program_by_slug('membership'), 'GET', '/programs/slug/membership'),
    (lambda c: c.delete_program(2), 'DELETE', '/programs/2'),
    (lambda c: c.get_program_stats(), 'GET', '/programs/stats'),
])
def test_routes(client, session, call, method, path):
    session.request.return_value = _response(payload={})
    call(client)
    args, _ = session.request.call_args
    assert args == (method, f'http://platform.test/api{path}')


def test_create_and_update_send_json_body(client, session):
    session.request.return_value = _response(status=201, payload={'id': 9})

    client.create_lecture({'title': 'New', 'program_id': 1})
    _, kwargs = session.request.call_args
    assert kwargs['json'] == {'title': 'New', 'program_id': 1}

    client.update_program(2, {'title': 'Renamed'})
    args, kwargs = session.request.call_args
    assert args == ('PUT', 'http://platform.test/api/programs/2')
    assert kwargs['json'] == {'title': 'Renamed'}


def test_http_error_raises_with_status(client, session):
    session.request.return_value = _response(status=404, payload={'error': 'missing'})

    with pytest.raises(APIClientError) as excinfo:
        client.get_program(42)

    assert str(excinfo.value) == 'HTTP error! status: 404'
    assert excinfo.value.status_code == 404


def test_network_error_is_wrapped(client, session):
    session.request.side_effect = requests.ConnectionError('connection refused')

    with pytest.raises(APIClientError, match='Error fetching lectures'):
        client.get_lectures()


def test_invalid_json_is_wrapped(client, session):
    session.request.return_value = _response(json_error=True)

    with pytest.raises(APIClientError, match='invalid JSON'):
        client.get_program_stats()


def test_base_url_defaults_to_setting(settings):
    settings.ACADEMY_API_BASE_URL = 'https://academy.example.com/api'
    assert PlatformAPIClient(session=Mock()).base_url == 'https://academy.example.com/api'


def test_token_sent_as_bearer_header(session):
    client = PlatformAPIClient(base_url='http://platform.test/api', session=session, token='sekret')
    session.request.return_value = _response(status=201, payload={'id': 4})

    client.create_program({'title': 'Client Program'})

    _, kwargs = session.request.call_args
    assert kwargs['headers']['Authorization'] == 'Bearer sekret'


def test_token_defaults_to_settings(session, settings):
    settings.ACADEMY_API_TOKEN = 'from-settings'
    client = PlatformAPIClient(base_url='http://platform.test/api', session=session)
    session.request.return_value = _response(payload={})

    client.delete_lecture(3)

    _, kwargs = session.request.call_args
    assert kwargs['headers']['Authorization'] == 'Bearer from-settings'


def test_no_authorization_header_without_token(client, session):
    session.request.return_value = _response(payload=[])
    client.get_lectures()
    _, kwargs = session.request.call_args
    assert 'Authorization' not in kwargs['headers']
