import logging

import pytest

from envrequest import Request
from envrequest import RequestOptions
from envrequest.headers import apply_authorization_fallback
from envrequest.headers import header_name_from_key
from envrequest.headers import headers_from_metadata
from envrequest.util.structures import Headers


@pytest.mark.parametrize(
    'key,name',
    [
        ('HTTP_USER_AGENT', 'User-Agent'),
        ('HTTP_ACCEPT_ENCODING', 'Accept-Encoding'),
        ('HTTP_X_REWRITE_URL', 'X-Rewrite-Url'),
        ('HTTP_HOST', 'Host'),
        ('HTTP_DNT', 'Dnt'),
        ('HTTP_X_API_V2', 'X-Api-V2'),
        ('HTTP_X_REQUEST_ID', 'X-Request-Id'),
        ('HTTP_WWW_AUTHENTICATE', 'Www-Authenticate'),
        ('CONTENT_TYPE', 'Content-Type'),
        ('CONTENT_LENGTH', 'Content-Length'),
        ('CONTENT_MD5', 'Content-MD5'),
        ('CONTENT_ENCODING', 'Content-Encoding'),
    ],
)
def test_header_name_from_key(key, name):
    assert header_name_from_key(key) == name


@pytest.mark.parametrize(
    'key',
    [
        'HTTP_COOKIE',
        'HTTP_COOKIE2',
        'SERVER_NAME',
        'REQUEST_URI',
        'QUERY_STRING',
        'http_user_agent',
        'SCRIPT_FILENAME',
    ],
)
def test_header_name_from_key_not_a_header(key):
    assert header_name_from_key(key) is None


def test_cookies_and_content_headers():
    headers = headers_from_metadata(
        {
            'HTTP_ACCEPT_ENCODING': 'gzip',
            'CONTENT_TYPE': 'application/json',
            'HTTP_COOKIE': 'a=1',
        }
    )

    assert headers['Accept-Encoding'] == 'gzip'
    assert headers['Content-Type'] == 'application/json'
    assert 'Cookie' not in headers
    assert len(headers) == 2


def test_empty_values_are_ignored():
    headers = headers_from_metadata(
        {'HTTP_REFERER': '', 'CONTENT_LENGTH': '', 'HTTP_ACCEPT': '*/*'}
    )

    assert list(headers) == ['Accept']


def test_non_header_keys_are_ignored():
    headers = headers_from_metadata(
        {'SERVER_NAME': 'example.org', 'REQUEST_METHOD': 'GET', 'PATH': '/usr/bin'}
    )

    assert len(headers) == 0


def test_same_name_within_batch_last_wins():
    headers = headers_from_metadata(
        {'HTTP_CONTENT_TYPE': 'text/plain', 'CONTENT_TYPE': 'application/json'}
    )

    assert headers.get_all('Content-Type') == ['application/json']


def test_metadata_left_untouched():
    metadata = {'HTTP_ACCEPT': 'text/html'}
    headers = headers_from_metadata(metadata)
    headers.add('X-Extra', 'yes')

    assert metadata == {'HTTP_ACCEPT': 'text/html'}


def test_headers_are_case_insensitive():
    headers = headers_from_metadata({'HTTP_X_FORWARDED_FOR': '10.0.0.1'})

    assert headers['x-forwarded-for'] == '10.0.0.1'
    assert headers['X-FORWARDED-FOR'] == '10.0.0.1'


class TestRequestHeaders:
    def test_cookie_header_comes_from_cookie_container(self):
        req = Request(
            {'HTTP_COOKIE': 'ignored=1', 'HTTP_ACCEPT': '*/*'},
            cookies={'session': 'abc', 'theme': 'dark mode'},
        )

        assert req.headers.get_all('Cookie') == ['session=abc; theme=dark+mode']
        assert req.headers['Accept'] == '*/*'

    def test_server_reassignment_appends(self):
        req = Request({'HTTP_ACCEPT': 'text/html'}, cookies={'a': '1'})
        req.server = {'HTTP_ACCEPT': 'application/json', 'HTTP_X_TRACE': 't1'}

        assert req.headers.get_all('Accept') == ['text/html', 'application/json']
        assert req.headers['X-Trace'] == 't1'
        assert req.headers['Cookie'] == 'a=1'


class TestAuthorizationFallback:
    def test_recovered_from_header_source(self):
        server = {'REQUEST_URI': '/'}
        req = Request(server, header_source=lambda: {'authorization': 'Basic Zm9vOmJhcg=='})

        assert req.headers['Authorization'] == 'Basic Zm9vOmJhcg=='
        assert req.server['HTTP_AUTHORIZATION'] == 'Basic Zm9vOmJhcg=='
        assert 'HTTP_AUTHORIZATION' not in server

    def test_existing_variable_wins(self):
        req = Request(
            {'HTTP_AUTHORIZATION': 'Bearer token'},
            header_source=lambda: {'Authorization': 'Basic other'},
        )

        assert req.headers.get_all('Authorization') == ['Bearer token']

    def test_disabled_through_options(self):
        options = RequestOptions()
        options.authorization_fallback = False

        req = Request(
            {}, header_source=lambda: {'Authorization': 'Basic abc'}, options=options
        )

        assert 'Authorization' not in req.headers

    def test_no_authorization_in_listing(self):
        server = {}
        assert not apply_authorization_fallback(server, lambda: {'Accept': '*/*'})
        assert server == {}

    def test_no_header_source(self):
        server = {}
        assert not apply_authorization_fallback(server, None)
        assert server == {}

    def test_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger='envrequest')

        server = {}
        assert apply_authorization_fallback(
            server, lambda: Headers([('Authorization', 'Basic abc')])
        )

        assert server == {'HTTP_AUTHORIZATION': 'Basic abc'}
        assert 'Authorization header recovered' in caplog.text
