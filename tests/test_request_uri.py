import logging

import pytest

from envrequest import detection
from envrequest import Request
from envrequest.detection import detect_request_uri


def test_request_uri_with_query_string():
    req = Request({'REQUEST_URI': '/app/index.php/users?active=1', 'QUERY_STRING': 'active=1'})

    assert req.request_uri == '/app/index.php/users?active=1'
    assert req.uri.path == '/app/index.php/users'
    assert req.uri.query == 'active=1'


def test_query_only_from_query_string():
    req = Request({'REQUEST_URI': '/app/index.php/users?active=1'})

    assert req.request_uri == '/app/index.php/users?active=1'
    assert req.uri.path == '/app/index.php/users'
    assert req.uri.query is None
    assert str(req.uri) == '/app/index.php/users'


def test_rewrite_header_wins():
    req = Request({'HTTP_X_REWRITE_URL': '/rewritten/path', 'REQUEST_URI': '/ignored'})

    assert req.request_uri == '/rewritten/path'
    assert req.uri.path == '/rewritten/path'


def test_iis_unencoded_url_short_circuits():
    server = {
        'IIS_WasUrlRewritten': '1',
        'UNENCODED_URL': '/a//b',
        'HTTP_X_REWRITE_URL': '/rewritten',
        'HTTP_X_ORIGINAL_URL': '/original',
        'REQUEST_URI': '/request',
        'ORIG_PATH_INFO': '/orig',
    }

    assert detect_request_uri(server) == '/a//b'
    assert detect_request_uri({'IIS_WasUrlRewritten': '1', 'UNENCODED_URL': '/a//b'}) == '/a//b'


def test_iis_unencoded_url_logged(caplog):
    caplog.set_level(logging.DEBUG, logger='envrequest')

    detect_request_uri({'IIS_WasUrlRewritten': '1', 'UNENCODED_URL': '/x'})

    assert 'UNENCODED_URL' in caplog.text


@pytest.mark.parametrize(
    'server,expected',
    [
        # Not rewritten, or no unencoded URL available
        ({'IIS_WasUrlRewritten': '0', 'UNENCODED_URL': '/a//b', 'REQUEST_URI': '/a/b'}, '/a/b'),
        ({'IIS_WasUrlRewritten': '1', 'UNENCODED_URL': '', 'REQUEST_URI': '/a/b'}, '/a/b'),
        ({'IIS_WasUrlRewritten': '1', 'REQUEST_URI': '/a/b'}, '/a/b'),
        ({'UNENCODED_URL': '/a//b', 'REQUEST_URI': '/a/b'}, '/a/b'),
    ],
)
def test_iis_unencoded_url_requires_both(server, expected):
    assert detect_request_uri(server) == expected


@pytest.mark.parametrize(
    'server,expected',
    [
        # The original URL replaces the rewrite URL...
        (
            {
                'HTTP_X_REWRITE_URL': '/rewritten',
                'HTTP_X_ORIGINAL_URL': '/original',
                'REQUEST_URI': '/request',
            },
            '/original',
        ),
        # ...but REQUEST_URI is preferred when there is no rewrite URL
        ({'HTTP_X_ORIGINAL_URL': '/original', 'REQUEST_URI': '/request'}, '/request'),
        ({'HTTP_X_REWRITE_URL': '', 'REQUEST_URI': '/request'}, '/request'),
        ({'HTTP_X_REWRITE_URL': '/rewritten'}, '/rewritten'),
        ({'REQUEST_URI': '/request?x=1'}, '/request?x=1'),
        ({'REQUEST_URI': ''}, ''),
    ],
)
def test_rewrite_precedence(server, expected):
    assert detect_request_uri(server) == expected


def test_original_url_without_request_uri_falls_through():
    server = {'HTTP_X_ORIGINAL_URL': '/original', 'ORIG_PATH_INFO': '/orig'}
    assert detect_request_uri(server) == '/orig'

    assert detect_request_uri({'HTTP_X_ORIGINAL_URL': '/original'}) == '/'


@pytest.mark.parametrize(
    'request_uri,expected',
    [
        ('http://example.com/foo/bar?x=1', '/foo/bar?x=1'),
        ('https://example.com:8443/foo', '/foo'),
        ('http://user@example.com/', '/'),
        ('https://example.com', ''),
        ('/already/relative', '/already/relative'),
    ],
)
def test_absolute_uri_from_proxy(request_uri, expected):
    assert detect_request_uri({'REQUEST_URI': request_uri}) == expected


def test_absolute_rewrite_url():
    server = {'HTTP_X_REWRITE_URL': 'http://example.com/rewritten'}
    assert detect_request_uri(server) == '/rewritten'


@pytest.mark.parametrize(
    'query_string,expected',
    [
        ('a=1&b=2', '/index.php/foo?a=1&b=2'),
        ('', '/index.php/foo'),
        (None, '/index.php/foo'),
    ],
)
def test_orig_path_info(query_string, expected):
    server = {'ORIG_PATH_INFO': '/index.php/foo'}
    if query_string is not None:
        server['QUERY_STRING'] = query_string

    assert detect_request_uri(server) == expected


def test_default():
    assert detect_request_uri({}) == '/'
    assert Request().request_uri == '/'


class TestCaching:
    def test_detected_once(self, monkeypatch):
        calls = []

        def counting(server):
            calls.append(server)
            return '/counted'

        monkeypatch.setattr(detection, 'detect_request_uri', counting)

        req = Request({'REQUEST_URI': '/whatever'})
        assert req.request_uri == '/counted'
        assert req.request_uri == '/counted'
        assert len(calls) == 1

    def test_override(self):
        req = Request({'REQUEST_URI': '/detected'})
        assert req.request_uri == '/detected'

        req.request_uri = '/explicit?x=1'
        assert req.request_uri == '/explicit?x=1'
        assert req.request_uri == '/explicit?x=1'

    def test_stable_across_server_reassignment(self):
        req = Request({'REQUEST_URI': '/first'})
        req.server = {'REQUEST_URI': '/second'}

        assert req.request_uri == '/first'
        assert req.uri.path == '/first'
