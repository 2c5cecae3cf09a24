import pytest

from envrequest import Request
from envrequest import testing
from envrequest.util import uri
from envrequest.util.uri import Uri


@pytest.mark.parametrize(
    'https,scheme',
    [
        ('on', 'https'),
        ('ON', 'https'),
        ('1', 'https'),
        ('off', 'http'),
        ('', 'http'),
        (None, 'http'),
    ],
)
def test_scheme(https, scheme):
    server = {'REQUEST_URI': '/'}
    if https is not None:
        server['HTTPS'] = https

    req = Request(server)
    assert req.uri.scheme == scheme
    assert req.scheme == scheme


def test_server_name_and_port():
    req = Request({'SERVER_NAME': 'example.org', 'SERVER_PORT': '8080', 'REQUEST_URI': '/a'})

    assert req.uri.host == 'example.org'
    assert req.uri.port == 8080
    assert str(req.uri) == 'http://example.org:8080/a'


def test_server_name_preferred_over_host_header():
    req = Request(
        {
            'SERVER_NAME': 'internal.local',
            'SERVER_PORT': '80',
            'HTTP_HOST': 'public.example.org:8443',
        }
    )

    assert req.uri.host == 'internal.local'
    assert req.uri.port == 80


def test_server_port_without_server_name_is_ignored():
    req = Request({'SERVER_PORT': '8080', 'HTTP_HOST': 'example.org'})

    assert req.uri.host == 'example.org'
    assert req.uri.port is None


@pytest.mark.parametrize(
    'host_header,host,port',
    [
        ('example.org', 'example.org', None),
        ('example.org:81', 'example.org', 81),
        ('127.0.0.1', '127.0.0.1', None),
        ('127.0.0.1:3000', '127.0.0.1', 3000),
        ('[::1]', '[::1]', None),
        ('[::1]:8080', '[::1]', 8080),
        ('[2001:db8::7]:443', '[2001:db8::7]', 443),
        ('example.org:', 'example.org:', None),
    ],
)
def test_host_header_fallback(host_header, host, port):
    req = Request({'HTTP_HOST': host_header})

    assert req.uri.host == host
    assert req.uri.port == port


def test_no_host_information():
    req = Request({'REQUEST_URI': '/only/path?x=1', 'QUERY_STRING': 'x=1'})

    assert req.uri.host is None
    assert req.uri.port is None
    assert str(req.uri) == '/only/path?x=1'


def test_unparsable_server_port():
    req = Request({'SERVER_NAME': 'example.org', 'SERVER_PORT': 'eighty'})

    assert req.uri.host == 'example.org'
    assert req.uri.port is None


def test_query_only_from_query_string():
    req = Request({'REQUEST_URI': '/search?q=rewritten'})

    assert req.uri.path == '/search'
    assert req.uri.query is None


def test_full_uri(params_req):
    req = params_req(
        path='/index.php/users',
        query_string='page=2',
        scheme='https',
        host='example.org',
        port=8443,
    )

    assert str(req.uri) == 'https://example.org:8443/index.php/users?page=2'
    assert repr(req) == "<Request: GET 'https://example.org:8443/index.php/users?page=2'>"


class TestUri:
    @pytest.mark.parametrize(
        'kwargs,expected',
        [
            ({'host': 'example.org', 'port': 80, 'path': '/'}, 'http://example.org/'),
            (
                {'scheme': 'https', 'host': 'example.org', 'port': 443, 'path': '/a'},
                'https://example.org/a',
            ),
            (
                {'scheme': 'https', 'host': 'example.org', 'port': 80, 'path': '/a'},
                'https://example.org:80/a',
            ),
            ({'host': '::1', 'port': 8000, 'path': '/'}, 'http://[::1]:8000/'),
            ({'host': '[::1]', 'path': '/'}, 'http://[::1]/'),
            ({'host': 'example.org', 'path': '/a', 'query': 'b=c'}, 'http://example.org/a?b=c'),
            ({'host': 'example.org', 'path': '/a', 'query': ''}, 'http://example.org/a'),
            ({'path': '/a', 'query': 'b=c'}, '/a?b=c'),
        ],
    )
    def test_to_string(self, kwargs, expected):
        value = Uri(**kwargs)

        assert value.to_string() == expected
        assert str(value) == expected

    def test_equality(self):
        assert Uri(host='a', path='/') == Uri(host='a', path='/')
        assert Uri(host='a', path='/') != Uri(host='b', path='/')
        assert Uri() != 'http://'

    def test_relative(self):
        assert Uri(host='a', path='/x', query='y=1').relative == '/x?y=1'


@pytest.mark.parametrize(
    'host,expected',
    [
        ('envrequest.example.org', ('envrequest.example.org', None)),
        ('envrequest.example.org:8000', ('envrequest.example.org', 8000)),
        ('10.0.0.1:80', ('10.0.0.1', 80)),
        ('[fe80::1]:8080', ('[fe80::1]', 8080)),
        ('[fe80::1]', ('[fe80::1]', None)),
    ],
)
def test_parse_host(host, expected):
    assert uri.parse_host(host) == expected


class TestDecode:
    @pytest.mark.parametrize(
        'encoded,expected',
        [
            ('a+b', 'a b'),
            ('a%20b', 'a b'),
            ('%E2%84%A2', '™'),
            ('ab%2Gcd', 'ab%2Gcd'),
            ('100%', '100%'),
            ('no-escapes', 'no-escapes'),
        ],
    )
    def test_decode(self, encoded, expected):
        assert uri.decode(encoded) == expected

    def test_keep_plus(self):
        assert uri.decode('a+b%2B', unquote_plus=False) == 'a+b+'

    def test_type_error(self):
        with pytest.raises(TypeError):
            uri.decode(b'abc')


class TestParseQueryString:
    def test_simple(self):
        assert uri.parse_query_string('a=1&b=two+words') == {'a': '1', 'b': 'two words'}

    def test_repeated(self):
        assert uri.parse_query_string('t=1&t=2&t=3') == {'t': ['1', '2', '3']}

    @pytest.mark.parametrize(
        'keep_blank,expected',
        [
            (True, {'flag': '', 'a': '1', 'b': ''}),
            (False, {'a': '1'}),
        ],
    )
    def test_blank(self, keep_blank, expected):
        assert uri.parse_query_string('flag&a=1&b=', keep_blank=keep_blank) == expected

    def test_csv(self):
        assert uri.parse_query_string('t=1,2&t=3') == {'t': ['1', '2', '3']}
        assert uri.parse_query_string('t=1,2&t=3', csv=False) == {'t': ['1,2', '3']}
        assert uri.parse_query_string('t=a%2Cb,c') == {'t': ['a,b', 'c']}

    def test_csv_blank_elements(self):
        assert uri.parse_query_string('t=1,,3') == {'t': ['1', '3']}
        assert uri.parse_query_string('t=1,,3', keep_blank=True) == {'t': ['1', '', '3']}

    def test_encoded_name(self):
        assert uri.parse_query_string('caf%C3%A9=1') == {'café': '1'}

    def test_type_error(self):
        with pytest.raises(TypeError):
            uri.parse_query_string(None)


def test_default_host_helper():
    server = testing.create_server_params()
    req = Request(server)

    assert req.uri.host == testing.DEFAULT_HOST
    assert req.uri.port == 80
    assert str(req.uri) == 'http://' + testing.DEFAULT_HOST + '/'
