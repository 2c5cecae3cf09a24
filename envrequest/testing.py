# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Testing utilities.

This module contains helpers for simulating the server variables a host
web server would hand to the application, and the WSGI environ a WSGI
server would pass in::

    from envrequest import Request
    from envrequest import testing

    req = Request(testing.create_server_params(path='/index.php/users'))
"""

from __future__ import annotations

import io
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from envrequest.util.structures import Headers

DEFAULT_HOST = 'envrequest.example.org'
"""Default host name used by the helpers in this module."""

DEFAULT_DOCUMENT_ROOT = '/var/www/html'
"""Default document root used to build ``SCRIPT_FILENAME``."""

HeadersArg = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def _fixup_http_version(http_version: str) -> str:
    if http_version not in ('2', '2.0', '1.1', '1.0', '1'):
        raise ValueError('Invalid HTTP version: {!r}'.format(http_version))

    # NOTE: Normalize so that the version is always given as major.minor
    if http_version in ('1', '2'):
        http_version += '.0'

    return http_version


def _header_key(name: str) -> str:
    key = name.upper().replace('-', '_')
    if key in ('CONTENT_TYPE', 'CONTENT_LENGTH', 'CONTENT_MD5'):
        return key
    return 'HTTP_' + key


def _add_headers(target: Dict[str, Any], headers: Optional[HeadersArg]) -> None:
    if headers is None:
        return

    converted: Dict[str, str] = {}
    for name, value in Headers(headers).fields():
        key = _header_key(name)
        if key in converted and key.startswith('HTTP_'):
            # NOTE: Repeated fields are combined, as servers do for CGI
            converted[key] += ',' + value
        else:
            converted[key] = value

    target.update(converted)


def create_server_params(
    path: str = '/',
    query_string: str = '',
    http_version: str = '1.1',
    scheme: str = 'http',
    host: Optional[str] = DEFAULT_HOST,
    port: Optional[int] = None,
    headers: Optional[HeadersArg] = None,
    method: str = 'GET',
    script_name: str = '/index.php',
    document_root: str = DEFAULT_DOCUMENT_ROOT,
    extra: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Create server variables as an Apache-style host would report them.

    Keyword Args:
        path (str): The request path, without the query string
            (default ``'/'``). It is used as-is for ``REQUEST_URI``.
        query_string (str): The query string, without a leading ``'?'``
            (default ``''``).
        http_version (str): The HTTP version to simulate. Must be either
            ``'2'``, ``'2.0'``, ``'1.1'``, ``'1.0'``, or ``'1'``
            (default ``'1.1'``).
        scheme (str): URL scheme, either ``'http'`` or ``'https'``
            (default ``'http'``). ``HTTPS`` is set to ``'on'`` for the
            latter.
        host (str): Value for ``SERVER_NAME`` and the ``Host`` header, or
            ``None`` to leave both out.
        port (int): The TCP port to simulate. Defaults to the standard port
            for the given scheme.
        headers (dict): Headers as a mapping or an iterable of
            (*name*, *value*) pairs.
        method (str): The HTTP method to use (default ``'GET'``).
        script_name (str): Location of the front controller relative to the
            document root (default ``'/index.php'``). Used for
            ``SCRIPT_NAME``, ``PHP_SELF`` and ``SCRIPT_FILENAME``.
        document_root (str): The document root (default
            ``'/var/www/html'``).
        extra (dict): Additional variables, applied last.

    Raises:
        ValueError: `query_string` starts with ``'?'``, or `http_version`
            is not supported.
    """
    http_version = _fixup_http_version(http_version)

    if query_string and query_string.startswith('?'):
        raise ValueError("query_string should not start with '?'")

    scheme = scheme.lower()
    if port is None:
        port = 80 if scheme == 'http' else 443

    request_uri = path + '?' + query_string if query_string else path

    params = {
        'SERVER_PROTOCOL': 'HTTP/' + http_version,
        'SERVER_SOFTWARE': 'Apache/2.4.62 (Unix)',
        'REQUEST_METHOD': method,
        'REQUEST_URI': request_uri,
        'QUERY_STRING': query_string,
        'SERVER_PORT': str(port),
        'DOCUMENT_ROOT': document_root,
        'SCRIPT_NAME': script_name,
        'PHP_SELF': script_name,
        'SCRIPT_FILENAME': document_root.rstrip('/') + script_name,
        'REMOTE_ADDR': '127.0.0.1',
    }

    if scheme == 'https':
        params['HTTPS'] = 'on'

    if host is not None:
        params['SERVER_NAME'] = host
        params['HTTP_HOST'] = host

    _add_headers(params, headers)

    if extra:
        params.update(extra)

    return params


def create_environ(
    path: str = '/',
    query_string: str = '',
    http_version: str = '1.1',
    scheme: str = 'http',
    host: str = DEFAULT_HOST,
    port: Optional[int] = None,
    headers: Optional[HeadersArg] = None,
    root_path: str = '',
    body: Union[str, bytes] = b'',
    method: str = 'GET',
    extra: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Create a mock PEP-3333 environ ``dict`` for simulating WSGI requests.

    Keyword Args:
        path (str): The path for the request (default ``'/'``).
        query_string (str): The query string to simulate, without a
            leading ``'?'`` (default ``''``).
        http_version (str): The HTTP version to simulate
            (default ``'1.1'``).
        scheme (str): URL scheme, either ``'http'`` or ``'https'``
            (default ``'http'``).
        host (str): Hostname for the request.
        port (int): The TCP port to simulate. Defaults to the standard port
            for the given scheme.
        headers (dict): Headers as a mapping or an iterable of
            (*name*, *value*) pairs.
        root_path (str): Value for ``SCRIPT_NAME`` (default ``''``).
        body (str): The body of the request. A ``str`` is encoded as UTF-8.
        method (str): The HTTP method to use (default ``'GET'``).
        extra (dict): Additional environ keys, applied last.
    """
    http_version = _fixup_http_version(http_version)

    if query_string and query_string.startswith('?'):
        raise ValueError("query_string should not start with '?'")

    body = body.encode() if isinstance(body, str) else body

    scheme = scheme.lower()
    if port is None:
        port = 80 if scheme == 'http' else 443

    if root_path and not root_path.startswith('/'):
        root_path = '/' + root_path

    environ: Dict[str, Any] = {
        'SERVER_PROTOCOL': 'HTTP/' + http_version,
        'SERVER_SOFTWARE': 'gunicorn/23.0.0',
        'SCRIPT_NAME': root_path,
        'REQUEST_METHOD': method,
        'PATH_INFO': path.encode().decode('iso-8859-1'),
        'QUERY_STRING': query_string,
        'REMOTE_PORT': '65133',
        'SERVER_NAME': host,
        'SERVER_PORT': str(port),
        'HTTP_HOST': host,
        'wsgi.version': (1, 0),
        'wsgi.url_scheme': scheme,
        'wsgi.input': io.BytesIO(body),
        'wsgi.multithread': False,
        'wsgi.multiprocess': True,
        'wsgi.run_once': False,
    }

    if body:
        environ['CONTENT_LENGTH'] = str(len(body))

    _add_headers(environ, headers)

    if extra:
        environ.update(extra)

    return environ
