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

"""WSGI integration.

Builds a :class:`~envrequest.Request` from a PEP-3333 environ::

    from envrequest.gateway import create_request

    def app(environ, start_response):
        req = create_request(environ)
        ...

WSGI servers do not all report the same variables. ``REQUEST_URI`` is
provided by uWSGI and mod_wsgi but not by every server, and the scheme is
given as ``wsgi.url_scheme`` rather than ``HTTPS``. The missing variables
are synthesized here so that detection works the same way it does for any
other host.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from envrequest._typing import HeaderSource
from envrequest._typing import ParamsArg
from envrequest.constants import BODYLESS_METHODS
from envrequest.constants import MEDIA_URLENCODED
from envrequest.request import Request
from envrequest.request import RequestOptions
from envrequest.request_helpers import collapse_cookies
from envrequest.request_helpers import parse_cookie_header
from envrequest.util.misc import to_int
from envrequest.util.uri import decode
from envrequest.util.uri import parse_query_string

__all__ = (
    'create_request',
    'server_params_from_environ',
)


def server_params_from_environ(environ: Mapping[str, Any]) -> Dict[str, str]:
    """Extract server variables from a WSGI environ.

    Every ``str`` value whose key does not start with ``'wsgi.'`` is kept.
    ``HTTPS`` is set to ``'on'`` for ``https`` requests if the server did
    not set it, and ``REQUEST_URI`` is synthesized when missing, from
    ``RAW_URI`` if available, or else from ``SCRIPT_NAME``, ``PATH_INFO``
    and ``QUERY_STRING``.

    Args:
        environ (dict): A WSGI environ.

    Returns:
        dict: A new ``dict`` of server variables.
    """
    server = {
        key: value
        for key, value in environ.items()
        if isinstance(value, str) and not key.startswith('wsgi.')
    }

    if 'HTTPS' not in server and environ.get('wsgi.url_scheme') == 'https':
        server['HTTPS'] = 'on'

    if 'REQUEST_URI' not in server:
        raw_uri = server.get('RAW_URI')
        if raw_uri:
            server['REQUEST_URI'] = raw_uri
        else:
            # NOTE: PATH_INFO is "bytes tunneled as latin-1" per PEP 3333,
            #   so it is encoded back before being quoted.
            path = server.get('SCRIPT_NAME', '') + (server.get('PATH_INFO') or '/')
            request_uri = quote(path.encode('iso-8859-1', 'replace'), safe="/;=,:@!$&'()*+~")
            query_string = server.get('QUERY_STRING')
            if query_string:
                request_uri += '?' + query_string
            server['REQUEST_URI'] = request_uri

    return server


def create_request(
    environ: Mapping[str, Any],
    options: Optional[RequestOptions] = None,
    header_source: Optional[HeaderSource] = None,
    files: ParamsArg = None,
    env: ParamsArg = None,
) -> Request:
    """Create a :class:`~envrequest.Request` from a WSGI environ.

    Query string parameters and cookies are parsed from the environ; cookie
    values are percent-decoded. A form-encoded body whose length is given
    by ``CONTENT_LENGTH`` is read and parsed into
    :attr:`~envrequest.Request.post` for methods other than ``GET`` and
    ``HEAD`` (unless disabled through `options`); the raw body remains available through
    :attr:`~envrequest.Request.content`.

    Args:
        environ (dict): A WSGI environ.

    Keyword Arguments:
        options (RequestOptions): Options for the new request.
        header_source: Callable returning the host's full header listing.
        files (dict): Uploaded files, already parsed by the caller.
        env (dict): Environment variables to expose on the request.

    Returns:
        Request: The new request.
    """
    options = options if options is not None else RequestOptions()
    server = server_params_from_environ(environ)

    query = parse_query_string(
        server.get('QUERY_STRING', ''),
        keep_blank=options.keep_blank_qs_values,
        csv=options.auto_parse_qs_csv,
    )

    cookies = None
    cookie_header = server.get('HTTP_COOKIE')
    if cookie_header:
        cookies = {
            name: decode(value)
            for name, value in collapse_cookies(parse_cookie_header(cookie_header)).items()
        }

    req = Request(
        server,
        query=query,
        cookies=cookies,
        files=files,
        raw_files=False,
        env=env,
        stream=environ.get('wsgi.input'),
        header_source=header_source,
        options=options,
    )

    content_type = server.get('CONTENT_TYPE')
    if (
        options.auto_parse_form_urlencoded
        and content_type is not None
        and MEDIA_URLENCODED in content_type
        and req.method not in BODYLESS_METHODS
        # NOTE: PEP 3333 forbids reading wsgi.input past CONTENT_LENGTH,
        #   so the form is left unparsed when the length is not known.
        and to_int(server.get('CONTENT_LENGTH'))
    ):
        body = req.content.decode('utf-8', 'replace')
        req.post = parse_query_string(
            body,
            keep_blank=options.keep_blank_qs_values,
            csv=options.auto_parse_qs_csv,
        )

    return req
