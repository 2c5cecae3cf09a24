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

"""Request class."""

from __future__ import annotations

from typing import Optional

from envrequest import detection
from envrequest._typing import _UNSET
from envrequest._typing import HeaderSource
from envrequest._typing import ParamsArg
from envrequest._typing import ReadableIO
from envrequest._typing import UnsetOr
from envrequest.constants import VERSION_10
from envrequest.constants import VERSION_11
from envrequest.files import map_uploaded_files
from envrequest.headers import apply_authorization_fallback
from envrequest.headers import headers_from_metadata
from envrequest.request_helpers import serialize_cookies
from envrequest.util.misc import to_int
from envrequest.util.structures import Headers
from envrequest.util.structures import Parameters
from envrequest.util.uri import parse_host
from envrequest.util.uri import Uri


def _as_parameters(value: ParamsArg) -> Parameters:
    if isinstance(value, Parameters):
        return value
    return Parameters(value)


class Request:
    """Represents a client's HTTP request, as described by its host server.

    The request is assembled from server variables (``REQUEST_METHOD``,
    ``REQUEST_URI``, ``HTTP_*``, ...) and the parameter containers the host
    has already parsed. Nothing is read from the process environment;
    everything is passed in explicitly.

    Args:
        server (dict): Server variables describing the request.

    Keyword Arguments:
        query (dict): Query string parameters.
        post (dict): Form parameters from the request body.
        cookies (dict): Cookies sent with the request. A ``Cookie`` header
            is added to :attr:`headers` from these.
        files (dict): Uploaded files. By default, this is expected to be
            the by-attribute tree some hosts report, and is regrouped with
            :func:`~envrequest.files.map_uploaded_files`.
        raw_files (bool): Set to ``False`` if `files` is already grouped
            per file (default ``True``).
        env (dict): Environment variables of the host process, if the
            caller wants to expose them.
        stream: File-like object the raw body can be read from.
        header_source: Callable returning the host's full header listing,
            used to recover an ``Authorization`` header the server did not
            pass through.
        options (RequestOptions): Set of options controlling the request.
    """

    __slots__ = (
        '_base_path',
        '_base_url',
        '_content',
        '_cookies',
        '_env',
        '_files',
        '_post',
        '_query',
        '_request_uri',
        '_server',
        'header_source',
        'headers',
        'method',
        'options',
        'stream',
        'uri',
        'version',
    )

    method: Optional[str]
    """HTTP method as reported by the server (e.g., ``'GET'``), passed
    through verbatim, or ``None`` if the server did not report one.
    """
    version: str
    """HTTP protocol version, either ``'1.0'`` or ``'1.1'``."""
    headers: Headers
    """Request headers, rebuilt from the ``HTTP_*`` and ``CONTENT_*``
    server variables.
    """
    uri: Uri
    """The resolved location of the request."""

    def __init__(
        self,
        server: ParamsArg = None,
        *,
        query: ParamsArg = None,
        post: ParamsArg = None,
        cookies: ParamsArg = None,
        files: ParamsArg = None,
        raw_files: bool = True,
        env: ParamsArg = None,
        stream: Optional[ReadableIO] = None,
        header_source: Optional[HeaderSource] = None,
        options: Optional[RequestOptions] = None,
    ) -> None:
        self.options = options if options is not None else RequestOptions()
        self.header_source = header_source
        self.stream = stream

        self.method = None
        self.version = VERSION_11
        self.headers = Headers()
        self.uri = Uri()

        self._request_uri: UnsetOr[str] = _UNSET
        self._base_url: UnsetOr[str] = _UNSET
        self._base_path: UnsetOr[str] = _UNSET
        self._content: UnsetOr[bytes] = _UNSET

        self._server: Optional[Parameters] = None
        self._env = _as_parameters(env)
        self._query = _as_parameters(query)
        self._post = _as_parameters(post)
        self._files = Parameters()
        self._cookies = Parameters()

        if cookies:
            self.cookies = cookies
        if files:
            self._files = _as_parameters(map_uploaded_files(files) if raw_files else files)

        self.server = server if server is not None else Parameters()

    def __repr__(self) -> str:
        return '<%s: %s %r>' % (self.__class__.__name__, self.method, str(self.uri))

    # ------------------------------------------------------------------------
    # Parameter containers
    # ------------------------------------------------------------------------

    @property
    def server(self) -> Parameters:
        """Server variables the request was built from.

        Assigning a new mapping rebuilds :attr:`headers`, :attr:`method`,
        :attr:`version` and :attr:`uri` from it. Headers are appended, so a
        ``Cookie`` header added from :attr:`cookies` is kept.
        """
        if self._server is None:
            self._server = Parameters()
        return self._server

    @server.setter
    def server(self, server: ParamsArg) -> None:
        # NOTE: Copied so that the fallback below does not write into the
        #   caller's mapping.
        self._server = Parameters(server)

        if self.options.authorization_fallback:
            apply_authorization_fallback(self._server, self.header_source)

        self.headers.extend(headers_from_metadata(self._server))

        method = self._server.get('REQUEST_METHOD')
        if method is not None:
            self.method = method

        protocol = self._server.get('SERVER_PROTOCOL')
        if protocol is not None and VERSION_10 in protocol:
            self.version = VERSION_10

        self.uri = self._build_uri()

    @property
    def env(self) -> Parameters:
        """Environment variables exposed by the host, if any."""
        return self._env

    @env.setter
    def env(self, env: ParamsArg) -> None:
        self._env = _as_parameters(env)

    @property
    def query(self) -> Parameters:
        """Query string parameters."""
        return self._query

    @query.setter
    def query(self, query: ParamsArg) -> None:
        self._query = _as_parameters(query)

    @property
    def post(self) -> Parameters:
        """Form parameters submitted in the request body."""
        return self._post

    @post.setter
    def post(self, post: ParamsArg) -> None:
        self._post = _as_parameters(post)

    @property
    def cookies(self) -> Parameters:
        """Cookies sent with the request."""
        return self._cookies

    @cookies.setter
    def cookies(self, cookies: ParamsArg) -> None:
        self._cookies = _as_parameters(cookies)
        self.headers.add('Cookie', serialize_cookies(self._cookies))

    @property
    def files(self) -> Parameters:
        """Uploaded files, one mapping of attributes per file."""
        return self._files

    @files.setter
    def files(self, files: ParamsArg) -> None:
        self._files = _as_parameters(files)

    # ------------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------------

    @property
    def content(self) -> bytes:
        """Raw request body.

        The body is read from :attr:`stream` the first time this attribute
        is accessed and cached afterwards, since the stream can not be
        rewound. When ``CONTENT_LENGTH`` is known, no more than that many
        bytes are read.
        """
        if self._content is _UNSET:
            self._content = self._read_body()
        return self._content

    @content.setter
    def content(self, content: bytes) -> None:
        self._content = content

    def _read_body(self) -> bytes:
        if self.stream is None:
            return b''

        content_length = to_int(self.server.get('CONTENT_LENGTH'))
        if content_length is None:
            return self.stream.read() or b''
        if content_length <= 0:
            return b''

        return self.stream.read(content_length) or b''

    # ------------------------------------------------------------------------
    # Detected locations
    # ------------------------------------------------------------------------

    @property
    def request_uri(self) -> str:
        """The request URI as the application should see it.

        Detected on first access with
        :func:`~envrequest.detection.detect_request_uri`, unless set
        explicitly. May include the query string.
        """
        if self._request_uri is _UNSET:
            self._request_uri = detection.detect_request_uri(self.server)
        return self._request_uri

    @request_uri.setter
    def request_uri(self, request_uri: str) -> None:
        self._request_uri = request_uri

    @property
    def base_url(self) -> str:
        """The path prefix leading to the application's front controller.

        Detected on first access with
        :func:`~envrequest.detection.detect_base_url`, unless set
        explicitly. Never ends with a slash.
        """
        if self._base_url is _UNSET:
            self.base_url = detection.detect_base_url(self.server, self.request_uri)
        return self._base_url

    @base_url.setter
    def base_url(self, base_url: str) -> None:
        self._base_url = base_url.rstrip('/')

    @property
    def base_path(self) -> str:
        """The directory containing the application's front controller.

        Detected on first access with
        :func:`~envrequest.detection.detect_base_path`, unless set
        explicitly. Never ends with a slash.
        """
        if self._base_path is _UNSET:
            self.base_path = detection.detect_base_path(self.server, self.base_url)
        return self._base_path

    @base_path.setter
    def base_path(self, base_path: str) -> None:
        self._base_path = base_path.rstrip('/')

    # ------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------

    @property
    def scheme(self) -> str:
        """URL scheme used for the request. Either 'http' or 'https'."""
        return self.uri.scheme

    def _build_uri(self) -> Uri:
        server = self._server
        assert server is not None

        https = server.get('HTTPS')
        scheme = 'https' if https and https != 'off' else 'http'

        host: Optional[str] = None
        port: Optional[int] = None
        if 'SERVER_NAME' in server:
            host = server['SERVER_NAME']
            if 'SERVER_PORT' in server:
                port = to_int(server['SERVER_PORT'])
        else:
            host_header = self.headers.get('Host')
            if host_header:
                host, port = parse_host(host_header)

        path = self.request_uri.partition('?')[0]
        query = server.get('QUERY_STRING')

        return Uri(scheme=scheme, host=host, port=port, path=path, query=query)


class RequestOptions:
    """Defines a set of configurable request options.

    An instance of this class may be passed to :class:`~.Request` and to
    :func:`~envrequest.gateway.create_request` in order to tweak how the
    request is assembled.
    """

    authorization_fallback: bool
    """Set to ``False`` to ignore the host's header listing when the
    ``Authorization`` header is missing from the server variables
    (default ``True``).
    """
    keep_blank_qs_values: bool
    """Set to ``False`` to ignore query string params that have missing or blank
    values (default ``True``).

    For comma-separated values, this option also determines whether or not
    empty elements in the parsed list are retained.
    """
    auto_parse_qs_csv: bool
    """Set to ``True`` to split query string values on any non-percent-encoded
    commas (default ``False``).
    """
    auto_parse_form_urlencoded: bool
    """Set to ``False`` to leave ``application/x-www-form-urlencoded``
    bodies unparsed when building a request from a WSGI environ (default
    ``True``). The raw body remains available through
    :attr:`Request.content` either way.
    """

    __slots__ = (
        'authorization_fallback',
        'keep_blank_qs_values',
        'auto_parse_qs_csv',
        'auto_parse_form_urlencoded',
    )

    def __init__(self) -> None:
        self.authorization_fallback = True
        self.keep_blank_qs_values = True
        self.auto_parse_qs_csv = False
        self.auto_parse_form_urlencoded = True

    def __repr__(self) -> str:
        values = ', '.join(
            '%s=%r' % (name, getattr(self, name)) for name in self.__slots__
        )
        return '%s(%s)' % (self.__class__.__name__, values)
