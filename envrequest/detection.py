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

"""Request-URI, base URL and base path detection.

Web servers disagree on where the originally requested URI ends up. Apache
reports it as ``REQUEST_URI``, IIS behind ISAPI Rewrite or URL Rewrite
moves it into ``HTTP_X_REWRITE_URL``, ``HTTP_X_ORIGINAL_URL`` or
``UNENCODED_URL``, IIS 5 in CGI mode only has ``ORIG_PATH_INFO``, and
proxies may include the scheme and host. Likewise the location of the
application's front controller has to be pieced together from
``SCRIPT_FILENAME``, ``SCRIPT_NAME``, ``PHP_SELF`` and
``ORIG_SCRIPT_NAME``.

The functions below implement those heuristics over plain server
variables. Each heuristic is an ordered chain of probes; the first probe
returning something other than ``None`` wins, so the order of the probes
must be preserved.
"""

from __future__ import annotations

import re
from typing import Callable, Optional, Tuple

import envrequest
from envrequest._typing import RequestMetadata
from envrequest.util.misc import basename
from envrequest.util.misc import dirname

__all__ = (
    'detect_base_path',
    'detect_base_url',
    'detect_request_uri',
)

# NOTE: Proxied requests may carry an absolute URI; only the path is kept.
_SCHEME_AND_HOST_PATTERN = re.compile(r'^[^:]+://[^/]+')

_Probe = Callable[[RequestMetadata], Optional[str]]


# ------------------------------------------------------------------------
# Request URI
# ------------------------------------------------------------------------


def _probe_iis_unencoded_url(server: RequestMetadata) -> Optional[str]:
    # NOTE: IIS7 with URL Rewrite double-encodes slashes in the other
    #   variables; the unencoded URL takes precedence over everything.
    unencoded_url = server.get('UNENCODED_URL', '')
    if server.get('IIS_WasUrlRewritten') == '1' and unencoded_url != '':
        envrequest._logger.debug('Using UNENCODED_URL rewritten by IIS')
        return unencoded_url

    return None


def _probe_rewritten_or_request_uri(server: RequestMetadata) -> Optional[str]:
    request_uri = None

    # ISAPI_Rewrite on IIS
    rewrite_url = server.get('HTTP_X_REWRITE_URL')
    if rewrite_url is not None:
        request_uri = rewrite_url

    # IIS 7.0 or later with ISAPI_Rewrite
    original_url = server.get('HTTP_X_ORIGINAL_URL')
    if original_url is not None:
        request_uri = original_url

    if not rewrite_url:
        request_uri = server.get('REQUEST_URI')

    if request_uri is None:
        return None

    return _SCHEME_AND_HOST_PATTERN.sub('', request_uri, count=1)


def _probe_orig_path_info(server: RequestMetadata) -> Optional[str]:
    # IIS 5.0, CGI mode
    orig_path_info = server.get('ORIG_PATH_INFO')
    if orig_path_info is None:
        return None

    envrequest._logger.debug('Falling back to ORIG_PATH_INFO for the request URI')

    query_string = server.get('QUERY_STRING', '')
    if query_string != '':
        orig_path_info += '?' + query_string

    return orig_path_info


_REQUEST_URI_PROBES: Tuple[_Probe, ...] = (
    _probe_iis_unencoded_url,
    _probe_rewritten_or_request_uri,
    _probe_orig_path_info,
)


def detect_request_uri(server: RequestMetadata) -> str:
    """Detect the request URI as the application should see it.

    The result is the path of the request, possibly followed by the query
    string, independent of any rewriting done by the server or a proxy.
    Sources are consulted in this order:

        1. ``UNENCODED_URL``, when ``IIS_WasUrlRewritten`` is ``'1'``
        2. ``HTTP_X_REWRITE_URL``, or else ``REQUEST_URI``; a
           ``HTTP_X_ORIGINAL_URL`` only replaces the rewrite URL, never
           ``REQUEST_URI``. A leading ``scheme://host[:port]`` is removed.
        3. ``ORIG_PATH_INFO``, plus ``'?'`` and ``QUERY_STRING`` if the
           latter is not empty

    Args:
        server: Server variables describing the request.

    Returns:
        str: The detected request URI, or ``'/'`` if none of the sources
        is available.
    """
    for probe in _REQUEST_URI_PROBES:
        request_uri = probe(server)
        if request_uri is not None:
            return request_uri

    return '/'


# ------------------------------------------------------------------------
# Base URL
# ------------------------------------------------------------------------


def _script_candidate(server: RequestMetadata) -> str:
    filename = basename(server.get('SCRIPT_FILENAME', ''))

    for key in ('SCRIPT_NAME', 'PHP_SELF', 'ORIG_SCRIPT_NAME'):
        # NOTE: ORIG_SCRIPT_NAME is needed on some shared hosts (1and1)
        value = server.get(key)
        if value is not None and basename(value) == filename:
            return value

    # Backtrack up PHP_SELF to find the portion matching the script name
    php_self = server.get('PHP_SELF')
    path = php_self.strip('/') if php_self else ''
    pos = path.find(filename)
    prefix = path[:pos] if pos > 0 else ''

    envrequest._logger.debug('Base URL candidate rebuilt from PHP_SELF')
    return '/' + prefix + filename


def _match_full(request_uri: str, base_url: str) -> Optional[str]:
    if request_uri.startswith(base_url):
        return base_url
    return None


def _match_directory(request_uri: str, base_url: str) -> Optional[str]:
    base_dir = dirname(base_url).replace('\\', '/')
    if request_uri.startswith(base_dir):
        return base_dir
    return None


def _match_rewritten(request_uri: str, base_url: str) -> Optional[str]:
    truncated_request_uri = request_uri.partition('?')[0]

    script = basename(base_url)
    if not script or script not in truncated_request_uri:
        envrequest._logger.debug(
            'No base URL could be derived for %r', request_uri
        )
        return ''

    # NOTE: With mod_rewrite or ISAPI_Rewrite the script path may appear
    #   further into the request URI. A match at position 0 would have been
    #   caught above, so requiring pos > 0 avoids matching a value that
    #   comes from PATH_INFO or QUERY_STRING.
    if len(request_uri) >= len(base_url):
        pos = request_uri.find(base_url)
        if pos > 0:
            return request_uri[: pos + len(base_url)]

    return base_url


_BASE_URL_MATCHERS: Tuple[Callable[[str, str], Optional[str]], ...] = (
    _match_full,
    _match_directory,
    _match_rewritten,
)


def detect_base_url(server: RequestMetadata, request_uri: str) -> str:
    """Detect the base URL of the application.

    The base URL is the part of the request path that leads to the
    application's front controller, e.g. ``'/shop/index.php'`` for a
    request to ``'/shop/index.php/cart'``.

    A candidate is first taken from whichever of ``SCRIPT_NAME``,
    ``PHP_SELF`` and ``ORIG_SCRIPT_NAME`` (in that order) names the same
    script as ``SCRIPT_FILENAME``, or else rebuilt from ``PHP_SELF``. The
    candidate is then reconciled with `request_uri`:

        1. If the request URI starts with the candidate, it is returned.
        2. If the request URI starts with the candidate's directory, the
           directory is returned.
        3. If the script name does not appear in the request URI path at
           all, there is no usable base URL and ``''`` is returned.
        4. If the candidate appears further into the request URI, the
           request URI up to the end of that occurrence is returned;
           otherwise the candidate is returned unchanged.

    Args:
        server: Server variables describing the request.
        request_uri (str): The request URI, as returned by
            :func:`detect_request_uri` or set explicitly.

    Returns:
        str: The detected base URL. The result may end with a slash;
        :class:`~envrequest.Request` strips it when storing the value.
    """
    base_url = _script_candidate(server)

    for matcher in _BASE_URL_MATCHERS:
        result = matcher(request_uri, base_url)
        if result is not None:
            return result

    return base_url


# ------------------------------------------------------------------------
# Base path
# ------------------------------------------------------------------------


def detect_base_path(server: RequestMetadata, base_url: str) -> str:
    """Detect the base path of the application.

    The base path is the directory containing the front controller. When
    the base URL ends with the script name given by ``SCRIPT_FILENAME``,
    its directory is returned; otherwise the base URL already is a
    directory and is returned as-is.

    Args:
        server: Server variables describing the request.
        base_url (str): The base URL, as returned by
            :func:`detect_base_url` or set explicitly.

    Returns:
        str: The detected base path, or ``''`` if `base_url` is empty.
    """
    if base_url == '':
        return ''

    if basename(base_url) == basename(server.get('SCRIPT_FILENAME', '')):
        return dirname(base_url).replace('\\', '/')

    return base_url
