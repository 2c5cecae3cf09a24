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

"""URI utilities.

This module provides the :class:`Uri` value type a request's resolved
location is stored in, together with helpers to decode percent-encoded
strings, parse query strings, and split a ``Host`` header into its
parts::

    from envrequest.util import uri

    host, port = uri.parse_host('example.org:8080')
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple, Union

from envrequest.constants import DEFAULT_PORTS

_HEX_DIGITS = '0123456789ABCDEFabcdef'

# This map construction is based on urllib's implementation
_HEX_TO_BYTE = {
    (a + b).encode(): bytes([int(a + b, 16)]) for a in _HEX_DIGITS for b in _HEX_DIGITS
}

# NOTE: Matches only the last ":<digits>" suffix, so that a bracketed IPv6
#   literal without an explicit port (e.g., "[::1]") is left intact.
_HOST_PORT_PATTERN = re.compile(r':(\d+)$')


def decode(encoded_uri: str, unquote_plus: bool = True) -> str:
    """Decode percent-encoded characters in a URI or query string.

    This function models the behavior of `urllib.parse.unquote_plus`.
    Malformed escapes such as ``'%'`` or ``'%zz'`` are kept as-is.

    Args:
        encoded_uri (str): An encoded URI (full or partial).

    Keyword Arguments:
        unquote_plus (bool): Set to ``False`` to retain any plus ('+')
            characters in the given string, rather than converting them to
            spaces (default ``True``).

    Returns:
        str: A decoded URL. Escaped non-ASCII characters are assumed to be
        UTF-8, per RFC 3986.

    Raises:
        TypeError: `encoded_uri` was not a ``str``.
    """
    if not isinstance(encoded_uri, str):
        raise TypeError('encoded_uri must be a str, not %s' % type(encoded_uri).__name__)

    decoded_uri = encoded_uri

    if unquote_plus and '+' in decoded_uri:
        decoded_uri = decoded_uri.replace('+', ' ')

    # Short-circuit if we can
    if '%' not in decoded_uri:
        return decoded_uri

    tokens = decoded_uri.encode().split(b'%')
    decoded = bytearray(tokens[0])
    for token in tokens[1:]:
        try:
            decoded += _HEX_TO_BYTE[token[:2]] + token[2:]
        except KeyError:
            # malformed percentage like "x=%" or "y=%+"
            decoded += b'%' + token

    return decoded.decode('utf-8', 'replace')


def parse_query_string(
    query_string: str, keep_blank: bool = False, csv: bool = True
) -> Dict[str, Union[str, List[str]]]:
    """Parse a query string into a dict.

    Query string parameters are assumed to use standard form-encoding.
    A parameter given more than once maps to a ``list`` of its values in
    the order seen.

    Args:
        query_string (str): The query string to parse, without the
            leading ``'?'``.
        keep_blank (bool): Set to ``True`` to return fields even if
            they do not have a value (default ``False``). For comma-separated
            values, this option also determines whether or not empty elements
            in the parsed list are retained.
        csv (bool): Set to ``False`` in order to disable splitting values
            on ``','`` (default ``True``).

    Returns:
        dict: A dictionary of (*name*, *value*) pairs, one per query
        parameter. Note that *value* may be a single ``str``, or a
        ``list`` of ``str``.

    Raises:
        TypeError: `query_string` was not a ``str``.
    """
    if not isinstance(query_string, str):
        raise TypeError(
            'query_string must be a str, not %s' % type(query_string).__name__
        )

    params: Dict[str, Union[str, List[str]]] = {}

    for field in query_string.split('&'):
        k, _, v = field.partition('=')
        if not v and (not keep_blank or not k):
            continue

        k = decode(k)

        if csv and ',' in v:
            # NOTE: Values are decoded only after splitting, so that an
            #   encoded comma is kept as part of an element.
            values = [decode(element) for element in v.split(',') if element or keep_blank]
        else:
            values = [decode(v)]

        if k in params:
            old_value = params[k]
            if isinstance(old_value, list):
                old_value.extend(values)
            else:
                params[k] = [old_value] + values
        elif len(values) == 1 and not (csv and ',' in v):
            params[k] = values[0]
        else:
            params[k] = values

    return params


def parse_host(host: str) -> Tuple[str, Optional[int]]:
    """Split a ``Host`` header value into a (*host*, *port*) tuple.

    Only a trailing ``:<digits>`` suffix is treated as a port; this works
    for registered names, IPv4 addresses and bracketed IPv6 literals alike.
    The host part is returned exactly as given, brackets included.

    Args:
        host (str): Host string to parse, optionally containing a port.

    Returns:
        tuple: The host and the port converted to an ``int``, or ``None``
        when the string does not end with a port.
    """
    match = _HOST_PORT_PATTERN.search(host)
    if match is None:
        return host, None

    return host[: match.start()], int(match.group(1))


class Uri:
    """Represents the resolved location of a request.

    No validation is performed; whatever the server supplied is kept.

    Attributes:
        scheme (str): Either ``'http'`` or ``'https'``.
        host (str): Host name or address, or ``None`` if not known.
        port (int): Port number, or ``None`` if not known.
        path (str): Path component, without the query string.
        query (str): Query string without the leading ``'?'``, or ``None``.
    """

    __slots__ = ('scheme', 'host', 'port', 'path', 'query')

    def __init__(
        self,
        scheme: str = 'http',
        host: Optional[str] = None,
        port: Optional[int] = None,
        path: str = '',
        query: Optional[str] = None,
    ) -> None:
        self.scheme = scheme
        self.host = host
        self.port = port
        self.path = path
        self.query = query

    @property
    def netloc(self) -> str:
        """The ``host[:port]`` portion, omitting the scheme's default port."""
        if not self.host:
            return ''

        host = self.host
        if ':' in host and not host.startswith('['):
            host = '[' + host + ']'

        if self.port is not None and self.port != DEFAULT_PORTS.get(self.scheme):
            return host + ':' + str(self.port)

        return host

    @property
    def relative(self) -> str:
        """The path and query string portion, omitting scheme and host."""
        if self.query:
            return self.path + '?' + self.query
        return self.path

    def to_string(self) -> str:
        netloc = self.netloc
        if netloc:
            return self.scheme + '://' + netloc + self.relative
        return self.relative

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Uri):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __repr__(self) -> str:
        return '<%s: %r>' % (self.__class__.__name__, self.to_string())
