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

"""Utilities for the Request class."""

from __future__ import annotations

from collections.abc import Mapping
from http import cookies as http_cookies
import re
from typing import Any, Dict, List
from urllib.parse import quote_plus

# https://tools.ietf.org/html/rfc6265#section-4.1.1
#
# NOTE: We don't have to worry about code points in header strings outside
#   the range 0x0000 - 0x00FF per PEP 3333.
_COOKIE_NAME_RESERVED_CHARS = re.compile(
    '[\x00-\x1f\x7f-\xff()<>@,;:\\\\"/[\\]?={} \x09]'
)


def parse_cookie_header(header_value: str) -> Dict[str, List[str]]:
    """Parse a Cookie header value into a dict of named values.

    (See also: RFC 6265, Section 5.4)

    Args:
        header_value (str): Value of a Cookie header

    Returns:
        dict: Map of cookie names to a list of all cookie values found in the
        header for that name. If a cookie is specified more than once in the
        header, the order of the values will be preserved.
    """
    cookies: Dict[str, List[str]] = {}

    for token in header_value.split(';'):
        name, __, value = token.partition('=')

        # NOTE: RFC6265 is more strict about whitespace, but we are more
        #   lenient here to better handle old user agents.
        name = name.strip()
        value = value.strip()

        # Skip malformed cookie-pair
        if not name:
            continue

        # Skip cookies with invalid names
        if _COOKIE_NAME_RESERVED_CHARS.search(name):
            continue

        # NOTE: Mimic the standard library's support for escaped characters
        #   within a double-quoted value (obsolete RFC 2109).
        if len(value) > 2 and value[0] == '"' and value[-1] == '"':
            value = http_cookies._unquote(value)

        if name in cookies:
            cookies[name].append(value)
        else:
            cookies[name] = [value]

    return cookies


def collapse_cookies(cookies: Mapping[str, List[str]]) -> Dict[str, str]:
    """Keep only the first value seen for each cookie name."""
    return {name: values[0] for name, values in cookies.items()}


def serialize_cookies(cookies: Mapping[str, Any]) -> str:
    """Render a mapping of cookies as a Cookie header value.

    Values are form-encoded; names are used as-is. Pairs are joined with
    ``'; '``, e.g. ``{'a': '1', 'b': 'x y'}`` becomes ``'a=1; b=x+y'``.
    """
    return '; '.join(
        name + '=' + quote_plus(str(value)) for name, value in cookies.items()
    )
