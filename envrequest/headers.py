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

"""Header extraction.

Host servers hand request headers to the application as server variables:
``HTTP_USER_AGENT`` for ``User-Agent``, ``CONTENT_TYPE`` for
``Content-Type``, and so on. This module turns those variables back into a
:class:`~envrequest.util.structures.Headers` collection::

    from envrequest.headers import headers_from_metadata

    headers = headers_from_metadata({'HTTP_ACCEPT_ENCODING': 'gzip'})
    headers['Accept-Encoding']  # 'gzip'
"""

from __future__ import annotations

from typing import Dict, MutableMapping, Optional

import envrequest
from envrequest._typing import HeaderSource
from envrequest._typing import RequestMetadata
from envrequest.constants import CONTENT_PREFIX
from envrequest.constants import COOKIE_PREFIX
from envrequest.constants import HEADER_PREFIX
from envrequest.util.structures import Headers

__all__ = (
    'apply_authorization_fallback',
    'header_name_from_key',
    'headers_from_metadata',
)


def _ucwords(text: str) -> str:
    # NOTE: Unlike str.title(), only the first letter of each
    #   space-separated word is touched, so 'x1y' does not become 'X1Y'.
    return ' '.join(word[:1].upper() + word[1:] for word in text.split(' '))


def header_name_from_key(key: str) -> Optional[str]:
    """Derive a canonical header name from a server variable name.

    ``HTTP_*`` keys are lower-cased and then capitalized word by word
    (``HTTP_X_REWRITE_URL`` becomes ``X-Rewrite-Url``). ``CONTENT_*`` keys
    become ``Content-*`` with only the first letter of the suffix
    capitalized, except for ``CONTENT_MD5`` which becomes ``Content-MD5``.

    Args:
        key (str): Server variable name.

    Returns:
        str: The header name, or ``None`` if `key` does not carry a header.
        Cookie variables (``HTTP_COOKIE*``) also yield ``None``, since
        cookies are supplied through their own container.
    """
    if key.startswith(HEADER_PREFIX):
        if key.startswith(COOKIE_PREFIX):
            return None

        name = key[len(HEADER_PREFIX) :].replace('_', ' ')
        return _ucwords(name.lower()).replace(' ', '-')

    if key.startswith(CONTENT_PREFIX):
        suffix = key[len(CONTENT_PREFIX) :]
        if suffix != 'MD5':
            suffix = suffix.lower().capitalize()
        return 'Content-' + suffix

    return None


def headers_from_metadata(metadata: RequestMetadata) -> Headers:
    """Build a header collection from server variables.

    Entries with an empty value, and entries whose name does not carry a
    header (see :func:`header_name_from_key`), are ignored. Should two
    variables map to the same header name, the one seen last wins.

    Args:
        metadata: Server variables describing the request.

    Returns:
        Headers: A new collection; `metadata` is left untouched.
    """
    batch: Dict[str, str] = {}

    for key, value in metadata.items():
        if not value:
            continue

        name = header_name_from_key(key)
        if name is not None:
            batch[name] = value

    return Headers(batch)


def apply_authorization_fallback(
    server: MutableMapping[str, str], header_source: Optional[HeaderSource]
) -> bool:
    """Copy a missing ``Authorization`` header into the server variables.

    Some server modules (notably Apache's mod_php and some CGI setups) do
    not pass the ``Authorization`` header through as ``HTTP_AUTHORIZATION``,
    while still exposing it through a separate header listing. When such a
    listing is available and the variable is missing, it is filled in.

    Args:
        server: Mutable server variables.
        header_source: Callable returning the host's full header listing,
            or ``None`` if the host does not provide one.

    Returns:
        bool: ``True`` if ``HTTP_AUTHORIZATION`` was injected.
    """
    if header_source is None or 'HTTP_AUTHORIZATION' in server:
        return False

    listing = Headers(header_source())
    value = listing.get('Authorization')
    if value is None:
        return False

    envrequest._logger.debug(
        'Authorization header recovered from the host header listing'
    )
    server['HTTP_AUTHORIZATION'] = value
    return True
