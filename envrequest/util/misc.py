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

"""Miscellaneous utilities.

This module provides helpers for working with the script and URL paths a
host server reports. Paths are treated the way web servers hand them out:
``'/'`` and ``'\\'`` both separate segments, and trailing separators are
not significant.
"""

from __future__ import annotations

import re
from typing import Optional

__all__ = (
    'basename',
    'dirname',
    'to_int',
)

_SEPARATORS = '/\\'
_LEADING_INT_PATTERN = re.compile(r'\s*([+-]?\d+)')


def basename(path: Optional[str]) -> str:
    """Return the trailing name component of `path`.

    Trailing separators are ignored, so ``basename('/app/')`` is ``'app'``.
    ``None`` and the empty string both yield ``''``.
    """
    if not path:
        return ''

    stripped = path.rstrip(_SEPARATORS)
    if not stripped:
        return ''

    pos = max(stripped.rfind('/'), stripped.rfind('\\'))
    return stripped[pos + 1 :]


def dirname(path: Optional[str]) -> str:
    """Return the parent directory of `path`.

    Follows the conventions of PHP's ``dirname()`` rather than those of
    :func:`os.path.dirname`:

        * ``dirname('/index.php')`` is ``'/'``
        * ``dirname('index.php')`` is ``'.'``
        * ``dirname('/app/public/')`` is ``'/app'``
        * ``dirname('')`` is ``''``

    Backslash separators are preserved in the result; callers that want a
    URL path replace them with ``'/'``.
    """
    if not path:
        return ''

    stripped = path.rstrip(_SEPARATORS)
    if not stripped:
        # NOTE: The path consisted of separators only
        return path[0]

    pos = max(stripped.rfind('/'), stripped.rfind('\\'))
    if pos == -1:
        return '.'

    parent = stripped[:pos].rstrip(_SEPARATORS)
    return parent or stripped[pos]


def to_int(value: Optional[str]) -> Optional[int]:
    """Leniently convert a server variable to an ``int``.

    Leading whitespace and trailing garbage are ignored (``'8080abc'`` is
    ``8080``). Returns ``None`` when no leading integer can be found.
    """
    if value is None:
        return None

    match = _LEADING_INT_PATTERN.match(str(value))
    if match is None:
        return None

    return int(match.group(1))
