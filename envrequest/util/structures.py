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

"""Data structures.

This module provides the two containers a :class:`~envrequest.Request` is
built from: a case-insensitive, multi-valued :class:`Headers` collection,
and an ordered :class:`Parameters` container used for server variables,
query and form fields, cookies, uploaded files and the environment::

    from envrequest.util.structures import Headers

    headers = Headers({'Accept': 'text/html'})
    headers.add('accept', 'application/json')
    headers.get_all('ACCEPT')  # ['text/html', 'application/json']

"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import MutableMapping
from typing import Any, Iterator, List, Optional, Tuple, Union
from urllib.parse import urlencode

from envrequest.util.uri import parse_query_string

HeadersArg = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def _iter_pairs(data: Any) -> Iterator[Tuple[Any, Any]]:
    if isinstance(data, Mapping):
        return iter(data.items())
    return iter(data)


class Headers(MutableMapping):
    """A case-insensitive, insertion-ordered collection of header fields.

    A header name may be present more than once. Item access returns the
    first value stored under the given name, while :meth:`get_all` returns
    every value in the order it was added. Iteration yields each distinct
    name once, cased as it was first added::

        headers = Headers()
        headers.add('Content-Type', 'text/plain')
        headers['content-type'] == 'text/plain'  # True
        list(headers) == ['Content-Type']  # True

    Assigning through ``headers[name] = value`` replaces all values
    previously stored under `name`; :meth:`add` and :meth:`extend` append.

    Args:
        data: Optional initial header fields, as a mapping or an iterable
            of (*name*, *value*) pairs.
    """

    __slots__ = ('_fields',)

    def __init__(self, data: Optional[HeadersArg] = None) -> None:
        self._fields: List[Tuple[str, str]] = []
        if data is not None:
            self.extend(data)

    def add(self, name: str, value: str) -> None:
        """Append a header field, keeping any existing values for `name`."""
        self._fields.append((name, value))

    def extend(self, headers: HeadersArg) -> None:
        """Append several header fields at once.

        Args:
            headers: A mapping or an iterable of (*name*, *value*) pairs.
                A :class:`Headers` instance contributes all of its values.
        """
        if isinstance(headers, Headers):
            self._fields.extend(headers.fields())
            return

        for name, value in _iter_pairs(headers):
            self._fields.append((name, value))

    def get_all(self, name: str) -> List[str]:
        """Return every value stored under `name` (possibly an empty list)."""
        lowered = name.lower()
        return [value for key, value in self._fields if key.lower() == lowered]

    def fields(self) -> List[Tuple[str, str]]:
        """Return a list of all (*name*, *value*) pairs, duplicates included."""
        return list(self._fields)

    def to_dict(self) -> dict:
        """Return a plain ``dict``, joining repeated values with ``', '``."""
        result = {}
        for name in self:
            result[name] = ', '.join(self.get_all(name))
        return result

    def __setitem__(self, name: str, value: str) -> None:
        lowered = name.lower()
        self._fields = [
            field for field in self._fields if field[0].lower() != lowered
        ]
        self._fields.append((name, value))

    def __getitem__(self, name: str) -> str:
        lowered = name.lower()
        for key, value in self._fields:
            if key.lower() == lowered:
                return value

        raise KeyError(name)

    def __delitem__(self, name: str) -> None:
        lowered = name.lower()
        remaining = [field for field in self._fields if field[0].lower() != lowered]
        if len(remaining) == len(self._fields):
            raise KeyError(name)

        self._fields = remaining

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False

        lowered = name.lower()
        return any(key.lower() == lowered for key, _ in self._fields)

    def __iter__(self) -> Iterator[str]:
        seen = set()
        for key, _ in self._fields:
            lowered = key.lower()
            if lowered not in seen:
                seen.add(lowered)
                yield key

    def __len__(self) -> int:
        return len({key.lower() for key, _ in self._fields})

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            other_fields = other.fields()
        elif isinstance(other, Mapping):
            other_fields = list(other.items())
        else:
            return NotImplemented

        def lowered(fields):
            return sorted((key.lower(), value) for key, value in fields)

        return lowered(self._fields) == lowered(other_fields)

    def copy(self) -> Headers:
        return Headers(self._fields)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self._fields)


class Parameters(MutableMapping):
    """An ordered key/value container for request parameters.

    Unlike a bare ``dict``, a missing key is not an error when read through
    :meth:`get`, and the container can be rebuilt from, or rendered to, a
    form-encoded query string::

        params = Parameters.from_query_string('limit=10&sort=asc')
        params.get('limit')  # '10'
        params.get('offset', 0)  # 0

    Args:
        data: Optional initial values, as a mapping or an iterable of
            (*name*, *value*) pairs.

    Raises:
        TypeError: `data` was neither a mapping nor an iterable of pairs.
    """

    __slots__ = ('_store',)

    def __init__(self, data: Any = None) -> None:
        self._store: dict = {}
        if data is None:
            return

        if isinstance(data, (str, bytes)):
            raise TypeError(
                '%s expects a mapping or an iterable of pairs, not %s'
                % (self.__class__.__name__, type(data).__name__)
            )

        try:
            self._store.update(_iter_pairs(data))
        except (TypeError, ValueError) as ex:
            raise TypeError(
                '%s expects a mapping or an iterable of pairs: %s'
                % (self.__class__.__name__, ex)
            ) from ex

    @classmethod
    def from_query_string(
        cls, query_string: str, keep_blank: bool = True, csv: bool = False
    ) -> Parameters:
        """Build a container from a form-encoded string.

        See also: :func:`envrequest.util.uri.parse_query_string`.
        """
        return cls(parse_query_string(query_string, keep_blank=keep_blank, csv=csv))

    def to_query_string(self) -> str:
        """Render the container as a form-encoded string."""
        return urlencode(list(self._store.items()), doseq=True)

    def set(self, name: str, value: Any) -> Parameters:
        """Set `name` to `value` and return the container itself."""
        self._store[name] = value
        return self

    def to_dict(self) -> dict:
        """Return a shallow ``dict`` copy of the stored values."""
        return dict(self._store)

    def __setitem__(self, name: str, value: Any) -> None:
        self._store[name] = value

    def __getitem__(self, name: str) -> Any:
        return self._store[name]

    def __delitem__(self, name: str) -> None:
        del self._store[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Parameters):
            return self._store == other._store
        if isinstance(other, Mapping):
            return self._store == dict(other)
        return NotImplemented

    def copy(self) -> Parameters:
        return Parameters(self._store)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self._store)
