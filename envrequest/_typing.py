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

"""Private type aliases used internally by envrequest."""

from __future__ import annotations

from collections.abc import Mapping
from enum import auto
from enum import Enum
from typing import Any, Callable, Literal, Optional, Protocol, TypeVar, Union


class _Unset(Enum):
    UNSET = auto()


_T = TypeVar('_T')
_UNSET = _Unset.UNSET
UnsetOr = Union[Literal[_Unset.UNSET], _T]

RequestMetadata = Mapping[str, str]
"""Server variables describing the inbound request (CGI/PHP conventions)."""

HeaderSource = Callable[[], Mapping[str, str]]
"""Callable returning the host server's full header listing, if it has one."""


class ReadableIO(Protocol):
    def read(self, n: Optional[int] = ..., /) -> bytes: ...


ParamsArg = Optional[Mapping[str, Any]]
