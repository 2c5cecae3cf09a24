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

__all__ = (
    'VERSION_10',
    'VERSION_11',
    'MEDIA_URLENCODED',
)

VERSION_10 = '1.0'
"""HTTP/1.0 protocol version string."""

VERSION_11 = '1.1'
"""HTTP/1.1 protocol version string (the default)."""

MEDIA_URLENCODED = 'application/x-www-form-urlencoded'

# NOTE: Metadata key prefixes that carry request headers.
HEADER_PREFIX = 'HTTP_'
COOKIE_PREFIX = 'HTTP_COOKIE'
CONTENT_PREFIX = 'CONTENT_'

DEFAULT_PORTS = {'http': 80, 'https': 443}

# NOTE: Methods for which a request body has no defined semantics.
BODYLESS_METHODS = frozenset(['GET', 'HEAD'])
