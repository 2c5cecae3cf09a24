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

"""General utilities.

The container types in the `structures` module are hoisted into the
front-door `envrequest` module for convenience::

    import envrequest

    params = envrequest.Parameters({'page': '2'})

Conversely, the `uri` module must be imported explicitly::

    from envrequest.util import uri

    decoded = uri.decode('a%20b')
"""

from envrequest.util.structures import Headers
from envrequest.util.structures import Parameters
from envrequest.util.uri import Uri

__all__ = (
    'Headers',
    'Parameters',
    'Uri',
)
