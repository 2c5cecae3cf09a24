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

"""Primary package for envrequest.

envrequest turns the server variables a host web server reports for a
request into a single :class:`Request` object, undoing the differences
between Apache, IIS and proxies along the way::

    import envrequest

    req = envrequest.Request(server_params, query=query, cookies=cookies)
    req.method, req.uri, req.base_url, req.base_path

"""

import logging as _logging

__all__ = (
    'create_request',
    'detect_base_path',
    'detect_base_url',
    'detect_request_uri',
    'Headers',
    'headers_from_metadata',
    'map_uploaded_files',
    'Parameters',
    'Request',
    'RequestOptions',
    'Uri',
    'VERSION_10',
    'VERSION_11',
)

from envrequest.constants import VERSION_10
from envrequest.constants import VERSION_11
from envrequest.detection import detect_base_path
from envrequest.detection import detect_base_url
from envrequest.detection import detect_request_uri
from envrequest.files import map_uploaded_files
from envrequest.gateway import create_request
from envrequest.headers import headers_from_metadata
from envrequest.request import Request
from envrequest.request import RequestOptions
from envrequest.util import Headers
from envrequest.util import Parameters
from envrequest.util import Uri

# Package version
from envrequest.version import __version__  # NOQA: F401

# NOTE: Only to be used internally on the rare occasion that we need to
#   log something that we can't communicate any other way.
_logger = _logging.getLogger('envrequest')
_logger.addHandler(_logging.NullHandler())
