import io

import pytest

from envrequest import Request
from envrequest import testing


class CountingStream(io.BytesIO):
    """BytesIO that records how many times read() was called."""

    def __init__(self, data=b''):
        super().__init__(data)
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        return super().read(size)


@pytest.fixture()
def params_req():
    """Create a request from Apache-style server variables."""

    def factory(request_kwargs=None, **params_kwargs):
        server = testing.create_server_params(**params_kwargs)
        return Request(server, **(request_kwargs or {}))

    return factory


@pytest.fixture()
def counting_stream():
    return CountingStream
