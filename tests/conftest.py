import itertools
import json
from urllib.parse import urlsplit

import pytest

import qrest


def pytest_addoption(parser):
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="run against a live appliance",
    )
    parser.addoption("--addr", default="127.0.0.1", help="appliance address")
    parser.addoption("--port", type=int, default=8000, help="REST API port")
    parser.addoption("--username", default="admin")
    parser.addoption("--password", default="admin")


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "live: needs a live appliance, run with --live"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--live"):
        # --live given in cli: do not skip live tests
        return
    skip_live = pytest.mark.skip(reason="need --live option to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


class FakeServer:
    """An in-memory appliance, usable as HTTP client.

    Stored objects are served by GET, replaced by PUT
    (checking ``If-Match``) and removed by DELETE.
    Replies for specific requests can be queued with :meth:`reply`.
    """

    def __init__(self):
        self.objects = {}
        self.replies = {}
        self.requests = []
        self._etags = itertools.count(1)

    def store(self, path, body):
        etag = '"{}"'.format(next(self._etags))
        self.objects[path] = (body, etag)
        return etag

    def reply(self, method, path, status, body=None, headers=None):
        content = b"" if body is None else (
            body if isinstance(body, bytes) else json.dumps(body).encode()
        )
        self.replies.setdefault((method, path), []).append(
            qrest.Response(status, content, headers=headers or {})
        )

    def send(self, request, timeout=None):
        self.requests.append(request)
        url = urlsplit(request.url)
        path = url.path + ("?" + url.query if url.query else "")
        queued = self.replies.get((request.method, path))
        if queued:
            return queued.pop(0)
        return getattr(self, "_" + request.method.lower())(
            url.path, request
        )

    def _get(self, path, request):
        if path not in self.objects:
            return _json_response(404, {"description": "not found"})
        body, etag = self.objects[path]
        return _json_response(200, body, {"ETag": etag})

    def _put(self, path, request):
        if path not in self.objects:
            return _json_response(404, {"description": "not found"})
        _, etag = self.objects[path]
        if request.headers.get("If-Match", etag) != etag:
            return _json_response(
                412,
                {
                    "error_class": "http_precondition_failed",
                    "description": "ETag mismatch",
                },
            )
        body = json.loads(request.content.decode())
        return _json_response(200, body, {"ETag": self.store(path, body)})

    def _post(self, path, request):
        body = json.loads(request.content.decode())
        return _json_response(200, body)

    def _delete(self, path, request):
        self.objects.pop(path, None)
        return qrest.Response(200, b"")


qrest.send.register(FakeServer, FakeServer.send)


def _json_response(status, body, headers=None):
    return qrest.Response(
        status,
        json.dumps(body).encode(),
        headers=dict(headers or {}, **{"Content-Type": "application/json"}),
    )


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def client(server):
    client = qrest.Client("fake.local", session=server)
    client._token = "1:abc"
    return client


@pytest.fixture
def configured(server):
    """a logged-in default client"""
    client = qrest.configure(addr="fake.local", session=server)
    client._token = "1:abc"
    yield client
    qrest.unconfigure()


@pytest.fixture
def live_client(request):
    config = request.config
    client = qrest.Client(
        config.getoption("--addr"), port=config.getoption("--port")
    )
    # appliances usually have self-signed certificates
    client.session.verify = False
    client.login(
        config.getoption("--username"), config.getoption("--password")
    )
    yield client
    client.logout()
