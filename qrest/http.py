"""Basic HTTP abstractions and the JSON executor for the REST API"""
import json
import logging
from functools import partial
from http import HTTPStatus
from itertools import chain

from .clients import send
from .utils import EMPTY_MAPPING, header

__all__ = [
    "Request",
    "Response",
    "Result",
    "Http",
    "GET",
    "POST",
    "PUT",
    "DELETE",
]

logger = logging.getLogger(__name__)


class _SlotsMixin(object):
    __slots__ = ()

    def _asdict(self):
        return {a: getattr(self, a) for a in self.__slots__}

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self._asdict() == other._asdict()
        return NotImplemented

    def __ne__(self, other):
        if isinstance(other, self.__class__):
            return self._asdict() != other._asdict()
        return NotImplemented

    def replace(self, **kwargs):
        """Create a copy with replaced fields

        Parameters
        ----------
        **kwargs
            fields and values to replace
        """
        return type(self)(
            **dict(chain(self._asdict().items(), kwargs.items()))
        )


class Request(_SlotsMixin):
    """A simple HTTP request.

    Parameters
    ----------
    method: str
        The http method
    url: str
        The requested url, including any query string
    content: bytes or None
        The request content
    headers: Mapping
        Request headers.
    """

    __slots__ = "method", "url", "content", "headers"
    __hash__ = None

    def __init__(self, method, url, content=None, headers=EMPTY_MAPPING):
        self.method = method
        self.url = url
        self.content = content
        self.headers = headers

    def with_headers(self, headers):
        """Create a new request with added headers

        Parameters
        ----------
        headers: Mapping
            the headers to add
        """
        return self.replace(headers=dict(chain(self.headers.items(),
                                               headers.items())))

    def with_prefix(self, prefix):
        """Create a new request with added url prefix

        Parameters
        ----------
        prefix: str
            the URL prefix
        """
        return self.replace(url=prefix + self.url)

    def __repr__(self):
        return ("<Request: {0.method} {0.url}, "
                "headers={0.headers!r}>").format(self)


class Response(_SlotsMixin):
    """A simple HTTP response.

    Parameters
    ----------
    status_code: int
        The HTTP status code
    content: bytes or None
        The response content
    headers: Mapping
        The headers of the response.
    """

    __slots__ = "status_code", "content", "headers"
    __hash__ = None

    def __init__(self, status_code, content=None, headers=EMPTY_MAPPING):
        self.status_code = status_code
        self.content = content
        self.headers = headers

    def __repr__(self):
        return ("<Response: {0.status_code}, "
                "headers={0.headers!r}>").format(self)


class Result(_SlotsMixin):
    """A response, interpreted for the resource layer.

    Parameters
    ----------
    status: int
        The HTTP status code
    etag: str or None
        The ``ETag`` header, if any
    body
        The decoded JSON body of a successful response.
        ``None`` if the response had no content,
        ``{}`` if the content was not JSON.
    raw_body: str
        The response content as text
    error: dict or None
        The decoded error structure of a failed response.
        Falls back to ``{"message": ...}`` for non-JSON errors.
    """

    __slots__ = "status", "etag", "body", "raw_body", "error"
    __hash__ = None

    def __init__(self, status, etag=None, body=None, raw_body="", error=None):
        self.status = status
        self.etag = etag
        self.body = body
        self.raw_body = raw_body
        self.error = error

    @property
    def ok(self):
        """whether the status indicates success"""
        return 200 <= self.status < 300

    @classmethod
    def from_response(cls, response):
        """interpret a :class:`Response`"""
        raw = (response.content or b"").decode("utf-8", errors="replace")
        result = cls(
            response.status_code,
            etag=header(response.headers, "ETag"),
            raw_body=raw,
        )
        if result.ok:
            result.body = _loads(raw, default={}) if raw.strip() else None
        else:
            error = _loads(raw, default=None)
            result.error = (
                error
                if isinstance(error, dict)
                else {"message": raw.strip() or _reason(result.status)}
            )
        return result

    def __repr__(self):
        return "<Result: {0.status}, etag={0.etag!r}>".format(self)


def _loads(text, default):
    try:
        return json.loads(text)
    except ValueError:
        return default


def _reason(status):
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "HTTP {}".format(status)


class Http(object):
    """Executes JSON requests against one appliance.

    Parameters
    ----------
    base_url: str
        prefix for all request paths, e.g. ``https://10.0.0.1:8000``
    session
        the HTTP client, of any type registered with :func:`~qrest.send`
    timeout: int
        timeout in seconds
    bearer_token: str or None
        value of the ``Authorization`` header. Omitted if ``None``.
    debug: bool
        log request and response content at ``INFO`` level
    """

    def __init__(self, base_url, session, timeout, bearer_token=None,
                 debug=False):
        self.base_url = base_url
        self.session = session
        self.timeout = timeout
        self.bearer_token = bearer_token
        self.debug = debug

    def post(self, path, attrs):
        """Perform a POST request with the attributes as JSON body"""
        return self._execute(POST(path, _dumps(attrs)))

    def put(self, path, attrs, etag=None):
        """Perform a PUT request with the attributes as JSON body.
        If given, the etag is sent as ``If-Match`` precondition."""
        request = PUT(path, _dumps(attrs))
        if etag:
            request = request.with_headers({"If-Match": etag})
        return self._execute(request)

    def get(self, path):
        """Perform a GET request"""
        return self._execute(GET(path))

    def delete(self, path):
        """Perform a DELETE request"""
        return self._execute(DELETE(path))

    def _execute(self, request):
        request = request.with_prefix(self.base_url).with_headers(
            {"Content-Type": "application/json"})
        if self.bearer_token:
            request = request.with_headers(
                {"Authorization": self.bearer_token})
        logger.debug("%s %s", request.method, request.url)
        if self.debug:
            logger.info("request %r: %s", request, request.content)
        response = send(self.session, request, timeout=self.timeout)
        result = Result.from_response(response)
        logger.debug("%s %s -> %d", request.method, request.url,
                     result.status)
        if self.debug:
            logger.info("response %r: %s", result, result.raw_body)
        return result

    def __repr__(self):
        return "<Http: {0.base_url}, timeout={0.timeout}>".format(self)


def _dumps(attrs):
    return json.dumps(attrs).encode("utf-8")


GET = partial(Request, "GET")
GET.__doc__ = "shortcut for a GET request"
POST = partial(Request, "POST")
POST.__doc__ = "shortcut for a POST request"
PUT = partial(Request, "PUT")
PUT.__doc__ = "shortcut for a PUT request"
DELETE = partial(Request, "DELETE")
DELETE.__doc__ = "shortcut for a DELETE request"
