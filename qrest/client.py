"""Connection settings, the login session, and the default client"""
import logging
import threading
import typing as t
from dataclasses import dataclass
from functools import partial

import requests

from .errors import (
    AuthenticationError,
    ConfigError,
    LoginRequired,
    RequestFailed,
    ValidationError,
)
from .http import Http
from .utils import (
    validate_instance_of,
    validated_non_empty_string,
    validated_positive_int,
)

__all__ = [
    "Client",
    "RequestOptions",
    "configure",
    "unconfigure",
    "default_client",
    "login",
]

logger = logging.getLogger(__name__)

dclass = partial(dataclass, frozen=True)

DEFAULT_PORT = 8000
DEFAULT_TIMEOUT = 30


class Client(object):
    """Connection to one appliance, and its login session.

    Parameters
    ----------
    addr: str
        hostname or IP address of the appliance
    port: int
        the port of the REST API
    timeout: int
        default request timeout, in seconds
    session
        the HTTP client, of any type registered with :func:`~qrest.send`.
        Defaults to a new :class:`requests.Session`.

    Raises
    ------
    ValidationError
        if a parameter is malformed
    """

    def __init__(self, addr, port=DEFAULT_PORT, timeout=DEFAULT_TIMEOUT,
                 session=None):
        self.addr = validated_non_empty_string("addr", addr)
        self.port = validated_positive_int("port", port)
        self.timeout = validated_positive_int("timeout", timeout)
        self.session = requests.Session() if session is None else session
        self._token = None

    @property
    def base_url(self):
        return "https://{0.addr}:{0.port}".format(self)

    @property
    def logged_in(self):
        return self._token is not None

    @property
    def bearer_token(self):
        """the value for the ``Authorization`` header

        Raises
        ------
        LoginRequired
            if there is no login session
        """
        if self._token is None:
            raise LoginRequired(
                "Not logged in to {}".format(self.base_url), self
            )
        return "Bearer " + self._token

    def login(self, username, password):
        """Start a login session

        Raises
        ------
        AuthenticationError
            if the appliance refuses the credentials
        """
        from .v1.login import LoginSession

        try:
            session = LoginSession.start(
                username=username, password=password, client=self
            )
        except RequestFailed as e:
            logger.warning("login as %s on %s failed: %s",
                           username, self.base_url, e.status)
            raise AuthenticationError(
                "Login as {} failed with status {}".format(
                    username, e.status
                ),
                e.response,
            ) from e
        self._token = session.bearer_token
        logger.info("logged in as %s on %s", username, self.base_url)
        return session

    def logout(self):
        """Forget the login session"""
        self._token = None

    def http(self, options):
        """The executor for one request, given :class:`RequestOptions`"""
        return Http(
            self.base_url,
            self.session,
            self.timeout if options.timeout is None else options.timeout,
            bearer_token=None if options.not_authorized else self.bearer_token,
            debug=options.debug,
        )

    def __repr__(self):
        return "<Client: {0.base_url}, logged_in={0.logged_in}>".format(self)


@dclass
class RequestOptions:
    """Per-request overrides.

    Parameters
    ----------
    client: Client or None
        the client to use instead of the default client
    timeout: int or None
        timeout in seconds, instead of the client's
    not_authorized: bool
        do not send the bearer token
    debug: bool
        log request and response content at ``INFO`` level
    """

    client: t.Optional[Client] = None
    timeout: t.Optional[int] = None
    not_authorized: bool = False
    debug: bool = False

    def __post_init__(self):
        if self.client is not None:
            validate_instance_of("client", self.client, Client)
        if self.timeout is not None:
            validated_positive_int("timeout", self.timeout)

    def http(self):
        """the executor for a request with these options"""
        client = default_client() if self.client is None else self.client
        return client.http(self)


class _DefaultClient(object):
    """holder for the process-wide default client"""

    def __init__(self):
        self._client = None
        self._lock = threading.Lock()

    def configure(self, **params):
        with self._lock:
            if self._client is not None:
                raise ConfigError(
                    "A default client is already configured, "
                    "call unconfigure() first",
                    self._client,
                )
            self._client = Client(**params)
            logger.info("configured default client %r", self._client)
            return self._client

    def unconfigure(self):
        with self._lock:
            self._client = None
        logger.info("default client unconfigured")

    def get(self):
        client = self._client
        if client is None:
            raise ConfigError(
                "No default client, call configure() or pass a client"
            )
        return client


_default = _DefaultClient()


def configure(**params):
    """Create and install the default client.

    Parameters
    ----------
    **params
        arguments to :class:`Client`

    Raises
    ------
    ConfigError
        if already configured
    """
    return _default.configure(**params)


def unconfigure():
    """Remove the default client"""
    _default.unconfigure()


def default_client():
    """the configured default client

    Raises
    ------
    ConfigError
        if not configured
    """
    return _default.get()


def login(username, password):
    """Log the default client in"""
    return default_client().login(username, password)
