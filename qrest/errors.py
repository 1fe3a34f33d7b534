"""Exception types raised by qrest"""

__all__ = [
    "Error",
    "ValidationError",
    "ConfigError",
    "DataTypeError",
    "UriError",
    "ResourceMismatchError",
    "NoData",
    "LoginRequired",
    "AuthenticationError",
    "RequestFailed",
]


class Error(Exception):
    """Base class for all qrest errors.

    Parameters
    ----------
    msg: str
        The error message
    context
        An object to inspect when the error is caught,
        e.g. the resource or the response involved.
    """

    def __init__(self, msg, context=None):
        super().__init__(msg)
        self.context = context


class ValidationError(Error, ValueError):
    """a parameter is malformed (empty address, negative port...)"""


class ConfigError(Error):
    """the default client is missing or configured twice"""


class DataTypeError(Error, TypeError):
    """a value does not match the declared type of a field,
    or a response body does not have the expected shape"""

    def __init__(self, msg, context=None, field=None, expected=None,
                 value=None):
        super().__init__(msg, context)
        self.field, self.expected, self.value = field, expected, value


class UriError(Error):
    """a placeholder in a URI template could not be resolved"""


class ResourceMismatchError(Error):
    """a collection response does not match the collection declaration"""


class NoData(Error):
    """collection items were requested before any data was retrieved"""


class LoginRequired(Error):
    """an authenticated request was made without a login session"""


class AuthenticationError(Error):
    """the login exchange failed"""


class RequestFailed(Error):
    """the server responded with a non-success status.

    The :class:`~qrest.http.Result` is available as :attr:`response`.
    """

    def __init__(self, msg, response, context=None):
        super().__init__(msg, context)
        self.response = response

    @property
    def status(self):
        """the HTTP status code of the failed response"""
        return self.response.status

    @property
    def error(self):
        """the error payload sent by the server"""
        return self.response.error
