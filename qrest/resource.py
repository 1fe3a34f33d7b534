"""Declarative resources: typed fields, URI templates and CRUD verbs.

>>> class Song(Resource, uri="/v1/albums/:album/songs/:id"):
...     album = Field(Bignum)
...     id = Field(Bignum)
...     title = Field(str)
...
>>> song = Song.get({"album": 10, "id": 5})
>>> song.title
'Midnight City'
"""
import collections
import copy
import enum
import itertools
import logging
from functools import partial
from types import MethodType

from . import convert
from .client import RequestOptions
from .convert import Converter, Memo, ResourceRegistry
from .errors import DataTypeError, RequestFailed, UriError
from .uri import dump_param, load_param, resolve_path

__all__ = [
    "Resource",
    "Field",
    "QueryParam",
    "State",
    "verb",
    "registry",
]

logger = logging.getLogger(__name__)


class State(enum.Enum):
    """the request state of a resource instance"""

    NEW = "new"
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


class Field(object):
    """A typed attribute of a resource.
    Implements python's descriptor protocol.

    Parameters
    ----------
    type: type or Converter or None
        the declared type, e.g. ``str``, ``Bignum``
        or ``typing.List[Book]``.
        ``None`` stores any value as-is.
    key: str or None
        the key in the wire object. Defaults to the attribute name.

    Raises
    ------
    ~qrest.convert.UnsupportedType
        when the class is declared, if the type has no converter
    """

    storage = "attribute"

    def __init__(self, type=None, key=None):
        self.type, self._key = type, key
        if type is None or isinstance(type, Converter):
            self.converter = type
        else:
            self.converter = registry(type)

    def __set_name__(self, resource, name):
        self.resource, self.name = resource, name
        self.key = self._key or name

    def __get__(self, instance, cls):
        """part of the descriptor protocol.
        On a class, returns the field.
        On an instance, returns the field value"""
        if instance is None:
            return self
        attrs = instance.attributes
        value = attrs.get(self.key) if isinstance(attrs, dict) else None
        if value is None or self.converter is None:
            return value
        try:
            return self.converter.load(value, instance._memo)
        except (TypeError, ValueError) as e:
            raise DataTypeError(
                "Cannot read {} from {!r}, expected {}".format(
                    self.name, value, self.converter.name
                ),
                instance,
                field=self.name,
                expected=self.converter.name,
                value=value,
            ) from e

    def __set__(self, instance, value):
        if not isinstance(instance.attributes, dict):
            raise DataTypeError(
                "Cannot set {} on {}, its attributes are a {}".format(
                    self.name,
                    type(instance).__name__,
                    type(instance.attributes).__name__,
                ),
                instance,
                field=self.name,
                value=value,
            )
        if self.converter is not None:
            self.converter.check(value, self.name)
            if value is not None:
                value = self.converter.dump(value, instance._memo)
        instance.attributes[self.key] = value

    def __repr__(self):
        try:
            return '<{0.__class__.__name__} "{0.name}" of {1}>'.format(
                self, self.resource.__name__
            )
        except AttributeError:
            return "<{0.__class__.__name__} [no name]>".format(self)


class QueryParam(Field):
    """A field stored as a query parameter,
    appended to the resolved path of every request.

    Written values are percent-encoded, ``True``/``False``
    as ``true``/``false``. Writing ``None`` removes the parameter.

    Parameters
    ----------
    key: str
        the name of the query parameter
    """

    storage = "query"

    def __init__(self, key):
        super().__init__(key=key)

    def __set_name__(self, resource, name):
        self.resource, self.name = resource, name
        self.key = self._key

    def __get__(self, instance, cls):
        if instance is None:
            return self
        value = instance.query_params.get(self.key)
        return None if value is None else load_param(value)

    def __set__(self, instance, value):
        if value is None:
            instance.query_params.pop(self.key, None)
        else:
            instance.query_params[self.key] = dump_param(value)


class verb(object):
    """Decorate methods to make them callable on the class as well.

    On an instance the method is bound as usual.
    On the class, an instance is created from an attribute mapping
    and the method is called on it, unless an alternative was
    given with :meth:`classlevel`.

    Example
    -------

    >>> class Foo(Resource, uri="/v1/foo/:id"):
    ...     @verb
    ...     def touch(self, **options):
    ...         ...
    ...
    >>> Foo.touch({"id": 3})  # same as Foo({"id": 3}).touch()
    """

    def __init__(self, func, on_class=None):
        self._func, self._on_class = func, on_class
        self.__doc__ = func.__doc__

    def __set_name__(self, owner, name):
        self.name = name

    def classlevel(self, func):
        """decorator to set the class-level variant"""
        return type(self)(self._func, func)

    def _on_new_instance(self, cls, attrs=None, **options):
        return getattr(cls(attrs), self.name)(**options)

    def __get__(self, obj, objtype=None):
        if obj is not None:
            return MethodType(self._func, obj)
        if self._on_class is not None:
            return MethodType(self._on_class, objtype)
        return partial(self._on_new_instance, objtype)


class Resource(object):
    """Base class for resources.

    Subclasses declare their URI template and result class
    as class keywords, and their fields as :class:`Field` attributes.

    Parameters
    ----------
    mapping: ~typing.Mapping or None
        initial values. Declared fields are set through their
        typed setters, other keys are stored as-is.
    **kwargs
        more initial values

    Attributes
    ----------
    attributes: dict
        the wire representation, the single source of truth
        for all typed fields
    query_params: dict
        percent-encoded query parameters
    etag: str or None
        concurrency token of the last GET/PUT response
    status: int or None
        HTTP status of the last request
    error: dict or None
        error payload of the last request, if it failed
    response: ~qrest.http.Result or None
        the last response
    state: State
        the request state
    """

    uri = None
    result = None
    fields = collections.OrderedDict()

    def __init_subclass__(cls, uri=None, result=None, **kwargs):
        super().__init_subclass__(**kwargs)
        if uri is not None:
            cls.uri = uri
        if result is not None:
            cls.result = result

        # fields from superclasses must be explicitly copied.
        # Otherwise they reference the superclass
        def get_field_copy_linked_to_current_class(field):
            field_copy = copy.copy(field)
            field_copy.__set_name__(cls, field.name)
            return field_copy

        fields_from_superclass = [
            get_field_copy_linked_to_current_class(f)
            for f in cls.fields.values()
            if f.name not in cls.__dict__
        ]
        for field in fields_from_superclass:
            setattr(cls, field.name, field)

        cls.fields = collections.OrderedDict(itertools.chain(
            ((field.name, field) for field in fields_from_superclass),
            ((name, obj) for name, obj in cls.__dict__.items()
             if isinstance(obj, Field)),
        ))

    def __init__(self, mapping=None, **kwargs):
        self._init_state({}, Memo())
        for key, value in itertools.chain(
            dict(mapping or {}).items(), kwargs.items()
        ):
            field = self.fields.get(key)
            if field is None:
                self._attributes[key] = value
            else:
                field.__set__(self, value)

    def _init_state(self, attributes, memo):
        self._attributes, self._memo = attributes, memo
        self.query_params = {}
        self.etag = self.status = self.error = self.response = None
        self.state = State.NEW
        self._loaded = False

    @classmethod
    def _wrap(cls, wire, memo=None):
        """wrap a wire object without copying or checking it"""
        instance = cls.__new__(cls)
        instance._init_state(wire, Memo() if memo is None else memo)
        return instance

    @property
    def attributes(self):
        return self._attributes

    @attributes.setter
    def attributes(self, value):
        # the old memo may be shared with the wrappers handed out so far
        self._attributes, self._memo = value, Memo()

    @property
    def failed(self):
        """whether the last request failed"""
        return self.error is not None

    @property
    def resolved_path(self):
        """the URI template filled in from the attributes,
        with the query parameters appended

        Raises
        ------
        UriError
            if the class has no URI template,
            or a placeholder cannot be resolved
        """
        return self._resolve_path(self.query_params)

    def _resolve_path(self, params):
        if self.uri is None:
            raise UriError(
                "{} has no uri".format(type(self).__name__), self
            )
        attrs = self._attributes if isinstance(self._attributes, dict) else {}
        return resolve_path(self.uri, attrs, params)

    @verb
    def get(self, **options):
        """Retrieve the resource.

        Parameters
        ----------
        **options
            request options, see :class:`~qrest.client.RequestOptions`

        Returns
        -------
        Resource
            this instance, or an instance of the result class

        Raises
        ------
        RequestFailed
            if the server responds with an error status
        """
        return self._request(options, "GET")

    @verb
    def post(self, **options):
        """Create the resource, sending the attributes"""
        return self._request(options, "POST", self._attributes)

    @verb
    def put(self, **options):
        """Update the resource, sending the attributes.
        The etag of the last response is sent as precondition."""
        return self._request(options, "PUT", self._attributes, etag=self.etag)

    @verb
    def delete(self, **options):
        """Delete the resource"""
        return self._request(options, "DELETE")

    def _request(self, options, method, *args, **kwargs):
        http = RequestOptions(**options).http()
        path = self.resolved_path
        self.state = State.PENDING
        try:
            result = getattr(http, method.lower())(path, *args, **kwargs)
        except Exception:
            self.state = State.FAILED
            raise
        return self.store_result(result, method, path)

    def store_result(self, result, method="GET", path=None):
        """Interpret a response and update this instance.

        Parameters
        ----------
        result: ~qrest.http.Result
            the response
        method: str
            the request method, for messages
        path: str or None
            the request path, for messages

        Returns
        -------
        Resource
            this instance, or an instance of the result class

        Raises
        ------
        RequestFailed
            if the status is not a success
        DataTypeError
            if the response body has the wrong shape.
            Nothing is stored in that case.
        """
        path = path or self.uri
        if result.ok and result.body is not None:
            self._check_body(result.body)
        self.response, self.status = result, result.status
        if result.etag:
            self.etag = result.etag
        if not result.ok:
            self.error = result.error or {
                "message": "HTTP {}".format(result.status)
            }
            self.state = State.FAILED
            logger.warning("%s %s failed with status %d", method, path,
                           result.status)
            raise RequestFailed(
                "{} {} failed with status {}: {}".format(
                    method,
                    path,
                    result.status,
                    self.error.get("description")
                    or self.error.get("message")
                    or self.error,
                ),
                result,
                self,
            )
        self.error, self.state, self._loaded = None, State.SYNCED, True
        if result.body is not None:
            self.attributes = result.body
        return self._as_result()

    def _check_body(self, body):
        if not isinstance(body, dict):
            self.state = State.FAILED
            raise DataTypeError(
                "Expected an object for {}, got {!r}".format(
                    type(self).__name__, body
                ),
                self,
                expected="dict",
                value=body,
            )

    def _as_result(self):
        if self.result is None:
            return self
        other = self.result._wrap(self._attributes)
        for name in ("query_params", "etag", "status", "error", "response",
                     "state", "_loaded"):
            setattr(other, name, getattr(self, name))
        return other

    def __eq__(self, other):
        if type(self) is type(other):
            return (self._attributes, self.query_params) == (
                other._attributes, other.query_params
            )
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return "<{0.__class__.__name__}: {0._attributes!r}>".format(self)


registry = convert.registry | ResourceRegistry(Resource)
"""converters for all supported field types, including resources"""
