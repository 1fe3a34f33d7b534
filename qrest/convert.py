"""Conversion between wire (JSON) values and typed python values.

Every declared field type maps to a :class:`Converter`,
looked up through a composable registry:

>>> registry(int).dump(4)
4
>>> registry(Bignum).dump(10 ** 30)
'1000000000000000000000000000000'
"""
import abc
import threading
import typing as t
from collections.abc import Mapping, MutableSequence
from dataclasses import dataclass
from datetime import datetime
from functools import partial

from toolz import identity

from .errors import DataTypeError
from .utils import format_iso8601, parse_iso8601, ppartial

__all__ = [
    "Bignum",
    "Converter",
    "Primitive",
    "NestedConverter",
    "ArrayConverter",
    "TypedList",
    "Memo",
    "Registry",
    "CombinableRegistry",
    "MultiRegistry",
    "PrimitiveRegistry",
    "GenericRegistry",
    "ResourceRegistry",
    "UnsupportedType",
    "registry",
]

Bignum = t.NewType("Bignum", int)
"""arbitrary-precision integer, sent over the wire as a decimal string"""

INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1

dclass = partial(dataclass, frozen=True)


class Memo:
    """A table of wrappers, keyed by the identity of the wire object
    they wrap. Safe for concurrent use.

    The wire object is kept alive by the table,
    so its :func:`id` cannot be reused while it is registered.
    """

    __slots__ = "_entries", "_lock"

    def __init__(self):
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, wire, factory):
        """the wrapper registered for ``wire``,
        or a new one created by ``factory(wire)``"""
        with self._lock:
            entry = self._entries.get(id(wire))
            if entry is not None and entry[0] is wire:
                return entry[1]
            wrapper = factory(wire)
            self._entries[id(wire)] = (wire, wrapper)
            return wrapper

    def put(self, wire, wrapper):
        with self._lock:
            self._entries[id(wire)] = (wire, wrapper)

    def __len__(self):
        return len(self._entries)


def _lookup(memo, wire, factory):
    return factory(wire) if memo is None else memo.get(wire, factory)


class Converter(abc.ABC):
    """Interface for converters.
    A converter checks, dumps (to wire) and loads (from wire)
    values of one declared type."""

    @abc.abstractmethod
    def acceptable(self, value):
        """whether the value may be assigned to a field of this type"""
        raise NotImplementedError()

    def dump(self, value, memo=None):
        """convert a value to its wire representation"""
        return value

    def load(self, value, memo=None):
        """convert a wire value to its in-memory representation"""
        return value

    def check(self, value, field=None):
        """raise :class:`DataTypeError` if the value is not acceptable"""
        if value is not None and not self.acceptable(value):
            raise DataTypeError(
                "Unexpected type: {!r} for {}, expected {}".format(
                    value, field or "value", self.name
                ),
                field=field,
                expected=self.name,
                value=value,
            )
        return value

    def __repr__(self):
        return "<{0.__class__.__name__}: {0.name}>".format(self)


@dclass(repr=False)
class Primitive(Converter):
    """a converter for non-nested values"""

    name: str
    accepts: t.Callable[[t.Any], bool]
    dumper: t.Callable[[t.Any], t.Any] = identity
    loader: t.Callable[[t.Any], t.Any] = identity
    # whether a value is a valid wire value. Defaults to ``accepts``
    wire_accepts: t.Optional[t.Callable[[t.Any], bool]] = None

    def acceptable(self, value):
        return self.accepts(value)

    def dump(self, value, memo=None):
        return self.dumper(value)

    def load(self, value, memo=None):
        if not (self.wire_accepts or self.accepts)(value):
            raise _wire_error(self, value)
        try:
            return self.loader(value)
        except (TypeError, ValueError) as e:
            raise _wire_error(self, value) from e


def _wire_error(converter, value):
    return DataTypeError(
        "Unexpected wire value: {!r}, expected {}".format(
            value, converter.name
        ),
        expected=converter.name,
        value=value,
    )


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_int64(value):
    return _is_int(value) and INT64_MIN <= value <= INT64_MAX


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_decimal(value):
    return _is_int(value) or isinstance(value, str)


def _is_aware(value):
    return isinstance(value, datetime) and value.utcoffset() is not None


def _is_bool(value):
    return value is True or value is False


def _dump_list(value):
    return value if isinstance(value, list) else list(value)


def _dump_dict(value):
    return value if isinstance(value, dict) else dict(value)


STRING = Primitive("str", ppartial(isinstance, ..., str))
INTEGER = Primitive("int", _is_int64)
BIGNUM = Primitive(
    "Bignum", _is_int, dumper=str, loader=int, wire_accepts=_is_decimal
)
FLOAT = Primitive("float", _is_number, dumper=float, loader=float)
BOOLEAN = Primitive("bool", _is_bool)
TIMESTAMP = Primitive(
    "datetime",
    _is_aware,
    dumper=format_iso8601,
    loader=parse_iso8601,
    wire_accepts=ppartial(isinstance, ..., str),
)
OPAQUE_ARRAY = Primitive(
    "list",
    ppartial(isinstance, ..., (list, tuple)),
    dumper=_dump_list,
    wire_accepts=ppartial(isinstance, ..., list),
)
OPAQUE_OBJECT = Primitive(
    "dict",
    ppartial(isinstance, ..., Mapping),
    dumper=_dump_dict,
    wire_accepts=ppartial(isinstance, ..., dict),
)


class NestedConverter(Converter):
    """converter for fields holding another resource.
    The wire form is the resource's own attribute dict."""

    __slots__ = "cls"

    def __init__(self, cls):
        self.cls = cls

    @property
    def name(self):
        return self.cls.__name__

    def acceptable(self, value):
        return isinstance(value, self.cls)

    def dump(self, value, memo=None):
        wire = value.attributes
        if memo is not None:
            memo.put(wire, value)
        return wire

    def load(self, value, memo=None):
        if not isinstance(value, dict):
            raise DataTypeError(
                "Expected an object for {}, got {!r}".format(self.name, value),
                expected=self.name,
                value=value,
            )
        return _lookup(memo, value, partial(self.cls._wrap, memo=memo))

    def __eq__(self, other):
        if isinstance(other, NestedConverter):
            return self.cls is other.cls
        return NotImplemented

    def __hash__(self):
        return hash(self.cls)


class ArrayConverter(Converter):
    """converter for homogeneous lists of a declared element type.
    Loading wraps the wire list in a :class:`TypedList`,
    elements are only converted when accessed."""

    __slots__ = "element"

    def __init__(self, element):
        self.element = element

    @property
    def name(self):
        return "List[{}]".format(self.element.name)

    def acceptable(self, value):
        if isinstance(value, TypedList):
            return value.converter == self.element
        return isinstance(value, (list, tuple)) and all(
            x is None or self.element.acceptable(x) for x in value
        )

    def dump(self, value, memo=None):
        if isinstance(value, TypedList):
            return value.wire
        return [
            None if x is None else self.element.dump(x, memo) for x in value
        ]

    def load(self, value, memo=None):
        if not isinstance(value, list):
            raise DataTypeError(
                "Expected an array for {}, got {!r}".format(self.name, value),
                expected=self.name,
                value=value,
            )
        return _lookup(
            memo, value, partial(TypedList, converter=self.element, memo=memo)
        )

    def __eq__(self, other):
        if isinstance(other, ArrayConverter):
            return self.element == other.element
        return NotImplemented

    def __hash__(self):
        return hash(("List", self.element))


class TypedList(MutableSequence):
    """A list-like view over a wire array.
    Reads load elements, writes check and dump them,
    so the wire array always stays JSON-compatible.

    Parameters
    ----------
    wire: list
        the underlying wire array. Modified in-place.
    converter: Converter
        the element converter
    memo: Memo or None
        the table to memoize nested wrappers in
    """

    __slots__ = "wire", "converter", "memo"

    def __init__(self, wire, converter, memo=None):
        self.wire, self.converter, self.memo = wire, converter, memo

    def _load(self, value):
        return None if value is None else self.converter.load(value, self.memo)

    def _dump(self, value):
        self.converter.check(value, "List[{}] element".format(
            self.converter.name))
        return None if value is None else self.converter.dump(value, self.memo)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self._load(v) for v in self.wire[index]]
        return self._load(self.wire[index])

    def __setitem__(self, index, value):
        if isinstance(index, slice):
            self.wire[index] = [self._dump(v) for v in value]
        else:
            self.wire[index] = self._dump(value)

    def __delitem__(self, index):
        del self.wire[index]

    def __len__(self):
        return len(self.wire)

    def insert(self, index, value):
        self.wire.insert(index, self._dump(value))

    def __eq__(self, other):
        if isinstance(other, TypedList):
            return self.wire == other.wire
        if isinstance(other, (list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return "<TypedList[{}]: {!r}>".format(self.converter.name, list(self))


class UnsupportedType(LookupError):
    """indicates the registry does not have a converter for the given type"""


class Registry(abc.ABC):
    """Interface for a converter registry.
    Any callable with signature ``type -> Converter`` implements it.
    """

    @abc.abstractmethod
    def __call__(self, cls):
        raise NotImplementedError()


class CombinableRegistry(Registry):
    """base class for registries which may be combined

    any callable implementing the signature
    ``(type, Registry) -> Converter``
    is combinable

    also provides ``__or__`` as a mixin method
    """

    @abc.abstractmethod
    def __call__(self, cls, main=None):
        raise NotImplementedError()

    def __or__(self, other):
        return MultiRegistry([self, other])


@dclass
class MultiRegistry(CombinableRegistry):
    """registries tried in order, the first to support a type wins"""

    children: t.List[CombinableRegistry]

    def __call__(self, cls, main=None):
        exc = UnsupportedType(cls)
        for child in self.children:
            try:
                return child(cls, main=main or self)
            except UnsupportedType as e:
                exc = e
        raise exc

    def __or__(self, other):
        return MultiRegistry([*self.children, other])


@dclass
class PrimitiveRegistry(CombinableRegistry):
    """a registry of converters for non-nested types"""

    registry: t.Mapping[t.Any, Converter]

    def __call__(self, cls, main=None):
        try:
            return self.registry[cls]
        except (KeyError, TypeError):
            raise UnsupportedType(cls)


@dclass
class GenericRegistry(CombinableRegistry):
    """registry for generic types, for example :class:`~typing.List`.

    These types must have ``__origin__`` and ``__args__`` attributes
    """

    registry: t.Mapping[t.Any, t.Callable[..., Converter]]

    def __call__(self, cls, main=None):
        try:
            factory = self.registry[cls.__origin__]
        except (AttributeError, KeyError):
            raise UnsupportedType(cls)
        return factory(*map(main or self, cls.__args__))


@dclass
class ResourceRegistry(CombinableRegistry):
    """registry creating converters for subclasses of a base class"""

    base: type

    def __call__(self, cls, main=None):
        if isinstance(cls, type) and issubclass(cls, self.base):
            return NestedConverter(cls)
        raise UnsupportedType(cls)


registry = PrimitiveRegistry(
    {
        str: STRING,
        int: INTEGER,
        Bignum: BIGNUM,
        float: FLOAT,
        bool: BOOLEAN,
        datetime: TIMESTAMP,
        list: OPAQUE_ARRAY,
        dict: OPAQUE_OBJECT,
    }
) | GenericRegistry({list: ArrayConverter})
"""converters for all non-resource types.
Extended with a :class:`ResourceRegistry` in :mod:`qrest.resource`"""
