"""
The entire public API is available at root level::

    from qrest import Resource, Field, Collection, configure, send, ...

Resources of the v1 API are in :mod:`qrest.v1`.
"""
from . import clients, http
from .__about__ import __version__  # noqa
from .client import *  # noqa
from .clients import *  # noqa
from .collection import *  # noqa
from .convert import Bignum, Converter, UnsupportedType  # noqa
from .errors import *  # noqa
from .http import *  # noqa
from .resource import *  # noqa

__all__ = ["clients", "http", "Bignum", "Converter", "UnsupportedType"]
