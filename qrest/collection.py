"""Resources representing a list of member resources"""
import logging
import typing as t

from .client import RequestOptions
from .convert import NestedConverter
from .errors import DataTypeError, NoData, ResourceMismatchError, UriError
from .resource import Field, Resource, State, verb
from .uri import placeholders

__all__ = ["Collection"]

logger = logging.getLogger(__name__)


class Collection(Resource):
    """Base class for collections.

    Declared with the class keywords ``item`` (the member class)
    and ``items_field`` (the key of the member list in the response
    object). Without ``items_field``, the response is a bare array.

    >>> class Fans(Collection, uri="/v1/fans/", item=Fan,
    ...            items_field="fans"):
    ...     pass
    ...
    >>> [fan.name for fan in Fans.get().items()]
    ['Dmitri', 'Ilse']
    """

    item = None
    items_field = None

    def __init_subclass__(cls, item=None, items_field=None, **kwargs):
        if item is not None:
            cls.item = item
        if items_field is not None:
            cls.items_field = items_field
            # ``items`` itself is taken by the accessor method
            if items_field != "items" and items_field not in cls.__dict__:
                if cls.item is None:
                    raise TypeError(
                        "{} declares items_field without item".format(
                            cls.__name__
                        )
                    )
                setattr(cls, items_field, Field(t.List[cls.item]))
                getattr(cls, items_field).__set_name__(cls, items_field)
        super().__init_subclass__(**kwargs)

    def items(self):
        """The members, wrapped in the item class.
        Materialized from :attr:`attributes` on every call.

        Raises
        ------
        NoData
            if nothing was retrieved yet
        ResourceMismatchError
            if the response does not match ``items_field``
        """
        if not self._loaded:
            raise NoData(
                "No data for {}, get() it first".format(type(self).__name__),
                self,
            )
        attrs = self._attributes
        if isinstance(attrs, list):
            wire = attrs
        elif self.items_field is None:
            raise ResourceMismatchError(
                "{} expects a bare array, got an object with keys {}".format(
                    type(self).__name__, sorted(attrs)
                ),
                self,
            )
        else:
            wire = attrs.get(self.items_field)
            if not isinstance(wire, list):
                raise ResourceMismatchError(
                    "{} expects a list under {!r}, got {!r}".format(
                        type(self).__name__, self.items_field, wire
                    ),
                    self,
                )
        converter = NestedConverter(self.item)
        return [converter.load(value, self._memo) for value in wire]

    @verb
    def post(self, member, **options):
        """Create a member of this collection.

        Parameters
        ----------
        member: ~typing.Mapping or Resource
            the new member, as an item instance or its attributes
        **options
            request options, see :class:`~qrest.client.RequestOptions`

        Returns
        -------
        Resource
            a new item instance, populated from the response

        Raises
        ------
        RequestFailed
            if the server responds with an error status
        """
        if not isinstance(member, self.item):
            member = self.item(member)
        http = RequestOptions(**options).http()
        path = self._resolve_path(
            {**self.query_params, **member.query_params}
        )
        created = self.item()
        created.query_params = dict(member.query_params)
        created.state = State.PENDING
        logger.debug("creating %s in %s", self.item.__name__, path)
        return created.store_result(
            http.post(path, member.attributes), "POST", path
        )

    @post.classlevel
    def post(cls, member, **options):
        if cls.uri is None or placeholders(cls.uri):
            raise UriError(
                "Cannot post to {} without an instance: {} has "
                "placeholders".format(cls.__name__, cls.uri),
                cls,
            )
        return cls().post(member, **options)

    def _check_body(self, body):
        if not isinstance(body, (dict, list)):
            self.state = State.FAILED
            raise DataTypeError(
                "Expected an object or array for {}, got {!r}".format(
                    type(self).__name__, body
                ),
                self,
                expected="dict or list",
                value=body,
            )
