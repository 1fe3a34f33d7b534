"""Resolution of URI templates such as ``/v1/albums/:album/songs/:id``"""
from functools import singledispatch
from urllib.parse import quote, unquote

from .errors import UriError

__all__ = [
    "resolve_path",
    "placeholders",
    "query_string",
    "dump_param",
    "load_param",
]


def placeholders(template):
    """the names of the placeholders in a template, in order"""
    return [p[1:] for p in template.split("/") if p.startswith(":")]


def resolve_path(template, attrs, params=None):
    """Fill in the placeholders of a URI template.

    Parameters
    ----------
    template: str
        a path template, e.g. ``"/v1/users/:id"``
    attrs: ~typing.Mapping[str, object]
        the values to fill in, looked up by placeholder name
    params: ~typing.Mapping[str, str] or None
        already encoded query parameters to append

    Returns
    -------
    str
        the resolved path, e.g. ``"/v1/users/500?foo=bar"``

    Raises
    ------
    UriError
        if a placeholder has no (or an empty) value
    """
    resolved = []
    for part in template.split("/"):
        if part.startswith(":"):
            value = attrs.get(part[1:])
            resolved_part = "" if value is None else dump_param(value)
        else:
            resolved_part = part
        if part and not resolved_part:
            raise UriError(
                "Cannot resolve {} in path {} from {!r}".format(
                    part, template, attrs
                )
            )
        resolved.append(resolved_part)
    return "/".join(resolved) + query_string(params or {})


def query_string(params):
    """render encoded query parameters as ``?k=v&k=v``,
    or an empty string if there are none"""
    if not params:
        return ""
    return "?" + "&".join("{}={}".format(k, v) for k, v in params.items())


@singledispatch
def _text(value):
    return str(value)


@_text.register(bool)
def _bool_text(value):
    return "true" if value else "false"


def dump_param(value):
    """percent-encode a query parameter value"""
    return quote(_text(value), safe="")


def load_param(value):
    return unquote(value)
