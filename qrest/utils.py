"""Miscellaneous tools, boilerplate, and shortcuts"""
import functools
import itertools
import re
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone

from .errors import ValidationError

_ISO8601_RE = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[T ]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:?\d{2})?$"
)


class _EmptyMapping(Mapping):
    """an empty mapping to use as a default value"""

    def __iter__(self):
        yield from ()

    def __getitem__(self, key):
        raise KeyError(key)

    def __len__(self):
        return 0

    def __repr__(self):
        return "{<empty>}"


EMPTY_MAPPING = _EmptyMapping()


class ppartial(functools.partial):
    """like functools.partial, but allows positional arguments
    by use of ellipsis (...).
    Useful for builtin python functions which do not take keyword args

        >>> is_text = ppartial(isinstance, ..., str)
        >>> is_text('foo')
        True
    """

    def __call__(self, *args, **keywords):
        iter_args = iter(args)
        merged_args = (next(iter_args) if a is ... else a for a in self.args)
        merged_keywords = {**self.keywords, **keywords}
        return self.func(
            *itertools.chain(merged_args, iter_args), **merged_keywords
        )


def parse_iso8601(text):
    """parse an ISO-8601 timestamp into an aware UTC datetime.

    Fractions beyond microseconds are truncated.
    A missing offset is read as UTC.

    Parameters
    ----------
    text: str
        the timestamp, e.g. ``2015-06-01T12:00:00.123456789Z``

    Raises
    ------
    ValueError
        if the text is not an ISO-8601 timestamp
    """
    match = _ISO8601_RE.match(text)
    if match is None:
        raise ValueError("not an ISO-8601 timestamp: {!r}".format(text))
    parsed = datetime.strptime(
        match["date"] + "T" + match["time"], "%Y-%m-%dT%H:%M:%S"
    )
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    offset = match["offset"]
    if offset in (None, "Z"):
        tzinfo = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        digits = offset[1:].replace(":", "")
        tzinfo = timezone(
            sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        )
    return parsed.replace(
        microsecond=int(fraction), tzinfo=tzinfo
    ).astimezone(timezone.utc)


def format_iso8601(value):
    """render a datetime as UTC with nanosecond precision and a ``Z``.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return "{:%Y-%m-%dT%H:%M:%S}.{:06d}000Z".format(value, value.microsecond)


def header(headers, name, default=None):
    """case-insensitive header lookup on any mapping"""
    lowered = name.lower()
    return next(
        (v for k, v in headers.items() if k.lower() == lowered), default
    )


def _error_msg(name, arg, msg):
    return "{} ({!r}): {}".format(name, arg, msg)


def validate_instance_of(name, arg, cls):
    if not isinstance(arg, cls) or (
        isinstance(arg, bool) and bool not in _as_tuple(cls)
    ):
        raise ValidationError(
            _error_msg(name, arg, "is not instance of {}".format(cls))
        )
    return arg


def validated_non_empty_string(name, arg):
    validate_instance_of(name, arg, str)
    if not arg:
        raise ValidationError(_error_msg(name, arg, "is empty"))
    return arg


def validated_positive_int(name, arg):
    validate_instance_of(name, arg, int)
    if arg < 0:
        raise ValidationError(
            _error_msg(name, arg, "is not a positive integer")
        )
    return arg


def _as_tuple(cls):
    return cls if isinstance(cls, tuple) else (cls,)
