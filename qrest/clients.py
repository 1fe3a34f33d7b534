"""Funtions for dealing with HTTP clients in a unified manner"""
import urllib.request
from functools import singledispatch
from urllib.error import HTTPError

import requests

__all__ = ["send"]


@singledispatch
def send(client, request, timeout=None):
    """Given a client, send a :class:`~qrest.http.Request`,
    returning a :class:`~qrest.http.Response`.

    A :func:`~functools.singledispatch` function.

    Parameters
    ----------
    client: any registered client type
        The client with which to send the request.

        Client types registered by default:

        * :class:`requests.Session`
        * :class:`urllib.request.OpenerDirector`
          (e.g. from :func:`~urllib.request.build_opener`)

    request: Request
        The request to send
    timeout: int or None
        Timeout in seconds

    Returns
    -------
    Response
        the resulting response


    Example of registering a new HTTP client:

    >>> @send.register(MyClientClass)
    ... def _send(client, request: Request, timeout=None) -> Response:
    ...     r = client.send(request)
    ...     return Response(r.status, r.read(), headers=r.get_headers())
    """
    raise TypeError("client {!r} not registered".format(client))


@send.register(requests.Session)
def _requests_send(session, req, timeout=None):
    """send a request with the `requests` library"""
    res = session.request(
        req.method,
        req.url,
        data=req.content,
        headers=req.headers,
        timeout=timeout,
    )
    return _response(res.status_code, res.content, res.headers)


@send.register(urllib.request.OpenerDirector)
def _urllib_send(opener, req, timeout=None):
    """Send a request with an :mod:`urllib` opener"""
    raw_req = urllib.request.Request(
        req.url, req.content, headers=dict(req.headers), method=req.method
    )
    try:
        res = opener.open(raw_req, timeout=timeout)
    except HTTPError as http_err:
        res = http_err
    return _response(res.getcode(), res.read(), res.headers)


def _response(status_code, content, headers):
    from .http import Response

    return Response(status_code, content, headers=dict(headers))
