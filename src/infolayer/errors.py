"""Errors raised by the info layer core.

Raised where they happen and never caught inside the core. The caller
(the HTTP API, a script) decides how to report them.
"""

from __future__ import annotations


class InfoLayerError(Exception):
    """Base class for info layer failures."""


class NetworkFailure(InfoLayerError):
    """A remote service call failed or returned an unusable payload.

    Covers transport errors, non-2xx statuses and malformed JSON.
    ``url`` never includes the access token.
    """

    def __init__(self, message: str, url: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class NoRouteFound(InfoLayerError):
    """The directions service answered but returned no usable route."""
