class RequestError(Exception):
    """Base class for failures scoped to a single connection."""


class IncompleteRequestLine(RequestError):
    """Connection closed, timed out or exceeded the line bound before CRLF."""


class MalformedRequest(RequestError):
    """The request line is not an HTTP request line."""


class UnrecognizedMethod(RequestError):
    """The method token is neither GET nor HEAD."""


class ResourceNotFound(RequestError):
    """The target could not be opened below the document root."""


class ResourceReadFailure(RequestError):
    """An opened resource could not be sized or read in full."""
