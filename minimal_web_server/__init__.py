"""
Minimal Web Server - an HTTP/1.0 GET/HEAD static file server on asyncio streams.
"""

__version__ = "0.0.1"

from .config import ServerConfig
from .errors import (
    IncompleteRequestLine,
    MalformedRequest,
    RequestError,
    ResourceNotFound,
    ResourceReadFailure,
    UnrecognizedMethod,
)
from .headers import Headers
from .line_reader import read_line
from .logger import get_logger, logger
from .processor import RequestProcessor
from .request import Method, Request
from .resources import DocumentRoot
from .response_writer import Writer
from .responses import Response, StatusCode
from .server import Server

__all__ = [
    "DocumentRoot",
    "Headers",
    "IncompleteRequestLine",
    "MalformedRequest",
    "Method",
    "Request",
    "RequestError",
    "RequestProcessor",
    "ResourceNotFound",
    "ResourceReadFailure",
    "Response",
    "Server",
    "ServerConfig",
    "StatusCode",
    "UnrecognizedMethod",
    "Writer",
    "get_logger",
    "logger",
    "read_line",
]
