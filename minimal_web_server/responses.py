from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from .headers import Headers

# Constants
HTTP_VERSION = "HTTP/1.0"
SERVER_NAME = "Minimal Web Server"
NOT_FOUND_BODY = (b"<html><head><title>404 Not Found</title></head>"
                  b"<body><h1>URL not found</h1></body></html>\r\n")


class StatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


REASON_PHRASES = {
    StatusCode.OK: "OK",
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.NOT_FOUND: "NOT FOUND",
    StatusCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
}


def get_status_line(status_code: StatusCode) -> bytes:
    reason = REASON_PHRASES.get(status_code, "")
    return f"{HTTP_VERSION} {status_code.value} {reason}\r\n".encode("ascii")

def get_default_headers(server_name: str = SERVER_NAME) -> Headers:
    h = Headers()
    h["Server"] = server_name
    return h


@dataclass
class Response:
    status: StatusCode
    headers: Headers = field(default_factory=get_default_headers)
    body: Optional[bytes] = None

    def to_bytes(self) -> bytes:
        return get_status_line(self.status) + self.headers.to_bytes() + (self.body or b"")


def ok(body: Optional[bytes] = None, server_name: str = SERVER_NAME) -> Response:
    return Response(StatusCode.OK, get_default_headers(server_name), body)

def bad_request(server_name: str = SERVER_NAME) -> Response:
    return Response(StatusCode.BAD_REQUEST, get_default_headers(server_name))

def not_found(server_name: str = SERVER_NAME) -> Response:
    return Response(StatusCode.NOT_FOUND, get_default_headers(server_name),
                    NOT_FOUND_BODY)

def internal_error(server_name: str = SERVER_NAME) -> Response:
    return Response(StatusCode.INTERNAL_SERVER_ERROR,
                    get_default_headers(server_name))
