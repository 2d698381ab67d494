import asyncio
from dataclasses import dataclass
from enum import Enum

from .errors import IncompleteRequestLine, MalformedRequest
from .line_reader import MAX_LINE_LENGTH, read_line

# Constants
HTTP_MARKER = " HTTP/"
ENCODING = "iso-8859-1"


class Method(Enum):
    GET = "GET"
    HEAD = "HEAD"
    UNRECOGNIZED = "UNRECOGNIZED"


# Exact, case-sensitive prefixes, including the separating space.
METHOD_PREFIXES = (
    ("GET ", Method.GET),
    ("HEAD ", Method.HEAD),
)


@dataclass
class Request:
    method: Method
    target: str
    http_version: str
    raw: str

    @classmethod
    def parse(cls, line: bytes) -> "Request":
        data_string = line.decode(ENCODING)
        if "\x00" in data_string:
            msg = f"NUL byte in request-line: {data_string!r}"
            raise MalformedRequest(msg)

        idx = data_string.find(HTTP_MARKER)
        if idx == -1:
            msg = f"not an HTTP request-line: {data_string!r}"
            raise MalformedRequest(msg)

        head = data_string[:idx]
        http_version = data_string[idx + len(HTTP_MARKER):]

        for prefix, method in METHOD_PREFIXES:
            if head.startswith(prefix):
                return cls(method, head[len(prefix):], http_version, data_string)

        _, _, target = head.partition(" ")
        return cls(Method.UNRECOGNIZED, target, http_version, data_string)

    @classmethod
    async def from_reader(
        cls, reader: asyncio.StreamReader, max_length: int = MAX_LINE_LENGTH
    ) -> "Request":
        line, terminated = await read_line(reader, max_length)
        if not terminated:
            if len(line) > max_length:
                msg = f"request-line longer than {max_length} bytes"
            else:
                msg = (f"incomplete request-line, connection closed after "
                       f"{len(line)} bytes")
            raise IncompleteRequestLine(msg)
        return cls.parse(line)
