import asyncio

# Constants
CR = 0x0D
LF = 0x0A
CRLF = b"\r\n"
MAX_LINE_LENGTH = 500


async def read_line(
    reader: asyncio.StreamReader, max_length: int = MAX_LINE_LENGTH
) -> tuple[bytes, bool]:
    """Read a single CRLF terminated line from ``reader``, one byte at a time.

    Returns the bytes before the CRLF and ``True`` once the terminator has
    been seen. Nothing past the terminator is consumed.

    Returns whatever was accumulated and ``False`` when the stream ends
    first, or as soon as the line grows past ``max_length`` bytes (the
    terminator does not count towards the bound).
    """
    buf = bytearray()
    matched = 0

    while True:
        b = await reader.read(1)
        if not b:
            return bytes(buf), False

        c = b[0]
        buf.append(c)
        if c == CR:
            matched = 1
        elif c == LF and matched == 1:
            return bytes(buf[:-len(CRLF)]), True
        else:
            matched = 0

        # A trailing CR may still be the start of the terminator.
        if len(buf) - matched > max_length:
            return bytes(buf), False
