from collections.abc import Iterator

# Constants
CRLF = b"\r\n"


class Headers(dict):
    """Header map with case-insensitive keys.

    Setting a name twice in different case replaces the value, but the name
    is serialised the way it was first spelled, so ``h["Server"] = ...`` goes
    on the wire as ``Server: ...``.
    """

    def __init__(self, *args: dict[str, str], **kwargs: str) -> None:
        super().__init__()
        self._names: dict[str, str] = {}
        if args and isinstance(args[0], dict):
            for key, value in args[0].items():
                self[key] = value
        for key, value in kwargs.items():
            self[key] = value

    def __setitem__(self, key: str, value: str) -> None:
        if "\r" in value or "\n" in value:
            msg = f"header value for {key} must not contain CR or LF"
            raise ValueError(msg)
        self._names.setdefault(key.lower(), key)
        super().__setitem__(key.lower(), value)

    def fields(self) -> Iterator[tuple[str, str]]:
        for key, value in self.items():
            yield self._names[key], value

    def to_bytes(self) -> bytes:
        out = bytearray()
        for name, value in self.fields():
            out.extend(f"{name}: {value}".encode("iso-8859-1"))
            out.extend(CRLF)
        out.extend(CRLF)
        return bytes(out)
