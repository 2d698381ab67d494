import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

# Defaults
HOST = "0.0.0.0"
PORT = 80
DOCUMENT_ROOT = "./mws_root"
INDEX_DOCUMENT = "index.html"
MAX_LINE_LENGTH = 500
MAX_TARGET_LENGTH = 500
READ_TIMEOUT = 30.0
SERVER_NAME = "Minimal Web Server"
LOG_LEVEL = "INFO"

ENV_PREFIX = "MWS_"

T = TypeVar("T")


@dataclass
class ServerConfig:
    host: str = HOST
    port: int = PORT
    document_root: str = DOCUMENT_ROOT
    index_document: str = INDEX_DOCUMENT
    max_line_length: int = MAX_LINE_LENGTH
    max_target_length: int = MAX_TARGET_LENGTH
    read_timeout: Optional[float] = READ_TIMEOUT
    server_name: str = SERVER_NAME
    log_level: str = LOG_LEVEL

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            msg = f"port out of range: {self.port}"
            raise ValueError(msg)
        if self.max_line_length <= 0:
            msg = f"max_line_length must be positive, got: {self.max_line_length}"
            raise ValueError(msg)
        if self.max_target_length <= 0:
            msg = f"max_target_length must be positive, got: {self.max_target_length}"
            raise ValueError(msg)
        if self.read_timeout is not None and self.read_timeout <= 0:
            msg = f"read_timeout must be positive, got: {self.read_timeout}"
            raise ValueError(msg)
        if not self.index_document or "/" in self.index_document:
            msg = f"invalid index document: {self.index_document!r}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "ServerConfig":
        """Build a config from ``MWS_*`` environment variables.

        Unset variables keep their defaults. Numeric variables that do not
        parse raise ``ValueError`` naming the variable.
        """
        env = os.environ if environ is None else environ

        def lookup(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            if value is None or value.strip() == "":
                return None
            return value.strip()

        def number(name: str, convert: Callable[[str], T], default: T) -> T:
            raw = lookup(name)
            if raw is None:
                return default
            try:
                return convert(raw)
            except ValueError as err:
                msg = f"invalid value for {ENV_PREFIX}{name}: {raw!r}"
                raise ValueError(msg) from err

        return cls(
            host=lookup("HOST") or HOST,
            port=number("PORT", int, PORT),
            document_root=lookup("DOCUMENT_ROOT") or DOCUMENT_ROOT,
            max_line_length=number("MAX_LINE_LENGTH", int, MAX_LINE_LENGTH),
            max_target_length=number("MAX_TARGET_LENGTH", int, MAX_TARGET_LENGTH),
            read_timeout=number("READ_TIMEOUT", float, READ_TIMEOUT),
            log_level=lookup("LOG_LEVEL") or LOG_LEVEL,
        )
