import os
import stat
from typing import BinaryIO

from .errors import MalformedRequest, ResourceNotFound, ResourceReadFailure
from .logger import get_logger

logger = get_logger(__name__)

# Constants
INDEX_DOCUMENT = "index.html"
MAX_TARGET_LENGTH = 500
OPEN_FLAGS = os.O_RDONLY | getattr(os, "O_NONBLOCK", 0) | getattr(os, "O_BINARY", 0)


class DocumentRoot:
    """Maps request targets onto files below a fixed directory."""

    def __init__(self,
                 path: str,
                 index_document: str = INDEX_DOCUMENT,
                 max_target_length: int = MAX_TARGET_LENGTH) -> None:
        self.path: str = path
        self.index_document: str = index_document
        self.max_target_length: int = max_target_length

    def resolve(self, target: str) -> str:
        if target.endswith("/"):
            target += self.index_document

        if len(target) > self.max_target_length:
            msg = f"target longer than {self.max_target_length} characters"
            raise MalformedRequest(msg)

        if not target.startswith("/"):
            msg = f"target is not an absolute path: {target!r}"
            raise ResourceNotFound(msg)

        root = os.path.realpath(self.path)
        resource = os.path.realpath(self.path + target)
        if os.path.commonpath([root, resource]) != root:
            logger.warning(f"Rejected target outside document root: {target!r}")
            msg = f"target escapes document root: {target!r}"
            raise ResourceNotFound(msg)
        return resource

    @staticmethod
    def open(resource: str) -> BinaryIO:
        # Non-blocking so a FIFO below the root cannot stall the open.
        try:
            handle = open(resource, "rb",
                          opener=lambda path, _: os.open(path, OPEN_FLAGS))
        except OSError as err:
            msg = f"cannot open {resource!r}: {err.strerror}"
            raise ResourceNotFound(msg) from err

        try:
            mode = os.fstat(handle.fileno()).st_mode
        except OSError as err:
            handle.close()
            msg = f"cannot stat {resource!r}: {err.strerror}"
            raise ResourceNotFound(msg) from err
        if not stat.S_ISREG(mode):
            handle.close()
            msg = f"not a regular file: {resource!r}"
            raise ResourceNotFound(msg)
        return handle

    @staticmethod
    def read_all(handle: BinaryIO) -> bytes:
        try:
            size = os.fstat(handle.fileno()).st_size
        except OSError as err:
            msg = f"cannot determine size of {handle.name!r}: {err.strerror}"
            raise ResourceReadFailure(msg) from err

        try:
            data = handle.read(size)
        except OSError as err:
            msg = f"cannot read {handle.name!r}: {err.strerror}"
            raise ResourceReadFailure(msg) from err

        if len(data) != size:
            msg = f"short read on {handle.name!r}: expected {size} bytes, got {len(data)}"
            raise ResourceReadFailure(msg)
        return data

    def load(self, resource: str, with_body: bool = True) -> bytes:
        """Open ``resource`` and return its contents, or ``b""`` for headers only.

        The handle never outlives the call.
        """
        with self.open(resource) as handle:
            if not with_body:
                return b""
            return self.read_all(handle)
