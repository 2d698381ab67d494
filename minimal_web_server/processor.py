import asyncio
from typing import Optional

from .config import ServerConfig
from .errors import (
    IncompleteRequestLine,
    MalformedRequest,
    ResourceNotFound,
    ResourceReadFailure,
    UnrecognizedMethod,
)
from .logger import get_logger
from .request import Method, Request
from .resources import DocumentRoot
from .response_writer import Writer
from .responses import Response, bad_request, internal_error, not_found, ok

logger = get_logger(__name__)


class RequestProcessor:
    """Serves exactly one request per connection, then closes it.

    Holds configuration only, so a single instance can be shared by every
    connection task.
    """

    def __init__(self, config: Optional[ServerConfig] = None) -> None:
        self.config: ServerConfig = config if config is not None else ServerConfig()
        self.document_root = DocumentRoot(
            self.config.document_root,
            index_document=self.config.index_document,
            max_target_length=self.config.max_target_length,
        )

    async def process(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        addr = writer.get_extra_info("peername")
        client_id = f"{addr[0]}:{addr[1]}" if addr else "unknown"
        logger.debug(f"New connection from {client_id}")
        w = Writer(writer)
        try:
            response = await self.respond(reader, client_id)
            await w.send(response)
            logger.debug(f"Sent {response.status.value} ({w.bytes_written} bytes) "
                         f"to {client_id}")
        except ConnectionError as e:
            logger.warning(f"Connection with {client_id} lost while responding: {e}")
        except Exception:
            logger.exception(f"Unexpected error handling {client_id}")
            if not w.started:
                try:
                    await w.send(internal_error(self.config.server_name))
                except ConnectionError as e:
                    logger.warning(f"Could not send error response to {client_id}: {e}")
        finally:
            logger.debug(f"Closing connection with {client_id}")
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError as e:
                logger.debug(f"Error closing connection with {client_id}: {e}")

    async def respond(self, reader: asyncio.StreamReader, client_id: str) -> Response:
        server_name = self.config.server_name
        try:
            request = await asyncio.wait_for(
                Request.from_reader(reader, self.config.max_line_length),
                timeout=self.config.read_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Timed out waiting for request-line from {client_id}")
            return bad_request(server_name)
        except (IncompleteRequestLine, MalformedRequest) as e:
            logger.warning(f"Bad request from {client_id}: {e}")
            return bad_request(server_name)

        logger.info(f"Request from {client_id}: {request.raw!r}")

        try:
            if request.method is Method.UNRECOGNIZED:
                msg = f"unrecognized method in: {request.raw!r}"
                raise UnrecognizedMethod(msg)
            resource = self.document_root.resolve(request.target)
            logger.debug(f"Resource requested: {resource!r}")
            loop = asyncio.get_running_loop()
            body = await loop.run_in_executor(
                None, self.document_root.load, resource, request.method is Method.GET
            )
        except MalformedRequest as e:
            logger.warning(f"Bad request from {client_id}: {e}")
            return bad_request(server_name)
        except (UnrecognizedMethod, ResourceNotFound) as e:
            logger.warning(f"404 Not Found for {client_id}: {e}")
            return not_found(server_name)
        except ResourceReadFailure as e:
            logger.error(f"Aborting response to {client_id}: {e}")
            return internal_error(server_name)

        if request.method is Method.HEAD:
            return ok(server_name=server_name)
        return ok(body, server_name)
