import asyncio
import signal
import sys
from typing import Optional

from .config import ServerConfig
from .logger import get_logger
from .processor import RequestProcessor

logger = get_logger(__name__)

# Constants
BACKLOG = 20


class Server:
    def __init__(self, config: Optional[ServerConfig] = None) -> None:
        self.config: ServerConfig = config if config is not None else ServerConfig()
        self.processor = RequestProcessor(self.config)
        self.connections: set[asyncio.Task] = set()
        self.stopping: Optional[asyncio.Event] = None
        self.listener: Optional[asyncio.Server] = None

    async def __handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        task = asyncio.current_task()
        self.connections.add(task)
        try:
            await self.processor.process(reader, writer)
        finally:
            self.connections.discard(task)

    async def start(self) -> asyncio.Server:
        server = await asyncio.start_server(
            self.__handle_connection,
            self.config.host,
            self.config.port,
            backlog=BACKLOG,
            reuse_address=True,
        )
        for sock in server.sockets:
            host, port = sock.getsockname()[:2]
            logger.info(f"Server running on {host}:{port}, "
                        f"serving {self.config.document_root}")
        return server

    def run(self) -> None:
        try:
            logger.debug("Trying to start server...")
            asyncio.run(self.__run_async())
        except KeyboardInterrupt:
            logger.info("Server shutdown initiated....")
        finally:
            logger.info("Server stopped")

    def stop(self) -> None:
        if self.stopping is not None:
            self.stopping.set()

    async def serve(self) -> None:
        """Accept connections until ``stop()`` is called, then shut down.

        Shutdown runs in this task, so it always completes before ``serve``
        returns.
        """
        self.stopping = asyncio.Event()
        server = self.listener = await self.start()
        try:
            await self.stopping.wait()
        finally:
            await self.__shutdown(server)

    async def __run_async(self) -> None:
        if sys.platform != "win32":
            loop = asyncio.get_running_loop()

            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self.stop)

        await self.serve()

    async def __shutdown(self, server: asyncio.Server) -> None:
        logger.info("Shutting down server gracefully...")
        server.close()

        tasks = list(self.connections)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        await server.wait_closed()
        logger.info("Server shutdown complete.")
