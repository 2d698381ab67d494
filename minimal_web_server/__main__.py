import argparse
import sys
from dataclasses import replace
from typing import Optional

from .config import ServerConfig
from .logger import get_logger, set_level
from .server import Server

logger = get_logger(__name__)


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minimal-web-server",
        description="Serve a directory over HTTP/1.0 (GET and HEAD only).",
    )
    parser.add_argument("--host", default=defaults.host,
                        help="address to bind (default: %(default)s)")
    parser.add_argument("--port", type=int, default=defaults.port,
                        help="port to listen on (default: %(default)s)")
    parser.add_argument("--root", dest="document_root",
                        default=defaults.document_root,
                        help="document root directory (default: %(default)s)")
    parser.add_argument("--timeout", dest="read_timeout", type=float,
                        default=defaults.read_timeout,
                        help="seconds to wait for the request-line "
                             "(default: %(default)s)")
    parser.add_argument("--max-line-length", type=int,
                        default=defaults.max_line_length,
                        help="longest accepted request-line in bytes "
                             "(default: %(default)s)")
    parser.add_argument("--log-level", default=defaults.log_level,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        type=str.upper,
                        help="logging level (default: %(default)s)")
    return parser


def parse_config(argv: Optional[list[str]] = None) -> ServerConfig:
    defaults = ServerConfig.from_env()
    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    try:
        return replace(
            defaults,
            host=args.host,
            port=args.port,
            document_root=args.document_root,
            max_line_length=args.max_line_length,
            read_timeout=args.read_timeout,
            log_level=args.log_level,
        )
    except ValueError as e:
        parser.error(str(e))


def main(argv: Optional[list[str]] = None) -> int:
    try:
        config = parse_config(argv)
        set_level(config.log_level)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    logger.info(f"Starting Minimal Web Server on port {config.port}")
    try:
        Server(config).run()
    except OSError as e:
        logger.error(f"Failed to start server: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
