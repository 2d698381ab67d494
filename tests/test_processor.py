import asyncio
import os
import tempfile
import unittest
from typing import Optional
from unittest import mock

from minimal_web_server.config import ServerConfig
from minimal_web_server.errors import ResourceReadFailure
from minimal_web_server.processor import RequestProcessor
from minimal_web_server.resources import DocumentRoot

from mocks import MockStreamReader, MockStreamWriter

OK_HEAD = b"HTTP/1.0 200 OK\r\nServer: Minimal Web Server\r\n\r\n"
NOT_FOUND = (b"HTTP/1.0 404 NOT FOUND\r\nServer: Minimal Web Server\r\n\r\n"
             b"<html><head><title>404 Not Found</title></head>"
             b"<body><h1>URL not found</h1></body></html>\r\n")
BAD_REQUEST = b"HTTP/1.0 400 Bad Request\r\nServer: Minimal Web Server\r\n\r\n"
INTERNAL_ERROR = (b"HTTP/1.0 500 Internal Server Error\r\n"
                  b"Server: Minimal Web Server\r\n\r\n")

INDEX = b"<html><body><h1>It works!</h1></body></html>\n"
DOCS_INDEX = b"<html><body>docs</body></html>\n"
BINARY = bytes(range(256)) * 4 + b"\r\n\r\n\x00"


class TestRequestProcessor(unittest.TestCase):
    def setUp(self) -> None:
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)

        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.root = os.path.join(self.tmp.name, "mws_root")
        os.makedirs(os.path.join(self.root, "docs"))
        self.write_file("index.html", INDEX)
        self.write_file("docs/index.html", DOCS_INDEX)
        self.write_file("blob.bin", BINARY)
        self.write_file("empty.txt", b"")
        with open(os.path.join(self.tmp.name, "secret.txt"), "wb") as f:
            f.write(b"secret")

        self.config = ServerConfig(document_root=self.root)

    def tearDown(self) -> None:
        self.loop.run_until_complete(self.loop.shutdown_default_executor())
        self.loop.close()

    def write_file(self, name: str, data: bytes) -> None:
        with open(os.path.join(self.root, name), "wb") as f:
            f.write(data)

    def serve(self, data: bytes, config: Optional[ServerConfig] = None) -> bytes:
        reader = MockStreamReader(data, num_bytes_per_read=4)
        writer = MockStreamWriter()
        processor = RequestProcessor(config or self.config)
        self.loop.run_until_complete(processor.process(reader, writer))
        self.assertTrue(writer.closed)
        return bytes(writer.buffer)

    def test_get_existing_file(self) -> None:
        response = self.serve(b"GET /index.html HTTP/1.0\r\n\r\n")
        self.assertEqual(response, OK_HEAD + INDEX)

    def test_get_binary_file_is_byte_exact(self) -> None:
        response = self.serve(b"GET /blob.bin HTTP/1.0\r\n")
        self.assertEqual(response[len(OK_HEAD):], BINARY)
        self.assertEqual(len(response) - len(OK_HEAD), len(BINARY))

    def test_get_empty_file(self) -> None:
        self.assertEqual(self.serve(b"GET /empty.txt HTTP/1.0\r\n"), OK_HEAD)

    def test_head_has_no_body(self) -> None:
        self.assertEqual(self.serve(b"HEAD /index.html HTTP/1.0\r\n"), OK_HEAD)
        self.assertEqual(self.serve(b"HEAD /blob.bin HTTP/1.0\r\n"), OK_HEAD)

    def test_head_does_not_read_the_file(self) -> None:
        with mock.patch.object(DocumentRoot, "read_all") as read_all:
            self.serve(b"HEAD /index.html HTTP/1.0\r\n")
        read_all.assert_not_called()

    def test_missing_file(self) -> None:
        self.assertEqual(self.serve(b"GET /nope.html HTTP/1.0\r\n"), NOT_FOUND)
        self.assertEqual(self.serve(b"HEAD /nope.html HTTP/1.0\r\n"), NOT_FOUND)

    def test_directory_without_slash_is_not_found(self) -> None:
        self.assertEqual(self.serve(b"GET /docs HTTP/1.0\r\n"), NOT_FOUND)

    def test_trailing_slash_serves_index(self) -> None:
        self.assertEqual(self.serve(b"GET / HTTP/1.0\r\n"), OK_HEAD + INDEX)
        self.assertEqual(self.serve(b"GET /docs/ HTTP/1.0\r\n"),
                         self.serve(b"GET /docs/index.html HTTP/1.0\r\n"))

    def test_trailing_slash_without_index_is_not_found(self) -> None:
        os.makedirs(os.path.join(self.root, "bare"))
        self.assertEqual(self.serve(b"GET /bare/ HTTP/1.0\r\n"), NOT_FOUND)

    def test_repeated_get_is_identical(self) -> None:
        first = self.serve(b"GET /blob.bin HTTP/1.0\r\n")
        second = self.serve(b"GET /blob.bin HTTP/1.0\r\n")
        self.assertEqual(first, second)

    def test_unrecognized_method_is_not_found(self) -> None:
        with mock.patch.object(DocumentRoot, "resolve") as resolve:
            response = self.serve(b"POST /index.html HTTP/1.0\r\n")
        self.assertEqual(response, NOT_FOUND)
        resolve.assert_not_called()

    def test_lowercase_method_is_not_found(self) -> None:
        self.assertEqual(self.serve(b"get /index.html HTTP/1.0\r\n"), NOT_FOUND)

    def test_missing_http_marker_is_bad_request(self) -> None:
        self.assertEqual(self.serve(b"GET /index.html\r\n"), BAD_REQUEST)
        self.assertEqual(self.serve(b"hello there\r\n"), BAD_REQUEST)

    def test_empty_line_is_bad_request(self) -> None:
        self.assertEqual(self.serve(b"\r\n"), BAD_REQUEST)

    def test_connection_closed_mid_line_is_bad_request(self) -> None:
        self.assertEqual(self.serve(b"GET /index.html HTTP/1.0"), BAD_REQUEST)
        self.assertEqual(self.serve(b""), BAD_REQUEST)

    def test_line_at_max_length_is_accepted(self) -> None:
        config = ServerConfig(document_root=self.root, max_line_length=40)
        line = b"GET /" + b"a" * (40 - len(b"GET / HTTP/1.0")) + b" HTTP/1.0"
        self.assertEqual(len(line), 40)
        self.assertEqual(self.serve(line + b"\r\n", config), NOT_FOUND)

    def test_line_over_max_length_is_bad_request(self) -> None:
        config = ServerConfig(document_root=self.root, max_line_length=40)
        line = b"GET /" + b"a" * (41 - len(b"GET / HTTP/1.0")) + b" HTTP/1.0"
        self.assertEqual(len(line), 41)
        self.assertEqual(self.serve(line + b"\r\n", config), BAD_REQUEST)

    def test_target_too_long_after_index_append_is_bad_request(self) -> None:
        config = ServerConfig(document_root=self.root, max_target_length=30)
        self.assertEqual(self.serve(b"GET /docs/ HTTP/1.0\r\n", config), OK_HEAD + DOCS_INDEX)
        line = b"GET /" + b"a" * 20 + b"/ HTTP/1.0"
        self.assertEqual(self.serve(line + b"\r\n", config), BAD_REQUEST)

    def test_traversal_is_not_found(self) -> None:
        self.assertEqual(self.serve(b"GET /../secret.txt HTTP/1.0\r\n"), NOT_FOUND)
        self.assertEqual(self.serve(b"GET /docs/../../secret.txt HTTP/1.0\r\n"),
                         NOT_FOUND)

    def test_read_failure_aborts_response(self) -> None:
        with mock.patch.object(DocumentRoot, "read_all",
                               side_effect=ResourceReadFailure("boom")):
            response = self.serve(b"GET /index.html HTTP/1.0\r\n")
        self.assertEqual(response, INTERNAL_ERROR)

    def test_unexpected_error_still_closes_connection(self) -> None:
        with mock.patch.object(DocumentRoot, "resolve",
                               side_effect=RuntimeError("boom")):
            response = self.serve(b"GET /index.html HTTP/1.0\r\n")
        self.assertEqual(response, INTERNAL_ERROR)

    def test_control_characters_in_request_line_are_escaped_in_logs(self) -> None:
        forged = b"[WARNING] 01-01-2026 00-00-00 - forged"
        for line in (b"GET /x\n" + forged + b" HTTP/1.0\r\n",
                     b"HEAD /x\r" + forged + b" HTTP/1.0\r\n",
                     b"PUT /x\n" + forged + b" HTTP/1.0\r\n"):
            with self.subTest(line=line):
                with self.assertLogs("minimal_web_server", level="DEBUG") as cm:
                    response = self.serve(line)
                self.assertEqual(response, NOT_FOUND)
                self.assertFalse(any("\n" in r or "\r" in r for r in cm.output))
                self.assertTrue(any("\\n" in r or "\\r" in r for r in cm.output))

    def test_read_timeout_is_bad_request(self) -> None:
        config = ServerConfig(document_root=self.root, read_timeout=0.05)
        reader = asyncio.StreamReader()
        reader.feed_data(b"GET /index.html")
        writer = MockStreamWriter()
        self.loop.run_until_complete(
            RequestProcessor(config).process(reader, writer))
        self.assertEqual(bytes(writer.buffer), BAD_REQUEST)
        self.assertTrue(writer.closed)

    def test_unknown_peer(self) -> None:
        reader = MockStreamReader(b"GET / HTTP/1.0\r\n")
        writer = MockStreamWriter(peername=None)
        self.loop.run_until_complete(
            RequestProcessor(self.config).process(reader, writer))
        self.assertEqual(bytes(writer.buffer), OK_HEAD + INDEX)

    def test_write_failure_is_contained(self) -> None:
        reader = MockStreamReader(b"GET / HTTP/1.0\r\n")
        writer = MockStreamWriter()
        writer.write = mock.Mock(side_effect=ConnectionResetError("reset"))
        self.loop.run_until_complete(
            RequestProcessor(self.config).process(reader, writer))
        self.assertTrue(writer.closed)


if __name__ == "__main__":
    unittest.main()
