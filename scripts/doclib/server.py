"""
Local HTTP server for the PDF pass.

wkhtmltopdf reads the documents over http:// rather than file:// (the
same-origin restriction and some file:// bugs otherwise kick in), so the
generated HTML is hosted from a short-lived server for the duration of
the conversion. An optional stop monitor lets another process shut the
server down with a shared key, e.g. `build.py stop`.
Uses Python stdlib http.server - no additional dependencies required.
"""

import contextlib
import functools
import socket
import socketserver
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional
from urllib.parse import quote


class QuietHandler(SimpleHTTPRequestHandler):
    """Static file handler that only logs requests in verbose mode."""

    verbose: bool = False

    def log_message(self, format: str, *args) -> None:
        if self.verbose:
            print(f"    [http] {format % args}")


class DocServer:
    """Serves a directory over HTTP from a background thread."""

    def __init__(self, directory: str, host: str = "127.0.0.1", port: int = 0, verbose: bool = False):
        self.directory = directory
        self.host = host
        self.requested_port = port
        self.verbose = verbose
        self._httpd: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def port(self) -> Optional[int]:
        if self._httpd is None:
            return None
        return self._httpd.server_address[1]

    @property
    def running(self) -> bool:
        return self._httpd is not None

    def start(self) -> None:
        handler = type("DocHandler", (QuietHandler,), {"verbose": self.verbose})
        handler = functools.partial(handler, directory=self.directory)
        self._httpd = ThreadingHTTPServer((self.host, self.requested_port), handler)
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        self._thread.start()
        print(f"  Serving {self.directory} at {self.url_for('')}")

    def stop(self) -> None:
        """Shut the server down. Safe to call more than once."""
        with self._lock:
            httpd, self._httpd = self._httpd, None
            thread, self._thread = self._thread, None
        if httpd is None:
            return
        httpd.shutdown()
        httpd.server_close()
        if thread is not None:
            thread.join()
        print("  Stopped document server")

    def url_for(self, name: str) -> str:
        host = "localhost" if self.host in ("", "0.0.0.0") else self.host
        return f"http://{host}:{self.port}/{quote(name)}"


class _MonitorHandler(socketserver.StreamRequestHandler):
    """Line protocol: '<key>\\n<command>\\n'. Commands: stop, status."""

    def handle(self) -> None:
        key = self.rfile.readline().decode("utf-8", "replace").strip()
        if key != self.server.stop_key:
            return
        command = self.rfile.readline().decode("utf-8", "replace").strip().lower()
        if command == "stop":
            self.server.doc_server.stop()
            self.wfile.write(b"Stopped\r\n")
        elif command == "status":
            self.wfile.write(b"OK\r\n")


class StopMonitor(socketserver.TCPServer):
    """Control listener that stops a DocServer when sent the right key."""

    allow_reuse_address = True

    def __init__(self, doc_server: DocServer, port: int, key: str, host: str = "127.0.0.1"):
        super().__init__((host, port), _MonitorHandler)
        self.doc_server = doc_server
        self.stop_key = key
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server_address[1]

    def start(self) -> None:
        self._thread = threading.Thread(target=self.serve_forever, daemon=True)
        self._thread.start()
        print(f"  Stop monitor listening on port {self.port}")

    def stop(self) -> None:
        self.shutdown()
        self.server_close()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


def send_stop(port: int, key: str, host: str = "127.0.0.1", command: str = "stop", timeout: float = 5.0) -> str:
    """Send a command to a stop monitor and return its reply ('' if none)."""
    with socket.create_connection((host, port), timeout=timeout) as sock:
        sock.sendall(f"{key}\r\n{command}\r\n".encode("utf-8"))
        sock.shutdown(socket.SHUT_WR)
        reply = sock.makefile("rb").readline()
    return reply.decode("utf-8", "replace").strip()


@contextlib.contextmanager
def serve_directory(directory, host="127.0.0.1", port=0, stop_port=None, stop_key=None, verbose=False):
    """
    Serve directory for the duration of the with-block.

    The monitor (when stop_port and stop_key are set) and the server are
    always stopped on exit, whether or not the block raised.
    """
    server = DocServer(directory, host, port, verbose=verbose)
    server.start()
    monitor = None
    try:
        if stop_port and stop_port > 0 and stop_key:
            monitor = StopMonitor(server, stop_port, stop_key, host)
            monitor.start()
        yield server
    finally:
        if monitor is not None:
            monitor.stop()
        server.stop()
