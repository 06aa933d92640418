"""HTTP transport between cache peers."""

from __future__ import annotations

import logging
import threading
import urllib.error
import urllib.request
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional
from urllib.parse import quote_plus, unquote, urlsplit

from geecache.consistenthash import HashRing
from geecache.group import get_group

logger = logging.getLogger(__name__)

DEFAULT_BASE_PATH = "/_geecache/"
DEFAULT_REPLICAS = 50


class PeerRequestError(Exception):
    """Raised when a remote peer cannot deliver a value."""


def _encode_varint(number: int) -> bytes:
    out = bytearray()
    while number > 0x7F:
        out.append((number & 0x7F) | 0x80)
        number >>= 7
    out.append(number)
    return bytes(out)


def _decode_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = shift = 0
    while shift < 64:
        if pos >= len(data):
            raise ValueError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
        shift += 7
    raise ValueError("varint too long")


def encode_response(value: bytes) -> bytes:
    """Encode a response message whose field 1 holds ``value``."""
    return b"\x0a" + _encode_varint(len(value)) + bytes(value) if value else b""


def decode_response(data: bytes) -> bytes:
    """Decode a response message and return its value field."""
    value = b""
    pos = 0
    while pos < len(data):
        tag, pos = _decode_varint(data, pos)
        field, wire_type = tag >> 3, tag & 0x07
        if field == 0 or (field == 1 and wire_type != 2):
            raise ValueError(f"invalid field {field} with wire type {wire_type}")
        if wire_type == 0:
            _, pos = _decode_varint(data, pos)
        elif wire_type in (1, 5):
            pos += 8 if wire_type == 1 else 4
        elif wire_type == 2:
            length, pos = _decode_varint(data, pos)
            if field == 1:
                value = bytes(data[pos:pos + length])
            pos += length
        else:
            raise ValueError(f"unsupported wire type {wire_type}")
        if pos > len(data):
            raise ValueError("truncated field")
    return value


def _error(status: int, message: str) -> tuple[int, str, bytes]:
    return status, "text/plain; charset=utf-8", f"{message}\n".encode("utf-8")


class HTTPGetter:
    """Fetches values from one remote peer over HTTP."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url

    def get(self, group: str, key: str) -> bytes:
        url = f"{self.base_url}{quote_plus(group)}/{quote_plus(key)}"
        try:
            with urllib.request.urlopen(url) as res:
                body = res.read()
        except urllib.error.HTTPError as exc:
            raise PeerRequestError(f"server returned: {exc.code} {exc.reason}") from exc
        except OSError as exc:
            raise PeerRequestError(f"reading response body: {exc}") from exc
        try:
            return decode_response(body)
        except ValueError as exc:
            raise PeerRequestError(f"decoding response body: {exc}") from exc


class HTTPPool:
    """Serves cache lookups over HTTP and picks peers by consistent hashing."""

    def __init__(self, self_url: str, base_path: str = DEFAULT_BASE_PATH) -> None:
        self.self_url = self_url
        self.base_path = base_path
        self._lock = threading.Lock()
        self._peers: Optional[HashRing] = None
        self._getters: dict[str, HTTPGetter] = {}

    def log(self, message: str, *args: object) -> None:
        logger.info("[Server %s] %s", self.self_url, message % args if args else message)

    def handle(self, method: str, path: str) -> tuple[int, str, bytes]:
        """Answer ``<base_path><group>/<key>`` with ``(status, content_type, body)``.

        Raises ValueError if the path lies outside the base path.
        """
        if not path.startswith(self.base_path):
            raise ValueError(f"HTTPPool serving unexpected path: {path}")
        self.log("%s %s", method, path)
        parts = path[len(self.base_path):].split("/", 1)
        if len(parts) != 2:
            return _error(400, "bad request")
        group_name, key = parts
        group = get_group(group_name)
        if group is None:
            return _error(404, f"no such group: {group_name}")
        try:
            view = group.get(key)
        except Exception as exc:
            return _error(500, str(exc))
        return 200, "application/octet-stream", encode_response(view.byte_slice())

    def set(self, *peers: str) -> None:
        """Replace the pool's list of peers."""
        with self._lock:
            self._peers = HashRing(DEFAULT_REPLICAS)
            self._peers.add(*peers)
            self._getters = {peer: HTTPGetter(peer + self.base_path) for peer in peers}

    def pick_peer(self, key: str) -> Optional[HTTPGetter]:
        """Return the getter of the remote peer owning ``key``, or None."""
        with self._lock:
            peer = self._peers.get(key) if self._peers else ""
            if not peer or peer == self.self_url:
                return None
            self.log("Pick peer %s", peer)
            return self._getters[peer]

    def serve(self, host: str, port: int) -> None:
        """Serve peer requests on ``host:port`` forever."""
        pool = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                try:
                    status, ctype, body = pool.handle(
                        self.command, unquote(urlsplit(self.path).path)
                    )
                except ValueError as exc:
                    status, ctype, body = _error(500, str(exc))
                self.send_response(status)
                self.send_header("Content-Type", ctype)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            do_POST = do_GET

            def log_message(self, format: str, *args: object) -> None:
                logger.debug(format, *args)

        with ThreadingHTTPServer((host, port), Handler) as server:
            server.serve_forever()