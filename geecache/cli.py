"""Command line entry point running a cache peer and an optional API server."""

from __future__ import annotations

import argparse
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional, Sequence
from urllib.parse import parse_qs, urlsplit

from geecache.group import Group, new_group
from geecache.httppool import HTTPPool

logger = logging.getLogger(__name__)

DB = {"Tom": "630", "Jack": "589", "Sam": "567"}

API_ADDR = "http://localhost:9999"
ADDR_MAP = {
    8001: "http://localhost:8001",
    8002: "http://localhost:8002",
    8003: "http://localhost:8003",
}


def create_group() -> Group:
    """Create the "scores" group backed by the slow in-memory database."""

    def slow_db(key: str) -> bytes:
        logger.info("[SlowDB] search key %s", key)
        if key in DB:
            return DB[key].encode("utf-8")
        raise LookupError(f"{key} not exist")

    return new_group("scores", 2 << 10, slow_db)


def _host_port(addr: str) -> tuple[str, int]:
    parts = urlsplit(addr)
    return parts.hostname or "", parts.port or 80


def start_cache_server(addr: str, addrs: Sequence[str], group: Group) -> None:
    """Serve ``group`` to peers at ``addr``, knowing all of ``addrs``."""
    pool = HTTPPool(addr)
    pool.set(*addrs)
    group.register_peers(pool)
    logger.info("geecache is running at %s", addr)
    pool.serve(*_host_port(addr))


def start_api_server(api_addr: str, group: Group) -> None:
    """Serve ``/api?key=...`` lookups against ``group`` at ``api_addr``."""

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:
            parts = urlsplit(self.path)
            status, ctype = 200, "application/octet-stream"
            if parts.path != "/api":
                status, body = 404, b"404 page not found\n"
            else:
                key = parse_qs(parts.query).get("key", [""])[0]
                try:
                    body = group.get(key).byte_slice()
                except Exception as exc:
                    status, body = 500, f"{exc}\n".encode("utf-8")
            if status != 200:
                ctype = "text/plain; charset=utf-8"
            self.send_response(status)
            self.send_header("Content-Type", ctype)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: object) -> None:
            logger.debug(format, *args)

    logger.info("frontend server is running at %s", api_addr)
    with ThreadingHTTPServer(_host_port(api_addr), Handler) as server:
        server.serve_forever()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one cache peer, and the API server too when asked."""
    parser = argparse.ArgumentParser(prog="geecache")
    parser.add_argument("-port", "--port", type=int, default=8001, help="Geecache server port")
    parser.add_argument("-api", "--api", action="store_true", help="Start an API server")
    args = parser.parse_args(argv)
    if args.port not in ADDR_MAP:
        parser.error(f"unknown port {args.port}")

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    group = create_group()
    if args.api:
        threading.Thread(target=start_api_server, args=(API_ADDR, group), daemon=True).start()
    start_cache_server(ADDR_MAP[args.port], list(ADDR_MAP.values()), group)
    return 0