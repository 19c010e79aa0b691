from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Iterator, List, Tuple
from urllib.parse import urlsplit

import pytest

from exchanges.tastytrade import TastytradeClient


@dataclass
class Recorded:
    method: str
    target: str  # raw request target, query string included
    headers: Dict[str, str]  # lower-cased names
    body: bytes

    @property
    def path(self) -> str:
        return urlsplit(self.target).path

    @property
    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


@dataclass
class StubAPI:
    """Canned responses keyed by (method, path); unknown routes answer 404."""

    routes: Dict[Tuple[str, str], Tuple[int, bytes]] = field(default_factory=dict)
    requests: List[Recorded] = field(default_factory=list)
    url: str = ""

    def add(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        if isinstance(body, bytes):
            raw = body
        elif isinstance(body, str):
            raw = body.encode("utf-8")
        else:
            raw = json.dumps(body if body is not None else {}).encode("utf-8")
        self.routes[(method, path)] = (status, raw)

    @property
    def last(self) -> Recorded:
        return self.requests[-1]


def _handler(api: StubAPI) -> type:
    class Handler(BaseHTTPRequestHandler):
        def _serve(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length else b""
            headers = {k.lower(): v for k, v in self.headers.items()}
            rec = Recorded(self.command, self.path, headers, body)
            api.requests.append(rec)
            status, raw = api.routes.get((self.command, rec.path), (404, b"{}"))
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(raw)))
            self.end_headers()
            self.wfile.write(raw)

        do_GET = _serve
        do_POST = _serve

        def log_message(self, format: str, *args: Any) -> None:
            pass

    return Handler


@pytest.fixture
def stub() -> Iterator[StubAPI]:
    api = StubAPI()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _handler(api))
    api.url = f"http://127.0.0.1:{server.server_address[1]}"
    t = threading.Thread(target=server.serve_forever, daemon=True)
    t.start()
    try:
        yield api
    finally:
        server.shutdown()
        server.server_close()


SESSION_BODY = {
    "data": {
        "user": {"email": "trader@example.com", "username": "trader", "external-id": "U0001"},
        "session-token": "tok-abc123",
    },
    "context": "/sessions",
}


@pytest.fixture
def client(stub: StubAPI) -> Iterator[TastytradeClient]:
    with TastytradeClient(stub.url) as c:
        yield c


@pytest.fixture
def authed(stub: StubAPI, client: TastytradeClient) -> TastytradeClient:
    stub.add("POST", "/sessions", SESSION_BODY, status=201)
    client.authenticate("trader", "secret")
    return client
