"""HTTP front-end for the agent.

Endpoints:
    GET  /        Welcome message
    POST /agent   {"input": "...", "privateKey": "0x..."} -> {"response": "..."}

Every POST is its own conversation: a fresh wallet session, seeded with
``privateKey`` (alias ``credential``) when given.  The chain client, asset
registry and operation catalog are shared by all requests.  Operation
failures come back as 200 with the failure text; only a missing ``input``
(400) and unexpected errors (500) use other status codes.
"""

import json
import uuid
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlparse

from arbagent.agent import run_instruction, seed_wallet
from arbagent.assets import AssetRegistry
from arbagent.chain import ChainClient
from arbagent.context import create_context
from arbagent.logging_config import (
    clear_session_logger,
    create_session_logger,
    get_logger,
    get_session_stamp,
    set_session_logger,
)
from arbagent.session import WalletSession
from arbagent.skills.definitions import build_registry

WELCOME = "Welcome to Arbitrum AI Agent! Use POST /agent to interact with the agent."


class AgentService:
    """Shared state for the server; one ``handle_agent`` call per request."""

    def __init__(self, backend, chain: ChainClient | None = None,
                 assets: AssetRegistry | None = None, max_turns: int | None = None):
        self.backend = backend
        self.chain = chain or ChainClient()
        self.assets = assets if assets is not None else AssetRegistry()
        self.registry = build_registry()
        self.max_turns = max_turns

    def handle_agent(self, body) -> tuple[int, dict]:
        """Run one instruction. Returns (status, json-body)."""
        if not isinstance(body, dict):
            return 400, {"error": "Request body must be a JSON object"}
        instruction = body.get("input")
        if not isinstance(instruction, str) or not instruction.strip():
            return 400, {"error": "Input is required"}

        ctx = create_context(session=WalletSession(), assets=self.assets,
                             chain=self.chain, registry=self.registry)
        messages: list[dict] = []
        private_key = body.get("privateKey") or body.get("credential")
        try:
            if private_key:
                seed_wallet(messages, ctx, str(private_key))
            outcome = run_instruction(self.backend, ctx, messages, instruction,
                                      max_turns=self.max_turns)
        finally:
            ctx.session.clear_credential()
        return 200, {"response": outcome.text}


def _make_handler(service: AgentService):

    class AgentHandler(BaseHTTPRequestHandler):
        def _cors_headers(self):
            self.send_header("Access-Control-Allow-Origin", "*")
            self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
            self.send_header("Access-Control-Allow-Headers", "Content-Type")

        def _json_response(self, status: int, data: dict):
            payload = json.dumps(data, default=str).encode()
            self.send_response(status)
            self._cors_headers()
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        def _read_json_body(self):
            length = int(self.headers.get("Content-Length", 0) or 0)
            if length == 0:
                return {}
            return json.loads(self.rfile.read(length))

        def do_OPTIONS(self):
            self.send_response(204)
            self._cors_headers()
            self.end_headers()

        def do_GET(self):
            if urlparse(self.path).path == "/":
                self._json_response(200, {"message": WELCOME})
            else:
                self._json_response(404, {"error": "Not found"})

        def do_POST(self):
            if urlparse(self.path).path != "/agent":
                self._json_response(404, {"error": "Not found"})
                return

            request_id = uuid.uuid4().hex[:8]
            set_session_logger(create_session_logger(
                f"{get_session_stamp()}-{request_id}"))
            try:
                try:
                    body = self._read_json_body()
                except (ValueError, UnicodeDecodeError):
                    self._json_response(400, {"error": "Invalid JSON body"})
                    return
                try:
                    status, data = service.handle_agent(body)
                except Exception as e:
                    get_logger().exception("Request %s failed", request_id)
                    status, data = 500, {"error": f"Internal server error: {e}"}
                self._json_response(status, data)
            finally:
                clear_session_logger()

        def log_message(self, fmt, *args):
            get_logger().info("%s %s", self.address_string(), fmt % args)

    return AgentHandler


def make_server(service: AgentService, host: str, port: int) -> ThreadingHTTPServer:
    """Bind a threading HTTP server to (host, port)."""
    return ThreadingHTTPServer((host, port), _make_handler(service))


def serve(service: AgentService, host: str, port: int) -> None:
    """Run the server until interrupted."""
    server = make_server(service, host, port)
    print(f"Arbitrum AI Agent on http://{host}:{server.server_address[1]}")
    print("  POST /agent  {\"input\": \"...\", \"privateKey\": \"0x...\"}")
    get_logger().info("Server listening on %s:%s", host, server.server_address[1])
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nStopping server.")
    finally:
        server.server_close()
