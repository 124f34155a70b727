"""
JSON-RPC Server
=================
Line-delimited JSON-RPC 2.0 over stdin/stdout, speaking the tool
protocol (``initialize``, ``tools/list``, ``tools/call``).

One request per line in, one response per line out. Notifications get
no response. Lines that are not valid JSON are logged and skipped.
Logging goes to stderr; stdout carries protocol messages only.
"""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO

from signage_compliance.config import get_settings
from signage_compliance.errors import SignageError
from signage_compliance.rpc.tools import SignageTools
from signage_compliance.utils.log import get_logger

logger = get_logger(__name__)

JSONRPC_VERSION = "2.0"
SERVER_ERROR = -32000
METHOD_NOT_FOUND = -32601


class RPCServer:
    """Dispatches JSON-RPC messages to SignageTools."""

    def __init__(self, tools: SignageTools | None = None):
        self.tools = tools or SignageTools()
        self.rpc = get_settings().rpc

    # ── Message handling ──────────────────────────────

    def handle(self, message: dict) -> dict | None:
        """Handle one decoded request; returns the response, or None for notifications."""
        msg_id = message.get("id")
        method = message.get("method")
        params = message.get("params") or {}

        try:
            if method == "initialize":
                return self._result(msg_id, {
                    "protocolVersion": self.rpc.protocol_version,
                    "capabilities": {"tools": {}},
                    "serverInfo": {"name": self.rpc.server_name, "version": self.rpc.server_version},
                })

            if method == "notifications/initialized":
                logger.info("Client initialized")
                return None

            if method == "tools/list":
                return self._result(msg_id, {"tools": self.tools.definitions()})

            if method == "tools/call":
                result = self.tools.call(params.get("name"), params.get("arguments"))
                return self._result(msg_id, {
                    "content": [{"type": "text", "text": json.dumps(result, indent=2, ensure_ascii=False)}]
                })

            return self._error(msg_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        except SignageError as e:
            logger.warning("%s failed: %s", method, e)
            return self._error(msg_id, SERVER_ERROR, str(e))
        except Exception as e:
            logger.exception("Unhandled error in %s", method)
            return self._error(msg_id, SERVER_ERROR, str(e))

    def handle_line(self, line: str) -> dict | None:
        """Decode and handle one input line. Bad or blank lines yield None."""
        line = line.strip()
        if not line:
            return None
        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse message: %s", e)
            return None
        if not isinstance(message, dict):
            logger.error("Failed to parse message: expected a JSON object, got %s", type(message).__name__)
            return None
        return self.handle(message)

    def serve(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        """Read requests until EOF, writing one response line per request."""
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        logger.info("%s %s listening on stdio", self.rpc.server_name, self.rpc.server_version)

        for line in stdin:
            response = self.handle_line(line)
            if response is not None:
                stdout.write(json.dumps(response, ensure_ascii=False) + "\n")
                stdout.flush()

        logger.info("stdin closed, shutting down")

    # ── Envelopes ─────────────────────────────────────

    @staticmethod
    def _result(msg_id: Any, result: dict) -> dict:
        return {"jsonrpc": JSONRPC_VERSION, "id": msg_id, "result": result}

    @staticmethod
    def _error(msg_id: Any, code: int, message: str) -> dict:
        return {"jsonrpc": JSONRPC_VERSION, "id": msg_id, "error": {"code": code, "message": message}}


def serve_stdio() -> None:
    """Run a server with a fresh session registry on the process's stdio."""
    RPCServer().serve()
