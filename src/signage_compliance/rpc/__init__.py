"""Line-delimited JSON-RPC server exposing the signage tools."""

from signage_compliance.rpc.server import RPCServer, serve_stdio
from signage_compliance.rpc.tools import SignageTools

__all__ = ["RPCServer", "SignageTools", "serve_stdio"]
