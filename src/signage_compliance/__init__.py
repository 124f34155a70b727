"""
Signage Compliance System
==========================
BPA Code of Practice compliance checking for private car park signage.

Checks sign documents against a declarative rulebook, creates signs
from house templates, and serves the same engine to tool clients over
a line-delimited JSON-RPC channel.
"""

__version__ = "0.1.0"
