"""
RPC - JSON-RPC transport layer for ethfetch.

Provides the HTTP channel, typed eth_* method bindings and revert
reason normalization for node error responses.
"""
