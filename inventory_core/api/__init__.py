"""
Remote mirror access.

The remote service is an opaque HTTP endpoint; see RemoteGateway.
"""

from .remote_gateway import RemoteGateway, RemoteOutcome, RemoteResult

__all__ = [
    "RemoteGateway",
    "RemoteOutcome",
    "RemoteResult",
]
