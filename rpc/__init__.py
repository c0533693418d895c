"""
Token Factory RPC Module
JSON-RPC server and client for the chain simulator.
"""

from .server import RPCError, RPCDispatcher, create_app
from .client import RPCClient, RPCClientError, RPCResponseError
from .methods import RPCMethods

__all__ = [
    'RPCDispatcher',
    'RPCClient',
    'RPCMethods',
    'RPCError',
    'RPCClientError',
    'RPCResponseError',
    'create_app',
]
