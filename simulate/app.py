"""
Simulated Chain App
Routes execute messages and queries to the bank and custom handlers.
"""

import logging
from typing import Dict, List, Any, Optional
from threading import Lock

from core.bank import Bank
from core.result import Err, Result
from tokenfactory.handler import TokenFactoryHandler

logger = logging.getLogger(__name__)


class SimulateApp:
    """
    Message dispatcher for the simulated chain.

    Custom handlers are tried in registration order; the first one that
    does not decline (return None) answers. Calls are serialized with a
    single lock.
    """

    def __init__(self, bank: Bank = None, handlers: List[Any] = None):
        """
        Initialize app.

        Args:
            bank: Bank ledger (a fresh one if None)
            handlers: Custom handlers; a token factory handler if None
        """
        self.bank = bank if bank is not None else Bank()
        self.handlers: List[Any] = []
        self.lock = Lock()

        if handlers is None:
            handlers = [TokenFactoryHandler(self.bank)]
        for handler in handlers:
            self.add_custom_handler(handler)

    def add_custom_handler(self, handler):
        """
        Register a custom handler.

        A handler provides handle(sender, msg) and, optionally,
        handle_query(request); both return None to decline.
        """
        self.handlers.append(handler)

    @property
    def token_factory(self) -> Optional[TokenFactoryHandler]:
        for handler in self.handlers:
            if isinstance(handler, TokenFactoryHandler):
                return handler
        return None

    def execute(self, sender: str, msg: Dict[str, Any]) -> Result:
        """
        Execute a message on behalf of sender.

        Args:
            sender: Originating address
            msg: {'bank': {...}} or {'custom': {...}}

        Returns:
            Result of the message
        """
        with self.lock:
            if isinstance(msg, dict) and 'bank' in msg:
                return self.bank.handle_msg(sender, msg['bank'])

            if isinstance(msg, dict) and 'custom' in msg:
                for handler in self.handlers:
                    result = handler.handle(sender, msg)
                    if result is not None:
                        if result.is_err():
                            logger.debug(f"Custom message from {sender} failed: {result.error}")
                        return result
                return Err("unrecognized custom message")

            return Err("unrecognized message")

    def query(self, request: Dict[str, Any]) -> Result:
        """
        Answer a query.

        Args:
            request: {'bank': {...}} or {'custom': {...}}
        """
        with self.lock:
            if isinstance(request, dict) and 'bank' in request:
                return self.bank.query(request['bank'])

            if isinstance(request, dict) and 'custom' in request:
                for handler in self.handlers:
                    handle_query = getattr(handler, 'handle_query', None)
                    if handle_query is None:
                        continue
                    result = handle_query(request)
                    if result is not None:
                        return result
                return Err("unrecognized custom query")

            return Err("unrecognized query")
