"""
Token Factory RPC Methods
JSON-RPC methods for executing messages and reading chain state.
"""

from typing import Dict, List, Any, Optional
import time

from .server import RPCError
from core.coins import parse_amount
from core.result import Result, from_binary
from simulate.app import SimulateApp
from tokenfactory.messages import (
    CreateDenom,
    MintTokens,
    BurnTokens,
    ForceTransfer,
    wrap_custom,
)
import config


class RPCMethods:
    """
    Token factory RPC methods.

    Execute methods return the AppResponse as a dict; a failed execution
    becomes an RPC error carrying the module's error message.
    """

    def __init__(self, app: SimulateApp):
        self.app = app
        self.start_time = int(time.time())

    def get_methods(self) -> Dict[str, callable]:
        """
        Get all RPC methods.

        Returns:
            Dictionary of method name -> handler
        """
        return {
            # === Generic ===
            'execute': self.execute,
            'query': self.query,

            # === Token factory ===
            'createdenom': self.createdenom,
            'minttokens': self.minttokens,
            'burntokens': self.burntokens,
            'forcetransfer': self.forcetransfer,
            'listdenoms': self.listdenoms,
            'getdenommetadata': self.getdenommetadata,
            'getdenomadmin': self.getdenomadmin,

            # === Bank ===
            'getbalance': self.getbalance,
            'getallbalances': self.getallbalances,
            'getsupply': self.getsupply,

            # === Control ===
            'getinfo': self.getinfo,
            'help': self.help,
        }

    # ------------------------------------------------------------------
    # Generic
    # ------------------------------------------------------------------

    def execute(self, sender: str, msg: Dict) -> Dict:
        """Execute any message as sender."""
        return self._unwrap(self.app.execute(sender, msg))

    def query(self, request: Dict) -> Any:
        """Run any query and return the decoded response."""
        response = self._unwrap(self.app.query(request))
        return from_binary(response['data']) if response['data'] else None

    # ------------------------------------------------------------------
    # Token factory
    # ------------------------------------------------------------------

    def createdenom(self, sender: str, subdenom: str, metadata: Dict = None) -> Dict:
        """Create factory/<sender>/<subdenom>. Returns {'new_token_denom': ...}."""
        msg = wrap_custom(CreateDenom(subdenom=subdenom, metadata=metadata).to_dict())
        response = self._unwrap(self.app.execute(sender, msg))
        return from_binary(response['data'])

    def minttokens(self, sender: str, denom: str, amount, mint_to_address: str) -> Dict:
        msg = MintTokens(denom=denom, amount=self._amount(amount), mint_to_address=mint_to_address)
        return self._unwrap(self.app.execute(sender, wrap_custom(msg.to_dict())))

    def burntokens(self, sender: str, denom: str, amount, burn_from_address: str) -> Dict:
        msg = BurnTokens(denom=denom, amount=self._amount(amount), burn_from_address=burn_from_address)
        return self._unwrap(self.app.execute(sender, wrap_custom(msg.to_dict())))

    def forcetransfer(self, sender: str, denom: str, amount, from_address: str, to_address: str) -> Dict:
        msg = ForceTransfer(
            denom=denom,
            amount=self._amount(amount),
            from_address=from_address,
            to_address=to_address,
        )
        return self._unwrap(self.app.execute(sender, wrap_custom(msg.to_dict())))

    def listdenoms(self, creator: str) -> List[str]:
        """List denoms created by an address."""
        return self.query(wrap_custom({'denoms_by_creator': {'creator': creator}}))['denoms']

    def getdenommetadata(self, denom: str) -> Optional[Dict]:
        return self.query(wrap_custom({'metadata': {'denom': denom}}))['metadata']

    def getdenomadmin(self, denom: str) -> str:
        return self.query(wrap_custom({'admin': {'denom': denom}}))['admin']

    # ------------------------------------------------------------------
    # Bank
    # ------------------------------------------------------------------

    def getbalance(self, address: str, denom: str) -> str:
        """Get balance of one denom as a Uint128 string."""
        result = self.query({'bank': {'balance': {'address': address, 'denom': denom}}})
        return result['amount']['amount']

    def getallbalances(self, address: str) -> List[Dict]:
        return self.query({'bank': {'all_balances': {'address': address}}})['amount']

    def getsupply(self, denom: str) -> str:
        return self.query({'bank': {'supply': {'denom': denom}}})['amount']['amount']

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def getinfo(self) -> Dict:
        """Get simulator info."""
        factory = self.app.token_factory
        return {
            'version': config.CLIENT_VERSION,
            'name': config.CLIENT_NAME,
            'chain_id': config.CHAIN_ID,
            'denoms': factory.registry.size() if factory else 0,
            'uptime': int(time.time()) - self.start_time,
        }

    def help(self, command: str = None) -> str:
        """List methods, or show help for one."""
        methods = self.get_methods()
        if command is None:
            return '\n'.join(sorted(methods))

        handler = methods.get(command)
        if handler is None:
            raise RPCError(RPCError.METHOD_NOT_FOUND, f"Unknown command: {command}")
        return (handler.__doc__ or command).strip()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _amount(value) -> int:
        try:
            return parse_amount(value)
        except ValueError as e:
            raise RPCError(RPCError.RPC_INVALID_PARAMETER, str(e))

    @staticmethod
    def _unwrap(result: Result) -> Dict:
        if result.is_err():
            raise RPCError(RPCError.RPC_EXECUTION_ERROR, result.error)
        return result.unwrap().to_dict()
