"""
Simulated Bank Module
In-memory balances and supply for every denom on the simulated chain.
"""

import logging
from typing import Dict, List, Any, Optional
from threading import Lock

from .coins import Coin, parse_coins, format_coins
from .result import AppResponse, Event, Ok, Err, Result, to_binary
import config

logger = logging.getLogger(__name__)


class Bank:
    """
    Account balance ledger.

    Balances are kept per address and denom; zero balances are dropped so
    that listing an account only shows what it actually holds.
    """

    def __init__(self):
        self.balances: Dict[str, Dict[str, int]] = {}  # address -> denom -> amount
        self.supply: Dict[str, int] = {}  # denom -> total amount
        self.lock = Lock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_balance(self, address: str, denom: str) -> int:
        """Get balance of a single denom."""
        return self.balances.get(address, {}).get(denom, 0)

    def get_balances(self, address: str) -> List[Coin]:
        """Get all non-zero balances of an address, sorted by denom."""
        held = self.balances.get(address, {})
        return [Coin(denom=d, amount=held[d]) for d in sorted(held)]

    def get_supply(self, denom: str) -> int:
        """Get total supply of a denom."""
        return self.supply.get(denom, 0)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_balance(self, address: str, items: List[Coin]):
        """
        Overwrite balances of an address (test setup).

        Supply is adjusted by the difference so it stays the sum of all
        balances.
        """
        with self.lock:
            for coin in items:
                previous = self.get_balance(address, coin.denom)
                self.supply[coin.denom] = self.get_supply(coin.denom) - previous + coin.amount
                self._put(address, coin.denom, coin.amount)

    def mint(self, address: str, items: List[Coin]) -> Result:
        """
        Credit newly created coins to an address.

        Args:
            address: Recipient
            items: Coins to create

        Returns:
            Ok, or Err if a balance or the supply would overflow Uint128
        """
        with self.lock:
            added = _totals(items)
            for denom, amount in added.items():
                if self.get_supply(denom) + amount > config.UINT128_MAX:
                    return Err(f"overflow: cannot mint {amount}{denom}")

            for coin in items:
                self._put(address, coin.denom, self.get_balance(address, coin.denom) + coin.amount)
                self.supply[coin.denom] = self.get_supply(coin.denom) + coin.amount

        event = Event('coinbase')
        event.add_attribute('minter', address)
        event.add_attribute('amount', format_coins(items))
        return Ok(AppResponse(events=[event]))

    def handle_msg(self, sender: str, msg: Dict[str, Any]) -> Result:
        """
        Execute a bank message on behalf of sender.

        Supported shapes:
            {'send': {'to_address': str, 'amount': [coin, ...]}}
            {'burn': {'amount': [coin, ...]}}

        Args:
            sender: Address whose coins are moved or burned
            msg: Bank message

        Returns:
            Result of the operation
        """
        if not isinstance(msg, dict):
            return Err("unknown bank message")

        try:
            if 'send' in msg:
                body = msg['send']
                to_address = body.get('to_address')
                if not isinstance(to_address, str) or not to_address:
                    return Err("invalid bank message: to_address required")
                return self.send(sender, to_address, parse_coins(body.get('amount')))

            if 'burn' in msg:
                return self.burn(sender, parse_coins(msg['burn'].get('amount')))
        except (ValueError, AttributeError) as e:
            return Err(f"invalid bank message: {e}")

        return Err("unknown bank message")

    def send(self, sender: str, recipient: str, items: List[Coin]) -> Result:
        """Move coins between two accounts, all-or-nothing."""
        with self.lock:
            error = self._check_funds(sender, items)
            if error:
                logger.debug(f"Send rejected: {error}")
                return Err(error)

            for coin in items:
                self._put(sender, coin.denom, self.get_balance(sender, coin.denom) - coin.amount)
                self._put(recipient, coin.denom, self.get_balance(recipient, coin.denom) + coin.amount)

        event = Event('transfer')
        event.add_attribute('recipient', recipient)
        event.add_attribute('sender', sender)
        event.add_attribute('amount', format_coins(items))
        return Ok(AppResponse(events=[event]))

    def burn(self, sender: str, items: List[Coin]) -> Result:
        """Destroy coins held by sender, all-or-nothing."""
        with self.lock:
            error = self._check_funds(sender, items)
            if error:
                logger.debug(f"Burn rejected: {error}")
                return Err(error)

            for coin in items:
                self._put(sender, coin.denom, self.get_balance(sender, coin.denom) - coin.amount)
                self.supply[coin.denom] = self.get_supply(coin.denom) - coin.amount

        event = Event('burn')
        event.add_attribute('burner', sender)
        event.add_attribute('amount', format_coins(items))
        return Ok(AppResponse(events=[event]))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(self, request: Dict[str, Any]) -> Result:
        """
        Answer a bank query.

        Supported shapes:
            {'balance': {'address': str, 'denom': str}}
            {'all_balances': {'address': str}}
            {'supply': {'denom': str}}
        """
        if not isinstance(request, dict):
            return Err("unknown bank query")

        try:
            if 'balance' in request:
                body = request['balance']
                coin = Coin(denom=body['denom'], amount=self.get_balance(body['address'], body['denom']))
                return Ok(AppResponse(data=to_binary({'amount': coin.to_dict()})))

            if 'all_balances' in request:
                held = self.get_balances(request['all_balances']['address'])
                return Ok(AppResponse(data=to_binary({'amount': [c.to_dict() for c in held]})))

            if 'supply' in request:
                denom = request['supply']['denom']
                coin = Coin(denom=denom, amount=self.get_supply(denom))
                return Ok(AppResponse(data=to_binary({'amount': coin.to_dict()})))
        except (KeyError, TypeError) as e:
            return Err(f"invalid bank query: {e}")

        return Err("unknown bank query")

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_funds(self, address: str, items: List[Coin]) -> Optional[str]:
        """Return an error message if address cannot cover items."""
        for denom, amount in _totals(items).items():
            have = self.get_balance(address, denom)
            if have < amount:
                return f"insufficient funds: {address} has {have}{denom}, needs {amount}{denom}"
        return None

    def _put(self, address: str, denom: str, amount: int):
        held = self.balances.setdefault(address, {})
        if amount:
            held[denom] = amount
        else:
            held.pop(denom, None)
            if not held:
                del self.balances[address]


def _totals(items: List[Coin]) -> Dict[str, int]:
    """Sum amounts per denom."""
    totals: Dict[str, int] = {}
    for coin in items:
        totals[coin.denom] = totals.get(coin.denom, 0) + coin.amount
    return totals
